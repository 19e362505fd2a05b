"""Run polling for the assistants thread/run execution model.

A run is created by the provider in ``queued`` state and advances on its
own. The poller sleeps a fixed interval, reads the run, and reacts:

* ``completed``: cancel the run as cleanup (best effort) and hand the thread
  to the :class:`SummaryExtractor`.
* ``failed``, ``cancelled``, ``expired``, ``incomplete``: terminal failure.
* ``requires_action`` with ``submit_tool_outputs``: answer every pending tool
  call and keep polling.
* anything else (``queued``, ``in_progress``...): keep polling.

At most ``max_attempts`` status reads are made per run, tool-output
submissions included; past that the run is reported as timed out.
"""
from __future__ import annotations

import json
import time
from typing import Any, Callable, Mapping

import httpx

from one_liners.core.logging import get_logger
from one_liners.domain import ErrorCode, Result
from one_liners.infrastructure import OpenAIClient, ThreadsAPI

from .extraction import SummaryExtractor

logger = get_logger(__name__)

ToolHandler = Callable[[dict[str, Any]], Any]

PENDING_STATUSES = frozenset({"queued", "in_progress", "running", "cancelling"})
FAILED_STATUSES = frozenset({"failed", "cancelled", "expired", "incomplete"})

TOOL_ACKNOWLEDGEMENT = json.dumps({"success": True})


class RunPoller:
    """Wait for a run to finish and return the extracted assistant answer."""

    def __init__(
        self,
        api: ThreadsAPI,
        extractor: SummaryExtractor,
        *,
        interval: float = 5.0,
        max_attempts: int = 20,
        sleep: Callable[[float], None] = time.sleep,
        tool_handlers: Mapping[str, ToolHandler] | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._api = api
        self._extractor = extractor
        self._interval = interval
        self._max_attempts = max_attempts
        self._sleep = sleep
        self._tool_handlers = tool_handlers

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _call_handler(handler: ToolHandler, function: dict[str, Any]) -> str:
        try:
            arguments = json.loads(function.get("arguments") or "{}")
        except ValueError:
            arguments = {}
        output = handler(arguments if isinstance(arguments, dict) else {})
        return output if isinstance(output, str) else json.dumps(output)

    def _submit_tool_outputs(
        self,
        thread_id: str,
        run_id: str,
        required_action: dict[str, Any],
    ) -> Result[None]:
        tool_calls = (required_action.get("submit_tool_outputs") or {}).get("tool_calls") or []
        tool_outputs: list[dict[str, str]] = []
        for tool_call in tool_calls:
            if self._tool_handlers is None:
                output = TOOL_ACKNOWLEDGEMENT
            else:
                function = tool_call.get("function") or {}
                name = str(function.get("name") or "")
                handler = self._tool_handlers.get(name)
                if handler is None:
                    return Result.error(ErrorCode.UNKNOWN_TOOL, f"No handler registered for tool {name!r}.")
                try:
                    output = self._call_handler(handler, function)
                except Exception as exc:
                    logger.error("tool_handler_failed", thread_id=thread_id, run_id=run_id, tool=name, error=str(exc))
                    return Result.error(
                        ErrorCode.SUBMIT_TOOL_OUTPUTS_FAILED,
                        f"Tool {name!r} failed: {exc}",
                    )
            tool_outputs.append({"tool_call_id": str(tool_call.get("id")), "output": output})

        try:
            self._api.submit_tool_outputs(thread_id, run_id, tool_outputs)
        except httpx.HTTPError as exc:
            logger.error("submit_tool_outputs_failed", thread_id=thread_id, run_id=run_id, error=str(exc))
            return Result.error(ErrorCode.SUBMIT_TOOL_OUTPUTS_FAILED, "Failed to submit tool outputs.")

        logger.info("tool_outputs_submitted", thread_id=thread_id, run_id=run_id, count=len(tool_outputs))
        return Result.success(None)

    def _cancel(self, thread_id: str, run_id: str) -> None:
        try:
            self._api.cancel_run(thread_id, run_id)
        except httpx.HTTPError as exc:
            logger.warning("cancel_run_failed", thread_id=thread_id, run_id=run_id, error=str(exc))

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def wait(self, thread_id: str, run_id: str) -> Result[dict[str, Any]]:
        for attempt in range(1, self._max_attempts + 1):
            self._sleep(self._interval)
            try:
                run = self._api.retrieve_run(thread_id, run_id)
            except httpx.HTTPError as exc:
                logger.error("run_status_check_failed", thread_id=thread_id, run_id=run_id, error=str(exc))
                return Result.error(ErrorCode.STATUS_CHECK_FAILED, "Failed to check run status.")

            message = OpenAIClient.error_message(run)
            if message is not None:
                return Result.error(ErrorCode.RUN_STATUS_ERROR, f"Error retrieving run status: {message}")

            status = run.get("status")
            logger.debug("run_status", thread_id=thread_id, run_id=run_id, status=status, attempt=attempt)
            if status is None:
                return Result.error(ErrorCode.INVALID_STATUS_RESPONSE, "Run status missing from response.")

            if status == "completed":
                self._cancel(thread_id, run_id)
                return self._extractor.extract(thread_id)
            if status in FAILED_STATUSES:
                return Result.error(ErrorCode.RUN_FAILED_OR_CANCELLED, f"Run {status}.")
            if status == "requires_action":
                required_action = run.get("required_action") or {}
                if required_action.get("type") != "submit_tool_outputs":
                    return Result.error(ErrorCode.UNHANDLED_REQUIRES_ACTION, "Unhandled requires_action.")
                submitted = self._submit_tool_outputs(thread_id, run_id, required_action)
                if not submitted.ok:
                    return Result(failure=submitted.failure)

        logger.warning("run_timed_out", thread_id=thread_id, run_id=run_id, attempts=self._max_attempts)
        return Result.error(ErrorCode.TIMED_OUT, "Run did not complete in expected time.")


__all__ = ["FAILED_STATUSES", "PENDING_STATUSES", "RunPoller", "TOOL_ACKNOWLEDGEMENT"]
