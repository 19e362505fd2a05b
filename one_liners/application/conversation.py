"""Conversation threads: create one, post a message, run the assistant."""
from __future__ import annotations

from typing import Any

import httpx

from one_liners.core.logging import get_logger
from one_liners.domain import ErrorCode, Result
from one_liners.infrastructure import OpenAIClient, ThreadsAPI

from .extraction import SummaryExtractor
from .polling import PENDING_STATUSES, RunPoller

logger = get_logger(__name__)


class ConversationClient:
    """Sequences the thread calls and delegates waiting to :class:`RunPoller`."""

    def __init__(self, api: ThreadsAPI, poller: RunPoller, extractor: SummaryExtractor) -> None:
        self._api = api
        self._poller = poller
        self._extractor = extractor

    def create_thread(self) -> str | None:
        """Return a new thread id, or ``None`` when the provider call fails."""

        try:
            body = self._api.create_thread()
        except httpx.HTTPError as exc:
            logger.error("create_thread_failed", error=str(exc))
            return None
        thread_id = body.get("id")
        if not thread_id:
            logger.error("create_thread_missing_id")
            return None
        return str(thread_id)

    def add_message_and_run_thread(
        self,
        thread_id: str,
        assistant_id: str,
        text: str,
    ) -> Result[dict[str, Any]]:
        try:
            self._api.add_message(thread_id, text)
        except httpx.HTTPError as exc:
            logger.error("add_message_failed", thread_id=thread_id, error=str(exc))
            return Result.error(ErrorCode.ADD_MESSAGE_FAILED, "Failed to add message.")

        try:
            run = self._api.create_run(thread_id, assistant_id)
        except httpx.HTTPError as exc:
            logger.error("run_start_failed", thread_id=thread_id, error=str(exc))
            return Result.error(ErrorCode.RUN_START_FAILED, "Failed to run thread.")

        status = run.get("status")
        run_id = run.get("id")
        logger.info("run_started", thread_id=thread_id, run_id=run_id, status=status)
        if status in PENDING_STATUSES and run_id:
            return self._poller.wait(thread_id, str(run_id))
        if status == "completed":
            return self._extractor.extract(thread_id)
        message = OpenAIClient.error_message(run)
        if message is not None:
            return Result.error(ErrorCode.RUN_FAILED_OR_CANCELLED, f"Run failed to start: {message}")
        return Result.error(ErrorCode.RUN_FAILED_OR_CANCELLED, "Run failed or was cancelled.")


__all__ = ["ConversationClient"]
