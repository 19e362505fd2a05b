"""Endpoint wrappers for assistants, threads, runs and messages."""
from __future__ import annotations

from typing import Any

import httpx

from one_liners.core.logging import get_logger

from .provider import OpenAIClient

logger = get_logger(__name__)


class ThreadsAPI:
    """One method per provider endpoint used by the conversation pipeline.

    Methods return decoded bodies and let :class:`httpx.HTTPError` propagate;
    the caller decides which named failure a transport error becomes.
    """

    def __init__(self, client: OpenAIClient) -> None:
        self._client = client

    def create_thread(self) -> dict[str, Any]:
        _, body = self._client.post_json("/threads", {})
        return body

    def add_message(self, thread_id: str, content: str) -> dict[str, Any]:
        _, body = self._client.post_json(
            f"/threads/{thread_id}/messages",
            {"role": "user", "content": content},
        )
        return body

    def create_run(self, thread_id: str, assistant_id: str) -> dict[str, Any]:
        _, body = self._client.post_json(f"/threads/{thread_id}/runs", {"assistant_id": assistant_id})
        return body

    def retrieve_run(self, thread_id: str, run_id: str) -> dict[str, Any]:
        _, body = self._client.get_json(f"/threads/{thread_id}/runs/{run_id}")
        return body

    def submit_tool_outputs(
        self,
        thread_id: str,
        run_id: str,
        tool_outputs: list[dict[str, str]],
    ) -> dict[str, Any]:
        _, body = self._client.post_json(
            f"/threads/{thread_id}/runs/{run_id}/submit_tool_outputs",
            {"tool_outputs": tool_outputs},
        )
        return body

    def cancel_run(self, thread_id: str, run_id: str) -> dict[str, Any]:
        _, body = self._client.post_json(f"/threads/{thread_id}/runs/{run_id}/cancel")
        return body

    def list_messages(self, thread_id: str) -> dict[str, Any]:
        _, body = self._client.get_json(f"/threads/{thread_id}/messages")
        return body

    # ------------------------------------------------------------------
    # credential checks
    # ------------------------------------------------------------------
    def is_api_key_valid(self) -> bool:
        try:
            response = self._client.request("GET", "/models")
        except httpx.HTTPError as exc:
            logger.warning("api_key_check_failed", error=str(exc))
            return False
        return response.status_code == 200

    def is_assistant_valid(self, assistant_id: str) -> bool:
        if not assistant_id:
            return False
        try:
            _, body = self._client.get_json(f"/assistants/{assistant_id}")
        except httpx.HTTPError as exc:
            logger.warning("assistant_check_failed", assistant_id=assistant_id, error=str(exc))
            return False
        return body.get("id") == assistant_id


__all__ = ["ThreadsAPI"]
