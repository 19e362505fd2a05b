"""Vector storage: upload a vector file and attach it to a vector store."""
from __future__ import annotations

import os
import tempfile
import time
from pathlib import Path
from typing import Any, Callable

import httpx
from pydantic import BaseModel, ValidationError

from one_liners.core.logging import get_logger
from one_liners.domain import ErrorCode, OneLinersError, Result

from .provider import OpenAIClient

logger = get_logger(__name__)


class VectorFilePayload(BaseModel):
    """Document uploaded for every stored entry."""

    vector: list[float]
    entry_id: int | str
    text: str


class VectorStoreWriter:
    """Stores entry vectors as files in a provider-side vector store.

    Storing is two calls with no rollback: a file uploaded by a successful
    first step stays orphaned when the attach step fails, and a retry uploads
    a fresh copy.
    """

    def __init__(
        self,
        client: OpenAIClient,
        *,
        purpose: str = "assistants",
        max_retries: int = 3,
        retry_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._client = client
        self._purpose = purpose
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._sleep = sleep

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _write_temp_file(payload: VectorFilePayload) -> Path:
        fd, name = tempfile.mkstemp(prefix=f"vector_data_entry_{payload.entry_id}_", suffix=".json")
        with os.fdopen(fd, "w", encoding="utf-8") as fp:
            fp.write(payload.model_dump_json())
        return Path(name)

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def create_vector_file(self, vector: list[float], entry_id: int | str, text: str) -> str:
        """Upload ``{vector, entry_id, text}`` and return the new file id."""

        try:
            payload = VectorFilePayload(vector=vector, entry_id=entry_id, text=text)
            path = self._write_temp_file(payload)
        except (ValidationError, OSError) as exc:
            raise OneLinersError(ErrorCode.FILE_CREATION_FAILED, f"Failed to create file: {exc}") from exc

        filename = f"vector_data_entry_{entry_id}.json"
        try:
            with path.open("rb") as fp:
                response = self._client.request(
                    "POST",
                    "/files",
                    data={"purpose": self._purpose},
                    files={"file": (filename, fp, "application/json")},
                    timeout=self._client.upload_timeout,
                )
        except (httpx.HTTPError, OSError) as exc:
            raise OneLinersError(ErrorCode.FILE_CREATION_FAILED, f"Failed to create file: {exc}") from exc
        finally:
            path.unlink(missing_ok=True)

        body = OpenAIClient.decode(response)
        if response.status_code != 200:
            message = OpenAIClient.error_message(body) or "Unknown error"
            raise OneLinersError(ErrorCode.FILE_CREATION_FAILED, f"Failed to create file: {message}")
        file_id = body.get("id")
        if not file_id:
            raise OneLinersError(ErrorCode.FILE_ID_MISSING, "File ID missing from response.")
        return str(file_id)

    def attach_file_to_vector_store(self, vector_store_id: str, file_id: str) -> dict[str, Any]:
        try:
            _, body = self._client.post_json(f"/vector_stores/{vector_store_id}/files", {"file_id": file_id})
        except httpx.HTTPError as exc:
            raise OneLinersError(
                ErrorCode.ATTACH_FILE_FAILED,
                f"Failed to attach file to vector store: {exc}",
            ) from exc

        message = OpenAIClient.error_message(body)
        if message is not None:
            raise OneLinersError(ErrorCode.ATTACH_FILE_ERROR, f"Error attaching file: {message}")
        return body

    def store_vector(
        self,
        vector_store_id: str,
        vector: list[float],
        entry_id: int | str,
        text: str,
    ) -> dict[str, Any]:
        file_id = self.create_vector_file(vector, entry_id, text)
        return self.attach_file_to_vector_store(vector_store_id, file_id)

    def store_vector_with_retry(
        self,
        vector_store_id: str,
        vector: list[float],
        entry_id: int | str,
        text: str,
    ) -> Result[dict[str, Any]]:
        """Repeat the full upload + attach sequence until it succeeds.

        Returns the result of the last attempt, pausing ``retry_delay``
        seconds between attempts.
        """

        result: Result[dict[str, Any]] = Result.error(ErrorCode.FILE_CREATION_FAILED, "No attempt made.")
        for attempt in range(1, self._max_retries + 1):
            try:
                return Result.success(self.store_vector(vector_store_id, vector, entry_id, text))
            except OneLinersError as exc:
                result = Result.from_exception(exc)
                logger.warning(
                    "vector_store_retry",
                    entry_id=entry_id,
                    attempt=attempt,
                    max_retries=self._max_retries,
                    error=exc.message,
                )
            if attempt < self._max_retries:
                self._sleep(self._retry_delay)
        return result


__all__ = ["VectorFilePayload", "VectorStoreWriter"]
