"""HTTP transport for the OpenAI REST API (assistants v2)."""
from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

import httpx


class OpenAIClient:
    """Thin wrapper adding auth, the beta header and JSON decoding to httpx.

    Transport problems surface as :class:`httpx.HTTPError`; HTTP error
    statuses do not raise, callers inspect the decoded body the way the
    provider reports application errors (``{"error": {"message": ...}}``).
    """

    def __init__(
        self,
        api_key: str,
        *,
        api_base: str = "https://api.openai.com/v1",
        beta_header: str = "assistants=v2",
        timeout: float = 30.0,
        upload_timeout: float = 60.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        parsed = urlparse(api_base)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("api_base must include scheme and host")

        self._api_key = api_key
        self._api_base = api_base.rstrip("/")
        self._beta_header = beta_header
        self._timeout = timeout
        self.upload_timeout = upload_timeout
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "OpenAI-Beta": self._beta_header,
        }

    def url(self, path: str) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self._api_base}{path}"

    @staticmethod
    def decode(response: httpx.Response) -> dict[str, Any]:
        """Return the JSON object body, or an empty dict for anything else."""

        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    @staticmethod
    def error_message(body: dict[str, Any], default: str = "Unknown error") -> str | None:
        error = body.get("error")
        if not error:
            return None
        if isinstance(error, dict):
            return str(error.get("message") or default)
        return str(error)

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any | None = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        return self._client.request(
            method,
            self.url(path),
            headers=self._headers(),
            json=json,
            data=data,
            files=files,
            timeout=timeout if timeout is not None else self._timeout,
        )

    def get_json(self, path: str) -> tuple[int, dict[str, Any]]:
        response = self.request("GET", path)
        return response.status_code, self.decode(response)

    def post_json(self, path: str, payload: Any | None = None) -> tuple[int, dict[str, Any]]:
        response = self.request("POST", path, json=payload)
        return response.status_code, self.decode(response)

    def close(self) -> None:  # pragma: no cover - best effort cleanup
        if self._owns_client:
            self._client.close()


__all__ = ["OpenAIClient"]
