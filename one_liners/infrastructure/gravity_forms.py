"""Integration with the Gravity Forms REST API (v2)."""
from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlparse

import httpx

from one_liners.core.logging import get_logger
from one_liners.domain import Entry, ErrorCode, OneLinersError

logger = get_logger(__name__)


class GravityFormsClient:
    """Read-only client listing the entries submitted to a form."""

    def __init__(
        self,
        site_url: str,
        consumer_key: str | None = None,
        consumer_secret: str | None = None,
        *,
        page_size: int = 50,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        parsed = urlparse(site_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("site_url must include scheme and host")
        if page_size <= 0:
            raise ValueError("page_size must be a positive integer")

        self._site_url = site_url.rstrip("/")
        self._page_size = page_size
        self._auth = httpx.BasicAuth(consumer_key, consumer_secret or "") if consumer_key else None
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    def entries_url(self, form_id: int | str) -> str:
        return f"{self._site_url}/wp-json/gf/v2/forms/{form_id}/entries"

    def entry_admin_url(self, form_id: int | str, entry_id: int | str) -> str:
        """Link to the entry detail screen in the WordPress admin."""

        return f"{self._site_url}/wp-admin/admin.php?page=gf_entries&view=entry&id={form_id}&lid={entry_id}"

    def _fetch_page(self, form_id: int | str, status: str, page: int) -> dict[str, Any]:
        params = {
            "search": json.dumps({"status": status}),
            "paging[page_size]": str(self._page_size),
            "paging[current_page]": str(page),
        }
        kwargs: dict[str, Any] = {"params": params}
        if self._auth is not None:
            kwargs["auth"] = self._auth
        try:
            response = self._client.get(self.entries_url(form_id), **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise OneLinersError(ErrorCode.ENTRIES_FETCH_FAILED, f"Failed to retrieve entries: {exc}") from exc
        try:
            body = response.json()
        except ValueError as exc:
            raise OneLinersError(ErrorCode.ENTRIES_FETCH_FAILED, "Failed to retrieve entries: invalid JSON") from exc
        return body if isinstance(body, dict) else {}

    def get_entries(self, form_id: int | str, *, status: str = "active") -> list[Entry]:
        """Return every entry of ``form_id`` with the given status, all pages."""

        entries: list[Entry] = []
        page = 1
        while True:
            body = self._fetch_page(form_id, status, page)
            records = body.get("entries") or []
            for record in records:
                if isinstance(record, dict) and record.get("id") is not None:
                    entries.append(Entry.from_record(record))
            total = int(body.get("total_count") or 0)
            if not records or len(entries) >= total:
                break
            page += 1

        logger.info("entries_retrieved", form_id=str(form_id), count=len(entries), status=status)
        return entries

    def close(self) -> None:  # pragma: no cover - best effort cleanup
        if self._owns_client:
            self._client.close()


__all__ = ["GravityFormsClient"]
