from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException, Query

from one_liners.application import get_orchestrator
from one_liners.core.schema import BatchResponse, EntryListing, EntryRow
from one_liners.domain import ErrorCode, OneLinersError

router = APIRouter(prefix="/entries", tags=["entries"])

_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.CONFIGURATION_MISSING: 400,
    ErrorCode.NO_ENTRIES_FOUND: 404,
}


def _http_error(exc: OneLinersError) -> HTTPException:
    return HTTPException(status_code=_STATUS_CODES.get(exc.code, 502), detail=exc.failure.as_dict())


@router.get("", response_model=EntryListing)
async def list_entries(form_id: str | None = Query(default=None)) -> EntryListing:
    """List the active entries of a form with a link to each one."""
    orchestrator = get_orchestrator()
    form_id = form_id or orchestrator.settings.form_id
    if not form_id or not form_id.isdigit() or int(form_id) <= 0:
        raise HTTPException(status_code=400, detail="Invalid Form ID. Please enter a valid Form ID and try again.")

    try:
        entries = await asyncio.to_thread(orchestrator.list_entries, form_id)
        items = [
            EntryRow(
                id=entry.entry_id,
                status=entry.status,
                link=orchestrator.entry_link(form_id, entry.entry_id),
            )
            for entry in entries
        ]
    except OneLinersError as exc:
        raise _http_error(exc) from exc
    return EntryListing(form_id=form_id, items=items)


@router.post("/process", response_model=BatchResponse)
async def process_entries() -> BatchResponse:
    """Embed and store every active entry, then request the cumulative summary."""
    orchestrator = get_orchestrator()
    try:
        outcome = await asyncio.to_thread(orchestrator.process_entries)
    except OneLinersError as exc:
        raise _http_error(exc) from exc
    return BatchResponse(**outcome.as_dict())
