from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException

from one_liners.application import get_orchestrator

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post("/validate")
async def validate_assistant(payload: dict) -> dict:
    api_key = str(payload.get("api_key") or "").strip()
    assistant_id = str(payload.get("assistant_id") or "").strip()
    if not api_key or not assistant_id:
        raise HTTPException(status_code=400, detail="Missing API Key or Assistant ID.")

    orchestrator = get_orchestrator()
    error = await asyncio.to_thread(orchestrator.check_credentials, api_key, assistant_id)
    if error:
        raise HTTPException(status_code=400, detail=error)
    return {"message": "API Key and Assistant ID are valid!"}
