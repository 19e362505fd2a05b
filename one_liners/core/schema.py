from __future__ import annotations

from pydantic import BaseModel, Field


class EntryRow(BaseModel):
    id: int
    status: str
    link: str | None = None
    processing_status: str = "Pending"


class EntryListing(BaseModel):
    form_id: str
    items: list[EntryRow] = Field(default_factory=list)


class FailureModel(BaseModel):
    code: str
    kind: str
    message: str


class BatchResponse(BaseModel):
    entries: dict[str, str] = Field(default_factory=dict)
    final_summary: list[str] | None = None
    error: FailureModel | None = None
    success: bool = False
