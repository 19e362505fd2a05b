"""Domain entities for form entries and a batch run."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .results import Failure

STATUS_PROCESSING = "Processing"
STATUS_COMPLETE = "Complete"

# (field id, question label) in the order they appear in the entry text.
ENTRY_TEXT_FIELDS: tuple[tuple[str, str], ...] = (
    ("1", "What brought you to Centerstone?"),
    ("3", "How does Centerstone support the community?"),
    ("4", "In a word, what does Noble Purpose mean to you?"),
)


@dataclass(slots=True, frozen=True)
class Entry:
    """A single form submission pulled from the forms service."""

    entry_id: int
    status: str = "active"
    fields: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Entry":
        """Build an entry from a Gravity Forms REST record.

        Field answers are keyed by their numeric field id as a string; the
        remaining keys (``date_created``, ``source_url``...) are metadata.
        """

        fields: dict[str, str] = {}
        for key, value in record.items():
            if not str(key).replace(".", "").isdigit():
                continue
            fields[str(key)] = "" if value is None else str(value)
        return cls(
            entry_id=int(record["id"]),
            status=str(record.get("status") or "active"),
            fields=fields,
        )

    def answer(self, field_id: str) -> str:
        return self.fields.get(field_id, "")


def build_entry_text(entry: Entry) -> str:
    """Render the labelled question/answer block sent for embedding."""

    blocks = [f"{label}\n{entry.answer(field_id)}" for field_id, label in ENTRY_TEXT_FIELDS]
    return "\n\n".join(blocks)


@dataclass(slots=True)
class BatchOutcome:
    """Result of one orchestration run, returned to the caller in one piece."""

    entry_statuses: dict[int, str] = field(default_factory=dict)
    final_summary: tuple[str, str, str] | None = None
    summary_failure: Failure | None = None

    @property
    def success(self) -> bool:
        return self.final_summary is not None and self.summary_failure is None

    def as_dict(self) -> dict[str, Any]:
        return {
            "entries": {str(entry_id): status for entry_id, status in self.entry_statuses.items()},
            "final_summary": list(self.final_summary) if self.final_summary else None,
            "error": self.summary_failure.as_dict() if self.summary_failure else None,
            "success": self.success,
        }
