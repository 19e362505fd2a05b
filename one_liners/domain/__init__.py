"""Domain layer definitions."""

from .entries import (
    STATUS_COMPLETE,
    STATUS_PROCESSING,
    BatchOutcome,
    Entry,
    build_entry_text,
)
from .results import ErrorCode, ErrorKind, Failure, OneLinersError, Result

__all__ = [
    "BatchOutcome",
    "Entry",
    "ErrorCode",
    "ErrorKind",
    "Failure",
    "OneLinersError",
    "Result",
    "STATUS_COMPLETE",
    "STATUS_PROCESSING",
    "build_entry_text",
]
