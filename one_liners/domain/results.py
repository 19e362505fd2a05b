"""Typed outcomes shared by the provider clients and the orchestrator."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Coarse error taxonomy surfaced at the API boundary."""

    CONFIGURATION_MISSING = "configuration_missing"
    TRANSPORT_FAILURE = "transport_failure"
    APPLICATION_ERROR = "application_error"
    MALFORMED_RESPONSE = "malformed_response"
    TIMEOUT = "timeout"
    VALIDATION_FAILURE = "validation_failure"


class ErrorCode(str, Enum):
    CONFIGURATION_MISSING = "configuration_missing"
    NO_ENTRIES_FOUND = "no_entries_found"
    ENTRIES_FETCH_FAILED = "entries_fetch_failed"
    INVALID_INPUT = "invalid_input"
    EMBEDDING_FAILED = "embedding_failed"
    EMBEDDING_MISSING = "embedding_missing"
    FILE_CREATION_FAILED = "file_creation_failed"
    FILE_ID_MISSING = "file_id_missing"
    ATTACH_FILE_FAILED = "attach_file_failed"
    ATTACH_FILE_ERROR = "attach_file_error"
    THREAD_CREATION_FAILED = "thread_creation_failed"
    ADD_MESSAGE_FAILED = "add_message_failed"
    RUN_START_FAILED = "run_start_failed"
    RUN_FAILED_OR_CANCELLED = "run_failed_or_cancelled"
    STATUS_CHECK_FAILED = "status_check_failed"
    RUN_STATUS_ERROR = "run_status_error"
    INVALID_STATUS_RESPONSE = "invalid_status_response"
    SUBMIT_TOOL_OUTPUTS_FAILED = "submit_tool_outputs_failed"
    UNHANDLED_REQUIRES_ACTION = "unhandled_requires_action"
    UNKNOWN_TOOL = "unknown_tool"
    TIMED_OUT = "timed_out"
    FETCH_MESSAGES_FAILED = "fetch_messages_failed"
    NO_MESSAGES_FOUND = "no_messages_found"
    SUMMARY_NOT_FOUND = "summary_not_found"
    INVALID_SUMMARY_SHAPE = "invalid_summary_shape"
    NO_PROCESSED_ENTRIES = "no_processed_entries"

    @property
    def kind(self) -> ErrorKind:
        return _KINDS[self]


_KINDS: dict[ErrorCode, ErrorKind] = {
    ErrorCode.CONFIGURATION_MISSING: ErrorKind.CONFIGURATION_MISSING,
    ErrorCode.NO_ENTRIES_FOUND: ErrorKind.VALIDATION_FAILURE,
    ErrorCode.ENTRIES_FETCH_FAILED: ErrorKind.TRANSPORT_FAILURE,
    ErrorCode.INVALID_INPUT: ErrorKind.VALIDATION_FAILURE,
    ErrorCode.EMBEDDING_FAILED: ErrorKind.TRANSPORT_FAILURE,
    ErrorCode.EMBEDDING_MISSING: ErrorKind.MALFORMED_RESPONSE,
    ErrorCode.FILE_CREATION_FAILED: ErrorKind.TRANSPORT_FAILURE,
    ErrorCode.FILE_ID_MISSING: ErrorKind.MALFORMED_RESPONSE,
    ErrorCode.ATTACH_FILE_FAILED: ErrorKind.TRANSPORT_FAILURE,
    ErrorCode.ATTACH_FILE_ERROR: ErrorKind.APPLICATION_ERROR,
    ErrorCode.THREAD_CREATION_FAILED: ErrorKind.TRANSPORT_FAILURE,
    ErrorCode.ADD_MESSAGE_FAILED: ErrorKind.TRANSPORT_FAILURE,
    ErrorCode.RUN_START_FAILED: ErrorKind.TRANSPORT_FAILURE,
    ErrorCode.RUN_FAILED_OR_CANCELLED: ErrorKind.APPLICATION_ERROR,
    ErrorCode.STATUS_CHECK_FAILED: ErrorKind.TRANSPORT_FAILURE,
    ErrorCode.RUN_STATUS_ERROR: ErrorKind.APPLICATION_ERROR,
    ErrorCode.INVALID_STATUS_RESPONSE: ErrorKind.MALFORMED_RESPONSE,
    ErrorCode.SUBMIT_TOOL_OUTPUTS_FAILED: ErrorKind.TRANSPORT_FAILURE,
    ErrorCode.UNHANDLED_REQUIRES_ACTION: ErrorKind.APPLICATION_ERROR,
    ErrorCode.UNKNOWN_TOOL: ErrorKind.APPLICATION_ERROR,
    ErrorCode.TIMED_OUT: ErrorKind.TIMEOUT,
    ErrorCode.FETCH_MESSAGES_FAILED: ErrorKind.TRANSPORT_FAILURE,
    ErrorCode.NO_MESSAGES_FOUND: ErrorKind.MALFORMED_RESPONSE,
    ErrorCode.SUMMARY_NOT_FOUND: ErrorKind.VALIDATION_FAILURE,
    ErrorCode.INVALID_SUMMARY_SHAPE: ErrorKind.VALIDATION_FAILURE,
    ErrorCode.NO_PROCESSED_ENTRIES: ErrorKind.VALIDATION_FAILURE,
}


@dataclass(slots=True, frozen=True)
class Failure:
    """A named error with a human readable message."""

    code: ErrorCode
    message: str

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code.value, "kind": self.kind.value, "message": self.message}

    def __str__(self) -> str:
        return self.message


class OneLinersError(RuntimeError):
    """Raised by the provider and forms clients when a call cannot be completed."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def failure(self) -> Failure:
        return Failure(self.code, self.message)


@dataclass(slots=True, frozen=True)
class Result(Generic[T]):
    """Either a success payload or a :class:`Failure`."""

    value: T | None = None
    failure: Failure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def error(cls, code: ErrorCode, message: str) -> "Result[Any]":
        return cls(failure=Failure(code, message))

    @classmethod
    def from_exception(cls, exc: OneLinersError) -> "Result[Any]":
        return cls(failure=exc.failure)


__all__ = ["ErrorCode", "ErrorKind", "Failure", "OneLinersError", "Result"]
