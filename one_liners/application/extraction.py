"""Pull the structured JSON answer out of an assistant's thread messages."""
from __future__ import annotations

import json
import re
from typing import Any, Iterable

import httpx

from one_liners.core.logging import get_logger
from one_liners.domain import ErrorCode, Result
from one_liners.infrastructure import ThreadsAPI

logger = get_logger(__name__)

_JSON_FENCE = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)

LEGACY_SENTENCE_KEYS = ("sentence_1", "sentence_2", "sentence_3")


def _text_parts(message: dict[str, Any]) -> Iterable[str]:
    for part in message.get("content") or []:
        if not isinstance(part, dict) or part.get("type") != "text":
            continue
        text = part.get("text")
        value = text.get("value") if isinstance(text, dict) else text
        if isinstance(value, str):
            yield value


def parse_answer(text: str) -> dict[str, Any] | None:
    """Decode the JSON answer in ``text``, preferring a fenced ```json block."""

    match = _JSON_FENCE.search(text)
    candidate = match.group(1) if match else text
    try:
        parsed = json.loads(candidate.strip())
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None
    if "summary" in parsed or all(key in parsed for key in LEGACY_SENTENCE_KEYS):
        return parsed
    return None


def find_answer(messages: list[dict[str, Any]]) -> Result[dict[str, Any]]:
    """Scan messages, newest first, for the latest parseable assistant answer."""

    if not messages:
        return Result.error(ErrorCode.NO_MESSAGES_FOUND, "No messages found.")
    for message in messages:
        if not isinstance(message, dict) or message.get("role") != "assistant":
            continue
        for text in _text_parts(message):
            answer = parse_answer(text)
            if answer is not None:
                return Result.success(answer)
    return Result.error(ErrorCode.SUMMARY_NOT_FOUND, "No assistant message with a valid summary was found.")


def summary_sentences(payload: dict[str, Any]) -> Result[tuple[str, str, str]]:
    """Normalise either answer shape into exactly three sentences.

    Accepts ``{"summary": [s1, s2, s3]}`` and the older
    ``{"sentence_1": ..., "sentence_2": ..., "sentence_3": ...}`` form.
    """

    summary = payload.get("summary")
    if isinstance(summary, list):
        sentences = [str(item).strip() for item in summary]
    elif all(key in payload for key in LEGACY_SENTENCE_KEYS):
        sentences = [str(payload[key]).strip() for key in LEGACY_SENTENCE_KEYS]
    else:
        sentences = []

    if len(sentences) != 3 or not all(sentences):
        return Result.error(
            ErrorCode.INVALID_SUMMARY_SHAPE,
            "Failed to generate final summary. Invalid response format.",
        )
    return Result.success((sentences[0], sentences[1], sentences[2]))


class SummaryExtractor:
    """Fetches a thread's messages and returns the assistant's JSON answer."""

    def __init__(self, api: ThreadsAPI) -> None:
        self._api = api

    def extract(self, thread_id: str) -> Result[dict[str, Any]]:
        try:
            body = self._api.list_messages(thread_id)
        except httpx.HTTPError as exc:
            logger.error("fetch_messages_failed", thread_id=thread_id, error=str(exc))
            return Result.error(ErrorCode.FETCH_MESSAGES_FAILED, "Failed to fetch messages.")

        messages = body.get("data")
        if not isinstance(messages, list):
            messages = []
        result = find_answer(messages)
        if not result.ok:
            logger.warning("summary_not_extracted", thread_id=thread_id, code=result.failure.code.value)
        return result


__all__ = [
    "LEGACY_SENTENCE_KEYS",
    "SummaryExtractor",
    "find_answer",
    "parse_answer",
    "summary_sentences",
]
