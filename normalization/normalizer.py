"""
Response Normalizer

Reduces free-form model text to one validated JSON object of a task's shape.

Extraction chain (first match wins):
  1. ```json fenced block  → content up to the next fence
  2. any fenced block       → content between the first two fences
  3. first '{' or '['       → from whichever comes first to the end
  4. the trimmed text itself
Inside a fenced block the same brace anchoring is applied, which also drops
language tags such as ```JSON.

Invariants:
- normalize() never raises; failures are ParseFailure values
- A success has every declared field; missing fields are a failure,
  never filled with defaults
- Extra keys in the model output are dropped
- ParseFailure.raw is bounded to MAX_RAW_CHARS
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from pydantic import ValidationError

from prompting.tasks import Task, TaskOutput, output_shape

logger = logging.getLogger(__name__)

FENCE = "```"
JSON_LABEL = "json"
MAX_RAW_CHARS = 500

REASON_EMPTY = "empty output"
REASON_MALFORMED = "malformed json"
REASON_NOT_OBJECT = "not an object"
REASON_INCOMPLETE = "incomplete shape"
REASON_INVALID = "invalid shape"


@dataclass
class ParseFailure:
    reason: str
    raw: str = ""
    missing_fields: List[str] = field(default_factory=list)

    @classmethod
    def from_raw(cls, reason: str, raw: Optional[str], missing_fields=None) -> "ParseFailure":
        raw = raw or ""
        return cls(
            reason=reason,
            raw=raw[:MAX_RAW_CHARS],
            missing_fields=list(missing_fields or []),
        )


@dataclass(frozen=True)
class Fence:
    start: int          # index of the first backtick
    content_start: int  # index just past the delimiter (and its json label)
    is_json: bool


@dataclass
class Delimiters:
    """Positions found by one left-to-right pass over the text."""
    fences: List[Fence] = field(default_factory=list)
    first_brace: Optional[int] = None
    first_bracket: Optional[int] = None

    @property
    def json_anchor(self) -> Optional[int]:
        candidates = [p for p in (self.first_brace, self.first_bracket) if p is not None]
        return min(candidates) if candidates else None


def scan(text: str) -> Delimiters:
    """Classify fence and brace positions in a single pass."""
    found = Delimiters()
    i = 0
    n = len(text)
    while i < n:
        if text.startswith(FENCE, i):
            after = i + len(FENCE)
            is_json = text.startswith(JSON_LABEL, after)
            found.fences.append(Fence(
                start=i,
                content_start=after + len(JSON_LABEL) if is_json else after,
                is_json=is_json,
            ))
            i = after
            continue

        ch = text[i]
        if ch == "{" and found.first_brace is None:
            found.first_brace = i
        elif ch == "[" and found.first_bracket is None:
            found.first_bracket = i
        i += 1
    return found


def _fenced_block(text: str, found: Delimiters) -> Optional[str]:
    fences = found.fences
    if not fences:
        return None

    opening_index = next((k for k, f in enumerate(fences) if f.is_json), 0)
    opening = fences[opening_index]
    closing = fences[opening_index + 1] if opening_index + 1 < len(fences) else None
    end = closing.start if closing else len(text)
    return text[opening.content_start:end]


def _anchor_at_json(text: str, found: Delimiters) -> str:
    anchor = found.json_anchor
    if anchor is None:
        return text.strip()
    return text[anchor:].strip()


def extract_json_text(raw: Optional[str]) -> str:
    """Steps 1-4 of the chain: the candidate slice handed to the JSON parser."""
    text = (raw or "").strip()
    found = scan(text)

    block = _fenced_block(text, found)
    if block is not None:
        return _anchor_at_json(block, scan(block))

    return _anchor_at_json(text, found)


def parse_first_value(candidate: str):
    """Strict parse of the first JSON value; trailing text after it is ignored."""
    value, _ = json.JSONDecoder().raw_decode(candidate)
    return value


def normalize(raw: Optional[str], task: Task) -> Union[TaskOutput, ParseFailure]:
    """
    Turn raw model text into the task's output shape.

    Returns:
        TaskOutput subclass instance on success, ParseFailure otherwise.
    """
    if raw is None or not raw.strip():
        return ParseFailure.from_raw(REASON_EMPTY, raw)

    candidate = extract_json_text(raw)

    try:
        data = parse_first_value(candidate)
    except (ValueError, RecursionError):
        logger.warning(f"Model output for {task.value} is not valid JSON")
        return ParseFailure.from_raw(REASON_MALFORMED, raw)

    if not isinstance(data, dict):
        logger.warning(f"Model output for {task.value} is {type(data).__name__}, not an object")
        return ParseFailure.from_raw(REASON_NOT_OBJECT, raw)

    try:
        return output_shape(task).model_validate(data)
    except ValidationError as e:
        missing = [
            ".".join(str(part) for part in err["loc"])
            for err in e.errors()
            if err["type"] == "missing"
        ]
        reason = REASON_INCOMPLETE if missing else REASON_INVALID
        logger.warning(
            f"Model output for {task.value} rejected: {reason}",
            extra={"missing_fields": missing},
        )
        return ParseFailure.from_raw(reason, raw, missing_fields=missing)
