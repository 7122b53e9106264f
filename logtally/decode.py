"""Decode a log line into its ``type`` discriminator.

Decoding never raises for bad content. The outcome is either a
:class:`DecodedRecord` or a :class:`DecodeFailure` whose description starts
with a tag naming the cause:

- ``invalid JSON: ...`` for malformed syntax, non-standard constants such as
  ``NaN`` and lone surrogate escapes,
- ``duplicate field ...`` when the object repeats the ``type`` key,
- ``expected a JSON object, found ...`` when the top-level value is not an object,
- ``missing field ...`` when the object lacks the field,
- ``invalid type for field `type`: ...`` when the value is not a string.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, Tuple, Union

TYPE_FIELD = "type"


@dataclass(frozen=True, slots=True)
class DecodedRecord:
    """A successfully decoded line. Extra fields of the object are dropped."""

    type: str


@dataclass(frozen=True, slots=True)
class DecodeFailure:
    """A line that could not be decoded, with a human-readable reason."""

    description: str


DecodeOutcome = Union[DecodedRecord, DecodeFailure]


def json_kind(value: Any) -> str:
    """Return the JSON name for the kind of a decoded value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return f"boolean `{'true' if value else 'false'}`"
    if isinstance(value, int):
        return f"integer `{value}`"
    if isinstance(value, float):
        return f"floating point `{value}`"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


class _InvalidDocument(ValueError):
    """Raised from parser hooks for input that JSON does not allow."""


class _JsonObject(dict):
    """Decoded object that remembers whether the ``type`` key was repeated."""

    duplicate_type = False


def _check_text(value: Any) -> None:
    # Strings inside objects are checked by the pairs hook; arrays are walked here
    if isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            raise _InvalidDocument("lone surrogate in string escape") from None
    elif isinstance(value, list):
        for item in value:
            _check_text(item)


def _object_pairs(pairs: List[Tuple[str, Any]]) -> _JsonObject:
    obj = _JsonObject()
    for key, value in pairs:
        _check_text(key)
        _check_text(value)
        if key == TYPE_FIELD and key in obj:
            obj.duplicate_type = True
        obj[key] = value
    return obj


def _reject_constant(name: str) -> Any:
    raise _InvalidDocument(f"`{name}` is not a valid JSON value")


def decode_line(content: str) -> DecodeOutcome:
    """Decode one line of content.

    Args:
        content: Line text without its terminator.

    Returns:
        ``DecodedRecord`` on success, ``DecodeFailure`` otherwise.
    """
    try:
        payload = json.loads(
            content, object_pairs_hook=_object_pairs, parse_constant=_reject_constant
        )
    except json.JSONDecodeError as exc:
        return DecodeFailure(
            f"invalid JSON: {exc.msg} at line {exc.lineno} column {exc.colno}"
        )
    except _InvalidDocument as exc:
        return DecodeFailure(f"invalid JSON: {exc}")
    except RecursionError:
        return DecodeFailure("invalid JSON: nesting too deep")

    if not isinstance(payload, dict):
        try:
            _check_text(payload)
        except _InvalidDocument as exc:
            return DecodeFailure(f"invalid JSON: {exc}")
        return DecodeFailure(f"expected a JSON object, found {json_kind(payload)}")

    if payload.duplicate_type:
        return DecodeFailure(f"duplicate field `{TYPE_FIELD}`")

    if TYPE_FIELD not in payload:
        return DecodeFailure(f"missing field `{TYPE_FIELD}`")

    value = payload[TYPE_FIELD]
    if not isinstance(value, str):
        return DecodeFailure(
            f"invalid type for field `{TYPE_FIELD}`: expected a string, "
            f"found {json_kind(value)}"
        )

    return DecodedRecord(type=value)
