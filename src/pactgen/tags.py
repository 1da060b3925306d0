"""Per-field annotation ("pact tag") parser.

Grammar::

    tag          := pair (',' pair)*
    pair         := KEY '=' VALUE
    string tag   := 'example=' VALUE [',regex=' PATTERN]
    bool tag     := 'example=' BOOL
    integer tag  := 'example=' INT
    float tag    := 'example=' FLOAT
    array tag    := 'min=' DIGITS

``PATTERN`` consumes the rest of the tag, so it may itself contain commas.
In the example-only string form ``VALUE`` consumes the rest of the tag too,
as long as no further ``,key=`` segment follows. Keys not allowed for the
field kind are rejected, never ignored.

Public API:

* ``parse_tag(kind, tag)`` — parse one annotation into ``TagParams``.
* ``default_params()`` — parameters used when a field has no annotation.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass

from pactgen.schema import (
    BOOL_KINDS,
    FLOAT_KINDS,
    INTEGER_KINDS,
    KIND_ARRAY,
    STRING_KINDS,
)

DEFAULT_MIN = 1

_REGEX_SEPARATOR = ",regex="
_INT_RE = re.compile(r"[+-]?\d+")
_MIN_RE = re.compile(r"\d+")
_TRAILING_KEY_RE = re.compile(r",\s*([A-Za-z_]\w*)=")

# Accepted boolean spellings
_TRUE_LITERALS: frozenset[str] = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS: frozenset[str] = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class InvalidAnnotationError(ValueError):
    """Raised when a field annotation does not parse for the field's kind."""

    def __init__(self, tag: str, reason: str) -> None:
        super().__init__(f"invalid pact tag {tag!r}: {reason}")
        self.tag = tag
        self.reason = reason


@dataclass(frozen=True, slots=True)
class TagParams:
    """Parameters plucked from one field annotation."""

    min: int = DEFAULT_MIN
    example: str | int | float | bool | None = None
    regex: str | None = None


def default_params() -> TagParams:
    return TagParams()


def parse_tag(kind: str, tag: str) -> TagParams:
    """Parse annotation *tag* for a field of the given (dereferenced) *kind*.

    An empty tag yields the defaults. Raises ``InvalidAnnotationError`` on
    any malformed input.
    """
    tag = tag.strip()
    if not tag:
        return default_params()

    if kind in STRING_KINDS:
        return _parse_string_tag(tag)
    if kind in BOOL_KINDS:
        return TagParams(example=_parse_bool(tag, _single_value(tag, "example")))
    if kind in INTEGER_KINDS:
        return TagParams(example=_parse_int(tag, _single_value(tag, "example")))
    if kind in FLOAT_KINDS:
        return TagParams(example=_parse_float(tag, _single_value(tag, "example")))
    if kind == KIND_ARRAY:
        return TagParams(min=_parse_min(tag, _single_value(tag, "min")))
    raise InvalidAnnotationError(tag, f"fields of kind {kind!r} take no annotation")


def _split_pair(tag: str, pair: str) -> tuple[str, str]:
    key, sep, value = pair.partition("=")
    if not sep:
        raise InvalidAnnotationError(tag, f"expected key=value, got {pair!r}")
    return key.strip(), value


def _single_value(tag: str, expected_key: str) -> str:
    """Return the value of a tag made of exactly one ``expected_key=...`` pair."""
    pairs = tag.split(",")
    keys = [_split_pair(tag, p)[0] for p in pairs]
    unknown = sorted({k for k in keys if k != expected_key})
    if unknown:
        raise InvalidAnnotationError(tag, f"unknown key(s) {unknown}, expected {expected_key!r}")
    if len(pairs) > 1:
        raise InvalidAnnotationError(tag, f"duplicate key {expected_key!r}")
    return _split_pair(tag, pairs[0])[1].strip()


def _parse_string_tag(tag: str) -> TagParams:
    head, sep, pattern = tag.partition(_REGEX_SEPARATOR)
    key, value = _split_pair(tag, head)
    if key == "regex":
        raise InvalidAnnotationError(tag, "regex requires an example")
    if key != "example":
        raise InvalidAnnotationError(tag, f"unknown key {key!r}, expected 'example'")

    if not sep:
        if not value.strip():
            raise InvalidAnnotationError(tag, "example must not be empty")
        trailing = _TRAILING_KEY_RE.search(value)
        if trailing:
            raise InvalidAnnotationError(tag, f"unknown key {trailing.group(1)!r}")
        return TagParams(example=value)

    # The example in the regex form must be a single token.
    if not value or any(c.isspace() for c in value) or "," in value:
        raise InvalidAnnotationError(tag, f"malformed example {value!r}")
    if not pattern:
        raise InvalidAnnotationError(tag, "regex must not be empty")
    try:
        re.compile(pattern)
    except re.error as exc:
        raise InvalidAnnotationError(tag, f"regex does not compile: {exc}") from exc
    return TagParams(example=value, regex=pattern)


def _parse_bool(tag: str, value: str) -> bool:
    if value in _TRUE_LITERALS:
        return True
    if value in _FALSE_LITERALS:
        return False
    raise InvalidAnnotationError(tag, f"{value!r} is not a boolean")


def _parse_int(tag: str, value: str) -> int:
    if not _INT_RE.fullmatch(value):
        raise InvalidAnnotationError(tag, f"{value!r} is not an integer")
    return int(value)


def _parse_float(tag: str, value: str) -> float:
    try:
        number = float(value)
    except ValueError as exc:
        raise InvalidAnnotationError(tag, f"{value!r} is not a number") from exc
    if not math.isfinite(number):
        raise InvalidAnnotationError(tag, f"{value!r} is not a finite number")
    return number


def _parse_min(tag: str, value: str) -> int:
    if not _MIN_RE.fullmatch(value):
        raise InvalidAnnotationError(tag, f"min must be a non-negative integer, got {value!r}")
    return int(value)
