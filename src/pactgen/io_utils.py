"""I/O utilities for JSON fixtures.

Provides orjson-backed JSON load/save, canonical text formatting of
documents, and writing of body/matching-rule fixtures.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson

from pactgen.body_builder import PactBody

_PRETTY = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS


class MalformedDocumentError(ValueError):
    """Raised when text handed to a formatting helper is not valid JSON."""


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON with sorted keys, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = _PRETTY if pretty else orjson.OPT_SORT_KEYS
    path.write_bytes(orjson.dumps(obj, option=opts))


def format_json(text: str | bytes) -> str:
    """Return the canonical (indented, key-sorted) form of JSON *text*.

    Raises ``MalformedDocumentError`` if *text* does not parse.
    """
    try:
        obj = orjson.loads(text)
    except orjson.JSONDecodeError as exc:
        raise MalformedDocumentError(f"document is not valid JSON: {exc}") from exc
    return format_json_object(obj)


def format_json_object(obj: Any) -> str:
    """Return the canonical (indented, key-sorted) text of an in-memory document."""
    return orjson.dumps(obj, option=_PRETTY).decode("utf-8")


def save_pact_body(pact_body: PactBody, path: Path) -> None:
    """Write a fixture as ``{"body": ..., "matchingRules": ...}``."""
    save_json(pact_body.to_dict(), path)
