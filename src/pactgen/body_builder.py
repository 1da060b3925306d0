"""Body and matching-rule generation from matcher trees.

Walks a tree of literals, mappings, sequences and matcher nodes and produces:

* a literal-only JSON document in which every matcher is replaced by its
  example value, and
* a flat mapping from JSON-path to matching rule for every matcher node
  except ``NestedObject``, which only contributes the rules of its fields.

Paths start at ``$.body``; object fields append ``.name`` and repeated
elements append ``[*]`` (never a concrete index), so that one rule covers
every element of an array.
"""
from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pactgen.matchers import (
    BoundedRepeat,
    LiteralLike,
    MatchingRule,
    NestedObject,
    RawString,
    RegexMatch,
)

log = logging.getLogger(__name__)

BODY_ROOT = "$.body"
WILDCARD = "[*]"


@dataclass(frozen=True, slots=True)
class PactBody:
    """Example document plus the matching rules that apply to it."""

    body: Any
    matching_rules: dict[str, MatchingRule] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the fixture in its wire shape (``body`` / ``matchingRules``)."""
        return {"body": self.body, "matchingRules": self.matching_rules}


def build_body(value: Any, *, root: str = BODY_ROOT) -> PactBody:
    """Build the example document and matching rules for *value*.

    Parameters
    ----------
    value:
        A literal, a mapping or sequence that may contain matchers at any
        depth, or a matcher.
    root:
        JSON-path of the document root.

    Returns
    -------
    PactBody
        Fresh document and rule map; *value* is never mutated.
    """
    rules: dict[str, MatchingRule] = {}
    body = _build(value, root, rules)
    log.debug("built body with %d matching rule(s)", len(rules))
    return PactBody(body=body, matching_rules=rules)


def generate_pact_file(value: Any) -> PactBody:
    """Build the body/rule pair rooted at ``$.body``."""
    return build_body(value)


def _build(value: Any, path: str, rules: dict[str, MatchingRule]) -> Any:
    """Return the document fragment for *value* and record its rules."""
    if isinstance(value, BoundedRepeat):
        rules[path] = value.matching_rule()
        element = _build(value.contents, path + WILDCARD, rules)
        copies = value.repetitions
        if copies == 0:
            return []
        return [element] + [copy.deepcopy(element) for _ in range(copies - 1)]
    if isinstance(value, NestedObject):
        return _build_mapping(value.fields, path, rules)
    if isinstance(value, LiteralLike):
        rules[path] = value.matching_rule()
        return _build(value.contents, path, rules)
    if isinstance(value, (RegexMatch, RawString)):
        rules[path] = value.matching_rule()
        return value.example()
    if isinstance(value, Mapping):
        return _build_mapping(value, path, rules)
    if isinstance(value, (list, tuple)):
        return [_build(item, path + WILDCARD, rules) for item in value]
    # Anything else is a literal, probably a str, number, bool or None
    return value


def _build_mapping(
    mapping: Mapping[Any, Any],
    path: str,
    rules: dict[str, MatchingRule],
) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, child in mapping.items():
        if not isinstance(key, str):
            raise TypeError(f"object keys must be strings, got {key!r} at {path}")
        out[key] = _build(child, f"{path}.{key}", rules)
    return out
