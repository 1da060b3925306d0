"""Matcher variant set for contract-fixture generation.

A matcher stands in for a literal value inside an expected JSON message. It
carries an example value (placed into the generated document) and a matching
rule (telling a verifier how to compare actual data at that position).

Five node types form a closed union:

* **LiteralLike** — match by type against one example value.
* **RegexMatch** — generated example string plus a regular expression.
* **BoundedRepeat** — repeated element with a minimum or maximum count.
* **RawString** — a plain string occupying matcher position.
* **NestedObject** — field name → nested value (literal or matcher).

Functions:

* ``like`` / ``term`` / ``each_like`` / ``array_max_like`` … — factories.
* ``hex_value`` / ``uuid`` / ``ip_address`` / ``timestamp`` … — named matchers
  with a canonical example and a frozen pattern.
* ``matcher_to_json`` / ``matcher_from_json`` — wire-form round-trip using
  ``json_class`` tags.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal, TypeAlias

# ---------------------------------------------------------------------------
# Pattern constants
# ---------------------------------------------------------------------------

HEXADECIMAL = r"[0-9a-fA-F]+"
IP_ADDRESS = r"(\d{1,3}\.)+\d{1,3}"
IPV6_ADDRESS = (
    r"(\A([0-9a-f]{1,4}:){1,1}(:[0-9a-f]{1,4}){1,6}\Z)"
    r"|(\A([0-9a-f]{1,4}:){1,2}(:[0-9a-f]{1,4}){1,5}\Z)"
    r"|(\A([0-9a-f]{1,4}:){1,3}(:[0-9a-f]{1,4}){1,4}\Z)"
    r"|(\A([0-9a-f]{1,4}:){1,4}(:[0-9a-f]{1,4}){1,3}\Z)"
    r"|(\A([0-9a-f]{1,4}:){1,5}(:[0-9a-f]{1,4}){1,2}\Z)"
    r"|(\A([0-9a-f]{1,4}:){1,6}(:[0-9a-f]{1,4}){1,1}\Z)"
    r"|(\A(([0-9a-f]{1,4}:){1,7}|:):\Z)"
    r"|(\A:(:[0-9a-f]{1,4}){1,7}\Z)"
    r"|(\A((([0-9a-f]{1,4}:){6})(25[0-5]|2[0-4]\d|[0-1]?\d?\d)(\.(25[0-5]|2[0-4]\d|[0-1]?\d?\d)){3})\Z)"
    r"|(\A(([0-9a-f]{1,4}:){5}[0-9a-f]{1,4}:(25[0-5]|2[0-4]\d|[0-1]?\d?\d)(\.(25[0-5]|2[0-4]\d|[0-1]?\d?\d)){3})\Z)"
    r"|(\A([0-9a-f]{1,4}:){5}:[0-9a-f]{1,4}:(25[0-5]|2[0-4]\d|[0-1]?\d?\d)(\.(25[0-5]|2[0-4]\d|[0-1]?\d?\d)){3}\Z)"
    r"|(\A([0-9a-f]{1,4}:){1,1}(:[0-9a-f]{1,4}){1,4}:(25[0-5]|2[0-4]\d|[0-1]?\d?\d)(\.(25[0-5]|2[0-4]\d|[0-1]?\d?\d)){3}\Z)"
    r"|(\A([0-9a-f]{1,4}:){1,2}(:[0-9a-f]{1,4}){1,3}:(25[0-5]|2[0-4]\d|[0-1]?\d?\d)(\.(25[0-5]|2[0-4]\d|[0-1]?\d?\d)){3}\Z)"
    r"|(\A([0-9a-f]{1,4}:){1,3}(:[0-9a-f]{1,4}){1,2}:(25[0-5]|2[0-4]\d|[0-1]?\d?\d)(\.(25[0-5]|2[0-4]\d|[0-1]?\d?\d)){3}\Z)"
    r"|(\A([0-9a-f]{1,4}:){1,4}(:[0-9a-f]{1,4}){1,1}:(25[0-5]|2[0-4]\d|[0-1]?\d?\d)(\.(25[0-5]|2[0-4]\d|[0-1]?\d?\d)){3}\Z)"
    r"|(\A(([0-9a-f]{1,4}:){1,5}|:):(25[0-5]|2[0-4]\d|[0-1]?\d?\d)(\.(25[0-5]|2[0-4]\d|[0-1]?\d?\d)){3}\Z)"
    r"|(\A:(:[0-9a-f]{1,4}){1,5}:(25[0-5]|2[0-4]\d|[0-1]?\d?\d)(\.(25[0-5]|2[0-4]\d|[0-1]?\d?\d)){3}\Z)"
)
UUID = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"
TIMESTAMP = (
    r"^([\+-]?\d{4}(?!\d{2}\b))((-?)((0[1-9]|1[0-2])(\3([12]\d|0[1-9]|3[01]))?"
    r"|W([0-4]\d|5[0-2])(-?[1-7])?|(00[1-9]|0[1-9]\d|[12]\d{2}|3([0-5]\d|6[1-6])))"
    r"([T\s]((([01]\d|2[0-3])((:?)[0-5]\d)?|24\:?00)([\.,]\d+(?!:))?)?"
    r"(\17[0-5]\d([\.,]\d+)?)?([zZ]|([\+-])([01]\d|2[0-3]):?([0-5]\d)?)?)?)?$"
)
DATE = (
    r"^([\+-]?\d{4}(?!\d{2}\b))((-?)((0[1-9]|1[0-2])(\3([12]\d|0[1-9]|3[01]))?"
    r"|W([0-4]\d|5[0-2])(-?[1-7])?|(00[1-9]|0[1-9]\d|[12]\d{2}|3([0-5]\d|6[1-6])))?)"
)
TIME = r"^(T\d\d:\d\d(:\d\d)?(\.\d+)?(([+-]\d\d:\d\d)|Z)?)?$"

# Fixed so that generated fixtures are reproducible.
_TIME_EXAMPLE = datetime(2000, 2, 1, 12, 30, 0, tzinfo=UTC)


MatcherClass: TypeAlias = Literal[
    "like", "regex", "array_min_like", "array_max_like", "string", "object",
]
MatchingRule: TypeAlias = dict[str, Any]


# ---------------------------------------------------------------------------
# Node types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LiteralLike:
    """Match by type (int, string etc.) instead of a verbatim match."""

    contents: Any

    def __post_init__(self) -> None:
        # One rule per path: a matcher here would share the wrapper's path.
        if is_matcher(self.contents):
            raise TypeError(
                f"like() contents must not be a matcher, got {type(self.contents).__name__}"
            )

    @property
    def matcher_class(self) -> MatcherClass:
        return "like"

    def example(self) -> Any:
        return self.contents

    def matching_rule(self) -> MatchingRule:
        return {"match": "type"}


@dataclass(frozen=True, slots=True)
class RegexMatch:
    """Generated example string matched by a regular expression."""

    generate: str
    regex: str

    @property
    def matcher_class(self) -> MatcherClass:
        return "regex"

    def example(self) -> str:
        return self.generate

    def matching_rule(self) -> MatchingRule:
        return {"match": "regex", "regex": self.regex}


@dataclass(frozen=True, slots=True)
class BoundedRepeat:
    """Array whose elements all match *contents* by type.

    Only one bound reaches the rule: ``max`` when non-zero, else ``min``.
    """

    contents: Any
    min: int = 0
    max: int = 0

    def __post_init__(self) -> None:
        if self.min < 0:
            raise ValueError(f"min must be >= 0, got {self.min}")
        if self.max < 0:
            raise ValueError(f"max must be >= 0, got {self.max}")

    @property
    def matcher_class(self) -> MatcherClass:
        if self.max != 0:
            return "array_max_like"
        return "array_min_like"

    @property
    def repetitions(self) -> int:
        """Number of copies of *contents* materialized in a document."""
        if self.max != 0:
            return min(self.max, max(self.min, 1))
        return self.min

    def example(self) -> Any:
        return self.contents

    def matching_rule(self) -> MatchingRule:
        rule: MatchingRule = {"match": "type"}
        if self.max != 0:
            rule["max"] = self.max
        else:
            rule["min"] = self.min
        return rule


@dataclass(frozen=True, slots=True)
class RawString:
    """A plain string allowed to stand wherever a matcher is expected."""

    value: str

    @property
    def matcher_class(self) -> MatcherClass:
        return "string"

    def example(self) -> str:
        return self.value

    def matching_rule(self) -> MatchingRule:
        return {"match": "type"}


@dataclass(frozen=True, slots=True)
class NestedObject:
    """Complex object structure whose values may themselves be matchers."""

    fields: Mapping[str, Any]

    @property
    def matcher_class(self) -> MatcherClass:
        return "object"

    def example(self) -> dict[str, Any]:
        return {key: resolve_example(value) for key, value in self.fields.items()}

    def matching_rule(self) -> MatchingRule:
        return {"match": "type"}


Matcher: TypeAlias = LiteralLike | RegexMatch | BoundedRepeat | RawString | NestedObject

MATCHER_TYPES: tuple[type, ...] = (
    LiteralLike, RegexMatch, BoundedRepeat, RawString, NestedObject,
)


def is_matcher(value: Any) -> bool:
    """True if *value* is one of the five matcher node types."""
    return isinstance(value, MATCHER_TYPES)


def resolve_example(value: Any) -> Any:
    """Replace every matcher in *value* by its example, recursively.

    Unlike the body builder this keeps a single copy of repeated elements
    and records no rules.
    """
    if isinstance(value, NestedObject):
        return value.example()
    if is_matcher(value):
        return resolve_example(value.example())
    if isinstance(value, Mapping):
        return {key: resolve_example(v) for key, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [resolve_example(v) for v in value]
    return value


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def like(contents: Any) -> LiteralLike:
    """Match *contents* by type rather than by value."""
    return LiteralLike(contents=contents)


def term(generate: str, matcher: str) -> RegexMatch:
    """Generate *generate* in the document and match with regex *matcher*."""
    return RegexMatch(generate=generate, regex=matcher)


def regex(generate: str, matcher: str) -> RegexMatch:
    """More descriptive name for :func:`term`."""
    return term(generate, matcher)


def each_like(contents: Any, min: int) -> BoundedRepeat:
    """Array of at least *min* elements, each matching *contents* by type."""
    return BoundedRepeat(contents=contents, min=min)


def array_min_like(contents: Any, min: int) -> BoundedRepeat:
    return each_like(contents, min)


def array_max_like(contents: Any, max: int) -> BoundedRepeat:
    """Array of at most *max* elements, each matching *contents* by type."""
    return BoundedRepeat(contents=contents, max=max)


def raw_string(value: str) -> RawString:
    return RawString(value=value)


def struct_matcher(fields: Mapping[str, Any]) -> NestedObject:
    return NestedObject(fields=dict(fields))


def identifier() -> LiteralLike:
    """Any integer value."""
    return like(42)


def integer() -> LiteralLike:
    return identifier()


def decimal() -> LiteralLike:
    """Any decimal value."""
    return like(42.0)


def hex_value() -> RegexMatch:
    """Hexadecimal encoded strings."""
    return regex("3F", HEXADECIMAL)


def ip_address() -> RegexMatch:
    """Dotted IPv4 addresses."""
    return regex("127.0.0.1", IP_ADDRESS)


def ipv4_address() -> RegexMatch:
    return ip_address()


def ipv6_address() -> RegexMatch:
    """IPv6 addresses, including IPv4-mapped forms."""
    return regex("::ffff:192.0.2.128", IPV6_ADDRESS)


def uuid() -> RegexMatch:
    """Lower-case hyphenated UUIDs. The example is a v4 UUID."""
    return regex("fc763eba-0905-41c5-a27f-3934ab26786c", UUID)


def timestamp() -> RegexMatch:
    """ISO-8601 timestamps (``yyyy-MM-dd'T'HH:mm:ss``)."""
    return regex(_TIME_EXAMPLE.strftime("%Y-%m-%dT%H:%M:%SZ"), TIMESTAMP)


def date() -> RegexMatch:
    """ISO-8601 dates (``yyyy-MM-dd``)."""
    return regex(_TIME_EXAMPLE.strftime("%Y-%m-%d"), DATE)


def time() -> RegexMatch:
    """ISO-8601 times (``'T'HH:mm:ss``)."""
    return regex(_TIME_EXAMPLE.strftime("T%H:%M:%S"), TIME)


# ---------------------------------------------------------------------------
# Wire form
# ---------------------------------------------------------------------------

_LIKE_CLASS = "Pact::SomethingLike"
_ARRAY_CLASS = "Pact::ArrayLike"
_TERM_CLASS = "Pact::Term"
_RAW_STRING_CLASS = "Pact::RawString"
_STRUCT_CLASS = "Pact::StructMatcher"


def matcher_to_json(value: Any) -> Any:
    """Serialize a matcher tree to JSON-compatible data.

    Matcher nodes become ``json_class``-tagged objects::

        {"json_class": "Pact::SomethingLike", "contents": 127}
        {"json_class": "Pact::ArrayLike", "contents": ..., "min": 3}
        {"json_class": "Pact::Term",
         "data": {"generate": "abc", "matcher": {"json_class": "Regexp", "o": 0, "s": "\\\\w+"}}}

    Plain mappings, sequences and scalars are kept as they are.
    """
    if isinstance(value, LiteralLike):
        return {"json_class": _LIKE_CLASS, "contents": matcher_to_json(value.contents)}
    if isinstance(value, BoundedRepeat):
        d: dict[str, Any] = {
            "json_class": _ARRAY_CLASS,
            "contents": matcher_to_json(value.contents),
        }
        if value.min:
            d["min"] = value.min
        if value.max:
            d["max"] = value.max
        return d
    if isinstance(value, RegexMatch):
        return {
            "json_class": _TERM_CLASS,
            "data": {
                "generate": value.generate,
                "matcher": {"json_class": "Regexp", "o": 0, "s": value.regex},
            },
        }
    if isinstance(value, RawString):
        return {"json_class": _RAW_STRING_CLASS, "value": value.value}
    if isinstance(value, NestedObject):
        return {
            "json_class": _STRUCT_CLASS,
            "fields": {k: matcher_to_json(v) for k, v in value.fields.items()},
        }
    if isinstance(value, Mapping):
        return {k: matcher_to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [matcher_to_json(v) for v in value]
    return value


def matcher_from_json(data: Any) -> Any:
    """Deserialize the output of :func:`matcher_to_json`.

    Any object carrying a ``json_class`` member must be one of the known
    matcher tags. Raises ``ValueError`` on malformed input.
    """
    if isinstance(data, list):
        return [matcher_from_json(v) for v in data]
    if not isinstance(data, dict):
        return data
    if "json_class" not in data:
        return {k: matcher_from_json(v) for k, v in data.items()}

    json_class = data["json_class"]
    if json_class == _LIKE_CLASS:
        _require(data, "contents", json_class)
        contents = matcher_from_json(data["contents"])
        if is_matcher(contents):
            raise ValueError(f"{json_class} 'contents' must not be a matcher")
        return LiteralLike(contents=contents)
    if json_class == _ARRAY_CLASS:
        _require(data, "contents", json_class)
        return BoundedRepeat(
            contents=matcher_from_json(data["contents"]),
            min=_int_member(data, "min"),
            max=_int_member(data, "max"),
        )
    if json_class == _TERM_CLASS:
        term_data = data.get("data")
        if not isinstance(term_data, dict):
            raise ValueError("Pact::Term 'data' must be an object")
        term_matcher = term_data.get("matcher")
        if not isinstance(term_matcher, dict) or "s" not in term_matcher:
            raise ValueError("Pact::Term 'data.matcher' must be an object with 's'")
        _require(term_data, "generate", json_class)
        return RegexMatch(
            generate=_str_member(term_data, "generate", json_class),
            regex=_str_member(term_matcher, "s", json_class),
        )
    if json_class == _RAW_STRING_CLASS:
        _require(data, "value", json_class)
        return RawString(value=_str_member(data, "value", json_class))
    if json_class == _STRUCT_CLASS:
        fields = data.get("fields")
        if not isinstance(fields, dict):
            raise ValueError("Pact::StructMatcher 'fields' must be an object")
        return NestedObject(fields={k: matcher_from_json(v) for k, v in fields.items()})
    raise ValueError(f"Unrecognised matcher json_class: {json_class!r}")


def _require(data: dict[str, Any], key: str, json_class: str) -> None:
    if key not in data:
        raise ValueError(f"{json_class} payload is missing {key!r}")


def _int_member(data: dict[str, Any], key: str) -> int:
    raw = data.get(key, 0)
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"Pact::ArrayLike {key!r} must be an integer, got {raw!r}")
    return raw


def _str_member(data: dict[str, Any], key: str, json_class: str) -> str:
    raw = data[key]
    if not isinstance(raw, str):
        raise ValueError(f"{json_class} {key!r} must be a string, got {raw!r}")
    return raw
