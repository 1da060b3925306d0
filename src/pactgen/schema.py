"""Explicit type descriptions consumed by the matcher synthesizer.

A ``TypeSpec`` describes the shape of an expected message: its kind, the
element type of pointers and arrays, and the fields of a struct. Each
``FieldSpec`` carries the field's wire name and an optional annotation
("pact tag") tuning the generated matcher.

Functions:

* ``pointer_to`` / ``array_of`` / ``struct_of`` / ``field`` — builders.
* ``type_spec_from_json`` / ``type_spec_to_json`` — JSON round-trip.
* ``describe_dataclass`` — derive a ``TypeSpec`` from a Python dataclass.
"""
from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------

KIND_POINTER = "pointer"
KIND_ARRAY = "array"
KIND_STRUCT = "struct"
KIND_STRING = "string"
KIND_BOOL = "bool"

STRING_KINDS: frozenset[str] = frozenset({KIND_STRING})
BOOL_KINDS: frozenset[str] = frozenset({KIND_BOOL})
INTEGER_KINDS: frozenset[str] = frozenset({
    "int", "int8", "int16", "int32", "int64",
    "uint", "uint8", "uint16", "uint32", "uint64",
})
FLOAT_KINDS: frozenset[str] = frozenset({"float", "float32", "float64"})

SUPPORTED_KINDS: frozenset[str] = (
    frozenset({KIND_POINTER, KIND_ARRAY, KIND_STRUCT})
    | STRING_KINDS | BOOL_KINDS | INTEGER_KINDS | FLOAT_KINDS
)

# Kinds whose spec must carry an element type
_ELEM_KINDS: frozenset[str] = frozenset({KIND_POINTER, KIND_ARRAY})


@dataclass(frozen=True, slots=True)
class TypeSpec:
    """Description of one type: a scalar, a pointer, an array or a struct."""

    kind: str
    elem: TypeSpec | None = None
    fields: tuple[FieldSpec, ...] = ()
    name: str = ""

    def __post_init__(self) -> None:
        if not self.kind:
            raise ValueError("kind must not be empty")
        if self.kind in _ELEM_KINDS and self.elem is None:
            raise ValueError(f"{self.kind} type requires an element type")
        if self.fields and self.kind != KIND_STRUCT:
            raise ValueError(f"only struct types have fields, got kind {self.kind!r}")


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One struct field: wire name, type and optional annotation."""

    name: str
    type_spec: TypeSpec
    tag: str = ""


STRING = TypeSpec(kind=KIND_STRING)
BOOL = TypeSpec(kind=KIND_BOOL)
INT = TypeSpec(kind="int")
FLOAT = TypeSpec(kind="float64")


def pointer_to(elem: TypeSpec) -> TypeSpec:
    return TypeSpec(kind=KIND_POINTER, elem=elem)


def array_of(elem: TypeSpec) -> TypeSpec:
    return TypeSpec(kind=KIND_ARRAY, elem=elem)


def struct_of(*fields: FieldSpec, name: str = "") -> TypeSpec:
    return TypeSpec(kind=KIND_STRUCT, fields=tuple(fields), name=name)


def field(name: str, type_spec: TypeSpec, tag: str = "") -> FieldSpec:
    return FieldSpec(name=name, type_spec=type_spec, tag=tag)


def dereference(spec: TypeSpec) -> TypeSpec:
    """Strip any number of pointer layers from *spec*."""
    while spec.kind == KIND_POINTER and spec.elem is not None:
        spec = spec.elem
    return spec


# ---------------------------------------------------------------------------
# JSON serialization
# ---------------------------------------------------------------------------

def type_spec_to_json(spec: TypeSpec) -> dict[str, Any]:
    """Serialize a TypeSpec to a JSON-compatible dict.

    Scalar::

        {"kind": "string"}

    Struct::

        {"kind": "struct", "name": "User",
         "fields": [{"name": "id", "type": {"kind": "int"}, "tag": "example=7"}]}
    """
    d: dict[str, Any] = {"kind": spec.kind}
    if spec.name:
        d["name"] = spec.name
    if spec.elem is not None:
        d["elem"] = type_spec_to_json(spec.elem)
    if spec.kind == KIND_STRUCT:
        d["fields"] = [
            _field_to_json(f) for f in spec.fields
        ]
    return d


def _field_to_json(f: FieldSpec) -> dict[str, Any]:
    d: dict[str, Any] = {"name": f.name, "type": type_spec_to_json(f.type_spec)}
    if f.tag:
        d["tag"] = f.tag
    return d


def type_spec_from_json(data: Any) -> TypeSpec:
    """Deserialize the output of :func:`type_spec_to_json`.

    Raises ``ValueError`` on malformed input. Unsupported kind names are
    accepted here and rejected later by the synthesizer.
    """
    if not isinstance(data, dict):
        raise ValueError("Type spec payload must be an object")
    kind = data.get("kind")
    if not isinstance(kind, str) or not kind:
        raise ValueError("Type spec 'kind' must be a non-empty string")

    elem = None
    if "elem" in data:
        elem = type_spec_from_json(data["elem"])

    raw_fields = data.get("fields", [])
    if not isinstance(raw_fields, list):
        raise ValueError("Type spec 'fields' must be a list")
    fields: list[FieldSpec] = []
    for i, raw in enumerate(raw_fields):
        if not isinstance(raw, dict):
            raise ValueError(f"Field {i} must be an object")
        name = raw.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError(f"Field {i} 'name' must be a non-empty string")
        tag = raw.get("tag", "")
        if not isinstance(tag, str):
            raise ValueError(f"Field {name!r} 'tag' must be a string")
        if "type" not in raw:
            raise ValueError(f"Field {name!r} is missing 'type'")
        fields.append(FieldSpec(name=name, type_spec=type_spec_from_json(raw["type"]), tag=tag))

    return TypeSpec(
        kind=kind,
        elem=elem,
        fields=tuple(fields),
        name=str(data.get("name", "")),
    )


# ---------------------------------------------------------------------------
# Dataclass description
# ---------------------------------------------------------------------------

_SCALAR_KINDS: dict[Any, str] = {
    str: KIND_STRING,
    bool: KIND_BOOL,
    int: "int",
    float: "float64",
}

_SEQUENCE_ORIGINS: tuple[Any, ...] = (list, set, frozenset, Sequence)


def describe_dataclass(cls: Any) -> TypeSpec:
    """Build a struct ``TypeSpec`` from a dataclass type or instance.

    The wire name of each field is read from ``metadata["json"]`` and its
    annotation from ``metadata["pact"]``::

        @dataclass
        class User:
            name: str = dataclasses.field(metadata={"pact": "example=billy"})
            tags: list[str] = dataclasses.field(metadata={"json": "labels", "pact": "min=2"})

    Annotations that have no matcher equivalent are described with their own
    name as kind (``dict`` becomes ``"dict"``) so that synthesis rejects them.
    """
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass")
    return _describe_struct(cls if isinstance(cls, type) else type(cls), ())


def _describe_struct(cls: type, seen: tuple[type, ...]) -> TypeSpec:
    if cls in seen:
        # Self-referencing types have no finite matcher tree.
        return TypeSpec(kind="recursive", name=cls.__name__)
    hints = typing.get_type_hints(cls)
    fields = []
    for f in dataclasses.fields(cls):
        fields.append(FieldSpec(
            name=str(f.metadata.get("json", f.name)),
            type_spec=_describe_hint(hints[f.name], seen + (cls,)),
            tag=str(f.metadata.get("pact", "")),
        ))
    return TypeSpec(kind=KIND_STRUCT, fields=tuple(fields), name=cls.__name__)


def _describe_hint(hint: Any, seen: tuple[type, ...]) -> TypeSpec:
    if hint in _SCALAR_KINDS:
        return TypeSpec(kind=_SCALAR_KINDS[hint])
    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return _describe_struct(hint, seen)

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin is typing.Union or origin is types.UnionType:
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1 and len(args) == 2:
            return pointer_to(_describe_hint(non_none[0], seen))
        return TypeSpec(kind="union")
    if origin in _SEQUENCE_ORIGINS and len(args) == 1:
        return array_of(_describe_hint(args[0], seen))
    if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
        return array_of(_describe_hint(args[0], seen))

    if origin is not None:
        return TypeSpec(kind=getattr(origin, "__name__", str(origin)))
    return TypeSpec(kind=getattr(hint, "__name__", str(hint)))
