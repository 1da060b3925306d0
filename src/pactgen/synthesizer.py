"""Matcher synthesis from type descriptions.

Walks a ``TypeSpec`` and produces a matcher tree that mirrors its shape:
arrays require one element by default, and scalar fields are matched by type
against a fixed default example. Field annotations override these defaults:

* Minimum array size: ``min=2``
* String regex:       ``example=2000-01-01,regex=^\\d{4}-\\d{2}-\\d{2}$``
* Scalar example:     ``example=42``
"""
from __future__ import annotations

import dataclasses
import logging
from typing import Any

from pactgen.matchers import Matcher, NestedObject, each_like, like, term
from pactgen.schema import (
    BOOL_KINDS,
    FLOAT_KINDS,
    INTEGER_KINDS,
    KIND_ARRAY,
    KIND_POINTER,
    KIND_STRUCT,
    STRING_KINDS,
    SUPPORTED_KINDS,
    TypeSpec,
    dereference,
    describe_dataclass,
)
from pactgen.tags import TagParams, default_params, parse_tag

log = logging.getLogger(__name__)

DEFAULT_STRING_EXAMPLE = "string"
DEFAULT_BOOL_EXAMPLE = True
DEFAULT_INT_EXAMPLE = 1
DEFAULT_FLOAT_EXAMPLE = 1.1


class UnsupportedTypeKindError(TypeError):
    """Raised when a type description contains a kind with no matcher."""

    def __init__(self, spec: TypeSpec) -> None:
        label = f"{spec.kind} ({spec.name})" if spec.name else spec.kind
        super().__init__(f"match: unhandled type kind: {label}")
        self.kind = spec.kind


def match(src: Any) -> Matcher:
    """Synthesize a matcher for *src*.

    *src* is a ``TypeSpec``, a dataclass type, or a dataclass instance (only
    its type is inspected).
    """
    if isinstance(src, TypeSpec):
        return synthesize(src)
    if dataclasses.is_dataclass(src):
        return synthesize(describe_dataclass(src))
    raise TypeError(f"match: expected a TypeSpec or a dataclass, got {type(src).__name__}")


def synthesize(spec: TypeSpec, params: TagParams | None = None) -> Matcher:
    """Recursively build a matcher for *spec* under *params*.

    Raises ``UnsupportedTypeKindError`` for kinds outside pointer, array,
    struct, string, bool, integer and float, and ``InvalidAnnotationError``
    (from the tag parser) for malformed field annotations.
    """
    if params is None:
        params = default_params()
    kind = spec.kind

    if kind == KIND_POINTER:
        return synthesize(spec.elem, params)
    if kind == KIND_ARRAY:
        return each_like(synthesize(spec.elem, default_params()), params.min)
    if kind == KIND_STRUCT:
        result: dict[str, Any] = {}
        for f in spec.fields:
            field_kind = dereference(f.type_spec).kind
            # Unsupported kinds fail in synthesize() whatever their annotation.
            field_params = parse_tag(field_kind, f.tag) if field_kind in SUPPORTED_KINDS else None
            result[f.name] = synthesize(f.type_spec, field_params)
        log.debug("synthesized struct %s with %d field(s)", spec.name or "<anonymous>", len(result))
        return NestedObject(fields=result)
    if kind in STRING_KINDS:
        if params.regex:
            return term(str(params.example), params.regex)
        if params.example is not None:
            return like(str(params.example))
        return like(DEFAULT_STRING_EXAMPLE)
    if kind in BOOL_KINDS:
        return like(DEFAULT_BOOL_EXAMPLE if params.example is None else params.example)
    if kind in INTEGER_KINDS:
        return like(DEFAULT_INT_EXAMPLE if params.example is None else params.example)
    if kind in FLOAT_KINDS:
        return like(DEFAULT_FLOAT_EXAMPLE if params.example is None else params.example)

    raise UnsupportedTypeKindError(spec)
