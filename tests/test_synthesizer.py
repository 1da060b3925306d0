"""Tests for pactgen.synthesizer — matcher synthesis from type descriptions."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass

import pytest

from pactgen.body_builder import build_body
from pactgen.matchers import (
    BoundedRepeat,
    LiteralLike,
    NestedObject,
    RegexMatch,
    each_like,
    like,
    term,
)
from pactgen.schema import (
    BOOL,
    FLOAT,
    INT,
    STRING,
    TypeSpec,
    array_of,
    field,
    pointer_to,
    struct_of,
)
from pactgen.synthesizer import (
    DEFAULT_FLOAT_EXAMPLE,
    UnsupportedTypeKindError,
    match,
    synthesize,
)
from pactgen.tags import InvalidAnnotationError, TagParams

DATE_REGEX = r"^\d{4}-\d{2}-\d{2}$"


@dataclass
class Line:
    sku: str = dataclasses.field(metadata={"pact": "example=AB-1,regex=^[A-Z]{2}-\\d+$"})
    quantity: int = dataclasses.field(metadata={"pact": "example=3"})


@dataclass
class Order:
    id: int
    lines: list[Line] = dataclasses.field(metadata={"pact": "min=2"})
    paid: bool = dataclasses.field(default=False, metadata={"pact": "example=false"})
    note: str | None = dataclasses.field(default=None, metadata={"json": "comment"})


@dataclass
class Ledger:
    entries: dict[str, float]


# ───────────────────────────── Scalars ─────────────────────────────


class TestDefaults:
    def test_string(self) -> None:
        assert synthesize(STRING) == LiteralLike(contents="string")

    def test_bool(self) -> None:
        assert synthesize(BOOL) == like(True)

    @pytest.mark.parametrize("kind", ["int", "int8", "int16", "int32", "int64", "uint", "uint64"])
    def test_integers(self, kind: str) -> None:
        assert synthesize(TypeSpec(kind=kind)) == like(1)

    @pytest.mark.parametrize("kind", ["float", "float32", "float64"])
    def test_floats(self, kind: str) -> None:
        assert synthesize(TypeSpec(kind=kind)) == like(DEFAULT_FLOAT_EXAMPLE)
        assert DEFAULT_FLOAT_EXAMPLE == 1.1

    def test_array_defaults_to_min_one(self) -> None:
        assert synthesize(array_of(STRING)) == each_like(like("string"), 1)

    def test_pointer_is_transparent(self) -> None:
        assert synthesize(pointer_to(pointer_to(INT))) == like(1)


class TestParams:
    def test_string_example(self) -> None:
        assert synthesize(STRING, TagParams(example="billy")) == like("billy")

    def test_string_regex(self) -> None:
        params = TagParams(example="2000-01-01", regex=DATE_REGEX)
        assert synthesize(STRING, params) == RegexMatch(generate="2000-01-01", regex=DATE_REGEX)

    def test_bool_false_example(self) -> None:
        assert synthesize(BOOL, TagParams(example=False)) == like(False)

    def test_int_zero_example(self) -> None:
        assert synthesize(INT, TagParams(example=0)) == like(0)

    def test_float_example(self) -> None:
        assert synthesize(FLOAT, TagParams(example=2.5)) == like(2.5)

    def test_array_min(self) -> None:
        assert synthesize(array_of(INT), TagParams(min=4)) == each_like(like(1), 4)

    def test_nested_arrays_use_default_min(self) -> None:
        result = synthesize(array_of(array_of(INT)), TagParams(min=3))
        assert result == each_like(each_like(like(1), 1), 3)


# ───────────────────────────── Structs ─────────────────────────────


class TestStructs:
    def test_fields_keyed_by_wire_name(self) -> None:
        spec = struct_of(
            field("user_id", INT, tag="example=127"),
            field("name", STRING),
            field("admin", pointer_to(BOOL), tag="example=false"),
        )
        assert synthesize(spec) == NestedObject(fields={
            "user_id": like(127),
            "name": like("string"),
            "admin": like(False),
        })

    def test_annotated_sequence_and_regex(self) -> None:
        spec = struct_of(
            field(
                "dates",
                array_of(struct_of(field("date", STRING, tag="example=2000-01-01,regex=" + DATE_REGEX))),
                tag="min=2",
            ),
        )
        pact = build_body(synthesize(spec))
        assert pact.matching_rules == {
            "$.body.dates": {"match": "type", "min": 2},
            "$.body.dates[*].date": {"match": "regex", "regex": DATE_REGEX},
        }
        assert pact.body == {"dates": [{"date": "2000-01-01"}, {"date": "2000-01-01"}]}

    def test_empty_struct(self) -> None:
        assert synthesize(struct_of()) == NestedObject(fields={})


class TestErrors:
    @pytest.mark.parametrize("kind", ["map", "complex128", "func", "chan", "interface"])
    def test_unsupported_kind(self, kind: str) -> None:
        with pytest.raises(UnsupportedTypeKindError, match=kind):
            synthesize(TypeSpec(kind=kind))

    def test_unsupported_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            synthesize(struct_of(field("ok", STRING), field("bad", TypeSpec(kind="map"))))

    def test_unsupported_element(self) -> None:
        with pytest.raises(UnsupportedTypeKindError) as exc_info:
            synthesize(array_of(pointer_to(TypeSpec(kind="map", name="Lookup"))))
        assert exc_info.value.kind == "map"
        assert "Lookup" in str(exc_info.value)

    @pytest.mark.parametrize("tag", ["example=1", "min=2", "nonsense"])
    def test_unsupported_kind_with_annotation(self, tag: str) -> None:
        spec = struct_of(field("m", TypeSpec(kind="map"), tag=tag))
        with pytest.raises(UnsupportedTypeKindError, match="map"):
            synthesize(spec)

    def test_unsupported_pointer_target_with_annotation(self) -> None:
        spec = struct_of(field("m", pointer_to(TypeSpec(kind="chan")), tag="example=1"))
        with pytest.raises(UnsupportedTypeKindError) as exc_info:
            synthesize(spec)
        assert exc_info.value.kind == "chan"

    def test_malformed_min(self) -> None:
        spec = struct_of(field("items", array_of(STRING), tag="min=abc"))
        with pytest.raises(InvalidAnnotationError, match="min=abc"):
            synthesize(spec)

    def test_regex_on_non_string(self) -> None:
        spec = struct_of(field("count", INT, tag="example=1,regex=\\d+"))
        with pytest.raises(InvalidAnnotationError):
            synthesize(spec)

    def test_annotation_on_struct_field(self) -> None:
        spec = struct_of(field("inner", struct_of(field("a", INT)), tag="min=1"))
        with pytest.raises(InvalidAnnotationError):
            synthesize(spec)


# ───────────────────────────── match() ─────────────────────────────


class TestMatch:
    def test_type_spec(self) -> None:
        assert match(STRING) == like("string")

    def test_dataclass(self) -> None:
        line = NestedObject(fields={
            "sku": term("AB-1", "^[A-Z]{2}-\\d+$"),
            "quantity": like(3),
        })
        assert match(Order) == NestedObject(fields={
            "id": like(1),
            "lines": BoundedRepeat(contents=line, min=2),
            "paid": like(False),
            "comment": like("string"),
        })

    def test_dataclass_instance(self) -> None:
        order = Order(id=9, lines=[])
        assert match(order) == match(Order)

    def test_dataclass_body(self) -> None:
        pact = build_body(match(Order))
        assert pact.body["lines"] == [
            {"sku": "AB-1", "quantity": 3},
            {"sku": "AB-1", "quantity": 3},
        ]
        assert pact.matching_rules == {
            "$.body.id": {"match": "type"},
            "$.body.lines": {"match": "type", "min": 2},
            "$.body.lines[*].sku": {"match": "regex", "regex": "^[A-Z]{2}-\\d+$"},
            "$.body.lines[*].quantity": {"match": "type"},
            "$.body.paid": {"match": "type"},
            "$.body.comment": {"match": "type"},
        }

    def test_dataclass_with_unsupported_field(self) -> None:
        with pytest.raises(UnsupportedTypeKindError, match="dict"):
            match(Ledger)

    def test_rejects_other_values(self) -> None:
        with pytest.raises(TypeError, match="TypeSpec or a dataclass"):
            match(42)
