"""Tests for pathform.validation.html: constraint attributes and input types."""

from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum

from pathform.constraints import (
    Cascade,
    Email,
    Max,
    Min,
    NotBlank,
    NotEmpty,
    NotNull,
    Pattern,
    Size,
)
from pathform.fields import constrained, field_ref
from pathform.validation.html import html_attributes, input_type


class Priority(IntEnum):
    LOW = 1
    HIGH = 2


@dataclass(frozen=True, slots=True)
class Sample:
    name: str = constrained(NotBlank(), Size(max=50), default="")
    code: str = constrained(Size(min=2, max=8), default="")
    postal_code: str = constrained(Pattern(r"[0-9]{4,5}"), alias="postalCode", default="")
    email: str = constrained(NotBlank(), Email(), default="")
    age: int = constrained(Min(18), Max(130), default=18)
    price: Decimal = Decimal("0")
    ratio: float | None = None
    tags: str = constrained(NotEmpty(), default="")
    kind: str | None = constrained(NotNull(), default=None)
    nested: str = constrained(Cascade(), default="")
    note: str = ""
    active: bool = False
    priority: Priority = Priority.LOW


def attrs(name: str) -> dict[str, str]:
    return html_attributes(field_ref(Sample, name))


class TestHtmlAttributes:
    def test_not_blank_and_size(self) -> None:
        assert attrs("name") == {"required": "", "maxlength": "50"}

    def test_size_min_and_max(self) -> None:
        assert attrs("code") == {"maxlength": "8", "minlength": "2"}

    def test_pattern(self) -> None:
        assert attrs("postalCode") == {"pattern": "[0-9]{4,5}"}

    def test_email_adds_no_attribute(self) -> None:
        assert attrs("email") == {"required": ""}

    def test_min_max(self) -> None:
        assert attrs("age") == {"min": "18", "max": "130"}

    def test_not_empty_and_not_null_are_required(self) -> None:
        assert attrs("tags") == {"required": ""}
        assert attrs("kind") == {"required": ""}

    def test_cascade_adds_nothing(self) -> None:
        assert attrs("nested") == {}

    def test_no_constraints(self) -> None:
        assert attrs("note") == {}


class TestInputType:
    def test_email(self) -> None:
        assert input_type(field_ref(Sample, "email")) == "email"

    def test_numbers(self) -> None:
        assert input_type(field_ref(Sample, "age")) == "number"
        assert input_type(field_ref(Sample, "price")) == "number"
        assert input_type(field_ref(Sample, "ratio")) == "number"

    def test_text(self) -> None:
        assert input_type(field_ref(Sample, "name")) == "text"

    def test_bool_and_int_enum_are_not_numbers(self) -> None:
        assert input_type(field_ref(Sample, "active")) == "text"
        assert input_type(field_ref(Sample, "priority")) == "text"
