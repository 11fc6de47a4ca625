"""Tests for pathform.templating.builder: FormBuilder and IndexedFormBuilder."""

from dataclasses import dataclass, field
from enum import Enum

import pytest

from pathform.config import FormConfig
from pathform.constraints import NotBlank, NotNull, Size
from pathform.errors import ConfigurationError
from pathform.fields import constrained, field_ref
from pathform.templating.builder import FormBuilder, IndexedFormBuilder


class AddressType(Enum):
    HOME = "home"
    WORK = "work"


@dataclass(frozen=True, slots=True)
class Address:
    id: int | None = None
    type: AddressType | None = constrained(NotNull("Address type is required"), default=None)
    city: str = constrained(NotBlank(), Size(max=50), default="")


@dataclass(frozen=True, slots=True)
class Person:
    first_name: str = constrained(NotBlank(), alias="firstName", default="")
    addresses: list[Address] = field(default_factory=list)


ADDRESSES = field_ref(Person, "addresses")
FIRST_NAME = field_ref(Person, "first_name").to_path()


class TestFormBuilder:
    def test_field_wrapped_in_div(self) -> None:
        form = FormBuilder(Person(first_name="Ada"), {})
        html = form.field(FIRST_NAME, "First Name")
        assert html.startswith("<div><label>First Name<input")
        assert html.endswith("</label></div>")
        assert 'value="Ada"' in html

    def test_render_joins_in_call_order(self) -> None:
        form = FormBuilder(Person(), {"firstName": ["This field is required"]})
        form.errors_for("addresses")
        form.field(FIRST_NAME, "First Name")
        html = form.render()
        assert html.startswith("<div><label>First Name")
        assert 'This field is required</div></div>' in html

    def test_errors_for_general_key(self) -> None:
        violations = {"addresses": ["At least one address is required"]}
        form = FormBuilder(Person(), violations)
        assert form.errors_for("addresses") == (
            '<div class="form-error">At least one address is required</div>'
        )

    def test_config_applies_to_fields(self) -> None:
        form = FormBuilder(Person(), {"firstName": ["x"]}, FormConfig(error_class="oops"))
        assert '<div class="oops">x</div>' in form.field(FIRST_NAME, "First Name")

    def test_enum_select_on_full_path(self) -> None:
        person = Person(addresses=[Address(type=AddressType.HOME)])
        form = FormBuilder(person, {})
        html = form.enum_select(ADDRESSES.at(0, field_ref(Address, "type")), "Type")
        assert '<option value="HOME" selected>HOME</option>' in html

    def test_empty_builder(self) -> None:
        assert FormBuilder(None).render() == ""

    def test_html_protocol(self) -> None:
        form = FormBuilder(Person())
        form.field(FIRST_NAME, "First Name")
        assert form.__html__() == str(form.render())


class TestIndexedFormBuilder:
    def make(self, violations=None, index: int = 1) -> IndexedFormBuilder:
        person = Person(
            addresses=[
                Address(id=1, type=AddressType.HOME, city="Oslo"),
                Address(id=2, type=AddressType.WORK, city="Bergen"),
            ]
        )
        return IndexedFormBuilder(person, violations or {}, ADDRESSES, index)

    def test_field_by_attribute_name(self) -> None:
        html = self.make().field("city", "City")
        assert 'name="addresses[1].city"' in html
        assert 'value="Bergen"' in html
        assert 'required maxlength="50"' in html

    def test_field_by_field_object(self) -> None:
        html = self.make(index=0).field(field_ref(Address, "city"), "City")
        assert 'value="Oslo"' in html

    def test_indexed_violations(self) -> None:
        builder = self.make({"addresses[1].city": ["This field is required"]})
        assert "This field is required" in builder.field("city", "City")
        assert "This field is required" not in self.make(index=0).field("city", "City")

    def test_hidden_field(self) -> None:
        html = self.make().hidden_field("id")
        assert html == '<input type="hidden" name="addresses[1].id" value="2">'

    def test_enum_select(self) -> None:
        html = self.make().enum_select("type", "Address Type")
        assert html.startswith('<div><label>Address Type<select name="addresses[1].type"')
        assert '<option value="WORK" selected>WORK</option>' in html

    def test_prefix(self) -> None:
        assert self.make().prefix == "addresses[1]"

    def test_render(self) -> None:
        builder = self.make()
        builder.hidden_field("id")
        builder.field("city", "City")
        html = builder.render()
        assert html.startswith('<input type="hidden" name="addresses[1].id"')
        assert html.endswith("</label></div>")

    def test_unknown_element_field(self) -> None:
        with pytest.raises(ConfigurationError, match="no field 'zip'"):
            self.make().field("zip", "Zip")

    def test_requires_list_field(self) -> None:
        with pytest.raises(ConfigurationError, match="not a list field"):
            IndexedFormBuilder(Person(), {}, field_ref(Person, "first_name"), 0)
