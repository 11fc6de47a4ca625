"""Tests for pathform.paths: Direct, Nested and Indexed property paths."""

from dataclasses import dataclass, field
from enum import Enum

import pytest

from pathform.binding.keys import Index, Property, format_key, parse_key
from pathform.errors import ConfigurationError, PathResolutionError
from pathform.fields import constrained, field_ref
from pathform.paths import Direct, Indexed, Nested, at, leaf_field, to_path


class AddressType(Enum):
    HOME = "home"
    WORK = "work"


@dataclass(frozen=True, slots=True)
class Address:
    type: AddressType | None = None
    city: str = ""
    postal_code: str = constrained(alias="postalCode", default="")


@dataclass(frozen=True, slots=True)
class Person:
    first_name: str = constrained(alias="firstName", default="")
    home: Address | None = None
    addresses: list[Address] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Company:
    name: str = ""


FIRST_NAME = field_ref(Person, "first_name")
HOME = field_ref(Person, "home")
ADDRESSES = field_ref(Person, "addresses")
CITY = field_ref(Address, "city")
POSTAL_CODE = field_ref(Address, "postal_code")
ADDRESS_TYPE = field_ref(Address, "type")

ADA = Person(
    first_name="Ada",
    home=Address(city="London"),
    addresses=[
        Address(type=AddressType.HOME, city="Oslo", postal_code="0150"),
        Address(type=AddressType.WORK, city="Bergen", postal_code="5003"),
    ],
)

# ---------------------------------------------------------------------------
# Canonical strings
# ---------------------------------------------------------------------------


class TestCanonicalPath:
    def test_direct(self) -> None:
        assert to_path(FIRST_NAME).path == "firstName"
        assert FIRST_NAME.to_path() == Direct(FIRST_NAME)

    def test_nested(self) -> None:
        assert HOME.to_path().then(CITY).path == "home.city"

    def test_indexed(self) -> None:
        assert at(ADDRESSES, 0, POSTAL_CODE).path == "addresses[0].postalCode"
        assert ADDRESSES.at(3, CITY).path == "addresses[3].city"

    def test_str_is_path(self) -> None:
        assert str(ADDRESSES.at(1, CITY)) == "addresses[1].city"

    @pytest.mark.parametrize(
        "path",
        [
            Direct(FIRST_NAME),
            Nested(Direct(HOME), CITY),
            Indexed(ADDRESSES, 2, POSTAL_CODE),
        ],
    )
    def test_parses_back_to_same_segments(self, path) -> None:
        assert format_key(parse_key(path.path)) == path.path

    def test_indexed_segments(self) -> None:
        assert parse_key(ADDRESSES.at(2, CITY).path) == (
            Property("addresses"),
            Index(2),
            Property("city"),
        )

    def test_equal_structure_equal_path_and_hash(self) -> None:
        a = ADDRESSES.at(1, CITY)
        b = Indexed(field_ref(Person, "addresses"), 1, field_ref(Address, "city"))
        assert a == b
        assert hash(a) == hash(b)
        assert {a: "x"}[b] == "x"

    def test_different_index_differs(self) -> None:
        assert ADDRESSES.at(0, CITY) != ADDRESSES.at(1, CITY)


# ---------------------------------------------------------------------------
# get_value
# ---------------------------------------------------------------------------


class TestGetValue:
    def test_direct(self) -> None:
        assert FIRST_NAME.to_path().get_value(ADA) == "Ada"

    def test_nested(self) -> None:
        assert HOME.to_path().then(CITY).get_value(ADA) == "London"

    def test_indexed(self) -> None:
        assert ADDRESSES.at(1, CITY).get_value(ADA) == "Bergen"
        assert ADDRESSES.at(0, ADDRESS_TYPE).get_value(ADA) is AddressType.HOME

    def test_leaf_may_hold_none(self) -> None:
        assert ADDRESSES.at(0, ADDRESS_TYPE).get_value(Person(addresses=[Address()])) is None

    def test_index_out_of_bounds(self) -> None:
        with pytest.raises(PathResolutionError, match="out of bounds") as exc_info:
            ADDRESSES.at(2, CITY).get_value(ADA)
        assert exc_info.value.path == "addresses[2].city"
        assert "length 2" in str(exc_info.value)

    def test_index_into_empty_list(self) -> None:
        with pytest.raises(PathResolutionError):
            ADDRESSES.at(0, CITY).get_value(Person())

    def test_none_intermediate(self) -> None:
        with pytest.raises(PathResolutionError, match="'home' is None"):
            HOME.to_path().then(CITY).get_value(Person())

    def test_wrong_object_type(self) -> None:
        with pytest.raises(PathResolutionError, match="no field"):
            FIRST_NAME.to_path().get_value(Company(name="Acme"))

    def test_is_a_lookup_error(self) -> None:
        with pytest.raises(LookupError):
            ADDRESSES.at(5, CITY).get_value(ADA)


# ---------------------------------------------------------------------------
# Construction checks
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_index_on_non_list_field(self) -> None:
        with pytest.raises(ConfigurationError, match="not a list field"):
            Indexed(HOME, 0, CITY)

    def test_negative_index(self) -> None:
        with pytest.raises(ConfigurationError, match="non-negative"):
            ADDRESSES.at(-1, CITY)

    def test_bool_index(self) -> None:
        with pytest.raises(ConfigurationError):
            ADDRESSES.at(True, CITY)

    def test_element_field_of_other_type(self) -> None:
        with pytest.raises(ConfigurationError, match="Company.name"):
            ADDRESSES.at(0, field_ref(Company, "name"))

    def test_nested_field_of_other_type(self) -> None:
        with pytest.raises(ConfigurationError):
            HOME.to_path().then(field_ref(Company, "name"))

    def test_nested_through_list_requires_at(self) -> None:
        with pytest.raises(ConfigurationError, match="use at"):
            ADDRESSES.to_path().then(CITY)


class TestLeaf:
    def test_every_variant(self) -> None:
        assert Direct(FIRST_NAME).leaf is FIRST_NAME
        assert HOME.to_path().then(CITY).leaf is CITY
        assert ADDRESSES.at(0, POSTAL_CODE).leaf is POSTAL_CODE
        assert leaf_field(ADDRESSES.at(0, CITY)) is CITY
