"""Property paths: typed routes into nested and indexed object graphs.

A path names one location inside a dataclass graph. It is used three
ways: as the ``name`` of a rendered input, to read the current value out
of a bound object, and as the key under which validation violations are
reported. All three agree because they share ``path.path``.

Three variants, built from ``Field`` descriptors::

    first_name = field_ref(Person, "first_name").to_path()
    # Direct: "firstName"

    city = field_ref(Person, "home").to_path().then(field_ref(Address, "city"))
    # Nested: "home.city"

    second_city = field_ref(Person, "addresses").at(1, field_ref(Address, "city"))
    # Indexed: "addresses[1].city"

Paths are frozen and hashable. ``get_value`` never guesses: an absent
intermediate object or an index past the end of a list raises
``PathResolutionError``.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, assert_never

from pathform.errors import ConfigurationError, PathResolutionError
from pathform.fields import Field

_MISSING = object()


class PropertyPath:
    """Base for the three path variants. Not instantiated directly."""

    __slots__ = ()

    @property
    def path(self) -> str:
        """Canonical string form, e.g. ``addresses[0].city``."""
        raise NotImplementedError

    @property
    def leaf(self) -> Field:
        """The innermost field, whose constraints drive input rendering."""
        return leaf_field(self)

    def get_value(self, obj: Any) -> Any:
        """Navigate from *obj* to the described location and return its value."""
        raise NotImplementedError

    def then(self, child: Field) -> Nested:
        """Extend this path into a field of the value it points at."""
        return Nested(self, child)

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True, slots=True)
class Direct(PropertyPath):
    """A field declared directly on the root type."""

    field: Field

    @property
    def path(self) -> str:
        return self.field.name

    def get_value(self, obj: Any) -> Any:
        return _read(obj, self.field, self.path)


@dataclass(frozen=True, slots=True)
class Nested(PropertyPath):
    """A field of the value another path points at."""

    parent: PropertyPath
    field: Field

    def __post_init__(self) -> None:
        if self.parent.leaf.item_type is not None:
            msg = (
                f"{self.parent.path!r} is a list; use at() to address one of its elements"
            )
            raise ConfigurationError(msg)
        _check_owner(self.parent.leaf.value_type, self.field, "then")

    @property
    def path(self) -> str:
        return f"{self.parent.path}.{self.field.name}"

    def get_value(self, obj: Any) -> Any:
        intermediate = self.parent.get_value(obj)
        if intermediate is None:
            raise PathResolutionError(self.path, f"{self.parent.path!r} is None")
        return _read(intermediate, self.field, self.path)


@dataclass(frozen=True, slots=True)
class Indexed(PropertyPath):
    """A field of one element of a list field on the root type."""

    list_field: Field
    index: int
    element_field: Field

    def __post_init__(self) -> None:
        if self.list_field.item_type is None:
            msg = (
                f"{self.list_field.owner.__name__}.{self.list_field.attr} is not a "
                "list field and cannot be indexed"
            )
            raise ConfigurationError(msg)
        if isinstance(self.index, bool) or not isinstance(self.index, int) or self.index < 0:
            msg = f"List index must be a non-negative int, got {self.index!r}"
            raise ConfigurationError(msg)
        _check_owner(self.list_field.item_type, self.element_field, "at")

    @property
    def path(self) -> str:
        return f"{self.list_field.name}[{self.index}].{self.element_field.name}"

    def get_value(self, obj: Any) -> Any:
        items = _read(obj, self.list_field, self.path)
        if items is None:
            raise PathResolutionError(self.path, f"{self.list_field.name!r} is None")
        if self.index >= len(items):
            raise PathResolutionError(
                self.path,
                f"index {self.index} out of bounds for {self.list_field.name!r} "
                f"of length {len(items)}",
            )
        element = items[self.index]
        if element is None:
            raise PathResolutionError(
                self.path, f"{self.list_field.name}[{self.index}] is None"
            )
        return _read(element, self.element_field, self.path)


def to_path(field: Field) -> Direct:
    """A ``Direct`` path to *field*."""
    return Direct(field)


def at(list_field: Field, index: int, element_field: Field) -> Indexed:
    """An ``Indexed`` path: ``list_field[index].element_field``."""
    return Indexed(list_field, index, element_field)


def leaf_field(path: PropertyPath) -> Field:
    """Return the innermost field of *path*, whatever the variant."""
    match path:
        case Direct(field=field):
            return field
        case Nested(field=field):
            return field
        case Indexed(element_field=field):
            return field
        case _:
            assert_never(path)  # type: ignore[arg-type]


def _read(obj: Any, field: Field, path: str) -> Any:
    value = getattr(obj, field.attr, _MISSING)
    if value is _MISSING:
        raise PathResolutionError(
            path, f"{type(obj).__name__} object has no field {field.attr!r}"
        )
    return value


def _check_owner(expected: Any, child: Field, how: str) -> None:
    """Reject ``then``/``at`` with a field declared on an unrelated type."""
    if not (isinstance(expected, type) and dataclasses.is_dataclass(expected)):
        return
    if not issubclass(expected, child.owner):
        msg = (
            f"Cannot {how}() into {child.owner.__name__}.{child.attr}: "
            f"the path points at {expected.__name__}"
        )
        raise ConfigurationError(msg)
