"""Field descriptor table: one ``Field`` per bindable dataclass field.

Constraints and wire names are declared next to the field with
``constrained()``::

    @dataclass(frozen=True, slots=True)
    class Address:
        city: str = constrained(NotBlank(), Size(max=50), default="")
        postal_code: str = constrained(
            NotBlank(), Pattern(r"[0-9]{4,5}"), alias="postalCode", default=""
        )

``fields_of(Address)`` reads the dataclass once, resolves annotations,
and returns an ordered, read-only ``{name: Field}`` table keyed by wire
name. The table is cached per type; nothing is inspected per request.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Mapping
from dataclasses import MISSING, dataclass, field
from functools import cache
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, get_type_hints

from pathform._internal.annotations import is_optional, list_item_type, unwrap_optional
from pathform.constraints import Cascade, Constraint
from pathform.errors import ConfigurationError

if TYPE_CHECKING:
    from pathform.paths import Direct, Indexed

_METADATA_KEY = "pathform"


@dataclass(frozen=True, slots=True)
class _FieldMeta:
    constraints: tuple[Constraint, ...]
    alias: str | None


def constrained(
    *constraints: Constraint,
    alias: str | None = None,
    default: Any = MISSING,
    default_factory: Any = MISSING,
) -> Any:
    """Declare a dataclass field with constraints and an optional wire name.

    Args:
        *constraints: Constraint specs, checked in the order given.
        alias: Name used in form keys, paths, and violation maps.
            Defaults to the attribute name.
        default: Passed through to ``dataclasses.field``.
        default_factory: Passed through to ``dataclasses.field``.
    """
    meta = _FieldMeta(constraints=tuple(constraints), alias=alias)
    return field(
        default=default,
        default_factory=default_factory,
        metadata={_METADATA_KEY: meta},
    )


@dataclass(frozen=True, slots=True)
class Field:
    """Descriptor of one field on a dataclass.

    ``name`` is the wire name (alias or attribute name) and is what every
    canonical path, form key, and violation key uses.
    """

    name: str
    attr: str
    owner: type
    annotation: Any = field(compare=False)
    constraints: tuple[Constraint, ...] = field(default=(), compare=False)
    spec: dataclasses.Field[Any] | None = field(default=None, compare=False, repr=False)

    @property
    def value_type(self) -> Any:
        """The annotation with ``| None`` stripped."""
        return unwrap_optional(self.annotation)

    @property
    def item_type(self) -> Any | None:
        """Element type of a ``list[X]`` field, or None for non-list fields."""
        return list_item_type(self.annotation)

    @property
    def is_optional(self) -> bool:
        return is_optional(self.annotation)

    @property
    def cascade(self) -> bool:
        """True when the field carries the ``Cascade`` marker."""
        return any(isinstance(c, Cascade) for c in self.constraints)

    @property
    def has_default(self) -> bool:
        if self.spec is None:
            return False
        return self.spec.default is not MISSING or self.spec.default_factory is not MISSING

    def default_value(self) -> Any:
        """Return the declared default, calling the factory if there is one.

        Raises:
            LookupError: If the field has no default.
        """
        if self.spec is not None:
            if self.spec.default is not MISSING:
                return self.spec.default
            if self.spec.default_factory is not MISSING:
                return self.spec.default_factory()
        msg = f"{self.owner.__name__}.{self.attr} has no default"
        raise LookupError(msg)

    def get(self, obj: Any) -> Any:
        """Read this field from *obj*."""
        return getattr(obj, self.attr)

    def to_path(self) -> Direct:
        """A ``Direct`` property path to this field."""
        from pathform.paths import Direct

        return Direct(self)

    def at(self, index: int, element_field: Field) -> Indexed:
        """An ``Indexed`` path to *element_field* of list element *index*."""
        from pathform.paths import Indexed

        return Indexed(self, index, element_field)


class FieldTable(Mapping[str, Field]):
    """Ordered, read-only ``{wire name: Field}`` table for one dataclass."""

    __slots__ = ("_by_attr", "_by_name", "owner")

    def __init__(self, owner: type, fields: list[Field]) -> None:
        self.owner = owner
        self._by_name = MappingProxyType({f.name: f for f in fields})
        self._by_attr = MappingProxyType({f.attr: f for f in fields})

    def __getitem__(self, key: str) -> Field:
        return self._by_name[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_name)

    def __len__(self) -> int:
        return len(self._by_name)

    def __repr__(self) -> str:
        return f"FieldTable({self.owner.__name__}, {list(self._by_name)!r})"

    @property
    def by_attr(self) -> Mapping[str, Field]:
        """The same fields keyed by Python attribute name."""
        return self._by_attr


@cache
def fields_of(cls: type) -> FieldTable:
    """Build (once) and return the field table for dataclass *cls*.

    Raises:
        ConfigurationError: If *cls* is not a dataclass, an annotation
            cannot be resolved, or two fields share a wire name.
    """
    if not isinstance(cls, type) or not dataclasses.is_dataclass(cls):
        msg = f"{cls!r} is not a dataclass; pathform binds dataclasses only"
        raise ConfigurationError(msg)

    try:
        hints = get_type_hints(cls)
    except NameError as exc:
        msg = f"Cannot resolve annotations of {cls.__name__}: {exc}"
        raise ConfigurationError(msg) from exc

    result: list[Field] = []
    seen: set[str] = set()
    for f in dataclasses.fields(cls):
        meta = f.metadata.get(_METADATA_KEY)
        constraints = meta.constraints if meta else ()
        name = (meta.alias if meta else None) or f.name
        if name in seen:
            msg = f"{cls.__name__} declares the field name {name!r} twice"
            raise ConfigurationError(msg)
        seen.add(name)
        result.append(
            Field(
                name=name,
                attr=f.name,
                owner=cls,
                annotation=hints.get(f.name, Any),
                constraints=constraints,
                spec=f,
            )
        )
    return FieldTable(cls, result)


def field_ref(cls: type, name: str) -> Field:
    """Look up a field of *cls* by wire name or attribute name.

    Usage::

        city = field_ref(Address, "city")
        postal = field_ref(Address, "postal_code")  # or "postalCode"

    Raises:
        ConfigurationError: If *cls* has no such field.
    """
    table = fields_of(cls)
    found = table.get(name) or table.by_attr.get(name)
    if found is None:
        msg = f"{cls.__name__} has no field {name!r}; known fields: {', '.join(table)}"
        raise ConfigurationError(msg)
    return found
