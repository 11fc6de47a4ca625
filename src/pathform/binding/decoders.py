"""Typed decoding of a nested form tree into dataclass instances.

One decoder per annotation, composed from smaller decoders and cached:
scalars coerce a submitted string, ``X | None`` wraps another decoder,
``list[X]`` decodes each element, and a dataclass decodes each of its
fields by wire name.

Decoders never stop at the first problem. Every failure is recorded
under the canonical path of the offending field, and the caller raises
one ``BindingError`` carrying all of them. A partially-populated object
is never returned.
"""

import dataclasses
from collections.abc import Callable
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import cache
from typing import Any
from uuid import UUID

from pathform._internal.annotations import is_optional, list_item_type, unwrap_optional
from pathform._internal.violations import Violations, join_path, record
from pathform.config import FormConfig
from pathform.errors import ConfigurationError
from pathform.fields import Field, fields_of

# Returned by a decoder that recorded an error instead of producing a value.
INVALID: Any = object()

type Errors = Violations
type Decoder = Callable[[Any, str, Errors], Any]

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off", ""})


def _to_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(value)


# Type coercion map: target type -> (converter, message on failure)
_COERCIONS: dict[type, tuple[Callable[[str], Any], str]] = {
    int: (int, "Must be a whole number"),
    float: (float, "Must be a number"),
    Decimal: (Decimal, "Must be a number"),
    bool: (_to_bool, "Must be true or false"),
    UUID: (UUID, "Must be a valid identifier"),
    date: (date.fromisoformat, "Must be a valid date (YYYY-MM-DD)"),
    datetime: (datetime.fromisoformat, "Must be a valid date and time"),
    time: (time.fromisoformat, "Must be a valid time (HH:MM)"),
}


@cache
def decoder_for(annotation: Any, config: FormConfig) -> Decoder:
    """Return the (cached) decoder for *annotation*.

    Raises:
        ConfigurationError: If pathform cannot bind the annotation.
    """
    if annotation is Any:
        return _identity

    if is_optional(annotation):
        inner = unwrap_optional(annotation)
        if is_optional(inner) or inner is annotation:
            msg = f"Cannot bind union type {annotation!r}; use a single type or X | None"
            raise ConfigurationError(msg)
        return _optional(decoder_for(inner, config), inner is str)

    item = list_item_type(annotation)
    if item is not None:
        return _list(item, config)

    if annotation is str:
        return _string(config.strip_whitespace)

    if isinstance(annotation, type):
        if issubclass(annotation, Enum):
            return _enum(annotation)
        # Exact lookup: bool is an int and datetime is a date, neither may
        # be parsed as its base class.
        if annotation in _COERCIONS:
            convert, message = _COERCIONS[annotation]
            return _scalar(convert, message)
        if dataclasses.is_dataclass(annotation):
            return _dataclass(annotation, config)

    msg = f"Cannot bind form data to {annotation!r}"
    raise ConfigurationError(msg)


def _identity(node: Any, path: str, errors: Errors) -> Any:
    return node


def _string(strip: bool) -> Decoder:
    def decode(node: Any, path: str, errors: Errors) -> Any:
        if not isinstance(node, str):
            record(errors, path, "Expected a single value")
            return INVALID
        return node.strip() if strip else node

    return decode


def _scalar(convert: Callable[[str], Any], message: str) -> Decoder:
    def decode(node: Any, path: str, errors: Errors) -> Any:
        if not isinstance(node, str):
            record(errors, path, "Expected a single value")
            return INVALID
        try:
            return convert(node.strip())
        except (ValueError, TypeError, ArithmeticError):
            record(errors, path, message)
            return INVALID

    return decode


def _enum(enum_cls: type[Enum]) -> Decoder:
    by_name = {member.name: member for member in enum_cls}
    by_value = {str(member.value): member for member in enum_cls}
    options = ", ".join(by_name)

    def decode(node: Any, path: str, errors: Errors) -> Any:
        if isinstance(node, str):
            # IntEnum and Flag members with value 0 are falsy.
            found = by_name.get(node)
            if found is None:
                found = by_value.get(node)
            if found is not None:
                return found
        record(errors, path, f"Must be one of: {options}")
        return INVALID

    return decode


def _optional(inner: Decoder, keep_empty: bool) -> Decoder:
    def decode(node: Any, path: str, errors: Errors) -> Any:
        if node is None or (node == "" and not keep_empty):
            return None
        return inner(node, path, errors)

    return decode


def _list(item: Any, config: FormConfig) -> Decoder:
    element = decoder_for(item, config)

    def decode(node: Any, path: str, errors: Errors) -> Any:
        if not isinstance(node, list):
            record(errors, path, "Expected a list")
            return INVALID
        values = [element(child, f"{path}[{i}]", errors) for i, child in enumerate(node)]
        if any(v is INVALID for v in values):
            return INVALID
        return values

    return decode


def _dataclass(cls: type, config: FormConfig) -> Decoder:
    # Field decoders are resolved on first call, all at once, so
    # self-referencing dataclasses do not recurse while being built.
    resolved: list[tuple[Field, Decoder]] | None = None

    def decode(node: Any, path: str, errors: Errors) -> Any:
        nonlocal resolved
        if resolved is None:
            resolved = [
                (f, decoder_for(f.annotation, config))
                for f in fields_of(cls).values()
                if f.spec is None or f.spec.init
            ]
        if not isinstance(node, dict):
            record(errors, path, "Expected an object")
            return INVALID

        kwargs: dict[str, Any] = {}
        failed = False
        for f, field_decoder in resolved:
            at = join_path(path, f.name)
            if f.name not in node:
                if f.has_default:
                    continue
                if f.is_optional:
                    kwargs[f.attr] = None
                    continue
                record(errors, at, "This field is required")
                failed = True
                continue
            value = field_decoder(node[f.name], at, errors)
            if value is INVALID:
                failed = True
            else:
                kwargs[f.attr] = value

        if failed:
            return INVALID
        return cls(**kwargs)

    return decode
