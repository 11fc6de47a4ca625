"""Form data container and URL-encoded body parsing.

``FormData`` implements ``Mapping[str, str]`` and the ``MultiValueForm``
protocol, so it can be handed straight to ``bind_to``. ``form_values``
goes the other way: it flattens a bound object back into the flat keys
a form submits, with list elements at their indices.

URL-encoded forms use stdlib ``urllib.parse``; no extra dependency.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Iterator, Mapping
from typing import Any
from urllib.parse import parse_qsl

from pathform._internal.violations import join_path
from pathform.fields import fields_of
from pathform.templating.fields import format_value


class FormData(Mapping[str, str]):
    """Immutable parsed form data.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    ``items_multi`` returns every ``(key, value)`` pair in submission order.

    Usage::

        form = parse_form_data(body, "application/x-www-form-urlencoded")
        form["firstName"]             # "Ada"
        form.get_list("tags")         # ["a", "b"]
    """

    __slots__ = ("_data", "_pairs")

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        ordered = tuple(pairs)
        data: dict[str, list[str]] = {}
        for key, value in ordered:
            data.setdefault(key, []).append(value)
        object.__setattr__(self, "_pairs", ordered)
        object.__setattr__(self, "_data", data)

    @classmethod
    def from_dict(cls, data: Mapping[str, str | list[str]]) -> FormData:
        """Build from ``{key: value}`` or ``{key: [values]}``."""
        pairs: list[tuple[str, str]] = []
        for key, value in data.items():
            if isinstance(value, str):
                pairs.append((key, value))
            else:
                pairs.extend((key, v) for v in value)
        return cls(pairs)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"FormData({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key* (checkboxes, multi-selects)."""
        return list(self._data.get(key, []))

    def items_multi(self) -> list[tuple[str, str]]:
        """Every submitted ``(key, value)`` pair, repeats included, in order."""
        return list(self._pairs)


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse a form body into FormData.

    Only ``application/x-www-form-urlencoded`` is supported. Blank values
    are kept, so an emptied input still reaches the binder as ``""``.

    Raises:
        ValueError: If the content type is not URL-encoded form data, or
            the body is not valid UTF-8.
    """
    ct_lower = content_type.lower().split(";")[0].strip()
    if ct_lower != "application/x-www-form-urlencoded":
        msg = f"Unsupported form content type: {content_type!r}"
        raise ValueError(msg)
    return FormData(parse_qsl(body.decode("utf-8"), keep_blank_values=True))


def form_values(obj: Any, *, prefix: str = "") -> dict[str, str]:
    """Flatten a dataclass instance into form keys and string values.

    The inverse of binding. Nested dataclasses use dotted keys and list
    elements use their index::

        form_values(person)
        # {"firstName": "Ada", "addresses[0].city": "Oslo", ...}

    A ``None`` value emits no key, so binding falls back to the field's
    default, or ``None`` for an optional field without one. Feeding the
    result back through ``bind_to`` therefore rebuilds an equal object
    whenever ``None``-valued fields default to ``None``. Enums use the
    member name. Only dataclass list elements are flattened; the key
    grammar has no form for a bare scalar inside a list.
    """
    values: dict[str, str] = {}
    _flatten(obj, prefix, values)
    return values


def _flatten(obj: Any, path: str, out: dict[str, str]) -> None:
    for f in fields_of(type(obj)).values():
        value = f.get(obj)
        at = join_path(path, f.name)
        if f.item_type is not None:
            for i, element in enumerate(value or ()):
                if _is_instance(element):
                    _flatten(element, f"{at}[{i}]", out)
        elif _is_instance(value):
            _flatten(value, at, out)
        elif value is not None:
            out[at] = format_value(value)


def _is_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)
