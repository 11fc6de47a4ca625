"""Fold flat form pairs into a nested dict/list tree.

Each key contributes one scalar at the position its segments describe::

    builder = NestedFormTreeBuilder()
    builder.add("name", "Ada")
    builder.add("addresses[1].city", "Oslo")
    builder.tree
    # {"name": "Ada", "addresses": [{}, {"city": "Oslo"}]}

Intermediate dicts and lists are created on demand. Lists grow by
appending empty dicts until the addressed index exists; they never
shrink or reorder, so element ``i`` of the tree is always form index
``i`` no matter what order the keys arrived in.

Duplicate keys: the first value wins. Later values for an identical key
are ignored, matching how a multi-valued form field flattens to its
first value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Protocol, assert_never, runtime_checkable

from pathform.binding.keys import Index, Property, parse_key
from pathform.config import DEFAULT_CONFIG, FormConfig
from pathform.errors import FormKeyError

logger = logging.getLogger("pathform.binding")


@runtime_checkable
class MultiValueForm(Protocol):
    """Any form object that can hold several values per key.

    Framework form containers such as Starlette's ``FormData`` satisfy
    it. Binding reads only the keys and the first value of each.
    """

    def __iter__(self) -> Iterator[str]: ...
    def get_list(self, key: str) -> list[str]: ...


# A node of the tree: a submitted scalar, a nested object, or a list of them.
type TreeNode = str | dict[str, TreeNode] | list[TreeNode]

type FormSource = MultiValueForm | Mapping[str, str] | Iterable[tuple[str, str]]


class NestedFormTreeBuilder:
    """Incrementally builds the nested tree for one form submission.

    Not shared between requests; build, read ``tree``, discard.
    """

    __slots__ = ("_config", "_root")

    def __init__(self, *, config: FormConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG
        self._root: dict[str, TreeNode] = {}

    @property
    def tree(self) -> dict[str, TreeNode]:
        """The tree built so far."""
        return self._root

    def add(self, key: str, value: str) -> None:
        """Place *value* at the location named by *key*.

        Raises:
            FormKeyError: If *key* is malformed, or it needs a dict or
                list where an earlier key already put something else.
        """
        segments = parse_key(key, config=self._config)
        current: Any = self._root

        for part, next_part in zip(segments, segments[1:], strict=False):
            match part, next_part:
                case Property(name=name), Property():
                    current = _child(current, name, dict, key)
                case Property(name=name), Index():
                    current = _child(current, name, list, key)
                case Index(value=index), _:
                    while len(current) <= index:
                        current.append({})
                    current = current[index]
                    if not isinstance(current, dict):
                        raise FormKeyError(key, f"list element {index} is not an object")

        match segments[-1]:
            case Property(name=name):
                existing = current.get(name)
                if existing is None:
                    current[name] = value
                elif isinstance(existing, str):
                    logger.debug("Ignoring duplicate value for form key %r", key)
                else:
                    raise FormKeyError(key, f"{name!r} already holds nested fields")
            case Index():
                raise FormKeyError(key, "key must end in a field name, not a list index")
            case _:
                assert_never(segments[-1])

    def add_all(self, form: FormSource) -> NestedFormTreeBuilder:
        """Add every pair from *form*. Returns ``self`` for chaining.

        Multi-valued mappings contribute the first value of each key.
        Iterables of pairs are added in order, so the first occurrence of
        a repeated key wins there too.
        """
        for key, value in iter_pairs(form):
            self.add(key, value)
        return self


def build_tree(
    form: FormSource, *, config: FormConfig | None = None
) -> dict[str, TreeNode]:
    """Build the nested tree for a whole form submission."""
    return NestedFormTreeBuilder(config=config).add_all(form).tree


def iter_pairs(form: FormSource) -> Iterable[tuple[str, str]]:
    """Yield ``(key, value)`` pairs from any supported form source."""
    if isinstance(form, MultiValueForm):
        for key in form:
            values = form.get_list(key)
            yield key, values[0] if values else ""
    elif isinstance(form, Mapping):
        for key, value in form.items():
            if isinstance(value, list | tuple):
                value = value[0] if value else ""
            yield key, value
    else:
        yield from form


def _child(current: Any, name: str, kind: type, key: str) -> Any:
    """Get or create the ``dict``/``list`` stored under *name*."""
    existing = current.get(name)
    if existing is None:
        created = kind()
        current[name] = created
        return created
    if not isinstance(existing, kind):
        found = "a value" if isinstance(existing, str) else type(existing).__name__
        expected = "an object" if kind is dict else "a list"
        raise FormKeyError(key, f"{name!r} must be {expected} but already holds {found}")
    return existing
