"""Form binding: flat form keys in, typed dataclass instances out.

Usage::

    from pathform.binding import bind_to, bind_indexed_property

    person = bind_to(form, Person)
    # firstName=Ada&addresses[0].city=Oslo -> Person(first_name="Ada", addresses=[Address(city="Oslo")])

    address = bind_indexed_property(form, Address, "addresses", 0)
    # only addresses[0].* keys are read

Malformed keys raise ``FormKeyError``. Values that cannot be coerced, and
required fields that are absent, raise one ``BindingError`` listing every
problem by canonical path.
"""

import logging
from typing import Any

from pathform.binding.decoders import INVALID, Errors, decoder_for
from pathform.binding.keys import Index, KeySegment, Property, format_key, parse_key
from pathform.binding.tree import (
    FormSource,
    NestedFormTreeBuilder,
    TreeNode,
    build_tree,
    iter_pairs,
)
from pathform.config import DEFAULT_CONFIG, FormConfig
from pathform.errors import BindingError

__all__ = [
    "FormSource",
    "Index",
    "KeySegment",
    "NestedFormTreeBuilder",
    "Property",
    "TreeNode",
    "bind_indexed_property",
    "bind_to",
    "bind_tree",
    "build_tree",
    "form_from",
    "format_key",
    "parse_key",
]

logger = logging.getLogger("pathform.binding")


def bind_tree[T](
    tree: dict[str, TreeNode],
    cls: type[T],
    *,
    path: str = "",
    config: FormConfig | None = None,
) -> T:
    """Decode an already-built nested tree into *cls*.

    Args:
        tree: Output of ``build_tree`` (or any dict of the same shape).
        cls: Target dataclass.
        path: Canonical path of *tree* inside the submitted form; used as
            the prefix of every error key.
        config: Binding options.

    Raises:
        BindingError: If any field is missing or cannot be coerced.
        ConfigurationError: If *cls* contains a field type pathform cannot bind.
    """
    cfg = config or DEFAULT_CONFIG
    errors: Errors = {}
    value = decoder_for(cls, cfg)(tree, path, errors)
    if value is INVALID or errors:
        logger.debug("Binding %s failed: %s", cls.__name__, errors)
        raise BindingError(errors)
    return value


def bind_to[T](form: FormSource, cls: type[T], *, config: FormConfig | None = None) -> T:
    """Bind a whole form submission to a new *cls* instance.

    *form* may be a multi-valued mapping (first value per key), a plain
    ``{key: value}`` mapping, or an iterable of ``(key, value)`` pairs.

    Raises:
        FormKeyError: If a key does not match the key grammar.
        BindingError: If any field is missing or cannot be coerced.
    """
    tree = build_tree(form, config=config)
    return bind_tree(tree, cls, config=config)


def bind_indexed_property[T](
    form: FormSource,
    cls: type[T],
    list_name: str,
    index: int,
    *,
    config: FormConfig | None = None,
) -> T:
    """Bind only the ``list_name[index].*`` keys of *form* to *cls*.

    Used when a page edits a single list element and does not resubmit
    the rest of the parent object. Errors are still reported under the
    full path, e.g. ``addresses[2].city``, so they attach to the inputs
    that produced them.

    Raises:
        FormKeyError: If *list_name*/*index* do not form a valid key, or a
            selected key is malformed.
        BindingError: If any field is missing or cannot be coerced.
    """
    parse_key(f"{list_name}[{index}].x", config=config)
    element_path = f"{list_name}[{index}]"
    prefix = f"{element_path}."

    builder = NestedFormTreeBuilder(config=config)
    for key, value in iter_pairs(form):
        if key.startswith(prefix):
            builder.add(key, value)

    elements: Any = builder.tree.get(list_name, [])
    subtree = elements[index] if index < len(elements) else {}
    return bind_tree(subtree, cls, path=element_path, config=config)


async def form_from[T](request: Any, cls: type[T], *, config: FormConfig | None = None) -> T:
    """Bind the form body of a request to a *cls* instance.

    Reads ``await request.form()``; works with any framework request
    whose ``form()`` coroutine returns a mapping of submitted fields.

    Usage::

        @app.route("/person/register", methods=["POST"])
        async def register(request: Request):
            person = await form_from(request, Person)
    """
    form = await request.form()
    return bind_to(form, cls, config=config)
