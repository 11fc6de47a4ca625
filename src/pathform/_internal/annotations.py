"""Helpers for reading dataclass type annotations.

Only the shapes pathform binds are recognised: plain classes,
``X | None`` / ``Optional[X]``, and ``list[X]``.
"""

import types
from typing import Any, Union, get_args, get_origin

_NONE_TYPE = type(None)


def is_optional(annotation: Any) -> bool:
    """True for ``X | None`` and ``Optional[X]``."""
    if get_origin(annotation) in (Union, types.UnionType):
        return _NONE_TYPE in get_args(annotation)
    return False


def unwrap_optional(annotation: Any) -> Any:
    """Extract the base type from ``X | None`` or plain ``X``.

    Unions of several non-None members are returned unchanged.
    """
    if get_origin(annotation) in (Union, types.UnionType):
        args = [a for a in get_args(annotation) if a is not _NONE_TYPE]
        if len(args) == 1:
            return args[0]
    return annotation


def list_item_type(annotation: Any) -> Any | None:
    """Return ``X`` for ``list[X]`` (optionally wrapped in ``| None``), else None."""
    base = unwrap_optional(annotation)
    if get_origin(base) is list:
        args = get_args(base)
        return args[0] if args else Any
    if base is list:
        return Any
    return None
