"""Kida environment setup with the form filters and globals registered."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

from kida import Environment, FileSystemLoader

from pathform.templating.filters import BUILTIN_FILTERS, BUILTIN_GLOBALS


def create_environment(
    template_dir: str | Path | None = None,
    *,
    loader: Any = None,
    filters: dict[str, Callable[..., Any]] | None = None,
    globals_: dict[str, Any] | None = None,
    auto_reload: bool = False,
) -> Environment:
    """Create an autoescaping kida Environment for form templates.

    Args:
        template_dir: Directory to load templates from. Ignored when
            *loader* is given.
        loader: Any kida loader (``DictLoader``, ``ChoiceLoader``, ...).
        filters: Extra filters; may override the built-in ones.
        globals_: Extra globals; may override the built-in ones.
        auto_reload: Re-read templates when they change on disk.
    """
    if loader is None and template_dir is not None:
        loader = FileSystemLoader(str(template_dir))

    env = Environment(
        loader=loader,
        autoescape=True,
        auto_reload=auto_reload,
        trim_blocks=True,
        lstrip_blocks=True,
    )

    env.update_filters(BUILTIN_FILTERS)
    if filters:
        env.update_filters(filters)

    for name, value in {**BUILTIN_GLOBALS, **(globals_ or {})}.items():
        env.add_global(name, value)

    return env
