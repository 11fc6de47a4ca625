"""Shared helpers for ``{canonical path: [messages]}`` maps."""

type Violations = dict[str, list[str]]


def record(violations: Violations, path: str, message: str) -> None:
    """Append *message* under *path*, skipping an identical repeat."""
    messages = violations.setdefault(path, [])
    if message not in messages:
        messages.append(message)


def join_path(parent: str, name: str) -> str:
    """``join_path("addresses[0]", "city")`` -> ``"addresses[0].city"``."""
    return f"{parent}.{name}" if parent else name
