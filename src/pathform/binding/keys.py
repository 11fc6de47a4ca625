"""Form key parsing.

A form key names a location the same way a canonical property path does::

    firstName             -> Property("firstName")
    home.city             -> Property("home"), Property("city")
    addresses[0].city     -> Property("addresses"), Index(0), Property("city")

Grammar::

    key        = segment ("." segment)*
    segment    = identifier | identifier "[" integer "]"
    identifier = [A-Za-z_][A-Za-z0-9_]*
    integer    = [0-9]+

Parsing is strict. Anything else, including a key that ends in an index,
raises ``FormKeyError`` with the position of the first problem.
"""

import re
from dataclasses import dataclass

from pathform.config import DEFAULT_CONFIG, FormConfig
from pathform.errors import FormKeyError


@dataclass(frozen=True, slots=True)
class Property:
    """A named field step."""

    name: str


@dataclass(frozen=True, slots=True)
class Index:
    """A zero-based list element step."""

    value: int


type KeySegment = Property | Index

_SEGMENT_RE = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)(?:\[([^\]]*)\])?")


def parse_key(key: str, *, config: FormConfig | None = None) -> tuple[KeySegment, ...]:
    """Parse a flat form key into its segments.

    Raises:
        FormKeyError: If *key* does not match the grammar or an index
            exceeds ``config.max_list_index``.
    """
    cfg = config or DEFAULT_CONFIG
    if not key:
        raise FormKeyError(key, "key is empty")

    segments: list[KeySegment] = []
    pos = 0
    while True:
        match = _SEGMENT_RE.match(key, pos)
        if match is None:
            raise FormKeyError(key, f"expected a field name at position {pos}")
        segments.append(Property(match.group(1)))

        raw_index = match.group(2)
        if raw_index is not None:
            if not raw_index.isascii() or not raw_index.isdigit():
                raise FormKeyError(
                    key,
                    f"index {raw_index!r} at position {match.start(2)} is not a "
                    "non-negative integer",
                )
            index = int(raw_index)
            if index > cfg.max_list_index:
                raise FormKeyError(
                    key, f"index {index} exceeds the maximum of {cfg.max_list_index}"
                )
            segments.append(Index(index))

        pos = match.end()
        if pos == len(key):
            break
        if key[pos] != ".":
            raise FormKeyError(key, f"unexpected {key[pos]!r} at position {pos}")
        pos += 1

    if isinstance(segments[-1], Index):
        raise FormKeyError(key, "key must end in a field name, not a list index")
    return tuple(segments)


def format_key(segments: tuple[KeySegment, ...] | list[KeySegment]) -> str:
    """Inverse of ``parse_key``: join segments into canonical key form."""
    parts: list[str] = []
    for segment in segments:
        match segment:
            case Property(name=name):
                parts.append(f".{name}" if parts else name)
            case Index(value=value):
                parts.append(f"[{value}]")
    return "".join(parts)
