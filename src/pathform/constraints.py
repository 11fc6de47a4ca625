"""Declarative field constraints.

Each constraint is a frozen dataclass attached to a dataclass field with
``constrained()``. It knows two things: how to check a value and how to
describe itself. ``check`` has the signature::

    def check(self, value: object) -> str | None:
        '''Return error message, or None if valid.'''

Presence is the job of ``NotNull``, ``NotEmpty``, and ``NotBlank`` only.
Every other constraint accepts ``None`` so a missing value produces one
"required" message rather than a pile of format complaints.

``Cascade`` is a marker: it checks nothing itself and tells the validator to
descend into a nested dataclass or into each element of a list.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NotNull:
    """Value must not be ``None``."""

    message: str = "This field is required"

    def check(self, value: Any) -> str | None:
        if value is None:
            return self.message
        return None


@dataclass(frozen=True, slots=True)
class NotEmpty:
    """Value must not be ``None`` or have length zero (strings, lists)."""

    message: str = "This field is required"

    def check(self, value: Any) -> str | None:
        if value is None or len(value) == 0:
            return self.message
        return None


@dataclass(frozen=True, slots=True)
class NotBlank:
    """String must contain at least one non-whitespace character."""

    message: str = "This field is required"

    def check(self, value: Any) -> str | None:
        if value is None or not str(value).strip():
            return self.message
        return None


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Size:
    """Length of a string or list must fall within ``[min, max]``.

    ``max=None`` means unbounded.
    """

    min: int = 0
    max: int | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        if self.min < 0 or (self.max is not None and self.max < self.min):
            msg = f"Invalid size bounds: min={self.min}, max={self.max}"
            raise ValueError(msg)

    def check(self, value: Any) -> str | None:
        if value is None:
            return None
        length = len(value)
        if length < self.min or (self.max is not None and length > self.max):
            return self.message or self._default_message(value)
        return None

    def _default_message(self, value: Any) -> str:
        unit = "characters" if isinstance(value, str) else "items"
        if self.max is None:
            return f"Must be at least {self.min} {unit}"
        if self.min == 0:
            return f"Must be at most {self.max} {unit}"
        return f"Must be between {self.min} and {self.max} {unit}"


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Basic email pattern: checks structure, not deliverability
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


@dataclass(frozen=True, slots=True)
class Email:
    """Value must be a valid email address (basic format check).

    Renders as ``<input type="email">`` instead of adding an attribute.
    """

    message: str = "Must be a valid email address"

    def check(self, value: Any) -> str | None:
        if value is None or value == "":
            return None
        if not _EMAIL_RE.match(str(value)):
            return self.message
        return None


@dataclass(frozen=True, slots=True)
class Pattern:
    """Whole value must match the regular expression.

    Matching is anchored at both ends, the same way browsers treat the
    ``pattern`` attribute this constraint renders to.
    """

    regexp: str
    message: str | None = None
    _compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled", re.compile(self.regexp))

    def check(self, value: Any) -> str | None:
        if value is None or value == "":
            return None
        if not self._compiled.fullmatch(str(value)):
            return self.message or f"Must match pattern: {self.regexp}"
        return None


# ---------------------------------------------------------------------------
# Range
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Min:
    """Number must be greater than or equal to ``value``."""

    value: int | float | Decimal
    message: str | None = None

    def check(self, value: Any) -> str | None:
        if value is None:
            return None
        if value < self.value:
            return self.message or f"Must be at least {self.value}"
        return None


@dataclass(frozen=True, slots=True)
class Max:
    """Number must be less than or equal to ``value``."""

    value: int | float | Decimal
    message: str | None = None

    def check(self, value: Any) -> str | None:
        if value is None:
            return None
        if value > self.value:
            return self.message or f"Must be at most {self.value}"
        return None


# ---------------------------------------------------------------------------
# Cascade
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Cascade:
    """Validate the nested object (or every list element) as well."""

    def check(self, value: Any) -> str | None:
        return None


type Constraint = NotNull | NotEmpty | NotBlank | Size | Email | Pattern | Min | Max | Cascade
