"""HTML input attributes derived from field constraints.

The browser gets the same rules the server enforces, so most mistakes
are caught before the form is even submitted::

    NotBlank(), Size(max=50)   -> {"required": "", "maxlength": "50"}
    Pattern(r"[0-9]{4,5}")     -> {"pattern": "[0-9]{4,5}"}
    Email()                    -> input type "email", no attribute

Server-side validation still runs; these attributes are a convenience,
not a guarantee.
"""

from decimal import Decimal
from enum import Enum
from typing import assert_never

from pathform.constraints import (
    Cascade,
    Email,
    Max,
    Min,
    NotBlank,
    NotEmpty,
    NotNull,
    Pattern,
    Size,
)
from pathform.fields import Field

_NUMERIC_TYPES = (int, float, Decimal)


def html_attributes(field: Field) -> dict[str, str]:
    """Return the HTML constraint attributes for *field*.

    Multiple constraints combine. A field without constraints yields ``{}``.
    """
    attributes: dict[str, str] = {}
    for constraint in field.constraints:
        match constraint:
            case NotBlank() | NotEmpty() | NotNull():
                attributes["required"] = ""
            case Size(min=low, max=high):
                if high is not None:
                    attributes["maxlength"] = str(high)
                if low > 0:
                    attributes["minlength"] = str(low)
            case Pattern(regexp=regexp):
                attributes["pattern"] = regexp
            case Min(value=low):
                attributes["min"] = str(low)
            case Max(value=high):
                attributes["max"] = str(high)
            case Email() | Cascade():
                pass
            case _:
                assert_never(constraint)
    return attributes


def input_type(field: Field) -> str:
    """Pick the ``<input type>`` for *field*.

    ``Email`` constraints give ``email``; numeric fields give ``number``;
    everything else is ``text``.
    """
    if any(isinstance(c, Email) for c in field.constraints):
        return "email"
    value_type = field.value_type
    if (
        isinstance(value_type, type)
        and issubclass(value_type, _NUMERIC_TYPES)
        and not issubclass(value_type, bool | Enum)
    ):
        return "number"
    return "text"
