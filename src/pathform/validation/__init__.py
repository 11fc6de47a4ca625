"""Constraint validation of bound objects.

Usage::

    from pathform import constrained
    from pathform.validation import Cascade, Email, NotBlank, Size, validate

    @dataclass(frozen=True, slots=True)
    class Person:
        first_name: str = constrained(NotBlank(), Size(max=50), alias="firstName", default="")
        email: str = constrained(NotBlank(), Email(), default="")
        addresses: list[Address] = constrained(Cascade(), default_factory=list)

    result = validate(person)
    if not result:
        # result.violations == {"firstName": ["This field is required"]}
        ...
"""

from pathform.constraints import (
    Cascade,
    Constraint,
    Email,
    Max,
    Min,
    NotBlank,
    NotEmpty,
    NotNull,
    Pattern,
    Size,
)
from pathform.validation.html import html_attributes, input_type
from pathform.validation.result import Invalid, Valid, ValidationResult
from pathform.validation.service import ValidationService, validate

__all__ = [
    "Cascade",
    "Constraint",
    "Email",
    "Invalid",
    "Max",
    "Min",
    "NotBlank",
    "NotEmpty",
    "NotNull",
    "Pattern",
    "Size",
    "Valid",
    "ValidationResult",
    "ValidationService",
    "html_attributes",
    "input_type",
    "validate",
]
