"""Validation result: ``Valid(value)`` or ``Invalid(violations)``."""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Valid[T]:
    """The object passed every constraint.

    Truthy, so the usual check reads naturally::

        result = service.validate(person)
        if not result:
            return render_form(person, result.violations)
        repository.save(result.value)
    """

    value: T

    @property
    def is_valid(self) -> bool:
        return True

    @property
    def violations(self) -> dict[str, list[str]]:
        """Always empty; lets callers read ``violations`` off either branch."""
        return {}

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Invalid:
    """At least one constraint failed.

    ``violations`` maps canonical paths to messages, in the same format
    property paths produce::

        {"firstName": ["This field is required"],
         "addresses[0].postalCode": ["Postal code must be 4-5 digits"]}
    """

    violations: dict[str, list[str]] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return False

    def __bool__(self) -> bool:
        """Falsy when invalid, enabling the ``if not result:`` pattern."""
        return False


type ValidationResult[T] = Valid[T] | Invalid
