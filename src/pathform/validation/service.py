"""Object-graph validation keyed by canonical property path.

The violation keys produced here are the same strings ``PropertyPath``
produces (``firstName``, ``home.city``, ``addresses[0].city``). That
agreement is what lets the renderer attach each message to the input
that caused it.
"""

import dataclasses
import logging
from typing import Any

from pathform._internal.violations import Violations, join_path, record
from pathform.fields import Field, fields_of
from pathform.validation.result import Invalid, Valid, ValidationResult

logger = logging.getLogger("pathform.validation")


class ValidationService:
    """Runs declared field constraints over a dataclass graph.

    Stateless: one instance can be shared by every request.

    Usage::

        service = ValidationService()
        match service.validate(person):
            case Valid(value=person):
                repository.save(person)
            case Invalid(violations=violations):
                return render_form(person, violations)
    """

    __slots__ = ()

    def validate[T](self, value: T, *, prefix: str = "") -> ValidationResult[T]:
        """Validate *value* and every ``Cascade``-marked field reachable from it.

        Args:
            value: A dataclass instance.
            prefix: Canonical path *value* occupies in its parent form.
                ``validate(address, prefix="addresses[2]")`` reports
                ``addresses[2].city`` instead of ``city``.

        Returns:
            ``Valid(value)`` when nothing failed, else ``Invalid`` with
            messages grouped by path in constraint declaration order.
        """
        violations: Violations = {}
        self._walk(value, prefix, violations, set())
        if not violations:
            return Valid(value)
        logger.debug(
            "%s failed validation on %d path(s): %s",
            type(value).__name__,
            len(violations),
            ", ".join(violations),
        )
        return Invalid(violations)

    def _walk(self, obj: Any, path: str, violations: Violations, ancestors: set[int]) -> None:
        if id(obj) in ancestors:
            return
        ancestors.add(id(obj))
        try:
            for f in fields_of(type(obj)).values():
                self._check_field(obj, f, path, violations, ancestors)
        finally:
            ancestors.discard(id(obj))

    def _check_field(
        self,
        obj: Any,
        f: Field,
        path: str,
        violations: Violations,
        ancestors: set[int],
    ) -> None:
        value = f.get(obj)
        at = join_path(path, f.name)

        for constraint in f.constraints:
            message = constraint.check(value)
            if message is not None:
                record(violations, at, message)

        if not f.cascade or value is None:
            return
        if f.item_type is not None:
            for i, element in enumerate(value):
                if _is_instance(element):
                    self._walk(element, f"{at}[{i}]", violations, ancestors)
        elif _is_instance(value):
            self._walk(value, at, violations, ancestors)


def _is_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


_default_service = ValidationService()


def validate[T](value: T, *, prefix: str = "") -> ValidationResult[T]:
    """Validate *value* with a shared default ``ValidationService``."""
    return _default_service.validate(value, prefix=prefix)
