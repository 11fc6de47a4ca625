"""Pathform exception hierarchy.

Shared across binding, paths, validation, and templating so every module
raises and catches the same types.

Validation failures are not exceptions. They come back as the ``Invalid``
branch of ``ValidationResult`` and are re-rendered into the form.
"""


class PathformError(Exception):
    """Base for all pathform-specific errors."""


class ConfigurationError(PathformError):
    """Raised when a field or path declaration is invalid.

    Unknown field names, non-dataclass owners, mismatched path types, and
    unsupported annotations all end up here. Typically surfaces the first
    time a type is used, not per request.
    """


class FormKeyError(PathformError, ValueError):
    """Raised when a submitted form key does not match the key grammar.

    Callers should map this to a 400-class response: the client sent a
    key no form rendered by this library can produce.

    Attributes:
        key: The offending key, verbatim.
        reason: What is wrong with it.
    """

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid form key {key!r}: {reason}")


class PathResolutionError(PathformError, LookupError):
    """Raised when a property path cannot be navigated on an object.

    Means the caller paired a path with an object of the wrong shape, for
    example an index past the end of the list. Never returned as ``None``.

    Attributes:
        path: The canonical path that failed to resolve.
    """

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Cannot resolve {path!r}: {detail}")


class BindingError(PathformError):
    """Raised when form data cannot be bound to the target type.

    Attributes:
        errors: Dict mapping canonical paths to lists of error messages.
    """

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Form binding failed for: {fields}")
