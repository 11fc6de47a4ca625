"""pathform: property-path form binding, validation and rendering.

Flat HTML form keys in, typed dataclasses out, and violations mapped back
onto the inputs that caused them. One canonical path string
(``firstName``, ``home.city``, ``addresses[0].city``) names a location
in every direction: input name, form key, and violation key.

Basic usage::

    from dataclasses import dataclass

    from pathform import NotBlank, Size, bind_to, constrained, validate

    @dataclass(frozen=True, slots=True)
    class Person:
        first_name: str = constrained(NotBlank(), Size(max=50), alias="firstName", default="")

    person = bind_to({"firstName": "Ada"}, Person)
    result = validate(person)
    if not result:
        ...  # re-render with result.violations

Rendering (kida templates)::

    from pathform import FormBuilder, field_ref

    form = FormBuilder(person, result.violations)
    form.field(field_ref(Person, "first_name").to_path(), "First Name")
"""

__version__ = "0.1.0"
__all__ = [
    "BindingError",
    "Cascade",
    "ConfigurationError",
    "Direct",
    "Email",
    "Field",
    "FormBuilder",
    "FormConfig",
    "FormData",
    "FormKeyError",
    "IndexedFormBuilder",
    "Indexed",
    "Invalid",
    "Max",
    "Min",
    "Nested",
    "NotBlank",
    "NotEmpty",
    "NotNull",
    "PathResolutionError",
    "PathformError",
    "Pattern",
    "PropertyPath",
    "Size",
    "Valid",
    "ValidationResult",
    "ValidationService",
    "at",
    "bind_indexed_property",
    "bind_to",
    "build_tree",
    "constrained",
    "create_environment",
    "field_ref",
    "fields_of",
    "form_from",
    "form_values",
    "html_attributes",
    "parse_form_data",
    "parse_key",
    "render_field",
    "to_path",
    "validate",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import pathform`` free of the kida import until rendering is
    actually used.
    """
    if name in ("FormConfig",):
        from pathform.config import FormConfig

        return FormConfig

    if name in (
        "BindingError",
        "ConfigurationError",
        "FormKeyError",
        "PathResolutionError",
        "PathformError",
    ):
        from pathform import errors as _errors

        return getattr(_errors, name)

    if name in ("Field", "constrained", "field_ref", "fields_of"):
        from pathform import fields as _fields

        return getattr(_fields, name)

    if name in ("Direct", "Indexed", "Nested", "PropertyPath", "at", "to_path"):
        from pathform import paths as _paths

        return getattr(_paths, name)

    if name in ("Cascade", "Email", "Max", "Min", "NotBlank", "NotEmpty", "NotNull", "Pattern", "Size"):
        from pathform import constraints as _constraints

        return getattr(_constraints, name)

    if name in ("bind_indexed_property", "bind_to", "build_tree", "form_from", "parse_key"):
        from pathform import binding as _binding

        return getattr(_binding, name)

    if name in (
        "Invalid",
        "Valid",
        "ValidationResult",
        "ValidationService",
        "html_attributes",
        "validate",
    ):
        from pathform import validation as _validation

        return getattr(_validation, name)

    if name in ("FormBuilder", "IndexedFormBuilder", "create_environment", "render_field"):
        from pathform import templating as _templating

        return getattr(_templating, name)

    if name in ("FormData", "form_values", "parse_form_data"):
        from pathform import forms as _forms

        return getattr(_forms, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
