"""Template filters and globals for forms rendered with kida.

Registered on every environment built by ``create_environment``. They
cover the cases the builders do not: hand-written inputs that still want
the violation messages and constraint attributes of a field.
"""

import html
from typing import Any

from kida.template import Markup

from pathform.fields import Field
from pathform.templating.fields import (
    error_messages,
    format_value,
    render_attributes,
    render_enum_select,
    render_field,
    render_hidden,
)
from pathform.validation.html import html_attributes, input_type


def attr(value: Any, name: str) -> str | Markup:
    """Output an HTML attribute when value is truthy, else empty string.

    Example:
        <input name="city"{{ placeholder | attr("placeholder") }}>
        → <input name="city" placeholder="Oslo">   (when placeholder is "Oslo")
        → <input name="city">                      (when placeholder is None or "")

    """
    if not value:
        return ""
    return Markup(f' {name}="{html.escape(str(value))}"')


def field_errors(errors: Any, key: str) -> list[str]:
    """Messages recorded under canonical path *key*.

    Returns an empty list when *errors* is None, not a mapping, or has
    nothing for *key*.

    Example:
        {% for msg in violations | field_errors("addresses[0].city") %}
          <div class="form-error">{{ msg }}</div>
        {% end %}

    """
    if errors is None:
        return []
    if isinstance(errors, dict):
        val = errors.get(key, [])
        return list(val) if val else []
    return []


def html_attrs(attributes: Any) -> Markup:
    """Serialize a mapping as HTML attributes, escaping every value.

    Pairs with ``constraint_attrs``:

        <input name="city"{{ constraint_attrs(city) | html_attrs }}>
        → <input name="city" required maxlength="50">
    """
    if not attributes:
        return Markup("")
    return Markup(render_attributes(attributes))


def constraint_attrs(field: Field) -> dict[str, str]:
    """HTML constraint attributes of *field*; see ``html_attributes``."""
    return html_attributes(field)


BUILTIN_FILTERS: dict[str, Any] = {
    "attr": attr,
    "field_errors": field_errors,
    "form_value": format_value,
    "html_attrs": html_attrs,
}

BUILTIN_GLOBALS: dict[str, Any] = {
    "constraint_attrs": constraint_attrs,
    "error_messages": error_messages,
    "input_type": input_type,
    "render_enum_select": render_enum_select,
    "render_field": render_field,
    "render_hidden": render_hidden,
}
