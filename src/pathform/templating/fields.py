"""HTML rendering of single form fields addressed by property path.

Each helper reads the current value through the path, derives input
attributes from the leaf field's constraints, and appends the
violation messages recorded under the same path::

    render_field(first_name, person, violations, "First Name")

    <label>First Name<input type="text" name="firstName" value="Ada"
        required maxlength="50"></label>
    <div class="form-error">This field is required</div>

Output is a single ``Markup`` value, escaped once here, so kida
templates print it as-is.
"""

import html
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from kida.template import Markup

from pathform.config import DEFAULT_CONFIG, FormConfig
from pathform.errors import ConfigurationError
from pathform.paths import PropertyPath
from pathform.validation.html import html_attributes
from pathform.validation.html import input_type as default_input_type

# Attributes rendered without a value when set.
BOOLEAN_ATTRIBUTES = frozenset(
    {"autofocus", "checked", "disabled", "multiple", "readonly", "required", "selected"}
)

type AttrValue = str | int | float | bool | None


def format_value(value: Any) -> str:
    """Render a bound value the way it is submitted back.

    ``None`` is empty, enum members use their name, and booleans are
    ``true``/``false`` so the binder accepts them unchanged.
    """
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_attributes(attributes: Mapping[str, AttrValue]) -> str:
    """Serialize *attributes* as `` name="value"`` pairs, in order.

    ``None`` and ``False`` drop the attribute. Boolean attributes such as
    ``required`` render bare when set to ``True`` or ``""``.
    """
    parts: list[str] = []
    for name, value in attributes.items():
        if value is None or value is False:
            continue
        if value is True or (value == "" and name in BOOLEAN_ATTRIBUTES):
            parts.append(f" {html.escape(name)}")
            continue
        parts.append(f' {html.escape(name)}="{html.escape(str(value), quote=True)}"')
    return "".join(parts)


def error_messages(
    violations: Mapping[str, Iterable[str]] | None,
    key: str,
    config: FormConfig | None = None,
) -> Markup:
    """Render every message recorded under *key*, one element each."""
    return Markup(_errors_html(violations, key, config or DEFAULT_CONFIG))


def _errors_html(
    violations: Mapping[str, Iterable[str]] | None, key: str, config: FormConfig
) -> str:
    if not violations:
        return ""
    tag = config.error_tag
    css = html.escape(config.error_class, quote=True)
    return "".join(
        f'<{tag} class="{css}">{html.escape(message)}</{tag}>'
        for message in violations.get(key, ())
    )


def current_value(path: PropertyPath, bound: Any) -> Any:
    """Value at *path* in *bound*; ``None`` when there is no bound object yet."""
    if bound is None:
        return None
    return path.get_value(bound)


def render_field(
    path: PropertyPath,
    bound: Any,
    violations: Mapping[str, Iterable[str]] | None,
    label: str,
    *,
    input_type: str | None = None,
    placeholder: str | None = None,
    css_class: str | None = None,
    input_id: str | None = None,
    attrs: Mapping[str, AttrValue] | None = None,
    config: FormConfig | None = None,
) -> Markup:
    """Render a labelled ``<input>`` for *path* followed by its violations.

    Args:
        path: Where the value lives; ``path.path`` becomes the input name.
        bound: Object to read the current value from. ``None`` renders an
            empty input, for forms shown before anything was submitted.
        violations: Messages keyed by canonical path.
        label: Label text.
        input_type: Overrides the type derived from the leaf field.
        placeholder: ``placeholder`` attribute.
        css_class: ``class`` attribute.
        input_id: ``id`` attribute.
        attrs: Extra attributes, applied last.
        config: Error element tag and class.

    Raises:
        PathResolutionError: If *path* cannot be followed in *bound*.
    """
    leaf = path.leaf
    attributes: dict[str, AttrValue] = {
        "type": input_type or default_input_type(leaf),
        "name": path.path,
        "id": input_id,
        "class": css_class,
        "value": format_value(current_value(path, bound)),
        "placeholder": placeholder,
    }
    attributes.update(html_attributes(leaf))
    if attrs:
        attributes.update(attrs)

    return Markup(
        f"<label>{html.escape(label)}<input{render_attributes(attributes)}></label>"
        + _errors_html(violations, path.path, config or DEFAULT_CONFIG)
    )


def render_hidden(path: PropertyPath, bound: Any) -> Markup:
    """Render ``<input type="hidden">`` carrying the current value of *path*."""
    attributes = {
        "type": "hidden",
        "name": path.path,
        "value": format_value(current_value(path, bound)),
    }
    return Markup(f"<input{render_attributes(attributes)}>")


def render_enum_select(
    path: PropertyPath,
    bound: Any,
    violations: Mapping[str, Iterable[str]] | None,
    label: str,
    *,
    css_class: str | None = None,
    config: FormConfig | None = None,
) -> Markup:
    """Render a labelled ``<select>`` with one option per enum member.

    The current member is ``selected``. Optional fields get a leading
    empty option labelled ``config.empty_option_label``.

    Raises:
        ConfigurationError: If the leaf field is not enum-typed.
    """
    cfg = config or DEFAULT_CONFIG
    leaf = path.leaf
    enum_cls = leaf.value_type
    if not (isinstance(enum_cls, type) and issubclass(enum_cls, Enum)):
        msg = f"{leaf.owner.__name__}.{leaf.attr} is not an enum field"
        raise ConfigurationError(msg)

    current = current_value(path, bound)
    options: list[str] = []
    if leaf.is_optional:
        selected = {"selected": current is None}
        options.append(
            f'<option value=""{render_attributes(selected)}>'
            f"{html.escape(cfg.empty_option_label)}</option>"
        )
    for member in enum_cls:
        option = {"value": member.name, "selected": member is current}
        options.append(f"<option{render_attributes(option)}>{html.escape(member.name)}</option>")

    attributes: dict[str, AttrValue] = {"name": path.path, "class": css_class}
    if "required" in html_attributes(leaf):
        attributes["required"] = True

    return Markup(
        f"<label>{html.escape(label)}"
        f"<select{render_attributes(attributes)}>{''.join(options)}</select></label>"
        + _errors_html(violations, path.path, cfg)
    )
