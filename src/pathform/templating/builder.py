"""Form builders: bind the value object and violations once, then render fields.

Handlers build one per form and hand it to the template::

    form = FormBuilder(person, violations)
    form.field(to_path(field_ref(Person, "first_name")), "First Name")

    address = IndexedFormBuilder(person, violations, field_ref(Person, "addresses"), 0)
    address.enum_select("type", "Address Type")
    address.field("city", "City")

Every call returns the rendered ``Markup`` (so ``{{ form.field(...) }}``
works inside a template) and also records it; ``render()`` joins
everything recorded so far.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from kida.template import Markup

from pathform.config import DEFAULT_CONFIG, FormConfig
from pathform.errors import ConfigurationError
from pathform.fields import Field, field_ref
from pathform.paths import Indexed, PropertyPath
from pathform.templating.fields import (
    AttrValue,
    error_messages,
    render_enum_select,
    render_field,
    render_hidden,
)

type Violations = Mapping[str, Iterable[str]]


class _Builder:
    __slots__ = ("_parts", "bound", "config", "violations")

    def __init__(
        self,
        bound: Any,
        violations: Violations | None = None,
        config: FormConfig | None = None,
    ) -> None:
        self.bound = bound
        self.violations: Violations = violations or {}
        self.config = config or DEFAULT_CONFIG
        self._parts: list[str] = []

    def _emit(self, markup: Markup, *, wrap: bool = True) -> Markup:
        if wrap:
            markup = Markup(f"<div>{markup}</div>")
        self._parts.append(str(markup))
        return markup

    def errors_for(self, key: str) -> Markup:
        """Render violations recorded under *key* that belong to no single input.

        Used for object-level messages such as ``"addresses"`` ("At least
        one address is required").
        """
        return self._emit(error_messages(self.violations, key, self.config), wrap=False)

    def render(self) -> Markup:
        """Everything rendered by this builder, in call order."""
        return Markup("".join(self._parts))

    def __html__(self) -> str:
        return str(self.render())


class FormBuilder(_Builder):
    """Renders fields of a root object from full property paths."""

    __slots__ = ()

    def field(
        self,
        path: PropertyPath,
        label: str,
        *,
        input_type: str | None = None,
        placeholder: str | None = None,
        css_class: str | None = None,
        input_id: str | None = None,
        attrs: Mapping[str, AttrValue] | None = None,
    ) -> Markup:
        """Render a labelled input for *path*, wrapped in a ``<div>``."""
        return self._emit(
            render_field(
                path,
                self.bound,
                self.violations,
                label,
                input_type=input_type,
                placeholder=placeholder,
                css_class=css_class,
                input_id=input_id,
                attrs=attrs,
                config=self.config,
            )
        )

    def enum_select(self, path: PropertyPath, label: str, *, css_class: str | None = None) -> Markup:
        """Render a labelled ``<select>`` for an enum field, wrapped in a ``<div>``."""
        return self._emit(
            render_enum_select(
                path, self.bound, self.violations, label, css_class=css_class, config=self.config
            )
        )

    def hidden_field(self, path: PropertyPath) -> Markup:
        return self._emit(render_hidden(path, self.bound), wrap=False)


class IndexedFormBuilder(_Builder):
    """Renders fields of one list element: ``list_field[index].<field>``.

    Element fields may be given as ``Field`` objects or by name (wire or
    attribute name), resolved against the list's item type.
    """

    __slots__ = ("index", "list_field")

    def __init__(
        self,
        bound: Any,
        violations: Violations | None,
        list_field: Field,
        index: int,
        config: FormConfig | None = None,
    ) -> None:
        if list_field.item_type is None:
            msg = f"{list_field.owner.__name__}.{list_field.attr} is not a list field"
            raise ConfigurationError(msg)
        super().__init__(bound, violations, config)
        self.list_field = list_field
        self.index = index

    @property
    def prefix(self) -> str:
        """Canonical path of the element, e.g. ``addresses[2]``."""
        return f"{self.list_field.name}[{self.index}]"

    def path(self, element_field: Field | str) -> Indexed:
        """The ``Indexed`` path to *element_field* of this element."""
        if isinstance(element_field, str):
            element_field = field_ref(self.list_field.item_type, element_field)
        return Indexed(self.list_field, self.index, element_field)

    def field(
        self,
        element_field: Field | str,
        label: str,
        *,
        input_type: str | None = None,
        placeholder: str | None = None,
        css_class: str | None = None,
        input_id: str | None = None,
        attrs: Mapping[str, AttrValue] | None = None,
    ) -> Markup:
        """Render a labelled input for one element field, wrapped in a ``<div>``."""
        return self._emit(
            render_field(
                self.path(element_field),
                self.bound,
                self.violations,
                label,
                input_type=input_type,
                placeholder=placeholder,
                css_class=css_class,
                input_id=input_id,
                attrs=attrs,
                config=self.config,
            )
        )

    def hidden_field(self, element_field: Field | str) -> Markup:
        """Render a hidden input, e.g. to carry an element id through an edit."""
        return self._emit(render_hidden(self.path(element_field), self.bound), wrap=False)

    def enum_select(
        self, element_field: Field | str, label: str, *, css_class: str | None = None
    ) -> Markup:
        return self._emit(
            render_enum_select(
                self.path(element_field),
                self.bound,
                self.violations,
                label,
                css_class=css_class,
                config=self.config,
            )
        )
