"""HTML rendering of property-path form fields for kida templates."""

from pathform.templating.builder import FormBuilder, IndexedFormBuilder
from pathform.templating.fields import (
    error_messages,
    format_value,
    render_attributes,
    render_enum_select,
    render_field,
    render_hidden,
)
from pathform.templating.integration import create_environment

__all__ = [
    "FormBuilder",
    "IndexedFormBuilder",
    "create_environment",
    "error_messages",
    "format_value",
    "render_attributes",
    "render_enum_select",
    "render_field",
    "render_hidden",
]
