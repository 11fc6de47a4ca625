"""Form configuration.

FormConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FormConfig:
    """Binding, validation, and rendering options. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = FormConfig(error_class="field-error", strip_whitespace=True)
    """

    # Rendering
    error_class: str = "form-error"
    error_tag: str = "div"
    empty_option_label: str = ""  # Label of the blank option on optional enum selects

    # Binding
    strip_whitespace: bool = False
    max_list_index: int = 999  # Highest list index a form key may address


DEFAULT_CONFIG = FormConfig()
