"""Key templates: ``"<pattern>,<field>[,<field>...]"``.

The pattern is a printf-style string (``%s``, ``%d``, ``%.2f``); the
field values read from the message are substituted positionally.

>>> parse_template("Test-%s,order_number", message, schema)
'Test-test-order'
"""

from __future__ import annotations

from depot.errors import ConfigurationError, DeserializationError
from depot.message import ParsedMessage
from depot.models.schema import MessageSchema


def split_template(template: str | None) -> tuple[str, list[str]]:
    """Split a template into its pattern and field names."""
    if template is None or not template.strip():
        raise ConfigurationError(f"Template '{template}' is invalid")
    pattern, *names = template.split(",")
    return pattern, [name.strip() for name in names if name.strip()]


def parse_template(
    template: str | None, parsed: ParsedMessage, schema: MessageSchema
) -> str:
    """Expand *template* against *parsed*.

    A template without field names is returned as-is.

    Raises
    ------
    ConfigurationError
        If the template is empty, names a field the schema lacks, or its
        directives do not fit the field values.
    DeserializationError
        If the message has no value for one of the named fields.
    """
    pattern, names = split_template(template)
    if not names:
        return pattern
    values = tuple(parsed.get_field_by_name(name, schema) for name in names)
    missing = [name for name, value in zip(names, values) if value is None]
    if missing:
        raise DeserializationError(
            f"Message has no value for template field(s) {missing} of '{template}'"
        )
    try:
        return pattern % values
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"Template '{template}' does not match values of fields {names}: {exc}"
        ) from exc
