"""Message decoding interfaces.

The decoder that turns raw stream bytes into a structured message lives
outside depot.  depot only needs a ``MessageParser`` that resolves a
schema and parses a ``SinkMessage``, and a ``ParsedMessage`` that can read
a field by name.  ``DictParsedMessage`` is a mapping-backed implementation
used by the CLI and by tests.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from depot.errors import ConfigurationError
from depot.models.config import SchemaMessageMode
from depot.models.schema import MessageSchema


class SinkMessage(BaseModel):
    """A raw message as consumed from the log, plus its source metadata."""

    model_config = ConfigDict(frozen=True)

    log_key: Any = None
    log_message: Any = None
    metadata: dict[str, Any] = {}

    def metadata_string(self) -> str:
        return "{" + ", ".join(f"{k}={v}" for k, v in self.metadata.items()) + "}"


@runtime_checkable
class ParsedMessage(Protocol):
    """A decoded message."""

    def get_field_by_name(self, name: str, schema: MessageSchema) -> Any:
        """Return the value of field *name* (dotted for nested fields) or ``None``.

        Raises
        ------
        ConfigurationError
            If *name* is not a field of *schema*.
        """
        ...


@runtime_checkable
class MessageParser(Protocol):
    """Upstream decoder contract.

    ``get_schema`` may raise ``SchemaResolutionError``; ``parse`` may raise
    ``SchemaResolutionError`` or ``DeserializationError``.
    """

    def get_schema(self, schema_class: str) -> MessageSchema:
        ...

    def parse(
        self, message: SinkMessage, mode: SchemaMessageMode, schema_class: str
    ) -> ParsedMessage:
        ...


class DictParsedMessage:
    """A parsed message backed by a plain (possibly nested) mapping."""

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = data

    def get_field_by_name(self, name: str, schema: MessageSchema) -> Any:
        if schema.field(name) is None:
            raise ConfigurationError(f"Invalid field config : {name}")
        value: Any = self._data
        for part in name.split("."):
            if not isinstance(value, Mapping):
                return None
            value = value.get(part)
        return value

    def as_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def __repr__(self) -> str:
        return f"DictParsedMessage({self._data!r})"
