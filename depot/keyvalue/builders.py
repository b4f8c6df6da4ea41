"""Entry builders for the key-value store shapes.

Each builder turns one parsed message into one or more entries.  A
missing or empty field-name configuration is a ``ConfigurationError``
and stops the run; a message that lacks a value for a configured field is
a ``DeserializationError`` and only fails that message.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from depot.errors import ConfigurationError, DeserializationError
from depot.keyvalue.templating import parse_template
from depot.keyvalue.ttl import ttl_policy
from depot.message import ParsedMessage
from depot.models.config import KeyValueDataType, KeyValueSettings
from depot.models.entries import (
    Entry,
    HashFieldSetEntry,
    ListPushEntry,
    TtlPolicy,
    ValueSetEntry,
)
from depot.models.schema import MessageSchema

logger = logging.getLogger(__name__)


def _read_value(
    parsed: ParsedMessage, schema: MessageSchema, field_name: str, setting: str
) -> str:
    if not field_name:
        raise ConfigurationError(f"Empty config {setting} found")
    value = parsed.get_field_by_name(field_name, schema)
    if value is None:
        raise DeserializationError(f"Message has no value for field '{field_name}' ({setting})")
    return str(value)


class _KeyValueBuilder:
    def __init__(self, settings: KeyValueSettings) -> None:
        self._settings = settings
        self._ttl: TtlPolicy = ttl_policy(settings.ttl_type, settings.ttl_value)

    def key(self, parsed: ParsedMessage, schema: MessageSchema) -> str:
        return parse_template(self._settings.key_template, parsed, schema)


class ValueSetBuilder(_KeyValueBuilder):
    """One ``SET`` of the configured value field per message."""

    def build(
        self,
        parsed: ParsedMessage,
        schema: MessageSchema,
        index: int,
        metadata: Mapping[str, Any],
    ) -> list[Entry]:
        key = self.key(parsed, schema)
        value = _read_value(parsed, schema, self._settings.value_field_name, "value_field_name")
        return [ValueSetEntry(key=key, value=value, ttl=self._ttl)]


class ListPushBuilder(_KeyValueBuilder):
    """One ``LPUSH`` of the configured list field per message, tagged with its index."""

    def build(
        self,
        parsed: ParsedMessage,
        schema: MessageSchema,
        index: int,
        metadata: Mapping[str, Any],
    ) -> list[Entry]:
        key = self.key(parsed, schema)
        value = _read_value(parsed, schema, self._settings.list_field_name, "list_field_name")
        return [ListPushEntry(key=key, value=value, index=index, ttl=self._ttl)]


class HashFieldSetBuilder(_KeyValueBuilder):
    """One ``HSET`` per configured message-field -> hash-field pair.

    The hash-field name is itself a template, so
    ``{"order_details": "details_%s,order_number"}`` stores the details
    under a per-order hash field.
    """

    def build(
        self,
        parsed: ParsedMessage,
        schema: MessageSchema,
        index: int,
        metadata: Mapping[str, Any],
    ) -> list[Entry]:
        mapping = self._settings.hashset_field_to_column_mapping
        if not mapping:
            raise ConfigurationError("Empty config hashset_field_to_column_mapping found")
        key = self.key(parsed, schema)
        entries: list[Entry] = []
        for field_name, hash_field_template in mapping.items():
            hash_field = parse_template(hash_field_template, parsed, schema)
            value = _read_value(parsed, schema, field_name, "hashset_field_to_column_mapping")
            entries.append(
                HashFieldSetEntry(key=key, field=hash_field, value=value, ttl=self._ttl)
            )
        return entries


_BUILDERS: dict[KeyValueDataType, type[_KeyValueBuilder]] = {
    KeyValueDataType.KEYVALUE: ValueSetBuilder,
    KeyValueDataType.LIST: ListPushBuilder,
    KeyValueDataType.HASHSET: HashFieldSetBuilder,
}


def entry_builder_for(settings: KeyValueSettings) -> _KeyValueBuilder:
    """Return the builder for ``settings.data_type``."""
    builder = _BUILDERS[settings.data_type](settings)
    logger.info(
        "Key-value entry builder: %s (key template %r, ttl %s)",
        type(builder).__name__,
        settings.key_template,
        settings.ttl_type.value,
    )
    return builder
