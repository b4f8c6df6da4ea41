"""Build warehouse rows from parsed messages."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from depot.errors import DeserializationError
from depot.message import ParsedMessage
from depot.models.config import WarehouseSettings
from depot.models.entries import Entry, TableRowEntry
from depot.models.schema import MessageSchema
from depot.warehouse.metadata import metadata_values, parse_metadata_columns_types

INSERT_ID_KEYS = ("topic", "partition", "offset")


def insert_id_for(metadata: Mapping[str, Any]) -> str:
    """Row identity ``"{topic}_{partition}_{offset}"`` for deduplicated inserts.

    A message without its source position fails on its own with
    ``DeserializationError``.
    """
    missing = [key for key in INSERT_ID_KEYS if metadata.get(key) is None]
    if missing:
        raise DeserializationError(
            f"Row insert id needs message metadata {list(INSERT_ID_KEYS)}, missing: {missing}"
        )
    return "_".join(str(metadata[key]) for key in INSERT_ID_KEYS)


class TableRowBuilder:
    """Turns one parsed message into one ``TableRowEntry``.

    Every top-level schema field with a non-null value becomes a column.
    Configured metadata columns are filled from the source message
    metadata, flat or under the metadata namespace.
    """

    def __init__(self, settings: WarehouseSettings) -> None:
        self._settings = settings
        self._metadata_types = (
            parse_metadata_columns_types(settings.metadata_columns_types)
            if settings.add_metadata
            else []
        )

    def build(
        self,
        parsed: ParsedMessage,
        schema: MessageSchema,
        index: int,
        metadata: Mapping[str, Any],
    ) -> list[Entry]:
        columns: dict[str, Any] = {}
        for name in schema.field_names:
            value = parsed.get_field_by_name(name, schema)
            if value is not None:
                columns[name] = value
        if self._metadata_types:
            columns.update(
                metadata_values(
                    metadata, self._metadata_types, self._settings.metadata_namespace
                )
            )
        insert_id = insert_id_for(metadata) if self._settings.row_insert_id_enabled else None
        return [TableRowEntry(columns=columns, insert_id=insert_id)]
