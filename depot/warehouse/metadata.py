"""Source-metadata columns (topic, partition, offset, ...) for warehouse tables."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from depot.errors import ConfigurationError
from depot.models.schema import Column, ColumnMode, ColumnType

METADATA_TYPES: dict[str, ColumnType] = {
    "string": ColumnType.STRING,
    "integer": ColumnType.INTEGER,
    "float": ColumnType.FLOAT,
    "boolean": ColumnType.BOOLEAN,
    "timestamp": ColumnType.TIMESTAMP,
}


def parse_metadata_columns_types(spec: str) -> list[tuple[str, ColumnType]]:
    """Parse ``"topic=string,partition=integer"`` into (name, type) pairs."""
    pairs: list[tuple[str, ColumnType]] = []
    for item in spec.split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, type_name = item.partition("=")
        name, type_name = name.strip(), type_name.strip().lower()
        if not sep or not name or type_name not in METADATA_TYPES:
            raise ConfigurationError(f"Invalid metadata column definition: '{item}'")
        pairs.append((name, METADATA_TYPES[type_name]))
    return pairs


def metadata_columns(
    columns_types: Sequence[tuple[str, ColumnType]], namespace: str = ""
) -> list[Column]:
    """Build nullable metadata columns, nested under *namespace* when given."""
    flat = [
        Column(name=name, type=column_type, mode=ColumnMode.NULLABLE)
        for name, column_type in columns_types
    ]
    if not namespace:
        return flat
    return [
        Column(
            name=namespace,
            type=ColumnType.RECORD,
            mode=ColumnMode.NULLABLE,
            fields=tuple(flat),
        )
    ]


def with_metadata_columns(
    message_columns: Sequence[Column],
    columns_types: Sequence[tuple[str, ColumnType]],
    namespace: str = "",
) -> list[Column]:
    """Append metadata columns, refusing any name that a message column already uses."""
    extra = metadata_columns(columns_types, namespace)
    existing = {column.name for column in message_columns}
    collisions = [column.name for column in extra if column.name in existing]
    if collisions:
        raise ConfigurationError(
            "Metadata field(s) is already present in the schema. "
            f"fields: [{', '.join(collisions)}]"
        )
    return [*message_columns, *extra]


def metadata_values(
    metadata: Mapping[str, Any],
    columns_types: Sequence[tuple[str, ColumnType]],
    namespace: str = "",
) -> dict[str, Any]:
    """Row values for the configured metadata columns."""
    values = {name: metadata.get(name) for name, _ in columns_types}
    if namespace:
        return {namespace: values}
    return values
