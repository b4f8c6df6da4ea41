"""Time-partitioning spec construction."""

from __future__ import annotations

from collections.abc import Sequence

from depot.errors import ConfigurationError, UnsupportedPartitionError
from depot.models.config import PartitionSettings
from depot.models.schema import Column, ColumnType
from depot.models.warehouse import PartitionSpec, PartitionType

TIME_PARTITION_TYPES = (ColumnType.TIMESTAMP, ColumnType.DATE)


def build_partition_spec(
    settings: PartitionSettings, columns: Sequence[Column] = ()
) -> PartitionSpec | None:
    """Return the daily partition spec for *settings*, or ``None`` if disabled.

    Raises
    ------
    ConfigurationError
        If partitioning is enabled without a partition key.
    UnsupportedPartitionError
        If the key column exists in *columns* with a non-time type.
    """
    if not settings.enabled:
        return None
    if not settings.key:
        raise ConfigurationError("Partition key has to be set when partitioning is enabled")

    key_column = next((c for c in columns if c.name == settings.key), None)
    if key_column is not None and key_column.type not in TIME_PARTITION_TYPES:
        raise UnsupportedPartitionError(
            "Range partitioning is not supported, supported partition fields have "
            f"to be of DATE or TIMESTAMP type (field: {settings.key}, "
            f"type: {key_column.type.value})"
        )

    return PartitionSpec(
        field=settings.key,
        type=PartitionType.DAY,
        require_partition_filter=True,
        expiration_ms=settings.expiry_ms if settings.expiry_ms > 0 else None,
    )
