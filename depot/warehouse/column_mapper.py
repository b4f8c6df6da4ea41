"""FieldSchema -> warehouse Column mapping.

Type resolution checks the fully-qualified declared type name first (so
well-known wrapper messages such as timestamps map to their natural column
type) and the generic field kind second.  A field neither lookup resolves
raises ``SchemaMappingError``; there is no fallback type.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from depot.errors import SchemaMappingError
from depot.models.schema import (
    Cardinality,
    Column,
    ColumnMode,
    ColumnType,
    FieldKind,
    FieldSchema,
)

TIMESTAMP_TYPE_NAME = ".google.protobuf.Timestamp"
DURATION_TYPE_NAME = ".google.protobuf.Duration"
STRUCT_TYPE_NAME = ".google.protobuf.Struct"

CARDINALITY_TO_MODE: Mapping[Cardinality, ColumnMode] = MappingProxyType(
    {
        Cardinality.OPTIONAL: ColumnMode.NULLABLE,
        Cardinality.REPEATED: ColumnMode.REPEATED,
        Cardinality.REQUIRED: ColumnMode.REQUIRED,
    }
)


class TypeMapping(BaseModel):
    """Immutable lookup tables handed to a ``ColumnMapper``."""

    model_config = ConfigDict(frozen=True)

    by_type_name: dict[str, ColumnType]
    by_kind: dict[FieldKind, ColumnType]


DEFAULT_TYPE_MAPPING = TypeMapping(
    by_type_name={
        TIMESTAMP_TYPE_NAME: ColumnType.TIMESTAMP,
        STRUCT_TYPE_NAME: ColumnType.STRING,
        DURATION_TYPE_NAME: ColumnType.RECORD,
    },
    by_kind={
        FieldKind.BYTES: ColumnType.BYTES,
        FieldKind.STRING: ColumnType.STRING,
        FieldKind.ENUM: ColumnType.STRING,
        FieldKind.DOUBLE: ColumnType.FLOAT,
        FieldKind.FLOAT: ColumnType.FLOAT,
        FieldKind.BOOL: ColumnType.BOOLEAN,
        FieldKind.INT64: ColumnType.INTEGER,
        FieldKind.UINT64: ColumnType.INTEGER,
        FieldKind.INT32: ColumnType.INTEGER,
        FieldKind.UINT32: ColumnType.INTEGER,
        FieldKind.FIXED64: ColumnType.INTEGER,
        FieldKind.FIXED32: ColumnType.INTEGER,
        FieldKind.SFIXED32: ColumnType.INTEGER,
        FieldKind.SFIXED64: ColumnType.INTEGER,
        FieldKind.SINT32: ColumnType.INTEGER,
        FieldKind.SINT64: ColumnType.INTEGER,
        FieldKind.MESSAGE: ColumnType.RECORD,
        FieldKind.GROUP: ColumnType.RECORD,
    },
)


class ColumnMapper:
    """Maps field schemas to warehouse columns."""

    def __init__(self, type_mapping: TypeMapping = DEFAULT_TYPE_MAPPING) -> None:
        self._mapping = type_mapping

    def resolve_type(self, field: FieldSchema) -> ColumnType:
        column_type = self._mapping.by_type_name.get(field.type_name)
        if column_type is None:
            column_type = self._mapping.by_kind.get(field.kind)
        if column_type is None:
            raise SchemaMappingError(field.name, field.kind.value, field.type_name)
        return column_type

    def map(self, field: FieldSchema) -> Column:
        column_type = self.resolve_type(field)
        sub_columns: tuple[Column, ...] = ()
        # Only record columns keep children; a timestamp message flattens.
        if column_type is ColumnType.RECORD:
            sub_columns = tuple(self.map(sub) for sub in field.fields)
        return Column(
            name=field.name,
            type=column_type,
            mode=CARDINALITY_TO_MODE[field.cardinality],
            fields=sub_columns,
        )

    def map_all(self, fields: Sequence[FieldSchema]) -> list[Column]:
        return [self.map(field) for field in fields]
