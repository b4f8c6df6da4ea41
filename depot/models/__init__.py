"""depot data models — all Pydantic v2, all frozen (immutable)."""

from depot.models.config import (
    KeyValueDataType,
    KeyValueDeployment,
    KeyValueSettings,
    PartitionSettings,
    RetrySettings,
    SchemaMessageMode,
    TtlType,
    WarehouseSettings,
)
from depot.models.entries import (
    DurationTtl,
    Entry,
    EntryKind,
    ExactTimeTtl,
    HashFieldSetEntry,
    KeyValueEntry,
    ListPushEntry,
    NoTtl,
    TableRowEntry,
    TtlKind,
    TtlPolicy,
    ValueSetEntry,
)
from depot.models.outcomes import ErrorInfo, ErrorKind, Outcome, SinkResponse, WriteResult
from depot.models.schema import (
    Cardinality,
    Column,
    ColumnMode,
    ColumnType,
    FieldKind,
    FieldSchema,
    MessageSchema,
)
from depot.models.warehouse import (
    NEVER_EXPIRE_MS,
    InsertError,
    PartitionSpec,
    PartitionType,
    ReconcileOutcome,
    RemoteDatasetState,
    RemoteTableState,
    RowToInsert,
    TableIdentity,
    TableType,
)

__all__ = [
    # schema
    "Cardinality",
    "FieldKind",
    "FieldSchema",
    "MessageSchema",
    "Column",
    "ColumnMode",
    "ColumnType",
    # entries
    "EntryKind",
    "Entry",
    "KeyValueEntry",
    "ValueSetEntry",
    "ListPushEntry",
    "HashFieldSetEntry",
    "TableRowEntry",
    "TtlKind",
    "TtlPolicy",
    "NoTtl",
    "DurationTtl",
    "ExactTimeTtl",
    # outcomes
    "ErrorKind",
    "ErrorInfo",
    "Outcome",
    "WriteResult",
    "SinkResponse",
    # warehouse
    "NEVER_EXPIRE_MS",
    "TableIdentity",
    "TableType",
    "PartitionType",
    "PartitionSpec",
    "RemoteDatasetState",
    "RemoteTableState",
    "ReconcileOutcome",
    "InsertError",
    "RowToInsert",
    # config
    "SchemaMessageMode",
    "PartitionSettings",
    "RetrySettings",
    "WarehouseSettings",
    "KeyValueDataType",
    "KeyValueDeployment",
    "TtlType",
    "KeyValueSettings",
]
