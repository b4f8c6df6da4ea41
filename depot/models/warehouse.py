"""Remote warehouse state snapshots and table definitions."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from depot.models.schema import Column

# Canonical "never expire" partition expiry.  An unset remote expiry and a
# configured expiry <= 0 both normalise to this value before comparison.
NEVER_EXPIRE_MS = 0


class TableIdentity(BaseModel):
    """Stable key of a remote table: ``namespace`` is the dataset."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}.{self.name}"


class PartitionType(str, Enum):
    DAY = "DAY"


class PartitionSpec(BaseModel):
    """Time partitioning of a standard table."""

    model_config = ConfigDict(frozen=True)

    field: str
    type: PartitionType = PartitionType.DAY
    require_partition_filter: bool = True
    expiration_ms: int | None = None

    @property
    def effective_expiration_ms(self) -> int:
        return effective_expiry_ms(self.expiration_ms)


def effective_expiry_ms(expiry_ms: int | None) -> int:
    """Normalise an expiry so unset and non-positive values compare equal."""
    if expiry_ms is None or expiry_ms <= 0:
        return NEVER_EXPIRE_MS
    return expiry_ms


class TableType(str, Enum):
    STANDARD = "TABLE"
    VIEW = "VIEW"
    EXTERNAL = "EXTERNAL"


class RemoteDatasetState(BaseModel):
    model_config = ConfigDict(frozen=True)

    exists: bool = True
    location: str = ""
    labels: dict[str, str] = {}


class RemoteTableState(BaseModel):
    """A freshly fetched snapshot of the remote table; never cached."""

    model_config = ConfigDict(frozen=True)

    exists: bool = True
    table_type: TableType = TableType.STANDARD
    labels: dict[str, str] = {}
    columns: tuple[Column, ...] = ()
    partitioning: PartitionSpec | None = None


class ReconcileOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class InsertError(BaseModel):
    """One error reported by the warehouse for a single inserted row."""

    model_config = ConfigDict(frozen=True)

    reason: str = ""
    message: str = ""
    location: str = ""


class RowToInsert(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: dict
    insert_id: str | None = None
