"""Warehouse client contract.

The network client is supplied by the caller.  Mutating calls raise
``depot.errors.BackendError``; a message containing
``"Exceeded rate limits"`` marks the failure as transient.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from depot.models.schema import Column
from depot.models.warehouse import (
    InsertError,
    PartitionSpec,
    RemoteDatasetState,
    RemoteTableState,
    RowToInsert,
    TableIdentity,
)


@runtime_checkable
class WarehouseClient(Protocol):
    def get_dataset_state(self, dataset: str) -> RemoteDatasetState | None:
        """Return the dataset snapshot, or ``None`` if it does not exist."""
        ...

    def create_dataset(
        self, dataset: str, location: str, labels: dict[str, str]
    ) -> None:
        ...

    def update_dataset_labels(self, dataset: str, labels: dict[str, str]) -> None:
        ...

    def get_table_state(self, table: TableIdentity) -> RemoteTableState | None:
        """Return the table snapshot, or ``None`` if it does not exist."""
        ...

    def create_table(
        self,
        table: TableIdentity,
        columns: Sequence[Column],
        partition_spec: PartitionSpec | None,
        labels: dict[str, str],
    ) -> None:
        ...

    def update_table(
        self,
        table: TableIdentity,
        columns: Sequence[Column],
        partition_spec: PartitionSpec | None,
        labels: dict[str, str],
    ) -> None:
        ...

    def insert_rows(
        self, table: TableIdentity, rows: Sequence[RowToInsert]
    ) -> dict[int, list[InsertError]]:
        """Insert *rows*; return insert errors keyed by row position."""
        ...
