"""SchemaReconciler — brings the remote dataset and table in line with a desired schema.

Sequence per ``reconcile`` call, strictly in order:

1. Fetch the dataset.  Create it if absent; refuse a location change;
   update its labels if they differ.
2. Fetch the table.  Create it if absent; otherwise update it only when
   its labels, columns or (for a partitioned standard table) effective
   partition expiry differ.

Remote state is fetched fresh on every call.  Each mutating call is
retried on its own under ``RateLimitRetry``.  Callers must serialise
``reconcile`` calls for the same table.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from depot.errors import LocationImmutableError
from depot.instrumentation import (
    WAREHOUSE_OPERATION_LATENCY,
    WAREHOUSE_OPERATION_TOTAL,
    Instrumentation,
    LoggingInstrumentation,
)
from depot.models.config import WarehouseSettings
from depot.models.schema import Column
from depot.models.warehouse import (
    ReconcileOutcome,
    RemoteTableState,
    TableIdentity,
    TableType,
    effective_expiry_ms,
)
from depot.retry import RateLimitRetry
from depot.warehouse.client import WarehouseClient
from depot.warehouse.table_definition import build_partition_spec

logger = logging.getLogger(__name__)


class ApiCall:
    """Tag values for the ``api`` metric tag."""

    DATASET_CREATE = "dataset_create"
    DATASET_UPDATE = "dataset_update"
    TABLE_CREATE = "table_create"
    TABLE_UPDATE = "table_update"
    TABLE_INSERT_ALL = "table_insert_all"


def instrument_call(
    instrumentation: Instrumentation,
    table: TableIdentity,
    api: str,
    started: float,
) -> None:
    """Record one counter and one latency observation for a remote call."""
    tags = {"table": table.name, "dataset": table.namespace, "api": api}
    instrumentation.increment_counter(WAREHOUSE_OPERATION_TOTAL, tags)
    instrumentation.capture_duration(
        WAREHOUSE_OPERATION_LATENCY, time.monotonic() - started, tags
    )


class SchemaReconciler:
    """Creates or updates a remote warehouse table to match desired columns.

    Parameters
    ----------
    client:
        Warehouse client used for every remote call.
    table:
        Identity of the managed table; ``namespace`` is the dataset.
    settings:
        Location, labels, partitioning and retry configuration.
    instrumentation:
        Metrics sink.  Defaults to ``LoggingInstrumentation``.
    retry:
        Retry wrapper for mutating calls.  Defaults to one built from
        ``settings.retry``.
    """

    def __init__(
        self,
        client: WarehouseClient,
        table: TableIdentity,
        settings: WarehouseSettings,
        instrumentation: Instrumentation | None = None,
        retry: RateLimitRetry | None = None,
    ) -> None:
        self._client = client
        self.table = table
        self._settings = settings
        self._instrumentation = instrumentation or LoggingInstrumentation()
        self._retry = retry or RateLimitRetry(
            settings.retry, instrumentation=self._instrumentation
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reconcile(self, desired: Sequence[Column]) -> ReconcileOutcome:
        """Reconcile the remote dataset and table against *desired* columns.

        Raises
        ------
        LocationImmutableError
            If the dataset exists in a different location.
        ConfigurationError
            If partitioning is enabled without a usable partition key.
        TransientBackendError
            If a mutating call stayed rate limited for the whole retry budget.
        PermanentBackendError
            On any other backend failure of a mutating call.
        """
        desired = tuple(desired)
        partition_spec = build_partition_spec(self._settings.partitioning, desired)

        self._reconcile_dataset()

        table_state = self._client.get_table_state(self.table)
        if table_state is None or not table_state.exists:
            self._mutate(
                ApiCall.TABLE_CREATE,
                lambda: self._client.create_table(
                    self.table, desired, partition_spec, dict(self._settings.table_labels)
                ),
            )
            logger.info("Successfully CREATED table: %s", self.table)
            return ReconcileOutcome.CREATED

        if not self.needs_update(table_state, desired):
            logger.info("Skipping table update for %s, schema has not changed", self.table)
            return ReconcileOutcome.UNCHANGED

        self._mutate(
            ApiCall.TABLE_UPDATE,
            lambda: self._client.update_table(
                self.table, desired, partition_spec, dict(self._settings.table_labels)
            ),
        )
        logger.info("Successfully UPDATED table: %s", self.table)
        return ReconcileOutcome.UPDATED

    def needs_update(
        self, current: RemoteTableState, desired: Sequence[Column]
    ) -> bool:
        return (
            current.labels != self._settings.table_labels
            or tuple(current.columns) != tuple(desired)
            or self.partition_expiry_changed(current)
        )

    def partition_expiry_changed(self, current: RemoteTableState) -> bool:
        """Whether the configured expiry differs from a partitioned standard table's.

        Tables without remote partitioning are never updated for expiry:
        partitioning cannot be added to an existing table.
        """
        if current.table_type is not TableType.STANDARD or current.partitioning is None:
            return False
        configured = effective_expiry_ms(self._settings.partitioning.expiry_ms)
        return current.partitioning.effective_expiration_ms != configured

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reconcile_dataset(self) -> None:
        dataset = self.table.namespace
        state = self._client.get_dataset_state(dataset)
        if state is None or not state.exists:
            self._mutate(
                ApiCall.DATASET_CREATE,
                lambda: self._client.create_dataset(
                    dataset,
                    self._settings.dataset_location,
                    dict(self._settings.dataset_labels),
                ),
            )
            logger.info("Successfully CREATED dataset: %s", dataset)
            return

        if state.location != self._settings.dataset_location:
            raise LocationImmutableError(
                dataset, state.location, self._settings.dataset_location
            )
        if state.labels != self._settings.dataset_labels:
            self._mutate(
                ApiCall.DATASET_UPDATE,
                lambda: self._client.update_dataset_labels(
                    dataset, dict(self._settings.dataset_labels)
                ),
            )
            logger.info("Successfully UPDATED dataset: %s with labels", dataset)

    def _mutate(self, api: str, call: Callable[[], None]) -> None:
        started = time.monotonic()
        self._retry.call(call, description=f"{api} {self.table}")
        instrument_call(self._instrumentation, self.table, api, started)
