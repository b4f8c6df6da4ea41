"""Warehouse table sink."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from depot.conversion.converter import BatchConverter
from depot.conversion.merge import merge_write_results, successful_entries
from depot.instrumentation import Instrumentation
from depot.message import MessageParser, SinkMessage
from depot.models.config import SchemaMessageMode, WarehouseSettings
from depot.models.outcomes import SinkResponse
from depot.models.schema import Column, MessageSchema
from depot.models.warehouse import ReconcileOutcome, TableIdentity
from depot.retry import RateLimitRetry
from depot.warehouse.client import WarehouseClient
from depot.warehouse.column_mapper import ColumnMapper
from depot.warehouse.metadata import parse_metadata_columns_types, with_metadata_columns
from depot.warehouse.reconciler import SchemaReconciler
from depot.warehouse.rows import TableRowBuilder
from depot.warehouse.writer import WarehouseWriter

logger = logging.getLogger(__name__)


class WarehouseSink:
    """Keeps the remote table schema current and inserts message rows into it."""

    def __init__(
        self,
        settings: WarehouseSettings,
        converter: BatchConverter,
        reconciler: SchemaReconciler,
        writer: WarehouseWriter,
        mapper: ColumnMapper | None = None,
    ) -> None:
        self._settings = settings
        self._converter = converter
        self._reconciler = reconciler
        self._writer = writer
        self._mapper = mapper or ColumnMapper()

    @property
    def sink_name(self) -> str:
        return "warehouse"

    @classmethod
    def from_settings(
        cls,
        settings: WarehouseSettings,
        parser: MessageParser,
        client: WarehouseClient,
        schema_class: str,
        mode: SchemaMessageMode = SchemaMessageMode.LOG_MESSAGE,
        max_workers: int = 1,
        instrumentation: Instrumentation | None = None,
        retry: RateLimitRetry | None = None,
    ) -> WarehouseSink:
        table = TableIdentity(namespace=settings.dataset, name=settings.table)
        converter = BatchConverter(
            parser, TableRowBuilder(settings), schema_class, mode, max_workers
        )
        reconciler = SchemaReconciler(client, table, settings, instrumentation, retry)
        writer = WarehouseWriter(client, table, instrumentation)
        return cls(settings, converter, reconciler, writer)

    def desired_columns(self, schema: MessageSchema) -> list[Column]:
        """Columns for *schema*, with metadata columns appended when enabled."""
        columns = self._mapper.map_all(schema.fields)
        if not self._settings.add_metadata:
            return columns
        return with_metadata_columns(
            columns,
            parse_metadata_columns_types(self._settings.metadata_columns_types),
            self._settings.metadata_namespace,
        )

    def on_schema_update(self, schema: MessageSchema) -> ReconcileOutcome:
        """Reconcile the remote table with a new version of the message schema."""
        outcome = self._reconciler.reconcile(self.desired_columns(schema))
        logger.info("Schema %s reconciled with %s: %s", schema.name, self._reconciler.table, outcome.value)
        return outcome

    def push(self, messages: Sequence[SinkMessage]) -> SinkResponse:
        outcomes = self._converter.convert(messages)
        results = self._writer.write(successful_entries(outcomes))  # type: ignore[arg-type]
        return merge_write_results(outcomes, results)
