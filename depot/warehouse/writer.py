"""Insert table rows and map per-row insert errors to write results."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from depot.instrumentation import Instrumentation, LoggingInstrumentation
from depot.models.entries import TableRowEntry
from depot.models.outcomes import ErrorKind, WriteResult
from depot.models.warehouse import InsertError, RowToInsert, TableIdentity
from depot.warehouse.client import WarehouseClient
from depot.warehouse.reconciler import ApiCall, instrument_call

logger = logging.getLogger(__name__)

_OUT_OF_BOUNDS_MARKERS = ("is outside the allowed bounds", "out of range")


def classify_insert_errors(errors: Sequence[InsertError]) -> ErrorKind:
    """Pick the error kind for one row from the warehouse's insert errors.

    A row rejected for an unknown column points at a schema mismatch;
    an out-of-bounds value is bad data; ``stopped`` rows were only
    aborted alongside a bad row and can be retried as-is.
    """
    for error in errors:
        reason = error.reason.lower()
        message = error.message.lower()
        if reason == "invalid" and "no such field" in message:
            return ErrorKind.UNKNOWN_FIELDS_ERROR
        if reason == "invalid" and any(m in message for m in _OUT_OF_BOUNDS_MARKERS):
            return ErrorKind.INVALID_MESSAGE_ERROR
    if errors and all(error.reason.lower() == "stopped" for error in errors):
        return ErrorKind.SINK_RETRYABLE_ERROR
    return ErrorKind.SINK_UNKNOWN_ERROR


class WarehouseWriter:
    """Writes ``TableRowEntry`` batches with a single insert call."""

    def __init__(
        self,
        client: WarehouseClient,
        table: TableIdentity,
        instrumentation: Instrumentation | None = None,
    ) -> None:
        self._client = client
        self._table = table
        self._instrumentation = instrumentation or LoggingInstrumentation()

    def write(self, entries: Sequence[TableRowEntry]) -> list[WriteResult]:
        if not entries:
            return []
        rows = [RowToInsert(content=e.columns, insert_id=e.insert_id) for e in entries]
        started = time.monotonic()
        try:
            row_errors = self._client.insert_rows(self._table, rows)
        except Exception as exc:  # noqa: BLE001
            logger.error("Insert into %s failed for %d rows: %s", self._table, len(rows), exc)
            return [WriteResult.failed(str(exc), ErrorKind.SINK_UNKNOWN_ERROR)] * len(rows)
        instrument_call(self._instrumentation, self._table, ApiCall.TABLE_INSERT_ALL, started)

        results: list[WriteResult] = []
        for position in range(len(rows)):
            errors = row_errors.get(position)
            if not errors:
                results.append(WriteResult.ok())
                continue
            results.append(
                WriteResult.failed(
                    "; ".join(f"{e.reason}: {e.message}" for e in errors),
                    classify_insert_errors(errors),
                )
            )
        if row_errors:
            logger.warning(
                "Insert into %s: %d/%d rows failed", self._table, len(row_errors), len(rows)
            )
        return results
