"""Write key-value entries through a pipelined or a direct client.

Both writers return one ``WriteResult`` per entry, aligned with the input.
TTL is applied after the primary write of each entry; a TTL failure is
logged and never turns a successful write into a failed one.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from depot.instrumentation import Instrumentation, LoggingInstrumentation
from depot.keyvalue.client import DirectClient, KeyValueCommands, PipelinedClient
from depot.keyvalue.ttl import apply_ttl
from depot.models.entries import EntryKind, KeyValueEntry
from depot.models.outcomes import WriteResult

logger = logging.getLogger(__name__)


def submit(commands: KeyValueCommands, entry: KeyValueEntry) -> Any:
    """Issue the primary command for *entry* and return the client's reply."""
    logger.debug("%s", entry)
    if entry.kind is EntryKind.VALUE_SET:
        return commands.set(entry.key, entry.value)
    if entry.kind is EntryKind.LIST_PUSH:
        return commands.lpush(entry.key, entry.value)
    if entry.kind is EntryKind.HASH_FIELD_SET:
        return commands.hset(entry.key, entry.field, entry.value)
    raise TypeError(f"Not a key-value entry: {entry.kind}")


class PipelinedWriter:
    """Queues every entry (and its TTL) on one pipeline, then flushes once.

    Response handles are read only after ``sync()``.
    """

    def __init__(
        self,
        client: PipelinedClient,
        instrumentation: Instrumentation | None = None,
    ) -> None:
        self._client = client
        self._instrumentation = instrumentation or LoggingInstrumentation()

    def write(self, entries: Sequence[KeyValueEntry]) -> list[WriteResult]:
        if not entries:
            return []
        pipeline = self._client.pipeline()
        queued: list[tuple[KeyValueEntry, Any, Any]] = []
        rejected: dict[int, Exception] = {}
        for position, entry in enumerate(entries):
            try:
                handle = submit(pipeline, entry)
            except Exception as exc:  # noqa: BLE001
                logger.error("Could not queue %s: %s", entry, exc)
                rejected[position] = exc
                queued.append((entry, None, None))
                continue
            ttl_handle = None
            try:
                ttl_handle = apply_ttl(pipeline, entry.key, entry.ttl)
            except Exception as exc:  # noqa: BLE001
                self._instrumentation.capture_non_fatal_error(
                    exc, f"TTL not applied to key {entry.key}"
                )
            queued.append((entry, handle, ttl_handle))

        try:
            pipeline.sync()
        except Exception as exc:  # noqa: BLE001
            logger.error("Pipeline flush failed for %d entries: %s", len(entries), exc)
            return [WriteResult.failed(str(exc))] * len(entries)

        results: list[WriteResult] = []
        for position, (entry, handle, ttl_handle) in enumerate(queued):
            if position in rejected:
                results.append(WriteResult.failed(str(rejected[position])))
                continue
            try:
                handle.get()
            except Exception as exc:  # noqa: BLE001
                logger.error("Write failed for %s: %s", entry, exc)
                results.append(WriteResult.failed(str(exc)))
                continue
            results.append(WriteResult.ok())
            if ttl_handle is not None:
                try:
                    ttl_handle.get()
                except Exception as exc:  # noqa: BLE001
                    self._instrumentation.capture_non_fatal_error(
                        exc, f"TTL not applied to key {entry.key}"
                    )
        return results


class DirectWriter:
    """Writes each entry with its own call; transport errors fail only that entry."""

    def __init__(
        self,
        client: DirectClient,
        instrumentation: Instrumentation | None = None,
    ) -> None:
        self._client = client
        self._instrumentation = instrumentation or LoggingInstrumentation()

    def write(self, entries: Sequence[KeyValueEntry]) -> list[WriteResult]:
        results: list[WriteResult] = []
        for entry in entries:
            try:
                submit(self._client, entry)
            except Exception as exc:  # noqa: BLE001
                logger.error("Write failed for %s: %s", entry, exc)
                results.append(WriteResult.failed(str(exc)))
                continue
            results.append(WriteResult.ok())
            try:
                apply_ttl(self._client, entry.key, entry.ttl)
            except Exception as exc:  # noqa: BLE001
                self._instrumentation.capture_non_fatal_error(
                    exc, f"TTL not applied to key {entry.key}"
                )
        return results
