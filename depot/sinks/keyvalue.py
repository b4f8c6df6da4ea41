"""Key-value store sink."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from depot.conversion.converter import BatchConverter
from depot.conversion.merge import merge_write_results, successful_entries
from depot.instrumentation import Instrumentation
from depot.keyvalue.builders import entry_builder_for
from depot.keyvalue.client import DirectClient, PipelinedClient
from depot.keyvalue.writer import DirectWriter, PipelinedWriter
from depot.message import MessageParser, SinkMessage
from depot.models.config import KeyValueDeployment, KeyValueSettings, SchemaMessageMode
from depot.models.outcomes import SinkResponse

logger = logging.getLogger(__name__)


class KeyValueSink:
    """Writes messages as values, list pushes or hash fields.

    Parameters
    ----------
    converter:
        Batch converter wired with a key-value entry builder.
    writer:
        ``PipelinedWriter`` or ``DirectWriter``.
    """

    def __init__(
        self, converter: BatchConverter, writer: PipelinedWriter | DirectWriter
    ) -> None:
        self._converter = converter
        self._writer = writer

    @property
    def sink_name(self) -> str:
        return "keyvalue"

    @classmethod
    def from_settings(
        cls,
        settings: KeyValueSettings,
        parser: MessageParser,
        client: PipelinedClient | DirectClient,
        schema_class: str,
        mode: SchemaMessageMode = SchemaMessageMode.LOG_MESSAGE,
        max_workers: int = 1,
        instrumentation: Instrumentation | None = None,
    ) -> KeyValueSink:
        """Wire builder, converter and the writer matching ``settings.deployment``."""
        converter = BatchConverter(
            parser, entry_builder_for(settings), schema_class, mode, max_workers
        )
        writer: PipelinedWriter | DirectWriter
        if settings.deployment is KeyValueDeployment.STANDALONE:
            writer = PipelinedWriter(client, instrumentation)  # type: ignore[arg-type]
        else:
            writer = DirectWriter(client, instrumentation)  # type: ignore[arg-type]
        logger.info(
            "Key-value sink: %s writer, data type %s",
            settings.deployment.value,
            settings.data_type.value,
        )
        return cls(converter, writer)

    def push(self, messages: Sequence[SinkMessage]) -> SinkResponse:
        outcomes = self._converter.convert(messages)
        results = self._writer.write(successful_entries(outcomes))  # type: ignore[arg-type]
        response = merge_write_results(outcomes, results)
        if response.has_errors:
            logger.warning(
                "%d of %d messages failed, lowest failed index %s",
                len(response.errors),
                len(messages),
                response.lowest_failed_index,
            )
        return response
