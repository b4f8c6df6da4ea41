"""BatchConverter — turns a batch of messages into per-message outcomes.

Every message is decoded and handed to the configured entry builder on
its own.  Decoder failures become failed outcomes for that message only;
the batch carries on.  Each produced entry becomes one successful outcome,
so a message may yield several.  Outcomes always carry the message's
original batch index.

A ``ConfigurationError`` raised by the builder itself (empty template,
empty field mapping) is not a per-message problem and aborts the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Protocol, runtime_checkable

from depot.errors import DeserializationError, SchemaResolutionError
from depot.message import MessageParser, ParsedMessage, SinkMessage
from depot.models.config import SchemaMessageMode
from depot.models.entries import Entry
from depot.models.outcomes import ErrorKind, Outcome
from depot.models.schema import MessageSchema

logger = logging.getLogger(__name__)


@runtime_checkable
class EntryBuilder(Protocol):
    """Builds backend entries for one parsed message."""

    def build(
        self,
        parsed: ParsedMessage,
        schema: MessageSchema,
        index: int,
        metadata: Mapping[str, Any],
    ) -> list[Entry]:
        ...


class BatchConverter:
    """Converts message batches to outcomes, optionally on a worker pool.

    Parameters
    ----------
    parser:
        Upstream decoder that resolves schemas and parses messages.
    builder:
        Entry builder for the target backend shape.
    schema_class:
        Message class the decoder resolves the schema for.
    mode:
        Whether the log message or the log key is decoded.
    max_workers:
        Size of the worker pool; ``1`` converts on the calling thread.
    """

    def __init__(
        self,
        parser: MessageParser,
        builder: EntryBuilder,
        schema_class: str,
        mode: SchemaMessageMode = SchemaMessageMode.LOG_MESSAGE,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._parser = parser
        self._builder = builder
        self._schema_class = schema_class
        self._mode = mode
        self._max_workers = max_workers

    def convert(self, messages: Sequence[SinkMessage]) -> list[Outcome]:
        """Return the outcomes of every message in *messages*.

        The order of the returned list is not significant; use
        ``Outcome.index`` to relate an outcome to its message.
        """
        if self._max_workers == 1 or len(messages) <= 1:
            per_message = [self.convert_one(i, m) for i, m in enumerate(messages)]
        else:
            with ThreadPoolExecutor(
                max_workers=self._max_workers, thread_name_prefix="depot-convert"
            ) as pool:
                futures = [
                    pool.submit(self.convert_one, i, m) for i, m in enumerate(messages)
                ]
                per_message = [future.result() for future in futures]

        outcomes = [outcome for chunk in per_message for outcome in chunk]
        failed = sum(1 for outcome in outcomes if not outcome.success)
        if failed:
            logger.warning(
                "Converted %d messages: %d outcomes, %d failed",
                len(messages),
                len(outcomes),
                failed,
            )
        return outcomes

    def convert_one(self, index: int, message: SinkMessage) -> list[Outcome]:
        """Convert the message at batch position *index*."""
        summary = message.metadata_string()
        try:
            schema = self._parser.get_schema(self._schema_class)
            parsed = self._parser.parse(message, self._mode, self._schema_class)
            entries = self._builder.build(parsed, schema, index, message.metadata)
        except SchemaResolutionError as exc:
            logger.debug("Message %d %s: schema resolution failed: %s", index, summary, exc)
            return [Outcome.failed(index, ErrorKind.CONFIG_ERROR, str(exc), summary)]
        except DeserializationError as exc:
            logger.debug("Message %d %s: deserialization failed: %s", index, summary, exc)
            return [Outcome.failed(index, ErrorKind.DESERIALIZATION_ERROR, str(exc), summary)]
        return [Outcome.ok(index, entry, summary) for entry in entries]
