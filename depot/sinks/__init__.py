"""Sink protocol.

A sink converts a batch of messages, writes the resulting entries to its
backend and reports which message indices failed.  ``push`` never raises
for per-message or per-entry failures; configuration errors do propagate.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from depot.message import SinkMessage
from depot.models.outcomes import SinkResponse


@runtime_checkable
class Sink(Protocol):
    @property
    def sink_name(self) -> str:
        """Return the unique name of this sink."""
        ...

    def push(self, messages: Sequence[SinkMessage]) -> SinkResponse:
        """Convert and write *messages*, returning the failed indices."""
        ...
