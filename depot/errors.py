"""Error taxonomy for the depot sink core.

Configuration-class errors are fatal: they describe a setup defect a human
has to fix, so they abort the operation they belong to.  Per-message and
per-entry failures are recovered and reported as values instead
(``Outcome`` and ``WriteResult``); only the decoder-facing
``DeserializationError`` and ``SchemaResolutionError`` are raised across
the per-message boundary, and the batch converter catches both.
"""

from __future__ import annotations


class DepotError(Exception):
    """Base class for every error raised by depot."""


# ---------------------------------------------------------------------------
# Configuration (fatal)
# ---------------------------------------------------------------------------


class ConfigurationError(DepotError):
    """Raised when required sink configuration is missing or invalid."""


class SchemaResolutionError(ConfigurationError):
    """Raised by the message decoder when a message's schema cannot be resolved.

    This is the only configuration error the batch converter recovers
    from: it is recorded as a ``CONFIG_ERROR`` outcome for that message.
    """


class SchemaMappingError(ConfigurationError):
    """Raised when a field type has no backend column type mapping."""

    def __init__(self, field_name: str, kind: str, type_name: str) -> None:
        self.field_name = field_name
        self.kind = kind
        self.type_name = type_name
        super().__init__(
            f"No type mapping found for field: {field_name}, "
            f"fieldType: {kind}, typeName: {type_name}"
        )


class LocationImmutableError(ConfigurationError):
    """Raised when the remote dataset lives in a different location."""

    def __init__(self, dataset: str, current: str, requested: str) -> None:
        self.dataset = dataset
        self.current = current
        self.requested = requested
        super().__init__(
            f"Dataset location cannot be changed from {current} to {requested} "
            f"(dataset: {dataset})"
        )


class UnsupportedPartitionError(ConfigurationError):
    """Raised when the partition key column cannot carry time partitioning."""


# ---------------------------------------------------------------------------
# Per-message (recovered)
# ---------------------------------------------------------------------------


class DeserializationError(DepotError):
    """Raised when message bytes do not conform to the expected schema."""


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------


class BackendError(DepotError):
    """Raised by a warehouse client when a remote call fails."""


class TransientBackendError(BackendError):
    """A rate-limited mutating call that kept failing until the retry budget ran out."""

    def __init__(self, message: str, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(message)


class PermanentBackendError(BackendError):
    """A non-retryable backend failure during reconciliation."""
