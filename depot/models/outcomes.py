"""Per-message outcomes, per-entry write results and the merged sink response."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from depot.models.entries import Entry


class ErrorKind(str, Enum):
    """Why a message did not make it to the backend."""

    CONFIG_ERROR = "config_error"
    DESERIALIZATION_ERROR = "deserialization_error"
    WRITE_ERROR = "write_error"
    UNKNOWN_FIELDS_ERROR = "unknown_fields_error"
    INVALID_MESSAGE_ERROR = "invalid_message_error"
    SINK_RETRYABLE_ERROR = "sink_retryable_error"
    SINK_UNKNOWN_ERROR = "sink_unknown_error"


class ErrorInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str = ""

    def __str__(self) -> str:
        return self.kind.name


class Outcome(BaseModel):
    """Result of converting one message (or one of its entries).

    ``index`` is the message's position in the original batch.  Exactly one
    of ``entry`` (success) or ``error`` (failure) is set.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    success: bool
    entry: Entry | None = None
    error: ErrorInfo | None = None
    metadata_summary: str = ""

    @model_validator(mode="after")
    def _exactly_one_result(self) -> Outcome:
        if self.success and (self.entry is None or self.error is not None):
            raise ValueError("a successful outcome carries an entry and no error")
        if not self.success and (self.error is None or self.entry is not None):
            raise ValueError("a failed outcome carries an error and no entry")
        return self

    @classmethod
    def ok(cls, index: int, entry: Entry, metadata_summary: str = "") -> Outcome:
        return cls(index=index, success=True, entry=entry, metadata_summary=metadata_summary)

    @classmethod
    def failed(
        cls, index: int, kind: ErrorKind, message: str, metadata_summary: str = ""
    ) -> Outcome:
        return cls(
            index=index,
            success=False,
            error=ErrorInfo(kind=kind, message=message),
            metadata_summary=metadata_summary,
        )


class WriteResult(BaseModel):
    """Result of writing a single entry to the backend."""

    model_config = ConfigDict(frozen=True)

    success: bool
    error_message: str = ""
    error_kind: ErrorKind | None = None

    @classmethod
    def ok(cls) -> WriteResult:
        return cls(success=True)

    @classmethod
    def failed(
        cls, message: str, kind: ErrorKind = ErrorKind.WRITE_ERROR
    ) -> WriteResult:
        return cls(success=False, error_message=message, error_kind=kind)


class SinkResponse(BaseModel):
    """Failed message indices for one pushed batch."""

    model_config = ConfigDict(frozen=True)

    errors: dict[int, ErrorInfo] = {}

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def lowest_failed_index(self) -> int | None:
        """Offsets may be committed up to, but excluding, this index."""
        return min(self.errors) if self.errors else None
