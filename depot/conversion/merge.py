"""Fold write results back onto message outcomes."""

from __future__ import annotations

from collections.abc import Sequence

from depot.models.entries import Entry
from depot.models.outcomes import ErrorInfo, ErrorKind, Outcome, SinkResponse, WriteResult


def successful_entries(outcomes: Sequence[Outcome]) -> list[Entry]:
    """Entries of the successful outcomes, in outcome order."""
    return [outcome.entry for outcome in outcomes if outcome.success and outcome.entry is not None]


def merge_write_results(
    outcomes: Sequence[Outcome], write_results: Sequence[WriteResult]
) -> SinkResponse:
    """Build the sink response for a batch.

    *write_results* must be aligned with ``successful_entries(outcomes)``.
    A message fails if any of its outcomes or any write of its entries
    failed; the first error recorded for an index is kept.
    """
    written = [outcome for outcome in outcomes if outcome.success]
    if len(written) != len(write_results):
        raise ValueError(
            f"Got {len(write_results)} write results for {len(written)} written entries"
        )

    errors: dict[int, ErrorInfo] = {}
    for outcome in outcomes:
        if not outcome.success and outcome.error is not None:
            errors.setdefault(outcome.index, outcome.error)
    for outcome, result in zip(written, write_results):
        if not result.success:
            errors.setdefault(
                outcome.index,
                ErrorInfo(
                    kind=result.error_kind or ErrorKind.WRITE_ERROR,
                    message=result.error_message,
                ),
            )
    return SinkResponse(errors=errors)
