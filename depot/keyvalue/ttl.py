"""TTL policy construction and application."""

from __future__ import annotations

from typing import Any

from depot.errors import ConfigurationError
from depot.keyvalue.client import KeyValueCommands
from depot.models.config import TtlType
from depot.models.entries import DurationTtl, ExactTimeTtl, NoTtl, TtlKind, TtlPolicy


def ttl_policy(ttl_type: TtlType, value: int) -> TtlPolicy:
    """Build the policy for configured *ttl_type* and *value*."""
    if ttl_type is TtlType.DISABLE:
        return NoTtl()
    if value <= 0:
        raise ConfigurationError(
            f"Provide a positive TTL value for ttl type {ttl_type.value}, got {value}"
        )
    if ttl_type is TtlType.DURATION:
        return DurationTtl(seconds=value)
    return ExactTimeTtl(epoch_seconds=value)


def apply_ttl(commands: KeyValueCommands, key: str, ttl: TtlPolicy) -> Any:
    """Issue the expiry command for *ttl*; returns the client's response or ``None``."""
    if ttl.kind is TtlKind.DURATION:
        return commands.expire(key, ttl.seconds)
    if ttl.kind is TtlKind.EXACT_TIME:
        return commands.expireat(key, ttl.epoch_seconds)
    return None
