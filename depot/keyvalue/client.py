"""Key-value store client contracts.

Two topologies are supported:

* ``PipelinedClient`` hands out a pipeline whose commands return response
  handles; handles can only be read after ``sync()``.
* ``DirectClient`` executes each command as its own network call and may
  raise on transport failure.

The command names follow the Redis command set, so redis-py's
``Redis.pipeline()`` and ``RedisCluster`` fit with a thin adapter.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KeyValueCommands(Protocol):
    def set(self, key: str, value: str) -> Any:
        ...

    def lpush(self, key: str, value: str) -> Any:
        ...

    def hset(self, key: str, field: str, value: str) -> Any:
        ...

    def expire(self, key: str, seconds: int) -> Any:
        ...

    def expireat(self, key: str, epoch_seconds: int) -> Any:
        ...


@runtime_checkable
class ResponseHandle(Protocol):
    def get(self) -> Any:
        """Return the command's reply; raises if the command failed."""
        ...


@runtime_checkable
class Pipeline(KeyValueCommands, Protocol):
    def sync(self) -> None:
        """Flush every queued command and resolve their handles."""
        ...


@runtime_checkable
class PipelinedClient(Protocol):
    def pipeline(self) -> Pipeline:
        ...


@runtime_checkable
class DirectClient(KeyValueCommands, Protocol):
    pass
