"""Shared test fixtures for depot: in-memory backend clients and message factories."""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from typing import Any

import pytest

from depot.errors import BackendError, DeserializationError, SchemaResolutionError
from depot.message import DictParsedMessage, SinkMessage
from depot.models.config import RetrySettings, SchemaMessageMode
from depot.models.schema import (
    Cardinality,
    Column,
    FieldKind,
    FieldSchema,
    MessageSchema,
)
from depot.models.warehouse import (
    InsertError,
    PartitionSpec,
    RemoteDatasetState,
    RemoteTableState,
    RowToInsert,
    TableIdentity,
)
from depot.retry import RateLimitRetry

RATE_LIMIT_MESSAGE = (
    "Error while updating table on callback:Exceeded rate limits: "
    "too many table update operations"
)


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


@pytest.fixture
def test_message_schema() -> MessageSchema:
    """Schema with a couple of strings, numbers and a nested location."""
    return MessageSchema(
        name="com.example.TestMessage",
        fields=(
            FieldSchema(name="order_number", kind=FieldKind.STRING),
            FieldSchema(name="order_details", kind=FieldKind.STRING),
            FieldSchema(name="amount", kind=FieldKind.FLOAT),
            FieldSchema(name="customer_total_fare", kind=FieldKind.INT64),
            FieldSchema(
                name="location",
                kind=FieldKind.MESSAGE,
                type_name=".com.example.Location",
                fields=(
                    FieldSchema(name="name", kind=FieldKind.STRING),
                    FieldSchema(name="lat", kind=FieldKind.DOUBLE),
                ),
            ),
            FieldSchema(
                name="created_at",
                kind=FieldKind.MESSAGE,
                type_name=".google.protobuf.Timestamp",
                fields=(
                    FieldSchema(name="seconds", kind=FieldKind.INT64),
                    FieldSchema(name="nanos", kind=FieldKind.INT32),
                ),
            ),
            FieldSchema(
                name="tags", kind=FieldKind.STRING, cardinality=Cardinality.REPEATED
            ),
        ),
    )


@pytest.fixture
def test_message() -> dict[str, Any]:
    return {
        "order_number": "test-order",
        "order_details": "ORDER-DETAILS",
        "amount": 12.3,
        "customer_total_fare": 2000,
        "location": {"name": "home", "lat": -6.2},
        "tags": ["a", "b"],
    }


# ---------------------------------------------------------------------------
# Message decoding
# ---------------------------------------------------------------------------


class FakeMessageParser:
    """Decodes ``SinkMessage.log_message`` dicts against one registered schema.

    A ``log_message`` of ``b"corrupt"`` fails deserialization; a message whose
    metadata carries ``unknown_schema=True`` fails schema resolution.
    """

    def __init__(self, schema: MessageSchema) -> None:
        self.schema = schema

    def get_schema(self, schema_class: str) -> MessageSchema:
        if schema_class != self.schema.name:
            raise SchemaResolutionError(f"Unknown schema class {schema_class}")
        return self.schema

    def parse(
        self, message: SinkMessage, mode: SchemaMessageMode, schema_class: str
    ) -> DictParsedMessage:
        if message.metadata.get("unknown_schema"):
            raise SchemaResolutionError("message has unknown fields")
        payload = message.log_key if mode is SchemaMessageMode.LOG_KEY else message.log_message
        if not isinstance(payload, dict):
            raise DeserializationError(f"cannot deserialize {payload!r}")
        return DictParsedMessage(payload)


@pytest.fixture
def parser(test_message_schema: MessageSchema) -> FakeMessageParser:
    return FakeMessageParser(test_message_schema)


@pytest.fixture
def make_sink_message() -> Callable[..., SinkMessage]:
    """Factory fixture: a SinkMessage at topic ``booking``, partition 1."""

    def _factory(
        log_message: Any = None, offset: int = 0, **metadata: Any
    ) -> SinkMessage:
        meta: dict[str, Any] = {"topic": "booking", "partition": 1, "offset": offset}
        meta.update(metadata)
        return SinkMessage(log_key=None, log_message=log_message, metadata=meta)

    return _factory


# ---------------------------------------------------------------------------
# Warehouse client
# ---------------------------------------------------------------------------


class FakeWarehouseClient:
    """Holds remote dataset/table state in memory and records mutating calls.

    ``fail(api, message, times)`` makes the next *times* calls of *api*
    raise ``BackendError(message)`` before the call takes effect.
    """

    MUTATING = ("create_dataset", "update_dataset_labels", "create_table", "update_table")

    def __init__(self) -> None:
        self.datasets: dict[str, RemoteDatasetState] = {}
        self.tables: dict[TableIdentity, RemoteTableState] = {}
        self.calls: list[str] = []
        self.attempts: dict[str, int] = {}
        self.inserted: list[tuple[TableIdentity, list[RowToInsert]]] = []
        self.insert_errors: dict[int, list[InsertError]] = {}
        self.insert_exception: Exception | None = None
        self._failures: dict[str, list[str]] = {}

    def fail(self, api: str, message: str, times: int = 1) -> None:
        self._failures.setdefault(api, []).extend([message] * times)

    def _attempt(self, api: str) -> None:
        self.attempts[api] = self.attempts.get(api, 0) + 1
        pending = self._failures.get(api)
        if pending:
            raise BackendError(pending.pop(0))
        self.calls.append(api)

    @property
    def mutating_calls(self) -> list[str]:
        return [c for c in self.calls if c in self.MUTATING]

    def get_dataset_state(self, dataset: str) -> RemoteDatasetState | None:
        return self.datasets.get(dataset)

    def create_dataset(self, dataset: str, location: str, labels: dict[str, str]) -> None:
        self._attempt("create_dataset")
        self.datasets[dataset] = RemoteDatasetState(location=location, labels=labels)

    def update_dataset_labels(self, dataset: str, labels: dict[str, str]) -> None:
        self._attempt("update_dataset_labels")
        self.datasets[dataset] = self.datasets[dataset].model_copy(update={"labels": labels})

    def get_table_state(self, table: TableIdentity) -> RemoteTableState | None:
        return self.tables.get(table)

    def create_table(
        self,
        table: TableIdentity,
        columns: Sequence[Column],
        partition_spec: PartitionSpec | None,
        labels: dict[str, str],
    ) -> None:
        self._attempt("create_table")
        self.tables[table] = RemoteTableState(
            columns=tuple(columns), partitioning=partition_spec, labels=labels
        )

    def update_table(
        self,
        table: TableIdentity,
        columns: Sequence[Column],
        partition_spec: PartitionSpec | None,
        labels: dict[str, str],
    ) -> None:
        self._attempt("update_table")
        current = self.tables[table]
        self.tables[table] = current.model_copy(
            update={
                "columns": tuple(columns),
                "labels": labels,
                "partitioning": partition_spec if current.partitioning else None,
            }
        )

    def insert_rows(
        self, table: TableIdentity, rows: Sequence[RowToInsert]
    ) -> dict[int, list[InsertError]]:
        if self.insert_exception is not None:
            raise self.insert_exception
        self.inserted.append((table, list(rows)))
        return dict(self.insert_errors)


@pytest.fixture
def warehouse_client() -> FakeWarehouseClient:
    return FakeWarehouseClient()


@pytest.fixture
def rate_limit_message() -> str:
    return RATE_LIMIT_MESSAGE


@pytest.fixture
def sleeps() -> list[float]:
    """Seconds passed to the injected sleep primitive."""
    return []


@pytest.fixture
def no_sleep_retry(sleeps: list[float]) -> RateLimitRetry:
    """Retry wrapper with the default budget that records sleeps instead of sleeping."""
    return RateLimitRetry(RetrySettings(), sleep=sleeps.append, rng=random.Random(7))


# ---------------------------------------------------------------------------
# Key-value clients
# ---------------------------------------------------------------------------


class FakeResponse:
    def __init__(self, pipeline: FakePipeline, value: Any = None, error: Exception | None = None) -> None:
        self._pipeline = pipeline
        self._value = value
        self._error = error

    def get(self) -> Any:
        if not self._pipeline.synced:
            raise RuntimeError("Please close pipeline or multi block before calling this method.")
        if self._error is not None:
            raise self._error
        return self._value


class FakeStore:
    """Shared command semantics for the fake key-value clients."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.lists: dict[str, list[str]] = {}
        self.hashes: dict[str, dict[str, str]] = {}
        self.expiries: dict[str, tuple[str, int]] = {}
        self.failing_keys: set[str] = set()
        self.failing_ttl_keys: set[str] = set()
        self.commands: list[tuple[Any, ...]] = []

    def _check(self, key: str) -> None:
        if key in self.failing_keys:
            raise ConnectionError(f"connection reset while writing {key}")

    def do_set(self, key: str, value: str) -> str:
        self._check(key)
        self.commands.append(("set", key, value))
        self.values[key] = value
        return "OK"

    def do_lpush(self, key: str, value: str) -> int:
        self._check(key)
        self.commands.append(("lpush", key, value))
        self.lists.setdefault(key, []).insert(0, value)
        return len(self.lists[key])

    def do_hset(self, key: str, field: str, value: str) -> int:
        self._check(key)
        self.commands.append(("hset", key, field, value))
        self.hashes.setdefault(key, {})[field] = value
        return 1

    def do_expire(self, kind: str, key: str, value: int) -> int:
        if key in self.failing_ttl_keys:
            raise ConnectionError(f"expire failed for {key}")
        self.commands.append((kind, key, value))
        self.expiries[key] = (kind, value)
        return 1


class FakePipeline:
    """Queues commands; results resolve only on ``sync()``."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store
        self._queue: list[tuple[Callable[[], Any], FakeResponse]] = []
        self.synced = False

    def _queue_command(self, fn: Callable[[], Any]) -> FakeResponse:
        response = FakeResponse(self)
        self._queue.append((fn, response))
        return response

    def set(self, key: str, value: str) -> FakeResponse:
        return self._queue_command(lambda: self._store.do_set(key, value))

    def lpush(self, key: str, value: str) -> FakeResponse:
        return self._queue_command(lambda: self._store.do_lpush(key, value))

    def hset(self, key: str, field: str, value: str) -> FakeResponse:
        return self._queue_command(lambda: self._store.do_hset(key, field, value))

    def expire(self, key: str, seconds: int) -> FakeResponse:
        return self._queue_command(lambda: self._store.do_expire("expire", key, seconds))

    def expireat(self, key: str, epoch_seconds: int) -> FakeResponse:
        return self._queue_command(lambda: self._store.do_expire("expireat", key, epoch_seconds))

    def sync(self) -> None:
        for fn, response in self._queue:
            try:
                response._value = fn()
            except Exception as exc:  # noqa: BLE001
                response._error = exc
        self.synced = True


class FakePipelinedClient:
    def __init__(self) -> None:
        self.store = FakeStore()
        self.pipelines: list[FakePipeline] = []

    def pipeline(self) -> FakePipeline:
        pipeline = FakePipeline(self.store)
        self.pipelines.append(pipeline)
        return pipeline


class FakeDirectClient:
    def __init__(self) -> None:
        self.store = FakeStore()

    def set(self, key: str, value: str) -> str:
        return self.store.do_set(key, value)

    def lpush(self, key: str, value: str) -> int:
        return self.store.do_lpush(key, value)

    def hset(self, key: str, field: str, value: str) -> int:
        return self.store.do_hset(key, field, value)

    def expire(self, key: str, seconds: int) -> int:
        return self.store.do_expire("expire", key, seconds)

    def expireat(self, key: str, epoch_seconds: int) -> int:
        return self.store.do_expire("expireat", key, epoch_seconds)


@pytest.fixture
def pipelined_client() -> FakePipelinedClient:
    return FakePipelinedClient()


@pytest.fixture
def direct_client() -> FakeDirectClient:
    return FakeDirectClient()
