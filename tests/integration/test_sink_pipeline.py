"""End-to-end sink tests — schema evolution, conversion and writes together.

These tests exercise the WarehouseSink and KeyValueSink over the in-memory
clients: reconciling a table through schema versions, pushing mixed
batches and checking which offsets may be committed.
"""

from __future__ import annotations

import pytest

from depot.instrumentation import WAREHOUSE_OPERATION_TOTAL, RecordingInstrumentation
from depot.models.config import (
    KeyValueSettings,
    PartitionSettings,
    TtlType,
    WarehouseSettings,
)
from depot.models.outcomes import ErrorKind
from depot.models.schema import FieldKind, FieldSchema
from depot.models.warehouse import InsertError, ReconcileOutcome, TableIdentity
from depot.sinks.keyvalue import KeyValueSink
from depot.sinks.warehouse import WarehouseSink

SCHEMA_CLASS = "com.example.TestMessage"
TABLE = TableIdentity(namespace="bookings", name="booking_log")


class TestWarehouseLifecycle:
    """Schema versions arrive, rows follow, failures stay per message."""

    @pytest.fixture
    def instrumentation(self) -> RecordingInstrumentation:
        return RecordingInstrumentation()

    @pytest.fixture
    def sink(self, parser, warehouse_client, no_sleep_retry, instrumentation) -> WarehouseSink:
        settings = WarehouseSettings(
            dataset=TABLE.namespace,
            table=TABLE.name,
            partitioning=PartitionSettings(enabled=True, key="created_at", expiry_ms=-1),
            metadata_columns_types="topic=string,partition=integer,offset=integer",
            metadata_namespace="__kafka",
        )
        return WarehouseSink.from_settings(
            settings,
            parser,
            warehouse_client,
            SCHEMA_CLASS,
            max_workers=4,
            instrumentation=instrumentation,
            retry=no_sleep_retry,
        )

    def test_schema_evolution(
        self, sink, warehouse_client, test_message_schema, rate_limit_message, sleeps
    ):
        assert sink.on_schema_update(test_message_schema) is ReconcileOutcome.CREATED
        assert warehouse_client.tables[TABLE].partitioning.field == "created_at"

        evolved = test_message_schema.model_copy(
            update={
                "fields": (
                    *test_message_schema.fields,
                    FieldSchema(name="driver_id", kind=FieldKind.STRING),
                )
            }
        )
        warehouse_client.fail("update_table", rate_limit_message, times=2)

        assert sink.on_schema_update(evolved) is ReconcileOutcome.UPDATED
        assert sink.on_schema_update(evolved) is ReconcileOutcome.UNCHANGED
        assert warehouse_client.attempts["update_table"] == 3
        assert len(sleeps) == 2
        names = [c.name for c in warehouse_client.tables[TABLE].columns]
        assert names[-2:] == ["driver_id", "__kafka"]

    def test_mixed_batch(
        self, sink, warehouse_client, test_message_schema, test_message, make_sink_message, instrumentation
    ):
        sink.on_schema_update(test_message_schema)
        messages = [make_sink_message(dict(test_message, order_number=f"o-{i}"), offset=i) for i in range(6)]
        messages[2] = make_sink_message(b"corrupt", offset=2)
        # Rows 0..4 map to messages 0, 1, 3, 4, 5.
        warehouse_client.insert_errors = {
            3: [InsertError(reason="invalid", message="Value 9e99 is outside the allowed bounds")],
            4: [InsertError(reason="stopped")],
        }

        response = sink.push(messages)

        assert {i: e.kind for i, e in response.errors.items()} == {
            2: ErrorKind.DESERIALIZATION_ERROR,
            4: ErrorKind.INVALID_MESSAGE_ERROR,
            5: ErrorKind.SINK_RETRYABLE_ERROR,
        }
        assert response.lowest_failed_index == 2
        ((_, rows),) = warehouse_client.inserted
        assert [r.insert_id for r in rows] == [f"booking_1_{i}" for i in (0, 1, 3, 4, 5)]
        assert instrumentation.count(WAREHOUSE_OPERATION_TOTAL, api="table_insert_all") == 1


class TestKeyValueLifecycle:
    def test_hash_sink_with_ttl(self, parser, pipelined_client, make_sink_message):
        settings = KeyValueSettings(
            key_template="booking:%s,order_number",
            hashset_field_to_column_mapping={
                "order_details": "details",
                "customer_total_fare": "fare",
            },
            ttl_type=TtlType.DURATION,
            ttl_value=600,
        )
        sink = KeyValueSink.from_settings(settings, parser, pipelined_client, SCHEMA_CLASS, max_workers=2)
        messages = [
            make_sink_message(
                {"order_number": "o-1", "order_details": "two rides", "customer_total_fare": 1500},
                offset=0,
            ),
            make_sink_message({"order_number": "o-2", "order_details": "no fare"}, offset=1),
            make_sink_message(
                {"order_number": "o-3", "order_details": "one ride", "customer_total_fare": 900},
                offset=2,
            ),
        ]

        response = sink.push(messages)

        assert list(response.errors) == [1]
        assert response.errors[1].kind is ErrorKind.DESERIALIZATION_ERROR
        store = pipelined_client.store
        assert store.hashes == {
            "booking:o-1": {"details": "two rides", "fare": "1500"},
            "booking:o-3": {"details": "one ride", "fare": "900"},
        }
        assert store.expiries == {
            "booking:o-1": ("expire", 600),
            "booking:o-3": ("expire", 600),
        }
        assert len(pipelined_client.pipelines) == 1
