"""Tests for runtime config — env-driven settings."""

from __future__ import annotations

import os

import pytest
from pydantic import ValidationError

from depot.config import DepotConfig
from depot.models.config import (
    KeyValueDataType,
    KeyValueDeployment,
    SchemaMessageMode,
    TtlType,
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep a developer's .env and DEPOT_* variables out of these tests."""
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("DEPOT_"):
            monkeypatch.delenv(name)


class TestDepotConfig:
    def test_defaults(self):
        config = DepotConfig()
        assert config.log_level == "INFO"
        assert config.conversion_workers == 1
        assert config.schema_message_mode is SchemaMessageMode.LOG_MESSAGE

    def test_unknown_variables_are_ignored(self, monkeypatch):
        monkeypatch.setenv("DEPOT_ENVIRONMENT", "production")
        assert not hasattr(DepotConfig(), "environment")

    def test_warehouse_defaults(self):
        warehouse = DepotConfig().warehouse
        assert warehouse.dataset_location == "asia-southeast1"
        assert warehouse.partitioning.enabled is False
        assert warehouse.partitioning.expiry_ms == -1
        assert warehouse.retry.max_attempts == 10
        assert warehouse.retry.max_sleep_ms == 10_000
        assert warehouse.row_insert_id_enabled is True

    def test_keyvalue_defaults(self):
        keyvalue = DepotConfig().keyvalue
        assert keyvalue.data_type is KeyValueDataType.HASHSET
        assert keyvalue.deployment is KeyValueDeployment.STANDALONE
        assert keyvalue.ttl_type is TtlType.DISABLE

    def test_schema_class_follows_mode(self):
        config = DepotConfig(
            schema_proto_message_class="com.example.Booking",
            schema_proto_key_class="com.example.BookingKey",
        )
        assert config.schema_class == "com.example.Booking"
        keyed = config.model_copy(update={"schema_message_mode": SchemaMessageMode.LOG_KEY})
        assert keyed.schema_class == "com.example.BookingKey"

    def test_worker_count_must_be_positive(self):
        with pytest.raises(ValidationError):
            DepotConfig(conversion_workers=0)


class TestEnvironmentOverrides:
    def test_flat_variable(self, monkeypatch):
        monkeypatch.setenv("DEPOT_LOG_LEVEL", "DEBUG")
        assert DepotConfig().log_level == "DEBUG"

    def test_nested_variables(self, monkeypatch):
        monkeypatch.setenv("DEPOT_WAREHOUSE__DATASET", "bookings")
        monkeypatch.setenv("DEPOT_WAREHOUSE__PARTITIONING__ENABLED", "true")
        monkeypatch.setenv("DEPOT_WAREHOUSE__PARTITIONING__KEY", "event_timestamp")
        monkeypatch.setenv("DEPOT_KEYVALUE__TTL_TYPE", "duration")
        monkeypatch.setenv("DEPOT_KEYVALUE__TTL_VALUE", "3600")

        config = DepotConfig()

        assert config.warehouse.dataset == "bookings"
        assert config.warehouse.partitioning.enabled is True
        assert config.warehouse.partitioning.key == "event_timestamp"
        assert config.keyvalue.ttl_type is TtlType.DURATION
        assert config.keyvalue.ttl_value == 3600

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("DEPOT_LOG_LEVEL=WARNING\n", encoding="utf-8")
        assert DepotConfig().log_level == "WARNING"
