"""Sink configuration models.

These are plain frozen models; ``depot.config.DepotConfig`` nests them and
fills them from ``DEPOT_*`` environment variables.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SchemaMessageMode(str, Enum):
    """Whether the sink decodes the log message or the log key."""

    LOG_MESSAGE = "log_message"
    LOG_KEY = "log_key"


# ---------------------------------------------------------------------------
# Warehouse
# ---------------------------------------------------------------------------


class PartitionSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    key: str = ""
    expiry_ms: int = -1  # <= 0 means partitions never expire


class RetrySettings(BaseModel):
    """Bounded randomized retry for rate-limited mutating calls."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=10, ge=1)
    max_sleep_ms: int = Field(default=10_000, ge=0)


class WarehouseSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    dataset: str = ""
    table: str = ""
    dataset_location: str = "asia-southeast1"
    dataset_labels: dict[str, str] = {}
    table_labels: dict[str, str] = {}
    partitioning: PartitionSettings = PartitionSettings()
    add_metadata: bool = True
    metadata_columns_types: str = ""  # "topic=string,partition=integer,offset=integer"
    metadata_namespace: str = ""
    row_insert_id_enabled: bool = True
    retry: RetrySettings = RetrySettings()


# ---------------------------------------------------------------------------
# Key-value store
# ---------------------------------------------------------------------------


class KeyValueDataType(str, Enum):
    KEYVALUE = "keyvalue"
    LIST = "list"
    HASHSET = "hashset"


class KeyValueDeployment(str, Enum):
    """``standalone`` writes through a pipeline, ``cluster`` call by call."""

    STANDALONE = "standalone"
    CLUSTER = "cluster"


class TtlType(str, Enum):
    DISABLE = "disable"
    DURATION = "duration"
    EXACT_TIME = "exact_time"


class KeyValueSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    data_type: KeyValueDataType = KeyValueDataType.HASHSET
    deployment: KeyValueDeployment = KeyValueDeployment.STANDALONE
    key_template: str = ""
    value_field_name: str = ""
    list_field_name: str = ""
    hashset_field_to_column_mapping: dict[str, str] = {}
    ttl_type: TtlType = TtlType.DISABLE
    ttl_value: int = 0
