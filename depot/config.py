"""Runtime configuration — env-driven.

Reads ``DEPOT_*`` environment variables and an optional ``.env`` file.
Nested settings use ``__`` as delimiter.

Examples
--------
Override via environment::

    export DEPOT_LOG_LEVEL=DEBUG
    export DEPOT_SCHEMA_PROTO_MESSAGE_CLASS=com.example.Booking
    export DEPOT_WAREHOUSE__DATASET=bookings
    export DEPOT_WAREHOUSE__PARTITIONING__ENABLED=true
    export DEPOT_KEYVALUE__KEY_TEMPLATE="booking-%s,order_number"
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from depot.models.config import KeyValueSettings, SchemaMessageMode, WarehouseSettings


class DepotConfig(BaseSettings):
    """Sink configuration with environment variable overrides."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DEPOT_",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Message decoding
    schema_message_mode: SchemaMessageMode = SchemaMessageMode.LOG_MESSAGE
    schema_proto_message_class: str = ""
    schema_proto_key_class: str = ""

    # Batch conversion worker pool
    conversion_workers: int = Field(default=1, ge=1)

    warehouse: WarehouseSettings = WarehouseSettings()
    keyvalue: KeyValueSettings = KeyValueSettings()

    @property
    def schema_class(self) -> str:
        """The message class the decoder should resolve for this mode."""
        if self.schema_message_mode is SchemaMessageMode.LOG_KEY:
            return self.schema_proto_key_class
        return self.schema_proto_message_class
