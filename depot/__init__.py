"""depot: sink-connector core.

Converts batches of schema-tagged messages into warehouse rows or
key-value writes:
  - Field schema -> warehouse column mapping with well-known type aliases
  - Remote dataset/table reconciliation (create / update / no-op) with
    bounded randomized retry on rate limits
  - Key-templated value, list and hash entries with TTL policies
  - Per-message outcomes that keep the original batch index, so one bad
    record never drops a batch
"""

__version__ = "0.1.0"

from depot.conversion.converter import BatchConverter
from depot.sinks.keyvalue import KeyValueSink
from depot.sinks.warehouse import WarehouseSink
from depot.warehouse.column_mapper import ColumnMapper
from depot.warehouse.reconciler import SchemaReconciler

__all__ = [
    "BatchConverter",
    "ColumnMapper",
    "SchemaReconciler",
    "KeyValueSink",
    "WarehouseSink",
    "__version__",
]
