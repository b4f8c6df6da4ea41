"""Warehouse backend: column mapping, schema reconciliation and row inserts."""

from depot.warehouse.column_mapper import DEFAULT_TYPE_MAPPING, ColumnMapper, TypeMapping
from depot.warehouse.reconciler import SchemaReconciler
from depot.warehouse.rows import TableRowBuilder
from depot.warehouse.writer import WarehouseWriter

__all__ = [
    "ColumnMapper",
    "TypeMapping",
    "DEFAULT_TYPE_MAPPING",
    "SchemaReconciler",
    "TableRowBuilder",
    "WarehouseWriter",
]
