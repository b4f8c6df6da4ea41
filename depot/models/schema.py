"""Field schema and column models.

``FieldSchema`` is the backend-agnostic description of a message field as
produced by the message decoder.  ``Column`` is its warehouse-native
counterpart.  Both are frozen, so a schema version built once can be
shared across worker threads.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class Cardinality(str, Enum):
    """How many values a field carries."""

    OPTIONAL = "optional"
    REQUIRED = "required"
    REPEATED = "repeated"


class FieldKind(str, Enum):
    """Scalar or nested kind of a message field (protobuf descriptor types)."""

    DOUBLE = "double"
    FLOAT = "float"
    INT64 = "int64"
    UINT64 = "uint64"
    INT32 = "int32"
    UINT32 = "uint32"
    FIXED64 = "fixed64"
    FIXED32 = "fixed32"
    SFIXED32 = "sfixed32"
    SFIXED64 = "sfixed64"
    SINT32 = "sint32"
    SINT64 = "sint64"
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"
    ENUM = "enum"
    MESSAGE = "message"
    GROUP = "group"


class FieldSchema(BaseModel):
    """A node of the typed field tree.

    ``type_name`` is the fully-qualified declared type for message and enum
    fields (e.g. ``.google.protobuf.Timestamp``) and is empty for scalars.
    ``fields`` holds the children of a nested field.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    kind: FieldKind
    cardinality: Cardinality = Cardinality.OPTIONAL
    type_name: str = ""
    fields: tuple[FieldSchema, ...] = ()

    @property
    def is_nested(self) -> bool:
        return self.kind in (FieldKind.MESSAGE, FieldKind.GROUP)


class MessageSchema(BaseModel):
    """The field schema of one message class."""

    model_config = ConfigDict(frozen=True)

    name: str
    fields: tuple[FieldSchema, ...] = ()

    def field(self, path: str) -> FieldSchema | None:
        """Return the field at a dotted *path*, or ``None`` if absent."""
        candidates = self.fields
        found: FieldSchema | None = None
        for part in path.split("."):
            found = next((f for f in candidates if f.name == part), None)
            if found is None:
                return None
            candidates = found.fields
        return found

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MessageSchema:
        """Build a schema from its JSON form (``{"name": ..., "fields": [...]}``)."""
        return cls.model_validate(data)


# ---------------------------------------------------------------------------
# Warehouse columns
# ---------------------------------------------------------------------------


class ColumnMode(str, Enum):
    NULLABLE = "NULLABLE"
    REQUIRED = "REQUIRED"
    REPEATED = "REPEATED"


class ColumnType(str, Enum):
    """Warehouse column types (legacy SQL names)."""

    BYTES = "BYTES"
    STRING = "STRING"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    TIMESTAMP = "TIMESTAMP"
    DATE = "DATE"
    RECORD = "RECORD"


class Column(BaseModel):
    """A warehouse-native column; equality is structural over the whole subtree."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ColumnType
    mode: ColumnMode = ColumnMode.NULLABLE
    fields: tuple[Column, ...] = ()

    def walk(self):
        """Yield this column and every descendant, depth first."""
        yield self
        for sub in self.fields:
            yield from sub.walk()

    @property
    def depth(self) -> int:
        if not self.fields:
            return 1
        return 1 + max(sub.depth for sub in self.fields)
