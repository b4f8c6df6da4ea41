"""Backend write units and TTL policies.

Entries are a tagged variant keyed on ``kind``; writers switch on the tag
rather than dispatching through per-entry methods, so each write shape
keeps its fields explicit and all transport logic stays in the writers.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# TTL policies
# ---------------------------------------------------------------------------


class TtlKind(str, Enum):
    NONE = "none"
    DURATION = "duration"
    EXACT_TIME = "exact_time"


class NoTtl(BaseModel):
    """Keys never expire."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[TtlKind.NONE] = TtlKind.NONE


class DurationTtl(BaseModel):
    """Expire the key *seconds* after the write."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[TtlKind.DURATION] = TtlKind.DURATION
    seconds: int = Field(gt=0)


class ExactTimeTtl(BaseModel):
    """Expire the key at a fixed unix time."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[TtlKind.EXACT_TIME] = TtlKind.EXACT_TIME
    epoch_seconds: int = Field(gt=0)


TtlPolicy = Annotated[
    Union[NoTtl, DurationTtl, ExactTimeTtl], Field(discriminator="kind")
]


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


class EntryKind(str, Enum):
    VALUE_SET = "value_set"
    LIST_PUSH = "list_push"
    HASH_FIELD_SET = "hash_field_set"
    TABLE_ROW = "table_row"


class ValueSetEntry(BaseModel):
    """``SET key value``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[EntryKind.VALUE_SET] = EntryKind.VALUE_SET
    key: str
    value: str
    ttl: TtlPolicy = NoTtl()

    def __str__(self) -> str:
        return f"ValueSetEntry: Key {self.key}, Value {self.value}"


class ListPushEntry(BaseModel):
    """``LPUSH key value``.

    ``index`` is the originating message's batch position; two messages
    pushing the same value to the same list are otherwise equal.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal[EntryKind.LIST_PUSH] = EntryKind.LIST_PUSH
    key: str
    value: str
    index: int
    ttl: TtlPolicy = NoTtl()

    def __str__(self) -> str:
        return f"ListPushEntry: Key {self.key}, Value {self.value}"


class HashFieldSetEntry(BaseModel):
    """``HSET key field value``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[EntryKind.HASH_FIELD_SET] = EntryKind.HASH_FIELD_SET
    key: str
    field: str
    value: str
    ttl: TtlPolicy = NoTtl()

    def __str__(self) -> str:
        return f"HashFieldSetEntry: Key {self.key}, Field {self.field}, Value {self.value}"


class TableRowEntry(BaseModel):
    """One warehouse row: column name -> value, plus an optional insert id."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[EntryKind.TABLE_ROW] = EntryKind.TABLE_ROW
    columns: dict[str, Any]
    insert_id: str | None = None
    ttl: TtlPolicy = NoTtl()


KeyValueEntry = Union[ValueSetEntry, ListPushEntry, HashFieldSetEntry]

Entry = Annotated[
    Union[ValueSetEntry, ListPushEntry, HashFieldSetEntry, TableRowEntry],
    Field(discriminator="kind"),
]
