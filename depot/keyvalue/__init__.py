"""Key-value backend: key templating, entry builders, TTL and writers."""

from depot.keyvalue.builders import (
    HashFieldSetBuilder,
    ListPushBuilder,
    ValueSetBuilder,
    entry_builder_for,
)
from depot.keyvalue.templating import parse_template
from depot.keyvalue.writer import DirectWriter, PipelinedWriter

__all__ = [
    "parse_template",
    "ValueSetBuilder",
    "ListPushBuilder",
    "HashFieldSetBuilder",
    "entry_builder_for",
    "PipelinedWriter",
    "DirectWriter",
]
