"""Batch conversion and write-result merging."""

from depot.conversion.converter import BatchConverter, EntryBuilder
from depot.conversion.merge import merge_write_results, successful_entries

__all__ = ["BatchConverter", "EntryBuilder", "merge_write_results", "successful_entries"]
