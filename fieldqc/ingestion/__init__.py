"""Task record ingestion."""

from fieldqc.ingestion.records import (
    FieldRef,
    RecordLoadError,
    find_field,
    iter_fields,
    load_record,
)

__all__ = ["FieldRef", "RecordLoadError", "find_field", "iter_fields", "load_record"]
