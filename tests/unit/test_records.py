"""Unit tests for task record loading and walking."""

from __future__ import annotations

import json

import pytest

from fieldqc.ingestion.records import RecordLoadError, find_field, iter_fields, load_record
from fieldqc.values import ValueKind


def test_iter_fields_paths(sample_record):
    """Test fields are walked depth-first with dotted paths."""
    paths = [ref.dotted_path for ref in iter_fields(sample_record)]

    assert paths[:3] == ["instruction_id", "steps", "steps.0"]
    assert "steps.1.rect.width" in paths
    assert paths[-1] == "metadata.annotator"
    # Parents come before their children
    assert paths.index("steps.1.rect") < paths.index("steps.1.rect.top")


def test_array_elements_are_keyed_by_index(sample_record):
    """Test array elements use their index as key."""
    refs = {ref.dotted_path: ref for ref in iter_fields(sample_record)}
    step = refs["steps.1"]
    assert step.key == "1"
    assert step.kind is ValueKind.OBJECT


def test_scalar_record_has_no_fields():
    """Test a scalar record yields nothing."""
    assert list(iter_fields("just a string")) == []


def test_find_field(sample_record):
    """Test a dotted path resolves to its field."""
    ref = find_field(sample_record, "steps.1.rect")
    assert ref.key == "rect"
    assert ref.path == ("steps", "1", "rect")
    assert ref.value["width"] == -5


@pytest.mark.parametrize("path", ["steps.9", "steps.x", "metadata.missing", "", "instruction_id.a"])
def test_find_field_missing(sample_record, path):
    """Test unresolvable paths raise KeyError."""
    with pytest.raises(KeyError):
        find_field(sample_record, path)


def test_load_record(tmp_path, sample_record):
    """Test a JSON record loads from disk."""
    path = tmp_path / "record.json"
    path.write_text(json.dumps(sample_record))
    assert load_record(path) == sample_record


def test_load_record_errors(tmp_path):
    """Test missing, malformed and undecodable files raise RecordLoadError."""
    with pytest.raises(RecordLoadError, match="not found"):
        load_record(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(RecordLoadError, match="Invalid JSON"):
        load_record(bad)

    not_utf8 = tmp_path / "latin1.json"
    not_utf8.write_bytes(b'{"title": "\xff\xfe"}')
    with pytest.raises(RecordLoadError, match="Invalid JSON"):
        load_record(not_utf8)
