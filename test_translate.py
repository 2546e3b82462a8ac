#!/usr/bin/env python3
"""Tests for translating dataset metadata and extract configs to wire requests."""

import dataclasses
import sys
from datetime import datetime, timedelta

import pytest

from bqclient.errors import ValidationError
from bqclient.jobs import ExtractConfig
from bqclient.models import (
    Compression,
    DatasetMetadata,
    DestinationFormat,
    GCSReference,
    Table,
)
from bqclient.translate import DATASET_FIELDS, dataset_to_wire, duration_to_ms, extract_to_wire


def test_none_translates_to_empty_request():
    assert dataset_to_wire(None) == {}
    assert extract_to_wire(None) == {}
    assert dataset_to_wire(DatasetMetadata()) == {}
    assert extract_to_wire(ExtractConfig()) == {}


def test_dataset_name_only():
    assert dataset_to_wire(DatasetMetadata(name="name")) == {"friendlyName": "name"}


def test_dataset_writable_fields():
    metadata = DatasetMetadata(
        name="name",
        description="desc",
        default_table_expiration=timedelta(hours=1),
        location="EU",
        labels={"x": "y"},
    )
    assert dataset_to_wire(metadata) == {
        "friendlyName": "name",
        "description": "desc",
        "defaultTableExpirationMs": 60 * 60 * 1000,
        "location": "EU",
        "labels": {"x": "y"},
    }


def test_empty_values_that_were_set_are_sent():
    wire = dataset_to_wire(DatasetMetadata(name="", default_table_expiration=timedelta(0), labels={}))
    assert wire == {"friendlyName": "", "defaultTableExpirationMs": 0, "labels": {}}


def test_duration_conversion_is_exact():
    assert duration_to_ms(timedelta(hours=1)) == 3_600_000
    assert duration_to_ms(timedelta(days=30, milliseconds=7)) == 2_592_000_007
    assert isinstance(duration_to_ms(timedelta(hours=1)), int)


def test_read_only_fields_are_rejected():
    values = {
        "full_id": "p:d",
        "creation_time": datetime(2024, 1, 1),
        "last_modified_time": datetime(2024, 1, 2),
        "etag": "abc",
    }
    for name, value in values.items():
        with pytest.raises(ValidationError) as excinfo:
            dataset_to_wire(DatasetMetadata(name="n", **{name: value}))
        assert excinfo.value.field == name
        assert name in str(excinfo.value)


def test_zero_read_only_fields_are_accepted():
    assert dataset_to_wire(DatasetMetadata(name="n", full_id="", etag="")) == {"friendlyName": "n"}


def test_every_metadata_field_has_a_writability_entry():
    names = {f.name for f in dataclasses.fields(DatasetMetadata)}
    assert names == set(DATASET_FIELDS)


def test_labels_are_copied():
    labels = {"x": "y"}
    wire = dataset_to_wire(DatasetMetadata(labels=labels))
    labels["z"] = "w"
    assert wire["labels"] == {"x": "y"}


def test_extract_config():
    dst = GCSReference(
        uris=["gs://bucket/a-*.csv", "gs://bucket/b-*.csv"],
        compression=Compression.GZIP,
        destination_format=DestinationFormat.CSV,
        field_delimiter="\t",
    )
    config = ExtractConfig(src=Table("p", "d", "t"), dst=dst, disable_header=True)
    wire = extract_to_wire(config)
    assert wire == {
        "destinationUris": ["gs://bucket/a-*.csv", "gs://bucket/b-*.csv"],
        "compression": "GZIP",
        "destinationFormat": "CSV",
        "fieldDelimiter": "\t",
        "sourceTable": {"projectId": "p", "datasetId": "d", "tableId": "t"},
        "printHeader": False,
    }
    dst.uris.append("gs://bucket/c-*.csv")
    assert len(wire["destinationUris"]) == 2


def test_extract_defaults_are_left_to_the_server():
    config = ExtractConfig(src=Table("p", "d", "t"), dst=GCSReference.from_uris("gs://bucket/out"))
    wire = extract_to_wire(config)
    assert wire == {
        "destinationUris": ["gs://bucket/out"],
        "sourceTable": {"projectId": "p", "datasetId": "d", "tableId": "t"},
    }
    assert "printHeader" not in wire


def test_extract_json_format_name():
    dst = GCSReference(uris=["gs://b/o"], destination_format=DestinationFormat.JSON)
    assert extract_to_wire(ExtractConfig(src=Table("p", "d", "t"), dst=dst))["destinationFormat"] == "NEWLINE_DELIMITED_JSON"


def test_extract_requires_a_destination_uri():
    with pytest.raises(ValidationError) as excinfo:
        extract_to_wire(ExtractConfig(src=Table("p", "d", "t"), dst=GCSReference()))
    assert excinfo.value.field == "dst.uris"


def test_extract_without_destination_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        extract_to_wire(ExtractConfig(job_id="j", src=Table("p", "d", "t")))
    assert excinfo.value.field == "dst.uris"


def test_extract_without_source_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        extract_to_wire(ExtractConfig(job_id="j", dst=GCSReference.from_uris("gs://b/o")))
    assert excinfo.value.field == "src"


def main():
    """Run all tests."""
    tests = [
        ("None input", test_none_translates_to_empty_request),
        ("Dataset name only", test_dataset_name_only),
        ("Dataset writable fields", test_dataset_writable_fields),
        ("Set empty values", test_empty_values_that_were_set_are_sent),
        ("Duration conversion", test_duration_conversion_is_exact),
        ("Read-only fields", test_read_only_fields_are_rejected),
        ("Zero read-only fields", test_zero_read_only_fields_are_accepted),
        ("Writability table", test_every_metadata_field_has_a_writability_entry),
        ("Labels copied", test_labels_are_copied),
        ("Extract config", test_extract_config),
        ("Extract defaults", test_extract_defaults_are_left_to_the_server),
        ("Extract JSON format", test_extract_json_format_name),
        ("Extract destination", test_extract_requires_a_destination_uri),
        ("Extract without destination", test_extract_without_destination_is_rejected),
        ("Extract without source", test_extract_without_source_is_rejected),
    ]

    failed = 0
    for test_name, test_func in tests:
        try:
            test_func()
            print(f"✓ {test_name}")
        except AssertionError as e:
            print(f"✗ {test_name} FAILED: {e}")
            failed += 1
        except Exception as e:
            print(f"✗ {test_name} ERROR: {e}")
            failed += 1

    print(f"Results: {len(tests) - failed}/{len(tests)} tests passed")
    sys.exit(1 if failed else 0)


if __name__ == '__main__':
    main()
