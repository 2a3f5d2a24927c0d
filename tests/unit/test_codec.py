from __future__ import annotations

import json
from pathlib import Path

import pytest

from fhir_unbundle.errors import DecodeError, ReadError
from fhir_unbundle.infrastructure.fhir_codec import (
    decode_document,
    decode_resource,
    encode_resource,
    is_bundle,
    read_input,
)

EXPECTED_ENTRY_COUNT = 4


def test_decode_bundle_returns_bundle_with_entries(bundle_file: Path) -> None:
    resource = decode_resource(bundle_file.read_bytes())

    assert is_bundle(resource)
    assert resource.get_resource_type() == "Bundle"
    assert len(resource.entry) == EXPECTED_ENTRY_COUNT
    assert resource.entry[1].resource is None
    assert resource.entry[2].resource.get_resource_type() == "Patient"


def test_decode_single_resource_is_not_a_bundle(sample_entries) -> None:
    patient = sample_entries[2]["resource"]

    resource = decode_resource(json.dumps(patient).encode("utf-8"))

    assert not is_bundle(resource)
    assert resource.get_resource_type() == "Patient"
    assert resource.id == "abc123"


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"{not json",
        b"[1, 2, 3]",
        b'"Bundle"',
        b'{"id": "no-type"}',
        b'{"resourceType": 42}',
        b'{"resourceType": "NotAResource", "id": "x"}',
        b'{"resourceType": "Patient", "active": "sometimes"}',
    ],
    ids=[
        "empty",
        "truncated",
        "array",
        "string",
        "missing-type",
        "non-string-type",
        "unknown-type",
        "invalid-field",
    ],
)
def test_decode_rejects_malformed_input(raw: bytes) -> None:
    with pytest.raises(DecodeError):
        decode_resource(raw)


def test_decode_rejects_datatype_documents() -> None:
    with pytest.raises(DecodeError):
        decode_resource(b'{"resourceType": "HumanName", "family": "Doe"}')


def test_encode_is_pretty_fhir_json(sample_entries) -> None:
    patient = sample_entries[2]["resource"]
    resource = decode_resource(json.dumps(patient).encode("utf-8"))

    data = encode_resource(resource)

    assert data.startswith(b"{\n  ")
    assert json.loads(data) == patient


def test_read_input_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ReadError) as excinfo:
        read_input(tmp_path / "missing.json")

    assert excinfo.value.code == "read_error"
    assert excinfo.value.details["path"].endswith("missing.json")


def test_read_input_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(ReadError):
        read_input(tmp_path)


class TestUnsupportedEntries:
    def test_unknown_entry_type_is_dropped_in_place(self, bundle_factory, sample_entries) -> None:
        payload = bundle_factory(
            [
                sample_entries[2],
                {"fullUrl": "urn:uuid:x", "resource": {"resourceType": "Bogus", "id": "x"}},
                sample_entries[3],
            ]
        )

        decoded = decode_document(json.dumps(payload).encode("utf-8"))

        assert decoded.unsupported == {1: "Bogus"}
        assert decoded.resource.entry[1].resource is None
        assert decoded.resource.entry[1].fullUrl == "urn:uuid:x"
        assert decoded.resource.entry[2].resource.get_resource_type() == "Observation"

    def test_r4_types_missing_from_r4b_are_dropped(self, bundle_factory, sample_entries) -> None:
        payload = bundle_factory(
            [
                {"resource": {"resourceType": "MedicinalProduct", "id": "mp-1"}},
                sample_entries[2],
                {"resource": {"resourceType": "RiskEvidenceSynthesis", "id": "res-1"}},
            ]
        )

        decoded = decode_document(json.dumps(payload).encode("utf-8"))

        assert decoded.unsupported == {0: "MedicinalProduct", 2: "RiskEvidenceSynthesis"}
        assert decoded.resource.entry[1].resource.id == "abc123"

    def test_supported_bundle_reports_nothing_dropped(self, bundle_file: Path) -> None:
        assert decode_document(bundle_file.read_bytes()).unsupported == {}

    def test_unknown_contained_type_is_a_decode_error(self) -> None:
        raw = json.dumps(
            {
                "resourceType": "Patient",
                "id": "p",
                "contained": [{"resourceType": "Bogus", "id": "x"}],
            }
        ).encode("utf-8")

        with pytest.raises(DecodeError):
            decode_resource(raw)


def test_encode_preserves_instant_values() -> None:
    raw = json.dumps(
        {
            "resourceType": "Patient",
            "id": "p",
            "meta": {"lastUpdated": "2020-01-01T10:00:00.120+01:00"},
        }
    ).encode("utf-8")
    original = decode_resource(raw)

    again = decode_resource(encode_resource(original))

    # Fractional seconds may be re-rendered; the instant itself must not move.
    assert again.meta.lastUpdated == original.meta.lastUpdated
