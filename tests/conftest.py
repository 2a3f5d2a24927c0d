"""
Pytest configuration for fhir-unbundle.

Provides fixtures for:
- Isolated settings (no leaking env vars or cached Settings between tests)
- Small FHIR R4 bundles written to a temporary directory
- An existing, empty output directory
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List

import pytest

from fhir_unbundle.config import get_settings

ORGANIZATION: Dict[str, Any] = {
    "resourceType": "Organization",
    "id": "org-1",
    "name": "Good Health Clinic",
}

PATIENT: Dict[str, Any] = {
    "resourceType": "Patient",
    "id": "abc123",
    "meta": {"versionId": "1"},
    "active": True,
    "name": [{"family": "Doe", "given": ["Jane"]}],
    "gender": "female",
    "birthDate": "1980-02-01",
}

OBSERVATION: Dict[str, Any] = {
    "resourceType": "Observation",
    "id": "obs-1",
    "status": "final",
    "code": {"text": "General appearance"},
    "subject": {"reference": "Patient/abc123"},
    "valueString": "well",
}


def make_bundle(entries: List[Dict[str, Any]], bundle_type: str = "collection") -> Dict[str, Any]:
    bundle: Dict[str, Any] = {"resourceType": "Bundle", "id": "bundle-1", "type": bundle_type}
    if entries:
        bundle["entry"] = entries
    return bundle


def bundle_entries() -> List[Dict[str, Any]]:
    """Four entries; index 1 carries no resource."""
    return [
        {"fullUrl": "urn:uuid:org-1", "resource": ORGANIZATION},
        {"request": {"method": "DELETE", "url": "Patient/old"}},
        {"fullUrl": "urn:uuid:abc123", "resource": PATIENT},
        {"fullUrl": "urn:uuid:obs-1", "resource": OBSERVATION},
    ]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Clear UNBUNDLE_* / LOG_* env vars and the cached Settings around each test.
    """
    for name in ("UNBUNDLE_OUTPUT_DIR", "UNBUNDLE_FAIL_FAST", "LOG_LEVEL", "LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], Path]:
    """
    Write a JSON document into the temporary input directory and return its path.
    """
    input_dir = tmp_path / "input"
    input_dir.mkdir(exist_ok=True)

    def _write(name: str, payload: Any) -> Path:
        path = input_dir / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def bundle_file(write_json: Callable[[str, Any], Path]) -> Path:
    return write_json("patient-bundle.json", make_bundle(bundle_entries()))


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def bundle_factory() -> Callable[..., Dict[str, Any]]:
    return make_bundle


@pytest.fixture
def sample_entries() -> List[Dict[str, Any]]:
    return bundle_entries()
