"""
FHIR codec boundary for fhir-unbundle.

Decoding raw bytes into typed resource models and encoding single resources
back to FHIR JSON is delegated to `fhir.resources` (R4B models). This module
only maps the library's failures onto the tool's error types and pins the
schema version and decoding context in one place.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Tuple, Type

from fhir.resources.R4B import get_fhir_model_class
from fhir.resources.R4B.bundle import Bundle
from fhir.resources.R4B.resource import Resource

from fhir_unbundle.errors import DecodeError, EncodeError, ReadError
from fhir_unbundle.utils.logging import get_logger

log = get_logger(__name__)

FHIR_VERSION = "R4B"
# Timestamps are always interpreted in UTC, regardless of the local zone.
DECODE_TIMEZONE = "UTC"
JSON_INDENT = 2


def read_input(path: Path) -> bytes:
    """
    Read the raw bytes of an input document.

    Raises
    ------
    ReadError
        If the file is missing, is a directory, or cannot be read.
    """
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ReadError(
            f"failed to read file {str(path)!r}: {exc.strerror or exc}",
            details={"path": str(path)},
        ) from exc


def _resource_class(resource_type: Any) -> Type[Resource]:
    if not isinstance(resource_type, str) or not resource_type:
        raise DecodeError("document has no resourceType")
    try:
        model_class = get_fhir_model_class(resource_type)
    except (LookupError, ValueError, ImportError, AttributeError) as exc:
        raise DecodeError(
            f"unknown resourceType {resource_type!r}",
            details={"resource_type": resource_type},
        ) from exc
    if not (isinstance(model_class, type) and issubclass(model_class, Resource)):
        raise DecodeError(
            f"{resource_type!r} is not a FHIR resource type",
            details={"resource_type": resource_type},
        )
    return model_class


class DecodedDocument(NamedTuple):
    """A decoded document plus the bundle entries whose resource was dropped."""

    resource: Resource
    unsupported: Dict[int, str]


def _is_known_resource_type(resource_type: Any) -> bool:
    try:
        _resource_class(resource_type)
    except DecodeError:
        return False
    return True


def _drop_unsupported_entries(payload: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[int, str]]:
    """
    Remove entry resources whose resourceType has no R4B model.

    The entry itself stays in place so later entries keep their index.
    """
    entries = payload.get("entry")
    if not isinstance(entries, list):
        return payload, {}

    unsupported: Dict[int, str] = {}
    kept: List[Any] = []
    for index, entry in enumerate(entries):
        resource = entry.get("resource") if isinstance(entry, dict) else None
        if isinstance(resource, dict) and not _is_known_resource_type(
            resource.get("resourceType")
        ):
            unsupported[index] = str(resource.get("resourceType"))
            entry = {key: value for key, value in entry.items() if key != "resource"}
        kept.append(entry)

    if not unsupported:
        return payload, {}
    return {**payload, "entry": kept}, unsupported


def decode_document(raw: bytes) -> DecodedDocument:
    """
    Decode FHIR JSON bytes into the matching R4B resource model.

    Bundle entries carrying a resource type without an R4B model (unknown
    types, or R4 types that R4B removed such as MedicinalProduct) are decoded
    without their resource and reported in `unsupported` by entry index.

    Parameters
    ----------
    raw : bytes
        The document exactly as read from disk.

    Returns
    -------
    DecodedDocument
        A `Bundle` or any other single resource model, and the dropped entries.

    Raises
    ------
    DecodeError
        If the bytes are not JSON, not a JSON object, carry a missing or
        unknown top-level `resourceType`, or fail model validation.
    """
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise DecodeError(f"failed to unmarshal: invalid JSON ({exc})") from exc
    if not isinstance(payload, dict):
        raise DecodeError(
            f"failed to unmarshal: expected a JSON object, got {type(payload).__name__}"
        )

    model_class = _resource_class(payload.get("resourceType"))
    unsupported: Dict[int, str] = {}
    if issubclass(model_class, Bundle):
        payload, unsupported = _drop_unsupported_entries(payload)

    try:
        resource = model_class.model_validate(payload)
    except (ValueError, TypeError, LookupError) as exc:
        # Nested unknown resource types (e.g. in `contained`) surface as KeyError.
        raise DecodeError(
            f"failed to unmarshal {model_class.__name__}: {exc}",
            details={"resource_type": model_class.__name__},
        ) from exc

    log.debug(
        "Decoded resource",
        extra={
            "resource_type": resource.get_resource_type(),
            "fhir_version": FHIR_VERSION,
            "timezone": DECODE_TIMEZONE,
            "unsupported_entries": len(unsupported),
        },
    )
    return DecodedDocument(resource, unsupported)


def decode_resource(raw: bytes) -> Resource:
    """Decode FHIR JSON bytes, discarding the unsupported-entry details."""
    return decode_document(raw).resource


def encode_resource(resource: Resource) -> bytes:
    """
    Encode a single resource as pretty-printed FHIR JSON.

    Raises
    ------
    EncodeError
        If the library cannot serialize the resource.
    """
    try:
        text = resource.model_dump_json(indent=JSON_INDENT, by_alias=True, exclude_none=True)
    except (ValueError, TypeError) as exc:
        raise EncodeError(
            f"failed to marshal {type(resource).__name__}: {exc}",
            details={"resource_type": type(resource).__name__},
        ) from exc
    return text.encode("utf-8")


def is_bundle(resource: Any) -> bool:
    """Whether a decoded value is a Bundle container."""
    return isinstance(resource, Bundle)


__all__ = [
    "DECODE_TIMEZONE",
    "FHIR_VERSION",
    "DecodedDocument",
    "decode_document",
    "decode_resource",
    "encode_resource",
    "is_bundle",
    "read_input",
]
