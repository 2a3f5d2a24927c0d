"""
Error types raised while unbundling.

Every fatal condition surfaces as an `UnbundleError` subclass so the CLI can
report it uniformly and exit non-zero. Skipped entries and non-bundle inputs
are not errors; they are recorded on the `UnbundleReport` instead.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class UnbundleError(Exception):
    """Base class for fatal unbundling errors."""

    code: str = "unbundle_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ReadError(UnbundleError):
    """Input file is missing or unreadable."""

    code = "read_error"


class DecodeError(UnbundleError):
    """Input bytes are not a valid FHIR resource."""

    code = "decode_error"


class OutputDirectoryError(UnbundleError):
    """Output directory does not exist or is not a directory."""

    code = "output_dir_error"


class EncodeError(UnbundleError):
    """A resource could not be serialized back to FHIR JSON."""

    code = "encode_error"


class WriteError(UnbundleError):
    """An output file could not be written."""

    code = "write_error"


__all__ = [
    "UnbundleError",
    "ReadError",
    "DecodeError",
    "OutputDirectoryError",
    "EncodeError",
    "WriteError",
]
