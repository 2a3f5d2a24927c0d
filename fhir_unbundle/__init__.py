"""
fhir-unbundle - split FHIR R4 bundles into one file per resource.

Parsing and serializing FHIR is delegated to `fhir.resources`; this package
provides:

- The splitter that walks Bundle.entry and names each output file
- The decode/encode boundary around the FHIR models
- A Typer CLI with a rich summary of what was written or skipped
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from fhir_unbundle.config import Settings, get_settings
from fhir_unbundle.domain.models import (
    FailedEntry,
    FhirResource,
    SkippedEntry,
    UnbundleReport,
    WrittenEntry,
)
from fhir_unbundle.errors import (
    DecodeError,
    EncodeError,
    OutputDirectoryError,
    ReadError,
    UnbundleError,
    WriteError,
)
from fhir_unbundle.splitter import output_filename, split_resource, unbundle
from fhir_unbundle.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Splitting
    "output_filename",
    "split_resource",
    "unbundle",
    # Results
    "FhirResource",
    "FailedEntry",
    "SkippedEntry",
    "UnbundleReport",
    "WrittenEntry",
    # Errors
    "UnbundleError",
    "ReadError",
    "DecodeError",
    "OutputDirectoryError",
    "EncodeError",
    "WriteError",
    # Logging
    "configure_logging",
    "get_logger",
]
