"""
Domain package for fhir-unbundle.

Exports the resource capability and the result models used by the splitter,
the reporter and the CLI. Keep this package focused on data definitions.
"""

from fhir_unbundle.domain.models import (
    FailedEntry,
    FhirResource,
    SkippedEntry,
    UnbundleReport,
    WrittenEntry,
)

__all__ = [
    "FailedEntry",
    "FhirResource",
    "SkippedEntry",
    "UnbundleReport",
    "WrittenEntry",
]
