"""
Domain models for fhir-unbundle.

Defines the capability every splittable FHIR resource must expose, and the
immutable result records the splitter returns to the CLI and reporter.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field


@runtime_checkable
class FhirResource(Protocol):
    """
    Capability shared by every FHIR resource model the splitter can write.

    Attributes
    ----------
    id : str | None
        Logical id of the resource, used in the output filename.
    meta : Any
        Resource metadata element (may be None).
    """

    id: Optional[str]
    meta: Any

    @classmethod
    def get_resource_type(cls) -> str:
        """Return the FHIR resource type name, e.g. "Patient"."""
        ...


_FROZEN = {
    "frozen": True,
    "populate_by_name": True,
    "arbitrary_types_allowed": False,
}


class WrittenEntry(BaseModel):
    """
    A bundle entry that was written to its own file.
    """

    index: int = Field(..., ge=0, description="Zero-based position in Bundle.entry.")
    resource_type: str = Field(..., description="FHIR resource type name.")
    resource_id: str = Field("", description="Resource logical id ('' when absent).")
    path: Path = Field(..., description="File the resource was written to.")

    model_config = _FROZEN


class SkippedEntry(BaseModel):
    """
    A bundle entry without a resource the splitter can write.
    """

    index: int = Field(..., ge=0, description="Zero-based position in Bundle.entry.")
    reason: str = Field(..., description="Why the entry was skipped.")

    model_config = _FROZEN


class FailedEntry(BaseModel):
    """
    A bundle entry whose encode or write failed while running in keep-going mode.
    """

    index: int = Field(..., ge=0, description="Zero-based position in Bundle.entry.")
    resource_type: str = Field(..., description="FHIR resource type name.")
    error: str = Field(..., description="Error message.")

    model_config = _FROZEN


class UnbundleReport(BaseModel):
    """
    Outcome of unbundling a single input file.
    """

    source: Path = Field(..., description="Input file path.")
    resource_type: str = Field(..., description="Resource type of the decoded document.")
    is_bundle: bool = Field(..., description="Whether the document was a Bundle.")
    total_entries: int = Field(0, ge=0, description="Number of entries in the Bundle.")
    written: List[WrittenEntry] = Field(default_factory=list)
    skipped: List[SkippedEntry] = Field(default_factory=list)
    failed: List[FailedEntry] = Field(default_factory=list)

    model_config = _FROZEN

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def written_paths(self) -> List[Path]:
        return [entry.path for entry in self.written]


__all__ = [
    "FhirResource",
    "WrittenEntry",
    "SkippedEntry",
    "FailedEntry",
    "UnbundleReport",
]
