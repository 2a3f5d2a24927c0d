"""
Splitter: write every resource of a FHIR Bundle to its own JSON file.

Usage (example from CLI):
    from fhir_unbundle.splitter import unbundle

    report = unbundle("patient-bundle.json", output_dir="out")
    print(report.written_paths)

Output files are named `{stem}-{resourceType}-{index}-{id}.json`, where `stem`
is the input filename without its extension and `index` is the entry's
zero-based position in `Bundle.entry` (skipped entries keep their slot).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from fhir_unbundle.config import get_settings
from fhir_unbundle.domain.models import (
    FailedEntry,
    FhirResource,
    SkippedEntry,
    UnbundleReport,
    WrittenEntry,
)
from fhir_unbundle.errors import EncodeError, OutputDirectoryError, WriteError
from fhir_unbundle.infrastructure.fhir_codec import (
    decode_document,
    encode_resource,
    is_bundle,
    read_input,
)
from fhir_unbundle.utils.logging import get_logger

log = get_logger(__name__)


def output_filename(source: Path | str, resource_type: str, index: int, resource_id: str) -> str:
    """Build `{stem}-{resource_type}-{index}-{resource_id}.json` for a bundle entry."""
    stem = Path(source).stem
    return f"{stem}-{resource_type}-{index}-{resource_id}.json"


def output_path(
    output_dir: Path | str,
    source: Path | str,
    resource_type: str,
    index: int,
    resource_id: str,
) -> Path:
    return Path(output_dir) / output_filename(source, resource_type, index, resource_id)


def extract_resource(entry: Any) -> Optional[FhirResource]:
    """
    Return the resource carried by a bundle entry, or None when there is
    nothing the splitter can write.
    """
    resource = getattr(entry, "resource", None)
    if resource is None or not isinstance(resource, FhirResource):
        return None
    return resource


def _skip_reason(entry: Any, dropped_type: Optional[str] = None) -> str:
    if dropped_type is not None:
        return f"unsupported resource {dropped_type}"
    resource = getattr(entry, "resource", None)
    if resource is None:
        return "entry has no resource"
    return f"unsupported resource {type(resource).__name__}"


def check_output_dir(output_dir: Path | str) -> Path:
    """Ensure the output directory exists; it is never created here."""
    path = Path(output_dir)
    if not path.is_dir():
        raise OutputDirectoryError(
            f"output directory {str(path)!r} does not exist or is not a directory",
            details={"output_dir": str(path)},
        )
    return path


def write_entry(
    source: Path | str,
    output_dir: Path | str,
    index: int,
    resource: FhirResource,
) -> WrittenEntry:
    """
    Encode one resource and write it to its own file, truncating any existing file.

    Raises
    ------
    EncodeError
        If the resource cannot be serialized.
    WriteError
        If the output file cannot be created or written.
    """
    resource_type = resource.get_resource_type()
    resource_id = resource.id or ""
    path = output_path(output_dir, source, resource_type, index, resource_id)

    data = encode_resource(resource)
    try:
        with path.open("wb") as f:
            f.write(data)
    except OSError as exc:
        raise WriteError(
            f"failed to write to file {str(path)!r}: {exc.strerror or exc}",
            details={"path": str(path), "index": index},
        ) from exc

    log.info(
        f"Wrote {resource_type} entry {index} to {path}",
        extra={"index": index, "resource_type": resource_type, "path": str(path)},
    )
    return WrittenEntry(
        index=index,
        resource_type=resource_type,
        resource_id=resource_id,
        path=path,
    )


def split_resource(
    resource: Any,
    source: Path | str,
    output_dir: Path | str,
    fail_fast: bool = True,
    unsupported: Optional[Dict[int, str]] = None,
) -> UnbundleReport:
    """
    Split an already decoded document.

    Parameters
    ----------
    resource : Any
        The decoded document. Anything other than a Bundle is logged and
        yields a report with `is_bundle=False` and no files.
    source : Path | str
        Input filename the output names derive from.
    output_dir : Path | str
        Existing directory receiving the output files.
    fail_fast : bool
        Abort on the first encode/write failure. When False, failures are
        collected on the report and the remaining entries are still written.
    unsupported : dict[int, str] | None
        Entry indexes whose resource the decoder dropped, mapped to the
        resource type it did not recognize.

    Returns
    -------
    UnbundleReport
        Written, skipped and failed entries, in bundle order.
    """
    source = Path(source)
    resource_type = type(resource).__name__
    if isinstance(resource, FhirResource):
        resource_type = resource.get_resource_type()

    if not is_bundle(resource):
        log.info(
            f"Not a bundle: {resource_type}; nothing to unbundle",
            extra={"source": str(source), "resource_type": resource_type},
        )
        return UnbundleReport(source=source, resource_type=resource_type, is_bundle=False)

    entries = list(resource.entry or [])
    log.info(
        f"Unbundling {len(entries)} entries from {source.name}",
        extra={"source": str(source), "entries": len(entries)},
    )

    written: List[WrittenEntry] = []
    skipped: List[SkippedEntry] = []
    failed: List[FailedEntry] = []

    for index, entry in enumerate(entries):
        entry_resource = extract_resource(entry)
        if entry_resource is None:
            reason = _skip_reason(entry, (unsupported or {}).get(index))
            log.warning(
                f"Skipping entry {index}: {reason}",
                extra={"index": index, "reason": reason},
            )
            skipped.append(SkippedEntry(index=index, reason=reason))
            continue

        try:
            written.append(write_entry(source, output_dir, index, entry_resource))
        except (EncodeError, WriteError) as exc:
            if fail_fast:
                raise
            log.error(
                f"Failed entry {index}: {exc.message}",
                extra={"index": index, "code": exc.code},
            )
            failed.append(
                FailedEntry(
                    index=index,
                    resource_type=entry_resource.get_resource_type(),
                    error=exc.message,
                )
            )

    return UnbundleReport(
        source=source,
        resource_type=resource_type,
        is_bundle=True,
        total_entries=len(entries),
        written=written,
        skipped=skipped,
        failed=failed,
    )


def unbundle(
    source: Path | str,
    output_dir: Optional[Path | str] = None,
    fail_fast: Optional[bool] = None,
) -> UnbundleReport:
    """
    Read, decode and split a FHIR bundle file.

    Parameters
    ----------
    source : Path | str
        Path of the bundle document.
    output_dir : Path | str | None
        Existing output directory. Defaults to settings.output_dir.
    fail_fast : bool | None
        Failure policy for encode/write errors. Defaults to settings.fail_fast.

    Raises
    ------
    ReadError, DecodeError, OutputDirectoryError
        Always fatal.
    EncodeError, WriteError
        Fatal when running with fail_fast.
    """
    settings = get_settings()
    effective_dir = check_output_dir(output_dir if output_dir is not None else settings.output_dir)
    effective_fail_fast = settings.fail_fast if fail_fast is None else fail_fast

    source = Path(source)
    decoded = decode_document(read_input(source))
    report = split_resource(
        decoded.resource,
        source,
        effective_dir,
        fail_fast=effective_fail_fast,
        unsupported=decoded.unsupported,
    )

    if report.is_bundle:
        log.info(
            f"Unbundled {source.name}: {len(report.written)} written, "
            f"{len(report.skipped)} skipped, {len(report.failed)} failed",
            extra={
                "source": str(source),
                "written": len(report.written),
                "skipped": len(report.skipped),
                "failed": len(report.failed),
            },
        )
    return report


__all__ = [
    "check_output_dir",
    "extract_resource",
    "output_filename",
    "output_path",
    "split_resource",
    "unbundle",
    "write_entry",
]
