"""
Utilities package for fhir-unbundle.

Exports shared helpers for logging and other cross-cutting concerns.
Keep this package lightweight and free of FHIR-specific logic.
"""

from fhir_unbundle.utils.logging import configure_logging, get_logger, normalize_level

__all__ = [
    "configure_logging",
    "get_logger",
    "normalize_level",
]
