"""
Infrastructure package for fhir-unbundle.

Centralizes I/O concerns: reading input documents and the FHIR
decode/encode boundary. Keep this layer decoupled from splitting logic.
"""

from fhir_unbundle.infrastructure.fhir_codec import (
    decode_document,
    decode_resource,
    encode_resource,
    is_bundle,
    read_input,
)

__all__ = [
    "decode_document",
    "decode_resource",
    "encode_resource",
    "is_bundle",
    "read_input",
]
