"""
Workproof Utilities Module

Helper functions shared across the workproof package.
"""

from workproof.utils.helpers import (
    sha256_hex,
    sha256_text,
    canonical_json,
    canonical_json_bytes,
    now_ms,
    format_timestamp_ms,
    is_hex_digest,
    truncate_hash,
)

__all__ = [
    "sha256_hex",
    "sha256_text",
    "canonical_json",
    "canonical_json_bytes",
    "now_ms",
    "format_timestamp_ms",
    "is_hex_digest",
    "truncate_hash",
]
