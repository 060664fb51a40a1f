"""
Workproof Helper Functions

Small, dependency-free utilities shared by the engine, the collaborators
and the CLI.
"""

import hashlib
import json
import re
from datetime import datetime, timezone
from typing import Any, Optional


HEX_DIGEST_RE = re.compile(r"[0-9a-f]{64}")

MS_PER_DAY = 24 * 60 * 60 * 1000


def sha256_hex(data: bytes) -> str:
    """Compute SHA-256 hash and return as lowercase hex string."""
    return hashlib.sha256(data).hexdigest()


def sha256_text(text: str) -> str:
    """SHA-256 of a UTF-8 encoded string, as hex."""
    return sha256_hex(text.encode("utf-8"))


def canonical_json(value: Any) -> str:
    """
    Serialize a value to canonical JSON.

    Keys are sorted and separators are compact so that two equal
    structures always serialize to the same string.

    Args:
        value: A JSON-serializable value

    Returns:
        str: Canonical JSON text
    """
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def canonical_json_bytes(value: Any) -> bytes:
    """Canonical JSON encoded as UTF-8."""
    return canonical_json(value).encode("utf-8")


def now_ms() -> int:
    """Current UTC time in integer milliseconds since the epoch."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def format_timestamp_ms(timestamp_ms: int) -> str:
    """
    Format an epoch-millisecond timestamp as ISO 8601 UTC.

    Args:
        timestamp_ms: Milliseconds since the Unix epoch

    Returns:
        str: ISO 8601 formatted timestamp
    """
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).isoformat()


def is_hex_digest(value: Any) -> bool:
    """True if value is a 64-character lowercase hex string."""
    return isinstance(value, str) and HEX_DIGEST_RE.fullmatch(value) is not None


def truncate_hash(hash_str: Optional[str], length: int = 16) -> str:
    """
    Truncate a hash for display purposes.

    Args:
        hash_str: Full hash string
        length: Number of characters to show

    Returns:
        str: Truncated hash with ellipsis
    """
    if not hash_str:
        return "N/A"
    if hash_str.startswith("0x"):
        hash_str = hash_str[2:]
    if len(hash_str) <= length:
        return hash_str
    return f"{hash_str[:length]}..."
