"""
Canonical serialization.

Lot states and stored events go through these functions whenever they are
hashed or compared as text, so identical states always produce identical bytes.
"""

import hashlib
import json
from typing import Any


def canonicalize(obj: Any) -> Any:
    """
    Convert arbitrary nested structures to canonical form.

    Rules:
    - objects exposing to_dict() are converted first
    - dict keys sorted alphabetically
    - tuples converted to lists
    - recursive normalization
    """
    if hasattr(obj, "to_dict") and callable(obj.to_dict):
        return canonicalize(obj.to_dict())
    if isinstance(obj, dict):
        return {k: canonicalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    """
    Deterministic JSON bytes for hashing.

    Returns:
        UTF-8 encoded JSON bytes
    """
    canon = canonicalize(obj)
    s = json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def canonical_json_str(obj: Any) -> str:
    """Deterministic JSON string (for display or comparison)."""
    return canonical_json_bytes(obj).decode("utf-8")


def state_hash(state: Any) -> str:
    """SHA-256 of the canonical JSON of a state (or any to_dict() object)."""
    return hashlib.sha256(canonical_json_bytes(state)).hexdigest()
