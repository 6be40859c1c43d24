"""
Canonical JSON Serialization

Provides deterministic JSON serialization for hashing and comparison.
Based on RFC 8785 (JSON Canonicalization Scheme) principles:
- Sorted keys (lexicographic)
- No whitespace
- Consistent number formatting
- UTF-8 encoding

Used to fingerprint framework versions and evidence chains so that an audit
record can prove which rule set and which evidence a verdict was based on.
"""
from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any


def _default_serializer(obj: Any) -> Any:
    """
    Custom JSON serializer for non-standard types.

    Handles:
    - datetime/date: ISO 8601 format
    - Enum: value
    - dataclass: dict
    - set/frozenset: sorted list
    """
    if isinstance(obj, datetime):
        if obj.tzinfo is not None:
            return obj.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
        return obj.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3]
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def canonical_json(obj: Any) -> str:
    """
    Serialize object to canonical JSON string.

    Example:
        >>> canonical_json({"b": 1, "a": 2})
        '{"a":2,"b":1}'
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        default=_default_serializer,
        ensure_ascii=False,
    )


def content_hash(obj: Any) -> str:
    """
    Compute SHA-256 hash of canonical JSON representation.

    Returns:
        Hex-encoded SHA-256 hash string (64 characters)
    """
    return hashlib.sha256(canonical_json(obj).encode("utf-8")).hexdigest()


def content_hash_short(obj: Any, length: int = 12) -> str:
    """Compute truncated SHA-256 hash for display purposes."""
    return content_hash(obj)[:length]


def compute_framework_hash(version: Any) -> str:
    """
    Compute SHA-256 hash of a framework version's rule-bearing fields.

    The hash covers type, version, validity interval, rule ids (sorted),
    limits and feature flags. Name and description are not included.

    Args:
        version: A FrameworkVersion instance

    Returns:
        Hex-encoded SHA-256 hash string (64 characters)
    """
    framework_dict = {
        "framework_type": version.framework_type.value,
        "version": version.version,
        "effective_from": version.effective_from.isoformat(),
        "effective_to": version.effective_to.isoformat() if version.effective_to else None,
        "rule_ids": sorted(version.rule_ids),
        "limits": version.limits.to_dict(),
        "features": dict(sorted(version.features.items())),
    }
    return content_hash(framework_dict)


def compute_chain_fingerprint(chain: Any) -> str:
    """
    Fingerprint an evidence chain by target, claim and the ordered sources.

    Two chains with the same fingerprint rank the same records in the same
    order for the same claim.
    """
    return content_hash_short({
        "target": chain.target,
        "claim": chain.claim,
        "sources": [
            [item.source.type.value, item.source.id, item.level]
            for item in chain.evidence
        ],
    }, length=16)
