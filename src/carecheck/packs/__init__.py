"""
CareCheck Framework Packs

Schema validation and loading for framework packs.

Framework packs are YAML or JSON files that define one version of a
regulatory framework (meerzorg, vv8, toetsingskader): when it applies, its
limits, feature flags and rule set.

Usage:
    from carecheck.packs import FrameworkPackLoader, load_framework_pack

    # Load a single pack
    version = load_framework_pack("packs/meerzorg/2026.yaml")

    # Load a directory of packs into a framework store
    store = FrameworkPackLoader().load_directory("packs")
"""
from __future__ import annotations

from .loader import (
    FrameworkPackLoader,
    load_framework_pack,
    load_from_string,
)
from .schema import (
    SCHEMA_VERSION,
    FrameworkPackSchema,
    LimitsSchema,
    check_schema_version,
    validate_framework_pack,
)

__all__ = [
    # Version
    "SCHEMA_VERSION",
    # Loader
    "FrameworkPackLoader",
    "load_framework_pack",
    "load_from_string",
    # Validation
    "validate_framework_pack",
    "check_schema_version",
    # Schemas
    "FrameworkPackSchema",
    "LimitsSchema",
]
