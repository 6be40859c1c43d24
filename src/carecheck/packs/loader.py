"""
CareCheck Framework Pack Loader

Loads and validates framework packs from YAML or JSON files.

Converts Pydantic schema models to CareCheck FrameworkVersion models and
checks that every rule id a pack names is registered.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..canon import compute_framework_hash
from ..engine.builtin_rules import create_default_registry
from ..engine.rule_registry import RuleRegistry
from ..exceptions import FrameworkLoadError, FrameworkValidationError, FrameworkVersionMismatch
from ..models import FrameworkType, FrameworkVersion, VersionLimits
from ..store import InMemoryFrameworkStore
from .schema import (
    SCHEMA_VERSION,
    FrameworkPackSchema,
    LimitsSchema,
    check_schema_version,
    validate_framework_pack,
)


logger = logging.getLogger(__name__)


PACK_SUFFIXES = {".yaml", ".yml", ".json"}


# =============================================================================
# Schema to Model Converters
# =============================================================================

def _convert_limits(schema: LimitsSchema) -> VersionLimits:
    return VersionLimits(
        max_day_care_hours=schema.max_day_care_hours,
        max_night_care_hours=schema.max_night_care_hours,
        max_one_on_one_hours=schema.max_one_on_one_hours,
        min_assessment_recency_days=schema.min_assessment_recency_days,
    )


def _convert_framework_pack(schema: FrameworkPackSchema) -> FrameworkVersion:
    """Convert a validated pack into a FrameworkVersion."""
    return FrameworkVersion(
        framework_type=FrameworkType(schema.framework_type),
        version=schema.version,
        effective_from=schema.effective_from,
        effective_to=schema.effective_to,
        limits=_convert_limits(schema.limits),
        rule_ids=tuple(schema.rule_ids),
        features=dict(schema.features),
        name=schema.name,
        description=schema.description,
    )


# =============================================================================
# Framework Pack Loader
# =============================================================================

class FrameworkPackLoader:
    """
    Loads framework packs from YAML or JSON files.

    Usage:
        loader = FrameworkPackLoader()
        version = loader.load("packs/meerzorg/2026.yaml")
        store = loader.load_directory("packs")
    """

    def __init__(self, strict_version: bool = True, registry: Optional[RuleRegistry] = None):
        """
        Args:
            strict_version: If True, reject packs with incompatible schema versions
            registry: Registry rule ids are checked against (built-in rules by default)
        """
        self.strict_version = strict_version
        self.registry = registry if registry is not None else create_default_registry()

    def load(self, path: Union[str, Path]) -> FrameworkVersion:
        """
        Load a framework pack from a file.

        Raises:
            FrameworkLoadError: If the file cannot be read
            FrameworkValidationError: If validation fails
            FrameworkVersionMismatch: If schema version incompatible
        """
        path = Path(path)

        try:
            data = self._load_file(path)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise FrameworkLoadError(
                message=f"Failed to load framework pack: {e}",
                details={"path": str(path), "error": str(e)},
            ) from e

        version = self.load_data(data, source=str(path))
        logger.info(
            "Loaded framework pack %s (%s %s, hash %s)",
            path.name, version.framework_type.value, version.version,
            compute_framework_hash(version),
            extra={
                "framework_type": version.framework_type.value,
                "framework_version": version.version,
            },
        )
        return version

    def load_data(self, data: Any, source: str = "<data>") -> FrameworkVersion:
        """Validate and convert an already parsed pack."""
        if not isinstance(data, dict):
            raise FrameworkValidationError(
                message="Framework pack must be a mapping",
                details={"path": source},
            )

        if self.strict_version and not check_schema_version(data):
            pack_version = data.get("schema_version", "unknown")
            raise FrameworkVersionMismatch(
                message=f"Schema version mismatch: pack has {pack_version}, expected {SCHEMA_VERSION}",
                details={
                    "pack_version": pack_version,
                    "expected_version": SCHEMA_VERSION,
                    "path": source,
                },
            )

        try:
            schema = validate_framework_pack(data)
        except ValidationError as e:
            raise FrameworkValidationError(
                message=f"Framework pack validation failed: {e.error_count()} errors",
                details={"errors": e.errors(include_url=False, include_context=False), "path": source},
            ) from e

        unknown = self.registry.unknown_rule_ids(schema.rule_ids)
        if unknown:
            raise FrameworkValidationError(
                message=f"Framework pack references unknown rules: {', '.join(unknown)}",
                details={"unknown_rule_ids": unknown, "path": source},
            )

        return _convert_framework_pack(schema)

    def load_directory(
        self,
        directory: Union[str, Path],
        store: Optional[InMemoryFrameworkStore] = None,
    ) -> InMemoryFrameworkStore:
        """
        Load every pack under a directory (recursively) into a store.

        Files are loaded in path order. Overlapping versions raise
        FrameworkOverlapError from the store.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise FrameworkLoadError(
                message=f"Framework pack directory not found: {directory}",
                details={"path": str(directory)},
            )

        store = store if store is not None else InMemoryFrameworkStore()
        for path in sorted(directory.rglob("*")):
            if path.is_file() and path.suffix.lower() in PACK_SUFFIXES:
                store.add(self.load(path))
        return store

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)


# =============================================================================
# Convenience Functions
# =============================================================================

def load_framework_pack(path: Union[str, Path]) -> FrameworkVersion:
    """Load a framework pack with a temporary loader."""
    return FrameworkPackLoader().load(path)


def load_from_string(
    content: str,
    format: str = "yaml",
    registry: Optional[RuleRegistry] = None,
) -> FrameworkVersion:
    """
    Load a framework pack from a string.

    Args:
        content: YAML or JSON string
        format: "yaml" or "json"
        registry: Registry rule ids are checked against
    """
    try:
        if format.lower() == "json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise FrameworkLoadError(
            message=f"Failed to parse framework pack: {e}",
            details={"format": format},
        ) from e

    return FrameworkPackLoader(registry=registry).load_data(data, source=f"<{format} string>")
