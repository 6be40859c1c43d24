"""
CareCheck Configuration

Environment-driven settings and structured logging setup.

Environment variables:
    CARECHECK_LOG_LEVEL          Log level for the "carecheck" logger (INFO)
    CARECHECK_ADVISORY_TIMEOUT   Advisory call timeout in seconds (20)
    CARECHECK_ADVISORY_MODEL     Chat model used by the advisory adapter (gpt-4o-mini)
    CARECHECK_ADVISORY_ENABLED   Call the advisory service at all (false)
    CARECHECK_PACKS_DIR          Directory with framework packs (bundled packs/)
    CARECHECK_RULE_WORKERS       Worker threads for rule evaluation (1)
    CARECHECK_MAX_EVIDENCE       Evidence items kept per criterion (5)
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


# Bundled packs live at the repository root next to src/
DEFAULT_PACKS_DIR = Path(__file__).resolve().parents[2] / "packs"

# Extra attributes copied from log records into the JSON entry
LOG_EXTRA_FIELDS = (
    "client_id",
    "criterion_id",
    "framework_type",
    "framework_version",
    "rule_id",
    "duration_ms",
)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read once from the environment."""
    log_level: str = "INFO"
    advisory_timeout: float = 20.0
    advisory_model: str = "gpt-4o-mini"
    advisory_enabled: bool = False
    packs_dir: Path = DEFAULT_PACKS_DIR
    rule_workers: int = 1
    max_evidence: int = 5

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            log_level=os.getenv("CARECHECK_LOG_LEVEL", "INFO").upper(),
            advisory_timeout=float(os.getenv("CARECHECK_ADVISORY_TIMEOUT", "20")),
            advisory_model=os.getenv("CARECHECK_ADVISORY_MODEL", "gpt-4o-mini"),
            advisory_enabled=_env_bool("CARECHECK_ADVISORY_ENABLED", False),
            packs_dir=Path(os.getenv("CARECHECK_PACKS_DIR", str(DEFAULT_PACKS_DIR))),
            rule_workers=max(1, int(os.getenv("CARECHECK_RULE_WORKERS", "1"))),
            max_evidence=max(1, int(os.getenv("CARECHECK_MAX_EVIDENCE", "5"))),
        )


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in LOG_EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach a JSON handler to the "carecheck" logger.

    Calling this twice does not add a second handler.
    """
    logger = logging.getLogger("carecheck")
    logger.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))
    if not any(isinstance(h.formatter, JSONFormatter) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
    return logger
