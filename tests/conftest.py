"""
Pytest configuration and fixtures for CareCheck tests.

Provides helper factories for dossier records and contexts. All factories
default to dates relative to AS_OF so recency-dependent tests are stable.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Optional

import pytest

from carecheck.config import DEFAULT_PACKS_DIR
from carecheck.engine import RuleRegistry, VersionManager, create_default_registry
from carecheck.models import (
    CheckContext,
    Client,
    Incident,
    LinkingContext,
    Measure,
    Note,
)
from carecheck.packs import FrameworkPackLoader
from carecheck.store import InMemoryFrameworkStore


# Reference "today" for all tests
AS_OF = date(2026, 3, 15)

CLIENT_ID = "C-001"


def days_ago(days: int) -> date:
    return AS_OF - timedelta(days=days)


# =============================================================================
# Factory Helpers
# =============================================================================

def make_client(client_id: str = CLIENT_ID, **kwargs: Any) -> Client:
    """Create a Client with sensible defaults."""
    kwargs.setdefault("name", "Mevr. De Vries")
    kwargs.setdefault("dob", "1938-04-12")
    kwargs.setdefault("wlz_profile", "VV7")
    kwargs.setdefault("provider", "Zorggroep Oost")
    return Client(client_id=client_id, **kwargs)


def make_note(
    text: str,
    id: str = "n-1",
    age_days: int = 10,
    author: str = "Verzorgende A. Bakker",
    section: str = "Rapportage",
    client_id: str = CLIENT_ID,
) -> Note:
    """Create a Note dated age_days before AS_OF."""
    return Note(
        id=id,
        client_id=client_id,
        date=days_ago(age_days),
        author=author,
        section=section,
        text=text,
    )


def make_measure(
    type: str = "Katz-ADL",
    score: Any = "F",
    id: str = "m-1",
    age_days: int = 10,
    comment: Optional[str] = None,
    client_id: str = CLIENT_ID,
) -> Measure:
    """Create a Measure dated age_days before AS_OF."""
    return Measure(
        id=id,
        client_id=client_id,
        date=days_ago(age_days),
        type=type,
        score=score,
        comment=comment,
    )


def make_incident(
    description: str,
    id: str = "i-1",
    age_days: int = 10,
    type: str = "Val",
    severity: str = "Matig",
    client_id: str = CLIENT_ID,
) -> Incident:
    """Create an Incident dated age_days before AS_OF."""
    return Incident(
        id=id,
        client_id=client_id,
        date=days_ago(age_days),
        type=type,
        severity=severity,
        description=description,
    )


def make_context(
    notes: Optional[list[Note]] = None,
    measures: Optional[list[Measure]] = None,
    incidents: Optional[list[Incident]] = None,
    field_name: Optional[str] = None,
    value: Any = None,
    keywords: Optional[list[str]] = None,
    client: Optional[Client] = None,
) -> LinkingContext:
    """Create a LinkingContext pinned to AS_OF."""
    return LinkingContext(
        client=client or make_client(),
        notes=notes or [],
        measures=measures or [],
        incidents=incidents or [],
        field_name=field_name,
        value=value,
        keywords=keywords,
        as_of=AS_OF,
    )


def make_check_context(
    form_data: Optional[dict[str, Any]] = None,
    notes: Optional[list[Note]] = None,
    measures: Optional[list[Measure]] = None,
    incidents: Optional[list[Incident]] = None,
    client: Optional[Client] = None,
    application_id: Optional[str] = "APP-001",
) -> CheckContext:
    """Create a CheckContext pinned to AS_OF."""
    return CheckContext(
        client=client or make_client(),
        notes=notes or [],
        measures=measures or [],
        incidents=incidents or [],
        form_data=form_data if form_data is not None else {},
        application_id=application_id,
        as_of=AS_OF,
    )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def registry() -> RuleRegistry:
    return create_default_registry()


@pytest.fixture
def framework_store(registry: RuleRegistry) -> InMemoryFrameworkStore:
    """Store loaded from the bundled framework packs."""
    return FrameworkPackLoader(registry=registry).load_directory(DEFAULT_PACKS_DIR)


@pytest.fixture
def manager(framework_store: InMemoryFrameworkStore, registry: RuleRegistry) -> VersionManager:
    return VersionManager(framework_store, registry)
