"""
CareCheck Storage Protocols

Protocols for the external collaborators the engine reads from, plus
in-memory reference implementations.

Key components:
- DossierAccessor: Read access to a client's dossier
- FrameworkVersionStore: Read access to registered framework versions
- InMemoryDossierStore: Dict-backed dossier for tests and the API
- InMemoryFrameworkStore: Dict-backed framework store that rejects
  overlapping validity intervals at registration time

The engine owns no persistence; production deployments plug in their own
implementations of these protocols.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol, runtime_checkable

from .exceptions import DossierError, FrameworkOverlapError
from .models import Client, FrameworkType, FrameworkVersion, Incident, Measure, Note


logger = logging.getLogger(__name__)


# =============================================================================
# Protocols
# =============================================================================

@runtime_checkable
class DossierAccessor(Protocol):
    """
    Protocol for read access to a client's dossier.

    Implementations return records in any order; callers sort as needed.
    """

    def get_client(self, client_id: str) -> Optional[Client]:
        ...

    def get_notes(self, client_id: str) -> list[Note]:
        ...

    def get_measures(self, client_id: str) -> list[Measure]:
        ...

    def get_incidents(self, client_id: str) -> list[Incident]:
        ...


@runtime_checkable
class FrameworkVersionStore(Protocol):
    """
    Protocol for read access to framework versions.

    Implementations must reject versions whose validity intervals overlap
    another version of the same framework type. VersionManager raises
    FrameworkOverlapError when it finds two versions effective on one date.
    """

    def list_versions(self, framework_type: FrameworkType) -> list[FrameworkVersion]:
        """
        List versions of a framework type.

        Returns:
            Versions ordered by effective_from, newest first
        """
        ...

    def get_version(
        self, framework_type: FrameworkType, version: str
    ) -> Optional[FrameworkVersion]:
        ...


# =============================================================================
# In-Memory Dossier
# =============================================================================

@dataclass
class InMemoryDossierStore:
    """Dict-backed DossierAccessor."""
    clients: dict[str, Client] = field(default_factory=dict)
    notes: dict[str, list[Note]] = field(default_factory=dict)
    measures: dict[str, list[Measure]] = field(default_factory=dict)
    incidents: dict[str, list[Incident]] = field(default_factory=dict)

    def add_client(self, client: Client) -> None:
        self.clients[client.client_id] = client

    def add_note(self, note: Note) -> None:
        self._check_client(note.client_id)
        self.notes.setdefault(note.client_id, []).append(note)

    def add_measure(self, measure: Measure) -> None:
        self._check_client(measure.client_id)
        self.measures.setdefault(measure.client_id, []).append(measure)

    def add_incident(self, incident: Incident) -> None:
        self._check_client(incident.client_id)
        self.incidents.setdefault(incident.client_id, []).append(incident)

    def _check_client(self, client_id: str) -> None:
        if client_id not in self.clients:
            raise DossierError(
                message=f"Record references unknown client '{client_id}'",
                client_id=client_id,
            )

    def get_client(self, client_id: str) -> Optional[Client]:
        return self.clients.get(client_id)

    def get_notes(self, client_id: str) -> list[Note]:
        return list(self.notes.get(client_id, []))

    def get_measures(self, client_id: str) -> list[Measure]:
        return list(self.measures.get(client_id, []))

    def get_incidents(self, client_id: str) -> list[Incident]:
        return list(self.incidents.get(client_id, []))


# =============================================================================
# In-Memory Framework Store
# =============================================================================

class InMemoryFrameworkStore:
    """
    Dict-backed FrameworkVersionStore.

    Versions of one framework type never overlap: add() raises
    FrameworkOverlapError for a version whose interval intersects an
    already registered one. Re-adding the same (type, version) replaces it.
    """

    def __init__(self, versions: Optional[list[FrameworkVersion]] = None):
        self._versions: dict[FrameworkType, dict[str, FrameworkVersion]] = {}
        for version in versions or []:
            self.add(version)

    def add(self, version: FrameworkVersion) -> None:
        """
        Register a framework version.

        Raises:
            FrameworkOverlapError: If the validity interval overlaps another
                version of the same framework type
        """
        registered = self._versions.setdefault(version.framework_type, {})
        for existing in registered.values():
            if existing.version == version.version:
                continue
            if existing.overlaps(version):
                raise FrameworkOverlapError(
                    message=(
                        f"{version.framework_type.value} {version.version} overlaps "
                        f"{existing.version}"
                    ),
                    details={
                        "framework_type": version.framework_type.value,
                        "version": version.version,
                        "conflicts_with": existing.version,
                    },
                )
        registered[version.version] = version
        logger.debug(
            "Registered framework version %s %s",
            version.framework_type.value, version.version,
        )

    def list_versions(self, framework_type: FrameworkType) -> list[FrameworkVersion]:
        versions = list(self._versions.get(framework_type, {}).values())
        return sorted(versions, key=lambda v: v.effective_from, reverse=True)

    def get_version(
        self, framework_type: FrameworkType, version: str
    ) -> Optional[FrameworkVersion]:
        return self._versions.get(framework_type, {}).get(version)

    def framework_types(self) -> list[FrameworkType]:
        return [t for t, versions in self._versions.items() if versions]

    def __len__(self) -> int:
        return sum(len(v) for v in self._versions.values())
