"""
CareCheck Dossier Models

Read-only records from a care recipient's dossier.

Key components:
- Client: Basic client registration data
- Note, Measure, Incident: The three dossier record kinds
- DossierRecord: Closed union of the record kinds
- LinkingContext: Everything the linker needs for one request

Records are owned by the external dossier store and are immutable once
ingested. Dates arriving as ISO strings are coerced to datetime.date.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, ClassVar, Optional, Union

from .enums import SourceType


# =============================================================================
# Date Helpers
# =============================================================================

def coerce_date(value: Any) -> date:
    """
    Coerce a date-like value to a date.

    Accepts date, datetime, and ISO 8601 strings ("2025-03-01" or
    "2025-03-01T10:00:00Z").

    Raises:
        ValueError: If the value cannot be interpreted as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return date.fromisoformat(text[:10])
    raise ValueError(f"Not a date: {value!r}")


def days_old(record_date: date, as_of: Optional[date] = None) -> int:
    """Whole days between a record date and the reference date."""
    reference = as_of or date.today()
    return (reference - record_date).days


# =============================================================================
# Client
# =============================================================================

@dataclass(frozen=True)
class Client:
    """A care recipient registered with a provider."""
    client_id: str
    name: str = ""
    dob: Optional[str] = None
    wlz_profile: Optional[str] = None
    provider: Optional[str] = None


# =============================================================================
# Dossier Records
# =============================================================================

@dataclass(frozen=True)
class Note:
    """
    A free-text dossier note.

    Attributes:
        id: Record identifier
        client_id: Owning client
        date: Date the note was written
        author: Author name and/or role (e.g., "Dr. Jansen, specialist")
        section: Dossier section (e.g., "Medisch", "Zorgplan")
        text: Note body
    """
    source_type: ClassVar[SourceType] = SourceType.NOTE

    id: str
    client_id: str
    date: date
    author: str = ""
    section: str = ""
    text: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", coerce_date(self.date))


@dataclass(frozen=True)
class Measure:
    """
    A standardized measurement (Katz-ADL, NPI, MMSE, ...).

    The score is kept as given by the source system; it may be numeric or a
    textual band.
    """
    source_type: ClassVar[SourceType] = SourceType.MEASURE

    id: str
    client_id: str
    date: date
    type: str
    score: Union[str, int, float]
    comment: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", coerce_date(self.date))


@dataclass(frozen=True)
class Incident:
    """An incident report (fall, medication error, aggression, ...)."""
    source_type: ClassVar[SourceType] = SourceType.INCIDENT

    id: str
    client_id: str
    date: date
    type: str
    severity: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", coerce_date(self.date))


DossierRecord = Union[Note, Measure, Incident]


# =============================================================================
# Linking Context
# =============================================================================

@dataclass
class LinkingContext:
    """
    Dossier slice plus the claim being linked.

    Either field_name/value (keywords are derived) or explicit keywords drive the
    text matching. as_of pins "today" for recency scoring.
    """
    client: Client
    notes: list[Note] = field(default_factory=list)
    measures: list[Measure] = field(default_factory=list)
    incidents: list[Incident] = field(default_factory=list)
    field_name: Optional[str] = None
    value: Any = None
    keywords: Optional[list[str]] = None
    as_of: Optional[date] = None

    def with_claim(
        self,
        field_name: Optional[str] = None,
        value: Any = None,
        keywords: Optional[list[str]] = None,
    ) -> LinkingContext:
        """Copy of this context targeting another claim."""
        return LinkingContext(
            client=self.client,
            notes=self.notes,
            measures=self.measures,
            incidents=self.incidents,
            field_name=field_name,
            value=value,
            keywords=keywords,
            as_of=self.as_of,
        )

    def find_record(self, source_type: SourceType, source_id: str) -> Optional[DossierRecord]:
        """Resolve a record by discriminator and id."""
        records: list[DossierRecord]
        if source_type == SourceType.NOTE:
            records = list(self.notes)
        elif source_type == SourceType.MEASURE:
            records = list(self.measures)
        elif source_type == SourceType.INCIDENT:
            records = list(self.incidents)
        else:
            return None
        for record in records:
            if record.id == source_id:
                return record
        return None
