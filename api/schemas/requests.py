"""Request schemas for the API."""

from datetime import date
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from carecheck.models import Client, Incident, Measure, Note


class ClientInput(BaseModel):
    """Client registration data."""
    client_id: str = Field(..., description="Client identifier")
    name: str = ""
    dob: Optional[str] = None
    wlz_profile: Optional[str] = Field(None, description="Wlz profile, e.g., 'VV7'")
    provider: Optional[str] = None

    def to_model(self) -> Client:
        return Client(
            client_id=self.client_id,
            name=self.name,
            dob=self.dob,
            wlz_profile=self.wlz_profile,
            provider=self.provider,
        )


class NoteInput(BaseModel):
    """A dossier note."""
    id: str
    date: date
    author: str = ""
    section: str = ""
    text: str = ""


class MeasureInput(BaseModel):
    """A standardized measurement."""
    id: str
    date: date
    type: str = Field(..., description="Instrument, e.g., 'Katz-ADL'")
    score: Union[float, str]
    comment: Optional[str] = None


class IncidentInput(BaseModel):
    """An incident report."""
    id: str
    date: date
    type: str
    severity: str = ""
    description: str = ""


class DossierInput(BaseModel):
    """A client's dossier sent along with the request."""
    client: ClientInput
    notes: list[NoteInput] = Field(default_factory=list)
    measures: list[MeasureInput] = Field(default_factory=list)
    incidents: list[IncidentInput] = Field(default_factory=list)

    def records(self) -> tuple[Client, list[Note], list[Measure], list[Incident]]:
        client_id = self.client.client_id
        return (
            self.client.to_model(),
            [Note(client_id=client_id, **n.model_dump()) for n in self.notes],
            [Measure(client_id=client_id, **m.model_dump()) for m in self.measures],
            [Incident(client_id=client_id, **i.model_dump()) for i in self.incidents],
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "client": {"client_id": "C-001", "name": "Mevr. De Vries", "wlz_profile": "VV7"},
                    "notes": [
                        {
                            "id": "n-1",
                            "date": "2026-03-01",
                            "author": "Dr. Jansen, specialist ouderengeneeskunde",
                            "section": "Medisch",
                            "text": "Cliënt is volledig ADL afhankelijk bij wassen en aankleden.",
                        }
                    ],
                    "measures": [
                        {"id": "m-1", "date": "2026-02-20", "type": "Katz-ADL", "score": "F"}
                    ],
                }
            ]
        }
    }


class CheckRequest(BaseModel):
    """Request to run the normative checks of a framework version."""
    dossier: DossierInput
    framework_type: str = Field(..., description="toetsingskader|vv8|meerzorg")
    version: Optional[str] = Field(None, description="Framework version; active version when omitted")
    form_data: dict[str, Any] = Field(default_factory=dict, description="Application form fields")
    application_id: Optional[str] = None
    as_of: Optional[date] = Field(None, description="Reference date (defaults to today)")


class LinkRequest(BaseModel):
    """Request to link a claim to dossier records."""
    dossier: DossierInput
    field_name: Optional[str] = Field(None, description="Form field, e.g., 'adl_score'")
    value: Any = None
    keywords: Optional[list[str]] = Field(None, description="Explicit keywords instead of field/value")
    target_path: Optional[str] = Field(None, description="Claim address; 'meerzorg.<field>' when omitted")
    as_of: Optional[date] = None


class ChainRequest(LinkRequest):
    """Request to build an evidence chain for a claim."""
    claim: str = Field(..., description="The claim as shown to reviewers")


class ValidateRequest(BaseModel):
    """Request to validate form data against a framework version."""
    form_data: Any = Field(..., description="Application form fields")
    as_of: Optional[date] = None


class MigrateRequest(BaseModel):
    """Request to migrate form data between framework versions."""
    form_data: Any = Field(..., description="Application form fields")
    from_version: str
    to_version: str
    as_of: Optional[date] = None


class CriteriaRequest(BaseModel):
    """Request to evaluate reassessment criteria."""
    client_id: str
    period_from: date
    period_to: date
    criteria: Optional[list[str]] = Field(None, description="Criterion ids; all VV8 criteria when omitted")
    max_evidence: Optional[int] = Field(None, ge=1, le=20, description="Evidence items per criterion; service default when omitted")
    dossier: Optional[DossierInput] = Field(
        None, description="Inline dossier; the service's dossier store is used when omitted"
    )
    as_of: Optional[date] = None
