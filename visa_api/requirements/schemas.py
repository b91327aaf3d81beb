"""
schemas.py — Requirements query and response contracts.

RequirementsResponse is the single denormalised document returned by
GET /v1/requirements. Every section has a defined default, so a profile
whose sub-sections are not populated yet still yields a complete document.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from visa_api.schemas import (
    EntryDocument,
    EntryProfile,
    HealthRequirements,
    SourceItem,
    TravelRequirements,
)


class RequirementsQuery(BaseModel):
    """Validated input of an aggregation request."""
    nationality: str = Field(..., min_length=1)
    destination: str = Field(..., min_length=1)
    purpose: str = "tourism"
    lang: str = "fr"


# ---------------------------------------------------------------------------
# RequirementsResponse
# ---------------------------------------------------------------------------

class NationalitySummary(BaseModel):
    id: int
    name_fr: str
    iso2: Optional[str] = None


class DestinationSummary(BaseModel):
    id: int
    name_fr: str
    iso2: Optional[str] = None
    continent: Optional[str] = None
    image_url: Optional[str] = None
    official_portal: Optional[str] = None


class DocumentSection(BaseModel):
    id: int
    nom_document: str
    type_document: str
    required: bool
    duree_validite_text: Optional[str] = None
    duree_validite_days: Optional[int] = None
    nombre_entrees: str
    duree_sejour_max_text: Optional[str] = None
    duree_sejour_max_days: Optional[int] = None
    prix_montant: Optional[float] = None
    prix_devise: Optional[str] = None
    prix_montant_eur: Optional[float] = None
    prix_libelle: Optional[str] = None
    temps_obtention_visa: Optional[str] = None
    application_url: Optional[str] = None
    source_officielle: Optional[str] = None
    confidence: Optional[float] = None


class TravelAuthorizationSection(BaseModel):
    required: bool
    name: str
    url: str
    message: str


class ArrivalFormSection(BaseModel):
    required: bool
    name: str
    url: str
    notes: str = ""


class VaccinesSection(BaseModel):
    required: List[Any] = []
    recommended: List[Any] = []
    notes: Optional[str] = None


class GuideSection(BaseModel):
    lang: str
    text: Optional[str] = None


class Sections(BaseModel):
    documents: List[DocumentSection]
    travel_authorization: TravelAuthorizationSection
    arrival_form: ArrivalFormSection
    vaccines: VaccinesSection
    guide: GuideSection


class LLMInfo(BaseModel):
    model: Optional[str] = None
    prompt_version: Optional[str] = None


class RequirementsResponse(BaseModel):
    nationality: NationalitySummary
    destination: DestinationSummary
    purpose: str
    last_checked: Optional[str] = Field(None, description="YYYY-MM-DD")
    source_confidence: Optional[float] = None
    needs_manual_review: bool
    sections: Sections
    sources: List[SourceItem]
    llm: LLMInfo


# ---------------------------------------------------------------------------
# GET /v1/entry-profiles/{id}
# ---------------------------------------------------------------------------

class EntryProfileDetail(BaseModel):
    profile: EntryProfile
    documents: List[EntryDocument]
    travel_requirements: Optional[TravelRequirements] = None
    health_requirements: Optional[HealthRequirements] = None
    sources: List[SourceItem]
