"""
schemas.py — Domain records returned by the stores, and the payloads they accept.

These are the persistence-agnostic shapes the rest of the service works with.
Stores build them from ORM rows; JSON text columns arrive here already
decoded (see json_fields.py), so nothing downstream parses strings.
"""
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, List, Optional

from pydantic import (
    AfterValidator,
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    TypeAdapter,
    ValidationError,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class DocumentType(str, Enum):
    passport_only = "passport_only"
    eta = "eta"
    evisa = "evisa"
    visa = "visa"
    visa_on_arrival = "visa_on_arrival"
    esta = "esta"
    etias = "etias"
    other = "other"
    unknown = "unknown"


class EntryCount(str, Enum):
    single = "single"
    multiple = "multiple"
    unknown = "unknown"


OFFICIAL_PORTAL_LABEL = "official_portal"


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

class Country(_Record):
    id: int
    name_fr: str
    iso2: Optional[str] = None
    continent: Optional[str] = None
    popular_destination: bool = False
    image_url: Optional[str] = None
    processed_visas_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Nationality(_Record):
    id: int
    name_fr: str
    iso2: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OfficialPortal(_Record):
    id: int
    country_id: int
    url: str
    label: str = OFFICIAL_PORTAL_LABEL


class CountryGuide(_Record):
    id: int
    country_id: int
    lang: str
    guide_text: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Requirement data
# ---------------------------------------------------------------------------

class SourceItem(BaseModel):
    """One source cited by the LLM run that produced a profile."""
    url: str
    title: str = ""


class EntryProfile(BaseModel):
    """
    Visa/entry rules for one (nationality, destination, purpose) triple,
    with the provenance of the LLM run that produced them.
    """
    id: int
    nationality_id: int
    destination_country_id: int
    purpose: str
    last_checked: Optional[date] = None
    source_confidence: Optional[float] = None
    needs_manual_review: bool = False
    llm_model: Optional[str] = None
    llm_prompt_version: Optional[str] = None
    sources: List[SourceItem] = []
    llm_raw: Any = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EntryDocument(_Record):
    id: int
    profile_id: int
    nom_document: str
    type_document: DocumentType
    required: bool
    duree_validite_text: Optional[str] = None
    duree_validite_days: Optional[int] = None
    nombre_entrees: EntryCount = EntryCount.unknown
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


class TravelRequirements(BaseModel):
    id: int
    profile_id: int
    travel_authorization_required: bool = False
    travel_authorization_name: Optional[str] = None
    travel_authorization_url: Optional[str] = None
    arrival_form_required: bool = False
    arrival_form_name: Optional[str] = None
    arrival_form_url: Optional[str] = None
    other_requirements: Any = None


class HealthRequirements(BaseModel):
    id: int
    profile_id: int
    vaccines_required: List[Any] = []
    vaccines_recommended: List[Any] = []
    notes: Optional[str] = None


# ---------------------------------------------------------------------------
# Write payloads
#
# Accepted by the stores' upsert operations and validated by FastAPI before an
# admin route body runs; a failure becomes a 400 VALIDATION_ERROR envelope
# listing every offending field.
#
# JSON-bearing fields (llm_sources_json, vaccines_*_json, other_requirements_json)
# are stored as text exactly as received. Malformed content is tolerated here
# and neutralised when read back.
# ---------------------------------------------------------------------------

_HTTP_URL = TypeAdapter(AnyHttpUrl)


def _check_url(value: str) -> str:
    # Validate, but store the URL as given rather than pydantic's normalised form
    try:
        _HTTP_URL.validate_python(value)
    except ValidationError:
        raise ValueError("must be an absolute http(s) URL") from None
    return value


def _upper(value: str) -> str:
    return value.upper()


UrlStr = Annotated[str, AfterValidator(_check_url)]
Iso2 = Annotated[str, StringConstraints(pattern=r"^[A-Za-z]{2}$"), AfterValidator(_upper)]
Confidence = Annotated[float, Field(ge=0, le=1)]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Reference data payloads
# ---------------------------------------------------------------------------

class NationalityIn(_Payload):
    name_fr: str = Field(..., min_length=1)
    iso2: Optional[Iso2] = None


class CountryIn(_Payload):
    name_fr: str = Field(..., min_length=1)
    iso2: Optional[Iso2] = None
    continent: Optional[str] = None
    popular_destination: bool = False
    image_url: Optional[UrlStr] = None
    processed_visas_count: Optional[int] = Field(default=None, ge=0)


class OfficialPortalIn(_Payload):
    url: UrlStr


class CountryGuideIn(_Payload):
    lang: str = Field(default="fr", min_length=1, max_length=8)
    guide_text: Optional[str] = None


# ---------------------------------------------------------------------------
# Requirement data payloads
# ---------------------------------------------------------------------------

class EntryProfileIn(_Payload):
    nationality_id: int = Field(..., gt=0)
    destination_country_id: int = Field(..., gt=0)
    purpose: str = Field(..., min_length=1, max_length=64)
    last_checked: Optional[date] = None
    source_confidence: Optional[Confidence] = None
    needs_manual_review: bool = False
    llm_model: Optional[str] = None
    llm_prompt_version: Optional[str] = None
    llm_sources_json: Optional[str] = None
    llm_raw_json: Optional[str] = None


class EntryDocumentIn(_Payload):
    nom_document: str = Field(..., min_length=1)
    type_document: DocumentType
    required: bool
    duree_validite_text: Optional[str] = None
    duree_validite_days: Optional[int] = None
    nombre_entrees: EntryCount
    duree_sejour_max_text: Optional[str] = None
    duree_sejour_max_days: Optional[int] = None
    prix_montant: Optional[float] = None
    prix_devise: Optional[str] = Field(default=None, min_length=3, max_length=3)
    prix_montant_eur: Optional[float] = None
    prix_libelle: Optional[str] = None
    temps_obtention_visa: Optional[str] = None
    application_url: Optional[UrlStr] = None
    source_officielle: Optional[str] = None
    confidence: Optional[Confidence] = None


class DocumentsIn(_Payload):
    documents: List[EntryDocumentIn]


class TravelRequirementsIn(_Payload):
    travel_authorization_required: bool
    travel_authorization_name: Optional[str] = None
    travel_authorization_url: Optional[UrlStr] = None
    arrival_form_required: bool
    arrival_form_name: Optional[str] = None
    arrival_form_url: Optional[UrlStr] = None
    other_requirements_json: Optional[str] = None


class HealthRequirementsIn(_Payload):
    vaccines_required_json: Optional[str] = None
    vaccines_recommended_json: Optional[str] = None
    notes: Optional[str] = None
