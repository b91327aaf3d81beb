"""
routes.py — Admin upsert endpoints (x-api-key required, see auth.py).

POST /v1/admin/nationalities                         — upsert by iso2, else name
POST /v1/admin/countries                             — upsert by iso2, else name
POST /v1/admin/countries/{iso2}/official-portal      — upsert per country
PUT  /v1/admin/countries/{iso2}/guide                — upsert per (country, lang)
PUT  /v1/admin/entry-profiles                        — upsert per (nationality, destination, purpose)
PUT  /v1/admin/entry-profiles/{id}/documents         — replace the whole document set
PUT  /v1/admin/entry-profiles/{id}/travel-requirements
PUT  /v1/admin/entry-profiles/{id}/health

Every upsert returns the durable id, which stays the same when the natural key
is submitted again.
"""
import logging

from fastapi import APIRouter, Depends

from visa_api.dependencies import get_reference_store, get_requirement_store
from visa_api.errors import NotFoundError
from visa_api.schemas import (
    Country,
    CountryGuideIn,
    CountryIn,
    DocumentsIn,
    EntryProfileIn,
    HealthRequirementsIn,
    NationalityIn,
    OfficialPortalIn,
    TravelRequirementsIn,
)
from visa_api.store import ReferenceStore, RequirementStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/admin", tags=["Admin"])


async def _require_country(store: ReferenceStore, iso2: str) -> Country:
    country = await store.get_country_by_iso2(iso2.upper())
    if country is None:
        raise NotFoundError("Country", iso2)
    return country


async def _require_profile(store: RequirementStore, profile_id: int) -> None:
    if await store.get_entry_profile_by_id(profile_id) is None:
        raise NotFoundError("Entry profile", profile_id)


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

@router.post("/nationalities", status_code=201)
async def upsert_nationality(
    body: NationalityIn,
    store: ReferenceStore = Depends(get_reference_store),
) -> dict:
    nationality_id = await store.upsert_nationality(body)
    return {"id": nationality_id, **body.model_dump(mode="json")}


@router.post("/countries", status_code=201)
async def upsert_country(
    body: CountryIn,
    store: ReferenceStore = Depends(get_reference_store),
) -> dict:
    country_id = await store.upsert_country(body)
    return {"id": country_id, **body.model_dump(mode="json")}


@router.post("/countries/{iso2}/official-portal", status_code=201)
async def upsert_official_portal(
    iso2: str,
    body: OfficialPortalIn,
    store: ReferenceStore = Depends(get_reference_store),
) -> dict:
    country = await _require_country(store, iso2)
    portal_id = await store.upsert_official_portal(country.id, body.url)
    return {"id": portal_id, "country_id": country.id, "url": body.url}


@router.put("/countries/{iso2}/guide")
async def upsert_country_guide(
    iso2: str,
    body: CountryGuideIn,
    store: ReferenceStore = Depends(get_reference_store),
) -> dict:
    country = await _require_country(store, iso2)
    guide_id = await store.upsert_country_guide(country.id, body.lang, body.guide_text)
    return {
        "id": guide_id,
        "country_id": country.id,
        "lang": body.lang,
        "guide_text": body.guide_text,
    }


# ---------------------------------------------------------------------------
# Requirement data
# ---------------------------------------------------------------------------

@router.put("/entry-profiles")
async def upsert_entry_profile(
    body: EntryProfileIn,
    reference: ReferenceStore = Depends(get_reference_store),
    requirements: RequirementStore = Depends(get_requirement_store),
) -> dict:
    if await reference.get_nationality_by_id(body.nationality_id) is None:
        raise NotFoundError("Nationality", body.nationality_id)
    if await reference.get_country_by_id(body.destination_country_id) is None:
        raise NotFoundError("Destination country", body.destination_country_id)
    profile_id = await requirements.upsert_entry_profile(body)
    return {"id": profile_id, **body.model_dump(mode="json")}


@router.put("/entry-profiles/{profile_id}/documents")
async def replace_entry_documents(
    profile_id: int,
    body: DocumentsIn,
    store: RequirementStore = Depends(get_requirement_store),
) -> dict:
    await _require_profile(store, profile_id)
    count = await store.replace_entry_documents(profile_id, body.documents)
    return {"success": True, "profile_id": profile_id, "documents_count": count}


@router.put("/entry-profiles/{profile_id}/travel-requirements")
async def upsert_travel_requirements(
    profile_id: int,
    body: TravelRequirementsIn,
    store: RequirementStore = Depends(get_requirement_store),
) -> dict:
    await _require_profile(store, profile_id)
    row_id = await store.upsert_travel_requirements(profile_id, body)
    return {"id": row_id, "profile_id": profile_id, **body.model_dump(mode="json")}


@router.put("/entry-profiles/{profile_id}/health")
async def upsert_health_requirements(
    profile_id: int,
    body: HealthRequirementsIn,
    store: RequirementStore = Depends(get_requirement_store),
) -> dict:
    await _require_profile(store, profile_id)
    row_id = await store.upsert_health_requirements(profile_id, body)
    return {"id": row_id, "profile_id": profile_id, **body.model_dump(mode="json")}
