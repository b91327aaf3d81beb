"""
routes.py — Public requirements endpoints.

GET /v1/requirements                              — aggregated requirements (core)
GET /v1/entry-profiles/{id}                       — profile with every sub-section
GET /v1/entry-profiles/{id}/documents             — document list
GET /v1/entry-profiles/{id}/travel-requirements   — travel authorization / arrival form
GET /v1/entry-profiles/{id}/health                — vaccines

A non-numeric id fails path validation (400); an unknown one is a 404.
"""
import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from visa_api.dependencies import get_aggregator, get_requirement_store
from visa_api.errors import NotFoundError
from visa_api.requirements.aggregator import RequirementsAggregator
from visa_api.requirements.schemas import (
    EntryProfileDetail,
    RequirementsQuery,
    RequirementsResponse,
)
from visa_api.schemas import (
    EntryDocument,
    EntryProfile,
    HealthRequirements,
    TravelRequirements,
)
from visa_api.store import RequirementStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1", tags=["Requirements"])


async def _require_profile(store: RequirementStore, profile_id: int) -> EntryProfile:
    profile = await store.get_entry_profile_by_id(profile_id)
    if profile is None:
        raise NotFoundError("Entry profile", profile_id)
    return profile


@router.get("/requirements", response_model=RequirementsResponse)
async def get_requirements(
    nationality: str = Query(..., min_length=1, description="ISO2 code or French name"),
    destination: str = Query(..., min_length=1, description="ISO2 code or French name"),
    purpose: str = Query(default="tourism", min_length=1),
    lang: str = Query(default="fr", min_length=1),
    aggregator: RequirementsAggregator = Depends(get_aggregator),
) -> RequirementsResponse:
    """
    Everything a traveller of one nationality needs to enter one destination
    for one purpose: documents, travel authorization, arrival form, vaccines,
    country guide, plus the provenance of the data.
    """
    query = RequirementsQuery(
        nationality=nationality,
        destination=destination,
        purpose=purpose,
        lang=lang,
    )
    return await aggregator.aggregate(query)


@router.get("/entry-profiles/{profile_id}", response_model=EntryProfileDetail)
async def get_entry_profile(
    profile_id: int,
    store: RequirementStore = Depends(get_requirement_store),
) -> EntryProfileDetail:
    profile = await _require_profile(store, profile_id)
    documents, travel, health = await asyncio.gather(
        store.list_entry_documents(profile_id),
        store.get_travel_requirements(profile_id),
        store.get_health_requirements(profile_id),
    )
    return EntryProfileDetail(
        profile=profile,
        documents=documents,
        travel_requirements=travel,
        health_requirements=health,
        sources=profile.sources,
    )


@router.get("/entry-profiles/{profile_id}/documents", response_model=List[EntryDocument])
async def get_entry_documents(
    profile_id: int,
    store: RequirementStore = Depends(get_requirement_store),
):
    await _require_profile(store, profile_id)
    return await store.list_entry_documents(profile_id)


@router.get("/entry-profiles/{profile_id}/travel-requirements", response_model=TravelRequirements)
async def get_travel_requirements(
    profile_id: int,
    store: RequirementStore = Depends(get_requirement_store),
):
    travel = await store.get_travel_requirements(profile_id)
    if travel is None:
        raise NotFoundError("Travel requirements", profile_id)
    return travel


@router.get("/entry-profiles/{profile_id}/health", response_model=HealthRequirements)
async def get_health_requirements(
    profile_id: int,
    store: RequirementStore = Depends(get_requirement_store),
):
    health = await store.get_health_requirements(profile_id)
    if health is None:
        raise NotFoundError("Health requirements", profile_id)
    return health
