"""
routes.py — Public reference-data endpoints.

GET /v1/countries                 — filtered, paginated country list
GET /v1/countries/{iso2}          — one country + its official portal URL
GET /v1/countries/{iso2}/guide    — travel guide for a language
GET /v1/nationalities             — filtered, paginated nationality list
"""
import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from visa_api.catalog.schemas import CountryDetailOut, CountryOut, NationalityOut
from visa_api.dependencies import get_reference_store
from visa_api.errors import NotFoundError
from visa_api.schemas import CountryGuide
from visa_api.store import ReferenceStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1", tags=["Catalog"])


@router.get("/countries", response_model=List[CountryOut])
async def list_countries(
    search: Optional[str] = Query(default=None, description="Substring of name_fr or iso2"),
    continent: Optional[str] = Query(default=None),
    popular: Optional[Literal["0", "1"]] = Query(default=None, description="1 = popular destinations only"),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: Optional[int] = Query(default=None, ge=0),
    store: ReferenceStore = Depends(get_reference_store),
):
    return await store.list_countries(
        search=search,
        continent=continent,
        popular=None if popular is None else popular == "1",
        limit=limit,
        offset=offset,
    )


@router.get("/countries/{iso2}", response_model=CountryDetailOut)
async def get_country(
    iso2: str,
    store: ReferenceStore = Depends(get_reference_store),
):
    country = await store.get_country_by_iso2(iso2.upper())
    if country is None:
        raise NotFoundError("Country", iso2)
    portal = await store.get_official_portal(country.id)
    return CountryDetailOut(
        **CountryOut.model_validate(country).model_dump(),
        official_portal=(portal and portal.url) or None,
    )


@router.get("/countries/{iso2}/guide", response_model=CountryGuide)
async def get_country_guide(
    iso2: str,
    lang: str = Query(default="fr", min_length=1),
    store: ReferenceStore = Depends(get_reference_store),
):
    country = await store.get_country_by_iso2(iso2.upper())
    if country is None:
        raise NotFoundError("Country", iso2)
    guide = await store.get_country_guide(country.id, lang)
    if guide is None:
        raise NotFoundError("Guide", f"{iso2.upper()}/{lang}")
    return guide


@router.get("/nationalities", response_model=List[NationalityOut])
async def list_nationalities(
    search: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: Optional[int] = Query(default=None, ge=0),
    store: ReferenceStore = Depends(get_reference_store),
):
    return await store.list_nationalities(search=search, limit=limit, offset=offset)
