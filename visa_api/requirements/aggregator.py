"""
aggregator.py — Assemble the requirements document for one trip.

Flow for (nationality, destination, purpose, lang):
  1. Resolve nationality, then destination (code or name, see resolver.py)
  2. Load the entry profile for the exact triple — no fallback across purposes
  3. Fetch documents, travel requirements, health requirements, the country
     guide and the official portal concurrently
  4. Shape one RequirementsResponse, defaulting every missing sub-section

Only an unresolved nationality, destination or profile fails the call
(NotFoundError). A profile may exist before its sub-sections are written;
those simply come back with their defaults.
"""
import asyncio
import logging
from typing import Optional

from visa_api.errors import NotFoundError
from visa_api.requirements.resolver import IdentifierResolver
from visa_api.requirements.schemas import (
    ArrivalFormSection,
    DestinationSummary,
    DocumentSection,
    GuideSection,
    LLMInfo,
    NationalitySummary,
    RequirementsQuery,
    RequirementsResponse,
    Sections,
    TravelAuthorizationSection,
    VaccinesSection,
)
from visa_api.schemas import TravelRequirements

logger = logging.getLogger(__name__)

NO_AUTHORIZATION_MESSAGE = "Vous n'avez PAS besoin d'autorisation de voyage pour ce trajet."
NAMED_AUTHORIZATION_MESSAGE = "Autorisation requise: {name}"
GENERIC_AUTHORIZATION_MESSAGE = "Une autorisation de voyage est requise."


def travel_authorization_message(travel: Optional[TravelRequirements]) -> str:
    """Human-readable verdict on whether a travel authorization is needed."""
    if travel is None or not travel.travel_authorization_required:
        return NO_AUTHORIZATION_MESSAGE
    if travel.travel_authorization_name:
        return NAMED_AUTHORIZATION_MESSAGE.format(name=travel.travel_authorization_name)
    return GENERIC_AUTHORIZATION_MESSAGE


class RequirementsAggregator:
    """Read-side core: resolution, concurrent fan-out, response shaping."""

    def __init__(self, reference_store, requirement_store) -> None:
        self._reference = reference_store
        self._requirements = requirement_store
        self._resolver = IdentifierResolver(reference_store)

    async def aggregate(self, query: RequirementsQuery) -> RequirementsResponse:
        nationality = await self._resolver.nationality(query.nationality)
        destination = await self._resolver.destination(query.destination)

        profile = await self._requirements.get_entry_profile(
            nationality.id, destination.id, query.purpose
        )
        if profile is None:
            raise NotFoundError(
                "Entry profile",
                f"{query.nationality} -> {query.destination} ({query.purpose})",
            )

        documents, travel, health, guide, portal = await asyncio.gather(
            self._requirements.list_entry_documents(profile.id),
            self._requirements.get_travel_requirements(profile.id),
            self._requirements.get_health_requirements(profile.id),
            self._reference.get_country_guide(destination.id, query.lang),
            self._reference.get_official_portal(destination.id),
        )
        logger.info(
            "Aggregated profile_id=%s documents=%d travel=%s health=%s guide=%s",
            profile.id,
            len(documents),
            travel is not None,
            health is not None,
            guide is not None,
        )

        sections = Sections(
            documents=[
                DocumentSection.model_validate(doc.model_dump(mode="json", exclude={"profile_id"}))
                for doc in documents
            ],
            travel_authorization=TravelAuthorizationSection(
                required=bool(travel and travel.travel_authorization_required),
                name=(travel and travel.travel_authorization_name) or "",
                url=(travel and travel.travel_authorization_url) or "",
                message=travel_authorization_message(travel),
            ),
            # No arrival-form notes are persisted; notes stays an empty string
            arrival_form=ArrivalFormSection(
                required=bool(travel and travel.arrival_form_required),
                name=(travel and travel.arrival_form_name) or "",
                url=(travel and travel.arrival_form_url) or "",
            ),
            vaccines=VaccinesSection(
                required=health.vaccines_required if health else [],
                recommended=health.vaccines_recommended if health else [],
                notes=(health and health.notes) or None,
            ),
            guide=GuideSection(
                lang=guide.lang if guide else query.lang,
                text=(guide and guide.guide_text) or None,
            ),
        )

        return RequirementsResponse(
            nationality=NationalitySummary(
                id=nationality.id,
                name_fr=nationality.name_fr,
                iso2=nationality.iso2,
            ),
            destination=DestinationSummary(
                id=destination.id,
                name_fr=destination.name_fr,
                iso2=destination.iso2,
                continent=destination.continent,
                image_url=destination.image_url,
                official_portal=(portal and portal.url) or None,
            ),
            purpose=query.purpose,
            last_checked=profile.last_checked.isoformat() if profile.last_checked else None,
            source_confidence=profile.source_confidence,
            needs_manual_review=profile.needs_manual_review,
            sections=sections,
            sources=profile.sources,
            llm=LLMInfo(model=profile.llm_model, prompt_version=profile.llm_prompt_version),
        )
