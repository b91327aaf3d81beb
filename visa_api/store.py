"""
store.py — Data access facades for the Visa API.

Two stores, both built on an async_sessionmaker passed in by the caller:
  - ReferenceStore:   countries, nationalities, official portals, country guides
  - RequirementStore: entry profiles, their documents, travel and health requirements

Design principles:
  - Each operation opens its own session, i.e. holds one pooled connection for
    its duration. Independent reads can therefore run concurrently.
  - Upserts are a single INSERT ... ON CONFLICT (natural key) DO UPDATE ...
    RETURNING id statement. Repeating a natural key updates the row in place and
    returns the same id.
  - Returns domain Pydantic objects (visa_api.schemas), never ORM instances.
    JSON text columns are decoded here.
  - Logs identifiers only.
"""
import logging
from typing import Any, Callable, Optional, Sequence

from sqlalchemy import delete, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from visa_api.json_fields import decode_blob, decode_list, decode_sources
from visa_api.models import (
    CountryGuideORM,
    CountryORM,
    EntryDocumentORM,
    EntryProfileORM,
    HealthRequirementsORM,
    NationalityORM,
    OfficialPortalORM,
    TravelRequirementsORM,
)
from visa_api.models._timestamps import utcnow
from visa_api.schemas import (
    OFFICIAL_PORTAL_LABEL,
    Country,
    CountryGuide,
    CountryIn,
    EntryDocument,
    EntryDocumentIn,
    EntryProfile,
    EntryProfileIn,
    HealthRequirements,
    HealthRequirementsIn,
    Nationality,
    NationalityIn,
    OfficialPortal,
    TravelRequirements,
    TravelRequirementsIn,
)

logger = logging.getLogger(__name__)

Sessions = async_sessionmaker[AsyncSession]

_DIALECT_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _dialect_insert(session: AsyncSession) -> Callable[..., Any]:
    """Pick the INSERT construct that supports ON CONFLICT for the bound database."""
    name = session.get_bind().dialect.name
    try:
        return _DIALECT_INSERTS[name]
    except KeyError:
        raise NotImplementedError(f"Upserts are not supported on '{name}' databases") from None


async def _upsert(
    sessions: Sessions,
    model: type,
    values: dict[str, Any],
    conflict_keys: Sequence[str],
    keep: Sequence[str] = (),
) -> int:
    """
    Insert a row or update it in place when its natural key already exists.

    Every column in values except the conflict keys and the keep columns is
    overwritten, and updated_at is refreshed. keep columns are only written
    on insert.
    Returns the row id, which is stable across repeated calls with the same key.
    """
    now = utcnow()
    async with sessions.begin() as session:
        insert = _dialect_insert(session)
        stmt = insert(model).values(**values, created_at=now, updated_at=now)
        changes = {
            key: stmt.excluded[key]
            for key in values
            if key not in conflict_keys and key not in keep
        }
        changes["updated_at"] = now
        stmt = stmt.on_conflict_do_update(
            index_elements=list(conflict_keys),
            set_=changes,
        ).returning(model.id)
        result = await session.execute(stmt)
        return result.scalar_one()


async def _first(sessions: Sessions, stmt) -> Optional[Any]:
    async with sessions() as session:
        result = await session.execute(stmt.limit(1))
        return result.scalars().first()


async def _all(sessions: Sessions, stmt) -> list[Any]:
    async with sessions() as session:
        result = await session.execute(stmt)
        return list(result.scalars().all())


def _natural_key(iso2: Optional[str]) -> list[str]:
    # iso2 when known; NULL iso2 never conflicts, so fall back to the name
    return ["iso2"] if iso2 else ["name_fr"]


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

class ReferenceStore:
    """Countries, nationalities, official portals and country guides."""

    def __init__(self, sessions: Sessions) -> None:
        self._sessions = sessions

    # -- countries ----------------------------------------------------------

    async def list_countries(
        self,
        search: Optional[str] = None,
        continent: Optional[str] = None,
        popular: Optional[bool] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[Country]:
        stmt = select(CountryORM)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(CountryORM.name_fr.ilike(pattern), CountryORM.iso2.ilike(pattern)))
        if continent:
            stmt = stmt.where(CountryORM.continent == continent)
        if popular is not None:
            stmt = stmt.where(CountryORM.popular_destination == popular)
        stmt = stmt.order_by(CountryORM.name_fr.asc()).limit(limit).offset(offset)
        rows = await _all(self._sessions, stmt)
        return [Country.model_validate(row) for row in rows]

    async def get_country_by_id(self, country_id: int) -> Optional[Country]:
        row = await _first(self._sessions, select(CountryORM).where(CountryORM.id == country_id))
        return Country.model_validate(row) if row else None

    async def get_country_by_iso2(self, iso2: str) -> Optional[Country]:
        row = await _first(self._sessions, select(CountryORM).where(CountryORM.iso2 == iso2))
        return Country.model_validate(row) if row else None

    async def get_country_by_name(self, name: str) -> Optional[Country]:
        row = await _first(self._sessions, select(CountryORM).where(CountryORM.name_fr == name))
        return Country.model_validate(row) if row else None

    async def upsert_country(self, data: CountryIn) -> int:
        # A country's code is never rewritten, a name-keyed upsert included
        country_id = await _upsert(
            self._sessions,
            CountryORM,
            data.model_dump(),
            _natural_key(data.iso2),
            keep=["iso2"],
        )
        logger.info("Upserted country id=%s iso2=%s", country_id, data.iso2)
        return country_id

    # -- nationalities ------------------------------------------------------

    async def list_nationalities(
        self,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[Nationality]:
        stmt = select(NationalityORM)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(NationalityORM.name_fr.ilike(pattern), NationalityORM.iso2.ilike(pattern))
            )
        stmt = stmt.order_by(NationalityORM.name_fr.asc()).limit(limit).offset(offset)
        rows = await _all(self._sessions, stmt)
        return [Nationality.model_validate(row) for row in rows]

    async def get_nationality_by_id(self, nationality_id: int) -> Optional[Nationality]:
        row = await _first(
            self._sessions, select(NationalityORM).where(NationalityORM.id == nationality_id)
        )
        return Nationality.model_validate(row) if row else None

    async def get_nationality_by_iso2(self, iso2: str) -> Optional[Nationality]:
        row = await _first(self._sessions, select(NationalityORM).where(NationalityORM.iso2 == iso2))
        return Nationality.model_validate(row) if row else None

    async def get_nationality_by_name(self, name: str) -> Optional[Nationality]:
        row = await _first(self._sessions, select(NationalityORM).where(NationalityORM.name_fr == name))
        return Nationality.model_validate(row) if row else None

    async def upsert_nationality(self, data: NationalityIn) -> int:
        nationality_id = await _upsert(
            self._sessions,
            NationalityORM,
            data.model_dump(),
            _natural_key(data.iso2),
        )
        logger.info("Upserted nationality id=%s iso2=%s", nationality_id, data.iso2)
        return nationality_id

    # -- official portals ---------------------------------------------------

    async def get_official_portal(self, country_id: int) -> Optional[OfficialPortal]:
        row = await _first(
            self._sessions,
            select(OfficialPortalORM).where(
                OfficialPortalORM.country_id == country_id,
                OfficialPortalORM.label == OFFICIAL_PORTAL_LABEL,
            ),
        )
        return OfficialPortal.model_validate(row) if row else None

    async def upsert_official_portal(self, country_id: int, url: str) -> int:
        portal_id = await _upsert(
            self._sessions,
            OfficialPortalORM,
            {"country_id": country_id, "label": OFFICIAL_PORTAL_LABEL, "url": url},
            ["country_id", "label"],
        )
        logger.info("Upserted official portal id=%s country_id=%s", portal_id, country_id)
        return portal_id

    # -- country guides -----------------------------------------------------

    async def get_country_guide(self, country_id: int, lang: str) -> Optional[CountryGuide]:
        row = await _first(
            self._sessions,
            select(CountryGuideORM).where(
                CountryGuideORM.country_id == country_id,
                CountryGuideORM.lang == lang,
            ),
        )
        return CountryGuide.model_validate(row) if row else None

    async def upsert_country_guide(
        self, country_id: int, lang: str, guide_text: Optional[str]
    ) -> int:
        guide_id = await _upsert(
            self._sessions,
            CountryGuideORM,
            {"country_id": country_id, "lang": lang, "guide_text": guide_text},
            ["country_id", "lang"],
        )
        logger.info("Upserted country guide id=%s country_id=%s lang=%s", guide_id, country_id, lang)
        return guide_id


# ---------------------------------------------------------------------------
# Requirement data
# ---------------------------------------------------------------------------

def _profile_from_row(row: EntryProfileORM) -> EntryProfile:
    return EntryProfile(
        id=row.id,
        nationality_id=row.nationality_id,
        destination_country_id=row.destination_country_id,
        purpose=row.purpose,
        last_checked=row.last_checked,
        source_confidence=row.source_confidence,
        needs_manual_review=row.needs_manual_review,
        llm_model=row.llm_model,
        llm_prompt_version=row.llm_prompt_version,
        sources=decode_sources(row.llm_sources_json),
        llm_raw=decode_blob(row.llm_raw_json),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class RequirementStore:
    """Entry profiles and everything hanging off them, keyed by profile id."""

    def __init__(self, sessions: Sessions) -> None:
        self._sessions = sessions

    # -- entry profiles -----------------------------------------------------

    async def get_entry_profile(
        self, nationality_id: int, destination_country_id: int, purpose: str
    ) -> Optional[EntryProfile]:
        row = await _first(
            self._sessions,
            select(EntryProfileORM).where(
                EntryProfileORM.nationality_id == nationality_id,
                EntryProfileORM.destination_country_id == destination_country_id,
                EntryProfileORM.purpose == purpose,
            ),
        )
        return _profile_from_row(row) if row else None

    async def get_entry_profile_by_id(self, profile_id: int) -> Optional[EntryProfile]:
        row = await _first(self._sessions, select(EntryProfileORM).where(EntryProfileORM.id == profile_id))
        return _profile_from_row(row) if row else None

    async def upsert_entry_profile(self, data: EntryProfileIn) -> int:
        profile_id = await _upsert(
            self._sessions,
            EntryProfileORM,
            data.model_dump(),
            ["nationality_id", "destination_country_id", "purpose"],
        )
        logger.info(
            "Upserted entry profile id=%s nationality_id=%s destination_country_id=%s purpose=%s",
            profile_id,
            data.nationality_id,
            data.destination_country_id,
            data.purpose,
        )
        return profile_id

    # -- documents ----------------------------------------------------------

    async def list_entry_documents(self, profile_id: int) -> list[EntryDocument]:
        rows = await _all(
            self._sessions,
            select(EntryDocumentORM)
            .where(EntryDocumentORM.profile_id == profile_id)
            .order_by(EntryDocumentORM.id.asc()),
        )
        return [EntryDocument.model_validate(row) for row in rows]

    async def replace_entry_documents(
        self, profile_id: int, documents: Sequence[EntryDocumentIn]
    ) -> int:
        """
        Replace a profile's whole document set.

        Delete and insert share one connection and one transaction: if anything
        fails, the rollback leaves the previous set untouched.
        Returns the number of documents written.
        """
        now = utcnow()
        async with self._sessions() as session:
            async with session.begin():
                await session.execute(
                    delete(EntryDocumentORM).where(EntryDocumentORM.profile_id == profile_id)
                )
                session.add_all(
                    EntryDocumentORM(
                        profile_id=profile_id,
                        created_at=now,
                        updated_at=now,
                        **doc.model_dump(mode="json"),
                    )
                    for doc in documents
                )
        logger.info("Replaced documents profile_id=%s count=%d", profile_id, len(documents))
        return len(documents)

    # -- travel requirements ------------------------------------------------

    async def get_travel_requirements(self, profile_id: int) -> Optional[TravelRequirements]:
        row = await _first(
            self._sessions,
            select(TravelRequirementsORM).where(TravelRequirementsORM.profile_id == profile_id),
        )
        if row is None:
            return None
        return TravelRequirements(
            id=row.id,
            profile_id=row.profile_id,
            travel_authorization_required=row.travel_authorization_required,
            travel_authorization_name=row.travel_authorization_name,
            travel_authorization_url=row.travel_authorization_url,
            arrival_form_required=row.arrival_form_required,
            arrival_form_name=row.arrival_form_name,
            arrival_form_url=row.arrival_form_url,
            other_requirements=decode_blob(row.other_requirements_json),
        )

    async def upsert_travel_requirements(self, profile_id: int, data: TravelRequirementsIn) -> int:
        row_id = await _upsert(
            self._sessions,
            TravelRequirementsORM,
            {"profile_id": profile_id, **data.model_dump()},
            ["profile_id"],
        )
        logger.info("Upserted travel requirements id=%s profile_id=%s", row_id, profile_id)
        return row_id

    # -- health requirements ------------------------------------------------

    async def get_health_requirements(self, profile_id: int) -> Optional[HealthRequirements]:
        row = await _first(
            self._sessions,
            select(HealthRequirementsORM).where(HealthRequirementsORM.profile_id == profile_id),
        )
        if row is None:
            return None
        return HealthRequirements(
            id=row.id,
            profile_id=row.profile_id,
            vaccines_required=decode_list(row.vaccines_required_json),
            vaccines_recommended=decode_list(row.vaccines_recommended_json),
            notes=row.notes,
        )

    async def upsert_health_requirements(self, profile_id: int, data: HealthRequirementsIn) -> int:
        row_id = await _upsert(
            self._sessions,
            HealthRequirementsORM,
            {"profile_id": profile_id, **data.model_dump()},
            ["profile_id"],
        )
        logger.info("Upserted health requirements id=%s profile_id=%s", row_id, profile_id)
        return row_id
