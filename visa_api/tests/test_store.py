"""
Integration tests for ReferenceStore / RequirementStore on SQLite.

Focus: upserts keep their ids stable, document sets are replaced as a whole,
and JSON columns come back decoded.
"""
import pytest
from sqlalchemy.exc import IntegrityError

from seed import PASSPORT, VJW, seed_france_japan
from visa_api.schemas import (
    CountryIn,
    DocumentType,
    EntryCount,
    EntryDocumentIn,
    EntryProfileIn,
    HealthRequirementsIn,
    NationalityIn,
    TravelRequirementsIn,
)
from visa_api.store import ReferenceStore, RequirementStore


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_country_upsert_by_iso2_keeps_id(reference_store: ReferenceStore) -> None:
    first = await reference_store.upsert_country(CountryIn(name_fr="Japon", iso2="jp"))
    second = await reference_store.upsert_country(
        CountryIn(name_fr="Japon", iso2="JP", continent="Asie", popular_destination=True)
    )
    assert first == second

    country = await reference_store.get_country_by_iso2("JP")
    assert country.id == first
    assert country.continent == "Asie"
    assert country.popular_destination is True


@pytest.mark.asyncio
async def test_country_without_iso2_upserts_by_name(reference_store: ReferenceStore) -> None:
    first = await reference_store.upsert_country(CountryIn(name_fr="Kosovo"))
    second = await reference_store.upsert_country(CountryIn(name_fr="Kosovo", continent="Europe"))
    assert first == second
    assert (await reference_store.get_country_by_name("Kosovo")).continent == "Europe"


@pytest.mark.asyncio
async def test_name_keyed_upsert_keeps_stored_iso2(reference_store: ReferenceStore) -> None:
    first = await reference_store.upsert_country(CountryIn(name_fr="Japon", iso2="JP"))
    second = await reference_store.upsert_country(CountryIn(name_fr="Japon", continent="Asie"))
    assert second == first

    country = await reference_store.get_country_by_iso2("JP")
    assert country is not None
    assert country.id == first
    assert country.continent == "Asie"


@pytest.mark.asyncio
async def test_country_name_taken_by_other_iso2_conflicts(reference_store: ReferenceStore) -> None:
    await reference_store.upsert_country(CountryIn(name_fr="Japon", iso2="JP"))
    with pytest.raises(IntegrityError):
        await reference_store.upsert_country(CountryIn(name_fr="Japon", iso2="JX"))


@pytest.mark.asyncio
async def test_nationality_upsert_keeps_id(reference_store: ReferenceStore) -> None:
    first = await reference_store.upsert_nationality(NationalityIn(name_fr="Française", iso2="FR"))
    second = await reference_store.upsert_nationality(NationalityIn(name_fr="Francaise", iso2="FR"))
    assert first == second
    assert (await reference_store.get_nationality_by_id(first)).name_fr == "Francaise"


@pytest.mark.asyncio
async def test_list_countries_filters(reference_store: ReferenceStore) -> None:
    await reference_store.upsert_country(CountryIn(name_fr="Japon", iso2="JP", continent="Asie", popular_destination=True))
    await reference_store.upsert_country(CountryIn(name_fr="Allemagne", iso2="DE", continent="Europe"))
    await reference_store.upsert_country(CountryIn(name_fr="Thaïlande", iso2="TH", continent="Asie"))

    names = [c.name_fr for c in await reference_store.list_countries()]
    assert names == ["Allemagne", "Japon", "Thaïlande"]

    asia = await reference_store.list_countries(continent="Asie")
    assert [c.iso2 for c in asia] == ["JP", "TH"]

    popular = await reference_store.list_countries(popular=True)
    assert [c.iso2 for c in popular] == ["JP"]

    search = await reference_store.list_countries(search="jap")
    assert [c.iso2 for c in search] == ["JP"]

    page = await reference_store.list_countries(limit=1, offset=1)
    assert [c.name_fr for c in page] == ["Japon"]


@pytest.mark.asyncio
async def test_official_portal_is_one_per_country(reference_store: ReferenceStore) -> None:
    country_id = await reference_store.upsert_country(CountryIn(name_fr="Japon", iso2="JP"))
    first = await reference_store.upsert_official_portal(country_id, "https://old.example/")
    second = await reference_store.upsert_official_portal(country_id, "https://www.mofa.go.jp/")
    assert first == second
    assert (await reference_store.get_official_portal(country_id)).url == "https://www.mofa.go.jp/"


@pytest.mark.asyncio
async def test_guide_is_per_language(reference_store: ReferenceStore) -> None:
    country_id = await reference_store.upsert_country(CountryIn(name_fr="Japon", iso2="JP"))
    fr = await reference_store.upsert_country_guide(country_id, "fr", "Bonjour")
    en = await reference_store.upsert_country_guide(country_id, "en", "Hello")
    assert fr != en
    assert await reference_store.upsert_country_guide(country_id, "fr", "Salut") == fr
    assert (await reference_store.get_country_guide(country_id, "fr")).guide_text == "Salut"
    assert await reference_store.get_country_guide(country_id, "de") is None


# ---------------------------------------------------------------------------
# Requirement data
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_entry_profile_upsert_keeps_id_and_decodes_sources(
    reference_store: ReferenceStore, requirement_store: RequirementStore
) -> None:
    ids = await seed_france_japan(reference_store, requirement_store)

    again = await requirement_store.upsert_entry_profile(
        EntryProfileIn(
            nationality_id=ids["nationality_id"],
            destination_country_id=ids["country_id"],
            purpose="tourism",
            needs_manual_review=True,
            llm_sources_json="garbage",
            llm_raw_json='{"answer": 42}',
        )
    )
    assert again == ids["profile_id"]

    profile = await requirement_store.get_entry_profile_by_id(again)
    assert profile.needs_manual_review is True
    assert profile.sources == []
    assert profile.llm_raw == {"answer": 42}


@pytest.mark.asyncio
async def test_profiles_are_distinct_per_purpose(
    reference_store: ReferenceStore, requirement_store: RequirementStore
) -> None:
    ids = await seed_france_japan(reference_store, requirement_store)
    business = await requirement_store.upsert_entry_profile(
        EntryProfileIn(
            nationality_id=ids["nationality_id"],
            destination_country_id=ids["country_id"],
            purpose="business",
        )
    )
    assert business != ids["profile_id"]
    found = await requirement_store.get_entry_profile(ids["nationality_id"], ids["country_id"], "business")
    assert found.id == business


@pytest.mark.asyncio
async def test_replace_documents_replaces_whole_set(
    reference_store: ReferenceStore, requirement_store: RequirementStore
) -> None:
    ids = await seed_france_japan(reference_store, requirement_store)
    profile_id = ids["profile_id"]

    docs = await requirement_store.list_entry_documents(profile_id)
    assert [d.nom_document for d in docs] == ["Passeport", "Visit Japan Web"]

    count = await requirement_store.replace_entry_documents(profile_id, [VJW])
    assert count == 1
    docs = await requirement_store.list_entry_documents(profile_id)
    assert [d.nom_document for d in docs] == ["Visit Japan Web"]
    assert docs[0].prix_devise == "JPY"
    assert docs[0].application_url == "https://vjw-lp.digital.go.jp/en/"

    await requirement_store.replace_entry_documents(profile_id, [PASSPORT, VJW])
    docs = await requirement_store.list_entry_documents(profile_id)
    assert [d.nom_document for d in docs] == ["Passeport", "Visit Japan Web"]

    assert await requirement_store.replace_entry_documents(profile_id, []) == 0
    assert await requirement_store.list_entry_documents(profile_id) == []


@pytest.mark.asyncio
async def test_failed_replacement_keeps_previous_documents(
    reference_store: ReferenceStore, requirement_store: RequirementStore
) -> None:
    ids = await seed_france_japan(reference_store, requirement_store)
    profile_id = ids["profile_id"]

    # Bypasses validation: nom_document is NOT NULL, so the insert fails after the delete
    nameless = EntryDocumentIn.model_construct(
        nom_document=None,
        type_document=DocumentType.visa,
        required=True,
        nombre_entrees=EntryCount.single,
    )
    with pytest.raises(IntegrityError):
        await requirement_store.replace_entry_documents(profile_id, [VJW, nameless])

    docs = await requirement_store.list_entry_documents(profile_id)
    assert [d.nom_document for d in docs] == ["Passeport", "Visit Japan Web"]


@pytest.mark.asyncio
async def test_travel_and_health_upsert_per_profile(
    reference_store: ReferenceStore, requirement_store: RequirementStore
) -> None:
    ids = await seed_france_japan(reference_store, requirement_store)
    profile_id = ids["profile_id"]
    travel_before = await requirement_store.get_travel_requirements(profile_id)

    travel_id = await requirement_store.upsert_travel_requirements(
        profile_id,
        TravelRequirementsIn(
            travel_authorization_required=True,
            travel_authorization_name="JESTA",
            arrival_form_required=False,
            other_requirements_json='{"return_ticket": true}',
        ),
    )
    assert travel_id == travel_before.id
    travel = await requirement_store.get_travel_requirements(profile_id)
    assert travel.travel_authorization_name == "JESTA"
    assert travel.other_requirements == {"return_ticket": True}

    await requirement_store.upsert_health_requirements(
        profile_id,
        HealthRequirementsIn(vaccines_required_json="{not a list"),
    )
    health = await requirement_store.get_health_requirements(profile_id)
    assert health.vaccines_required == []
    assert health.vaccines_recommended == []
    assert health.notes is None


@pytest.mark.asyncio
async def test_missing_sub_resources_are_none(
    reference_store: ReferenceStore, requirement_store: RequirementStore
) -> None:
    assert await requirement_store.get_entry_profile_by_id(999) is None
    assert await requirement_store.get_travel_requirements(999) is None
    assert await requirement_store.get_health_requirements(999) is None
    assert await requirement_store.list_entry_documents(999) == []
