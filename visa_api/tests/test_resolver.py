"""
Unit tests for nationality / destination resolution (code or French name).
"""
import pytest

from fakes import FakeReferenceStore
from visa_api.errors import NotFoundError
from visa_api.requirements.resolver import IdentifierResolver
from visa_api.schemas import Country, Nationality

FRANCE = Nationality(id=1, name_fr="Française", iso2="FR")
JAPAN = Country(id=10, name_fr="Japon", iso2="JP")
# A two-letter name with no code of its own
OZ = Country(id=11, name_fr="Oz", iso2=None)


@pytest.fixture
def store() -> FakeReferenceStore:
    return FakeReferenceStore(countries=[JAPAN, OZ], nationalities=[FRANCE])


@pytest.mark.asyncio
async def test_two_letter_code_is_upper_cased(store: FakeReferenceStore) -> None:
    resolver = IdentifierResolver(store)
    assert (await resolver.nationality("fr")).id == FRANCE.id
    assert (await resolver.destination("jp")).id == JAPAN.id
    assert ("nationality_iso2", "FR") in store.calls


@pytest.mark.asyncio
async def test_name_lookup_for_longer_tokens(store: FakeReferenceStore) -> None:
    resolver = IdentifierResolver(store)
    assert (await resolver.destination("Japon")).id == JAPAN.id
    # No code lookup is attempted for tokens that are not two characters long
    assert ("country_iso2", "JAPON") not in store.calls


@pytest.mark.asyncio
async def test_two_letter_name_falls_back_to_name(store: FakeReferenceStore) -> None:
    resolver = IdentifierResolver(store)
    assert (await resolver.destination("Oz")).id == OZ.id
    assert store.calls == [("country_iso2", "OZ"), ("country_name", "Oz")]


@pytest.mark.asyncio
async def test_unknown_nationality_names_kind_and_token(store: FakeReferenceStore) -> None:
    resolver = IdentifierResolver(store)
    with pytest.raises(NotFoundError) as excinfo:
        await resolver.nationality("XX")
    assert excinfo.value.kind == "Nationality"
    assert "XX" in str(excinfo.value)


@pytest.mark.asyncio
async def test_unknown_destination(store: FakeReferenceStore) -> None:
    resolver = IdentifierResolver(store)
    with pytest.raises(NotFoundError, match="Destination country not found: Atlantide"):
        await resolver.destination("Atlantide")
