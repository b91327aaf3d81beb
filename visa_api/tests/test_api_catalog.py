"""
API tests for the public catalog endpoints and /health.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient

from seed import seed_france_japan
from visa_api.schemas import CountryIn, NationalityIn


@pytest_asyncio.fixture
async def seeded(reference_store, requirement_store) -> dict[str, int]:
    ids = await seed_france_japan(reference_store, requirement_store)
    await reference_store.upsert_country(CountryIn(name_fr="Allemagne", iso2="DE", continent="Europe"))
    await reference_store.upsert_nationality(NationalityIn(name_fr="Allemande", iso2="DE"))
    return ids


@pytest.mark.asyncio
async def test_list_countries(client: AsyncClient, seeded: dict) -> None:
    response = await client.get("/v1/countries")
    assert response.status_code == 200
    body = response.json()
    assert [c["iso2"] for c in body] == ["DE", "JP"]
    assert set(body[0]) == {"id", "name_fr", "iso2", "continent", "popular_destination", "image_url"}


@pytest.mark.asyncio
async def test_list_countries_filters(client: AsyncClient, seeded: dict) -> None:
    popular = await client.get("/v1/countries", params={"popular": "1"})
    assert [c["iso2"] for c in popular.json()] == ["JP"]

    not_popular = await client.get("/v1/countries", params={"popular": "0"})
    assert [c["iso2"] for c in not_popular.json()] == ["DE"]

    europe = await client.get("/v1/countries", params={"continent": "Europe"})
    assert [c["iso2"] for c in europe.json()] == ["DE"]

    search = await client.get("/v1/countries", params={"search": "japon"})
    assert [c["iso2"] for c in search.json()] == ["JP"]

    page = await client.get("/v1/countries", params={"limit": 1, "offset": 1})
    assert [c["iso2"] for c in page.json()] == ["JP"]


@pytest.mark.asyncio
async def test_list_countries_bad_filter(client: AsyncClient) -> None:
    response = await client.get("/v1/countries", params={"popular": "yes"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_get_country_with_portal(client: AsyncClient, seeded: dict) -> None:
    response = await client.get("/v1/countries/jp")
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == seeded["country_id"]
    assert body["official_portal"] == "https://www.mofa.go.jp/"

    germany = await client.get("/v1/countries/DE")
    assert germany.json()["official_portal"] is None


@pytest.mark.asyncio
async def test_get_country_unknown(client: AsyncClient) -> None:
    response = await client.get("/v1/countries/ZZ")
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Country not found: ZZ"


@pytest.mark.asyncio
async def test_country_guide(client: AsyncClient, seeded: dict) -> None:
    response = await client.get("/v1/countries/JP/guide")
    assert response.status_code == 200
    body = response.json()
    assert body["lang"] == "fr"
    assert body["guide_text"] == "Le Japon en bref."

    missing = await client.get("/v1/countries/JP/guide", params={"lang": "en"})
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_list_nationalities(client: AsyncClient, seeded: dict) -> None:
    response = await client.get("/v1/nationalities")
    assert response.status_code == 200
    assert [n["iso2"] for n in response.json()] == ["DE", "FR"]

    search = await client.get("/v1/nationalities", params={"search": "fran"})
    assert [n["name_fr"] for n in search.json()] == ["Française"]


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    for path in ("/health", "/v1/health"):
        response = await client.get(path)
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["database"] == "connected"
        assert "timestamp" in body


@pytest.mark.asyncio
async def test_security_headers(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert "content-security-policy" in response.headers
