"""
End-to-end API tests for GET /v1/requirements and the entry-profile reads.

Tests the full stack: HTTP request → query validation → resolution →
concurrent store reads on SQLite → response shaping → error envelope.

Run from the project root: pytest visa_api/tests/test_api_requirements.py -v
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient

from seed import seed_france_japan
from visa_api.requirements.aggregator import NO_AUTHORIZATION_MESSAGE


@pytest_asyncio.fixture
async def seeded(reference_store, requirement_store) -> dict[str, int]:
    return await seed_france_japan(reference_store, requirement_store)


# ---------------------------------------------------------------------------
# GET /v1/requirements
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_requirements_france_to_japan(client: AsyncClient, seeded: dict) -> None:
    response = await client.get(
        "/v1/requirements", params={"nationality": "FR", "destination": "JP"}
    )
    assert response.status_code == 200, response.text
    body = response.json()

    assert body["nationality"] == {"id": seeded["nationality_id"], "name_fr": "Française", "iso2": "FR"}
    assert body["destination"]["name_fr"] == "Japon"
    assert body["destination"]["continent"] == "Asie"
    assert body["destination"]["official_portal"] == "https://www.mofa.go.jp/"
    assert body["purpose"] == "tourism"
    assert body["last_checked"] == "2025-01-15"
    assert body["source_confidence"] == 0.9
    assert body["needs_manual_review"] is False

    sections = body["sections"]
    assert [d["nom_document"] for d in sections["documents"]] == ["Passeport", "Visit Japan Web"]
    assert sections["documents"][0]["type_document"] == "passport_only"
    assert sections["travel_authorization"] == {
        "required": False,
        "name": "",
        "url": "",
        "message": NO_AUTHORIZATION_MESSAGE,
    }
    assert sections["arrival_form"] == {
        "required": True,
        "name": "Visit Japan Web",
        "url": "https://vjw-lp.digital.go.jp/en/",
        "notes": "",
    }
    assert sections["vaccines"]["recommended"] == ["Hépatite A", "Encéphalite japonaise"]
    assert sections["guide"] == {"lang": "fr", "text": "Le Japon en bref."}

    assert body["sources"][0]["title"] == "Exemption of Visa"
    assert body["llm"] == {"model": "gpt-4o", "prompt_version": "v3"}


@pytest.mark.asyncio
async def test_requirements_by_name_and_lower_case_code(client: AsyncClient, seeded: dict) -> None:
    response = await client.get(
        "/v1/requirements", params={"nationality": "fr", "destination": "Japon"}
    )
    assert response.status_code == 200, response.text
    assert response.json()["destination"]["iso2"] == "JP"


@pytest.mark.asyncio
async def test_requirements_guide_missing_for_lang(client: AsyncClient, seeded: dict) -> None:
    response = await client.get(
        "/v1/requirements", params={"nationality": "FR", "destination": "JP", "lang": "de"}
    )
    assert response.status_code == 200
    assert response.json()["sections"]["guide"] == {"lang": "de", "text": None}


@pytest.mark.asyncio
async def test_requirements_unknown_nationality(client: AsyncClient, seeded: dict) -> None:
    response = await client.get(
        "/v1/requirements", params={"nationality": "XX", "destination": "JP"}
    )
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert "Nationality" in error["message"]


@pytest.mark.asyncio
async def test_requirements_unknown_destination(client: AsyncClient, seeded: dict) -> None:
    response = await client.get(
        "/v1/requirements", params={"nationality": "FR", "destination": "Atlantide"}
    )
    assert response.status_code == 404
    assert "Destination country" in response.json()["error"]["message"]


@pytest.mark.asyncio
async def test_requirements_unknown_purpose(client: AsyncClient, seeded: dict) -> None:
    response = await client.get(
        "/v1/requirements",
        params={"nationality": "FR", "destination": "JP", "purpose": "business"},
    )
    assert response.status_code == 404
    assert "Entry profile" in response.json()["error"]["message"]


@pytest.mark.asyncio
async def test_requirements_missing_parameter(client: AsyncClient) -> None:
    response = await client.get("/v1/requirements", params={"nationality": "FR"})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any(d["field"] == "destination" for d in error["details"])


# ---------------------------------------------------------------------------
# GET /v1/entry-profiles/...
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_entry_profile_detail(client: AsyncClient, seeded: dict) -> None:
    profile_id = seeded["profile_id"]
    response = await client.get(f"/v1/entry-profiles/{profile_id}")
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["profile"]["id"] == profile_id
    assert body["profile"]["purpose"] == "tourism"
    assert len(body["documents"]) == 2
    assert body["travel_requirements"]["arrival_form_required"] is True
    assert body["health_requirements"]["notes"] == "Aucun vaccin obligatoire."
    assert body["sources"][0]["url"].startswith("https://www.mofa.go.jp/")


@pytest.mark.asyncio
async def test_entry_profile_sub_resources(client: AsyncClient, seeded: dict) -> None:
    profile_id = seeded["profile_id"]

    documents = await client.get(f"/v1/entry-profiles/{profile_id}/documents")
    assert documents.status_code == 200
    assert [d["nom_document"] for d in documents.json()] == ["Passeport", "Visit Japan Web"]

    travel = await client.get(f"/v1/entry-profiles/{profile_id}/travel-requirements")
    assert travel.status_code == 200
    assert travel.json()["arrival_form_name"] == "Visit Japan Web"

    health = await client.get(f"/v1/entry-profiles/{profile_id}/health")
    assert health.status_code == 200
    assert health.json()["vaccines_required"] == []


@pytest.mark.asyncio
async def test_entry_profile_unknown_id(client: AsyncClient) -> None:
    for path in (
        "/v1/entry-profiles/999",
        "/v1/entry-profiles/999/documents",
        "/v1/entry-profiles/999/travel-requirements",
        "/v1/entry-profiles/999/health",
    ):
        response = await client.get(path)
        assert response.status_code == 404, path
        assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_entry_profile_non_numeric_id(client: AsyncClient) -> None:
    response = await client.get("/v1/entry-profiles/abc")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
