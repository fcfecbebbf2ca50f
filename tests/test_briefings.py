import pytest

from conftest import SOCIAL_BRIEFING
from zingmedia.domain.catalog import get_template
from zingmedia.errors import InvalidBriefing
from zingmedia.services.briefings import validate_briefing_data


def test_templates_are_listed(api_client, login):
    headers = login("viewer@client.com")

    resp = api_client.get("/briefings/templates", headers=headers)

    assert resp.status_code == 200
    ids = [template["id"] for template in resp.json()]
    assert ids == ["social-campaign", "product-launch", "brand-awareness"]
    social = resp.json()[0]
    required = [item["name"] for item in social["fields"] if item["required"]]
    assert required == ["objective", "audience", "tone", "platforms"]


def test_create_and_get_briefing(api_client, login, create_briefing):
    headers = login("social@example.com")

    created = create_briefing(headers)
    fetched = api_client.get(f"/briefings/{created['id']}", headers=headers)
    listed = api_client.get("/briefings", headers=headers)

    assert created["status"] == "active"
    assert created["tenantId"] == "agency-demo"
    assert created["templateId"] == "social-campaign"
    assert created["data"]["platforms"] == ["instagram", "tiktok"]
    assert fetched.status_code == 200
    assert fetched.json() == created
    assert [item["id"] for item in listed.json()] == [created["id"]]


def test_unknown_template_is_rejected(api_client, login):
    headers = login("social@example.com")

    resp = api_client.post("/briefings", headers=headers, json={**SOCIAL_BRIEFING, "templateId": "nope"})

    assert resp.status_code == 400
    assert resp.json()["code"] == "template_not_found"


def test_missing_required_fields_are_rejected(api_client, login):
    headers = login("social@example.com")
    payload = {"templateId": "social-campaign", "name": "Incomplete", "data": {"objective": "Grow"}}

    resp = api_client.post("/briefings", headers=headers, json=payload)

    assert resp.status_code == 422
    assert resp.json()["code"] == "invalid_briefing"
    assert "audience" in resp.json()["detail"]
    assert api_client.get("/briefings", headers=headers).json() == []


def test_whitespace_only_name_is_rejected(api_client, login):
    headers = login("social@example.com")

    resp = api_client.post("/briefings", headers=headers, json={**SOCIAL_BRIEFING, "name": "   "})

    assert resp.status_code == 422
    assert api_client.get("/briefings", headers=headers).json() == []


def test_briefings_are_invisible_across_tenants(api_client, login, create_briefing):
    agency = login("social@example.com")
    client = login("viewer@client.com")
    created = create_briefing(agency)

    assert api_client.get("/briefings", headers=client).json() == []
    foreign = api_client.get(f"/briefings/{created['id']}", headers=client)
    missing = api_client.get("/briefings/unknown-id", headers=client)
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()


def test_comma_separated_platforms_are_normalized():
    template = get_template("social-campaign")
    data = {"objective": "o", "audience": "a", "tone": "t", "platforms": "Instagram, LinkedIn", "keywords": "a,b"}

    normalized = validate_briefing_data(template, data)

    assert normalized["platforms"] == ["instagram", "linkedin"]
    assert normalized["keywords"] == ["a", "b"]


def test_unsupported_platform_is_rejected():
    template = get_template("social-campaign")
    data = {"objective": "o", "audience": "a", "tone": "t", "platforms": ["myspace"]}

    with pytest.raises(InvalidBriefing):
        validate_briefing_data(template, data)
