import pytest

from zingmedia.auth.rbac import ROLE_PERMISSIONS, Identity, Permission, Role, authorize, permissions_for
from zingmedia.errors import Forbidden


def _identity(role: Role) -> Identity:
    return Identity(
        user_id="user-1",
        email="user@example.com",
        role=role,
        tenant_id="agency-demo",
        permissions=permissions_for(role),
    )


def test_every_role_has_a_permission_set():
    assert set(ROLE_PERMISSIONS) == set(Role)


def test_role_mapping():
    assert ROLE_PERMISSIONS[Role.platform_admin] == frozenset({Permission.ALL})
    assert ROLE_PERMISSIONS[Role.viewer] == frozenset({Permission.VIEW_CONTENT})
    assert ROLE_PERMISSIONS[Role.client_approver] == frozenset(
        {Permission.VIEW_CONTENT, Permission.APPROVE_CONTENT, Permission.REQUEST_ADJUSTMENTS}
    )
    assert Permission.GENERATE_CONTENT in ROLE_PERMISSIONS[Role.content_manager]
    assert Permission.MANAGE_WORKFLOW in ROLE_PERMISSIONS[Role.content_manager]
    assert Permission.GENERATE_CONTENT not in ROLE_PERMISSIONS[Role.agency_admin]
    assert Permission.MANAGE_USERS in ROLE_PERMISSIONS[Role.agency_admin]


def test_role_mapping_is_read_only():
    with pytest.raises(TypeError):
        ROLE_PERMISSIONS[Role.viewer] = frozenset({Permission.ALL})


def test_wildcard_satisfies_any_permission():
    admin = _identity(Role.platform_admin)

    for permission in Permission:
        assert authorize(admin, permission) is admin


def test_authorize_raises_forbidden_naming_the_permission():
    with pytest.raises(Forbidden) as excinfo:
        authorize(_identity(Role.viewer), Permission.GENERATE_CONTENT)

    assert "generate_content" in excinfo.value.message


def test_viewer_cannot_create_briefing(api_client, login):
    headers = login("viewer@client.com")

    resp = api_client.post(
        "/briefings",
        headers=headers,
        json={"templateId": "brand-awareness", "name": "x", "data": {"objective": "a", "audience": "b"}},
    )

    assert resp.status_code == 403
    assert resp.json()["code"] == "forbidden"


def test_approver_cannot_drive_workflow_transitions(api_client, login):
    headers = login("approver@client.com")

    resp = api_client.post("/workflows/anything/transition", headers=headers, json={"newState": "approval"})

    assert resp.status_code == 403


def test_agency_admin_cannot_generate_content(api_client, login):
    headers = login("agency@example.com")

    resp = api_client.post(
        "/content/generate-with-agents",
        headers=headers,
        json={"briefingId": "whatever", "subject": "x"},
    )

    assert resp.status_code == 403


def test_permission_check_precedes_existence_check(api_client, login):
    headers = login("viewer@client.com")

    resp = api_client.get("/assets/missing-asset/download", headers=headers)

    assert resp.status_code == 403
