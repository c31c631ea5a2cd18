import pytest

from surecrm.db import models
from surecrm.utils.feature_flags import refresh_feature_flag_cache


def _actions(client, admin_headers, action):
    body = client.get(f"/admin/api/audit-logs?action={action}", headers=admin_headers).json()
    return [log["action_type"] for log in body["logs"]]


def test_dashboard_renders_for_admin(client, admin_headers, new_client):
    new_client()
    r = client.get("/admin/", headers=admin_headers)
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
    assert "Dashboard" in r.text
    assert 'id="clients-total">1<' in r.text
    assert "VIEW_ADMIN_DASHBOARD" in _actions(client, admin_headers, "VIEW_ADMIN")


@pytest.mark.parametrize("path", ["/admin/", "/admin/settings", "/admin/audit-logs", "/admin/users"])
def test_pages_require_system_admin(client, agent_headers, path):
    assert client.get(path, headers=agent_headers).status_code == 403


def test_create_and_update_setting(client, admin_headers):
    r = client.post(
        "/admin/settings",
        data={"action": "create_setting", "key": "max_upload_mb", "value": "25", "description": "Upload cap"},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert "Setting &#39;max_upload_mb&#39; created." in r.text or "Setting 'max_upload_mb' created." in r.text

    settings = client.get("/admin/api/settings", headers=admin_headers).json()
    assert settings[0]["key"] == "max_upload_mb"
    assert settings[0]["value"] == 25

    r = client.post(
        "/admin/settings",
        data={"action": "update_setting", "setting_id": settings[0]["id"], "value": '{"limit": 50}'},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert client.get("/admin/api/settings", headers=admin_headers).json()[0]["value"] == {"limit": 50}

    actions = _actions(client, admin_headers, "SETTING")
    for expected in ("START_CREATE_SETTING", "SUCCESS_CREATE_SETTING", "START_UPDATE_SETTING", "SUCCESS_UPDATE_SETTING"):
        assert expected in actions


def test_setting_errors_are_reported_on_page(client, admin_headers):
    data = {"action": "create_setting", "key": "theme", "value": "dark"}
    assert client.post("/admin/settings", data=data, headers=admin_headers).status_code == 200
    r = client.post("/admin/settings", data=data, headers=admin_headers)
    assert r.status_code == 400
    assert "already exists" in r.text

    r = client.post("/admin/settings", data={"action": "create_setting", "key": "x"}, headers=admin_headers)
    assert r.status_code == 400
    assert "Key and value are required." in r.text

    r = client.post("/admin/settings", data={"action": "purge"}, headers=admin_headers)
    assert r.status_code == 400
    assert "Unknown action: purge" in r.text

    assert "ERROR_CREATE_SETTING" in _actions(client, admin_headers, "ERROR")


def test_agent_cannot_modify_settings(client, agent_headers, admin_headers):
    r = client.post("/admin/settings", data={"action": "create_setting", "key": "k", "value": "v"}, headers=agent_headers)
    assert r.status_code == 403
    assert client.get("/admin/api/settings", headers=admin_headers).json() == []
    stats = client.get("/admin/api/audit-logs", headers=admin_headers).json()["stats"]
    assert stats["unauthorized"] == 1


def test_audit_log_page_search(client, admin_headers, new_client):
    new_client()
    r = client.get("/admin/audit-logs?search=client", headers=admin_headers)
    assert r.status_code == 200
    assert "client_create" in r.text
    assert 'id="stat-total">' in r.text


def test_users_page_masks_contact_details(client, admin_headers, agent_headers):
    client.get("/tags/", headers=agent_headers)
    r = client.get("/admin/users", headers=admin_headers)
    assert r.status_code == 200
    assert agent_headers["x-auth-request-email"] not in r.text
    assert "***@example.com" in r.text


def test_toggle_user_status(client, admin_headers, agent_headers, db_session):
    client.get("/tags/", headers=agent_headers)
    client.get("/tags/", headers=admin_headers)
    by_email = {u.email: u.id for u in db_session.query(models.User).all()}
    admin_id = str(by_email[admin_headers["x-auth-request-email"]])
    agent_id = str(by_email[agent_headers["x-auth-request-email"]])

    r = client.post("/admin/users", data={"action": "toggle_user_status", "user_id": admin_id}, headers=admin_headers)
    assert r.status_code == 400
    assert "You cannot deactivate your own account." in r.text

    r = client.post("/admin/users", data={"action": "toggle_user_status", "user_id": agent_id}, headers=admin_headers)
    assert r.status_code == 200
    assert " deactivated." in r.text
    assert client.get("/tags/", headers=agent_headers).status_code == 403

    r = client.post("/admin/users", data={"action": "toggle_user_status", "user_id": agent_id}, headers=admin_headers)
    assert " activated." in r.text
    assert client.get("/tags/", headers=agent_headers).status_code == 200

    actions = _actions(client, admin_headers, "TOGGLE_USER_STATUS")
    assert "SUCCESS_TOGGLE_USER_STATUS" in actions
    assert "ERROR_TOGGLE_USER_STATUS" in actions



def test_agent_cannot_toggle_users(client, agent_headers):
    r = client.post("/admin/users", data={"action": "toggle_user_status", "user_id": "x"}, headers=agent_headers)
    assert r.status_code == 403


def test_stats_api(client, admin_headers, new_client):
    new_client()
    r = client.get("/admin/api/stats/clients_summary", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["stat_data"] == {"total": 1, "active": 1, "deleted": 0}
    assert client.get("/admin/api/stats/invitations", headers=admin_headers).status_code == 404


def test_backoffice_can_be_disabled(client, admin_headers, monkeypatch):
    monkeypatch.setenv("FEATURE_BACKOFFICE_ENABLED", "false")
    refresh_feature_flag_cache()
    assert client.get("/admin/", headers=admin_headers).status_code == 404
    assert client.get("/admin/api/settings", headers=admin_headers).status_code == 404
