import uuid


def _me(client, headers):
    # Any authenticated request creates the profile; the id comes back on audit rows
    client.post("/tags/", json={"name": f"t{uuid.uuid4().hex[:6]}"}, headers=headers)
    return client.get("/audits/?action_type=tag_create", headers=headers).json()[0]["actor_user_id"]


def test_agent_sees_only_own_rows(client, agent_headers, other_headers, new_client):
    new_client()
    other_id = _me(client, other_headers)

    logs = client.get("/audits/", headers=agent_headers).json()
    assert logs
    assert all(log["actor_user_id"] != other_id for log in logs)

    r = client.get(f"/audits/?user_id={other_id}", headers=agent_headers)
    assert r.status_code == 403


def test_admin_can_filter_by_user(client, admin_headers, other_headers):
    other_id = _me(client, other_headers)
    logs = client.get(f"/audits/?user_id={other_id}", headers=admin_headers).json()
    assert logs and all(log["actor_user_id"] == other_id for log in logs)


def test_client_access_history(client, agent_headers, other_headers, admin_headers, new_client):
    created = new_client()
    client.get(f"/clients/{created['id']}", headers=agent_headers)
    client.get(f"/clients/{created['id']}", headers=admin_headers)

    history = client.get(f"/audits/clients/{created['id']}", headers=admin_headers).json()
    actions = [log["action_type"] for log in history]
    assert actions.count("client_view") == 2
    assert "client_create" in actions

    assert client.get(f"/audits/clients/{created['id']}", headers=other_headers).status_code == 403
    assert client.get(f"/audits/clients/{uuid.uuid4()}", headers=agent_headers).status_code == 404


def test_requires_identity(client):
    assert client.get("/audits/").status_code == 401
