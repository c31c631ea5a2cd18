def _contact(client, headers, client_id, **overrides):
    payload = {
        "contact_method": "phone",
        "subject": "Renewal call",
        "content": "Discussed renewing the auto policy",
        "duration": 15,
        "outcome": "Interested",
        "next_action": "Send quote",
    }
    payload.update(overrides)
    r = client.post(f"/clients/{client_id}/contact-history", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_contact_history_lifecycle(client, agent_headers, new_client):
    owner = new_client()
    entry = _contact(client, agent_headers, owner["id"], privacy_level="public")
    assert entry["contact_method"] == "phone"
    assert entry["content"] == "Discussed renewing the auto policy"
    assert entry["contacted_at"]

    older = _contact(
        client, agent_headers, owner["id"], contact_method="kakao", contacted_at="2024-05-01T09:00:00+00:00"
    )
    listed = client.get(f"/clients/{owner['id']}/contact-history", headers=agent_headers).json()
    assert [c["id"] for c in listed] == [entry["id"], older["id"]]
    limited = client.get(f"/clients/{owner['id']}/contact-history?limit=1", headers=agent_headers).json()
    assert [c["id"] for c in limited] == [entry["id"]]

    r = client.patch(f"/contact-history/{entry['id']}", json={"outcome": "Signed"}, headers=agent_headers)
    assert r.status_code == 200
    assert r.json()["outcome"] == "Signed"
    r = client.patch(f"/contact-history/{entry['id']}", json={"contact_method": None}, headers=agent_headers)
    assert r.status_code == 422

    assert client.delete(f"/contact-history/{entry['id']}", headers=agent_headers).status_code == 204
    assert client.delete(f"/contact-history/{entry['id']}", headers=agent_headers).status_code == 404
    remaining = client.get(f"/clients/{owner['id']}/contact-history", headers=agent_headers).json()
    assert [c["id"] for c in remaining] == [older["id"]]


def test_contact_notes_are_masked(client, agent_headers, new_client):
    owner = new_client()
    _contact(client, agent_headers, owner["id"], privacy_level="confidential")
    _contact(client, agent_headers, owner["id"], subject="Visit", contacted_at="2024-01-01T00:00:00+00:00")

    confidential, restricted = client.get(f"/clients/{owner['id']}/contact-history", headers=agent_headers).json()
    assert confidential["content"] == "***"
    assert confidential["next_action"] == "***"
    assert restricted["subject"] == "Vi***it"
    assert restricted["content"] == "Di***cy"

    revealed = client.get(
        f"/clients/{owner['id']}/contact-history?show_confidential=true", headers=agent_headers
    ).json()
    assert revealed[0]["content"] == "Discussed renewing the auto policy"


def test_contact_history_is_audited(client, agent_headers, new_client):
    owner = new_client()
    entry = _contact(client, agent_headers, owner["id"])
    client.get(f"/clients/{owner['id']}/contact-history", headers=agent_headers)
    client.patch(f"/contact-history/{entry['id']}", json={"content": "private note"}, headers=agent_headers)

    views = client.get("/audits/?action_type=contact_view", headers=agent_headers).json()
    assert len(views) == 1
    assert views[0]["target_id"] == owner["id"]
    created = client.get("/audits/?action_type=contact_create", headers=agent_headers).json()
    assert created[0]["target_id"] == entry["id"]
    updated = client.get("/audits/?action_type=contact_update", headers=agent_headers).json()
    assert updated[0]["new_values"] == {"updated_fields": ["content"]}


def test_contact_history_validation_and_ownership(client, agent_headers, other_headers, new_client):
    owner = new_client()
    r = client.post(
        f"/clients/{owner['id']}/contact-history", json={"contact_method": "fax"}, headers=agent_headers
    )
    assert r.status_code == 422
    r = client.post(
        f"/clients/{owner['id']}/contact-history",
        json={"contact_method": "sms", "duration": -5},
        headers=agent_headers,
    )
    assert r.status_code == 422

    entry = _contact(client, agent_headers, owner["id"])
    assert client.get(f"/clients/{owner['id']}/contact-history", headers=other_headers).status_code == 403
    r = client.patch(f"/contact-history/{entry['id']}", json={"outcome": "x"}, headers=other_headers)
    assert r.status_code == 403

    assert client.delete(f"/clients/{owner['id']}", headers=agent_headers).status_code == 204
    r = client.patch(f"/contact-history/{entry['id']}", json={"outcome": "x"}, headers=agent_headers)
    assert r.status_code == 404
