from datetime import datetime, timedelta, timezone


def _iso(dt):
    return dt.isoformat()


def _policy(client, headers, client_id, **overrides):
    payload = {
        "insurance_type": "auto",
        "product_name": "Safe Drive",
        "insurance_company": "Sure Insurance",
        "policy_number": "POL-2024-000123",
        "insured_name": "Kim Minsu",
        "monthly_premium": "85000.00",
        "privacy_level": "restricted",
    }
    payload.update(overrides)
    r = client.post(f"/clients/{client_id}/insurance-policies", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_policy_lifecycle(client, agent_headers, new_client):
    owner = new_client()
    policy = _policy(client, agent_headers, owner["id"])
    assert policy["status"] == "active"
    assert policy["policy_number"] == "PO***23"

    unmasked = client.get(
        f"/clients/{owner['id']}/insurance-policies?show_confidential=true", headers=agent_headers
    ).json()
    assert unmasked[0]["policy_number"] == "POL-2024-000123"

    r = client.patch(f"/insurance-policies/{policy['id']}", json={"status": "cancelled"}, headers=agent_headers)
    assert r.status_code == 200
    assert r.json()["status"] == "cancelled"

    # Cancelled policies are listed but left out of the client detail
    assert len(client.get(f"/clients/{owner['id']}/insurance-policies", headers=agent_headers).json()) == 1
    assert client.get(f"/clients/{owner['id']}", headers=agent_headers).json()["insurance_policies"] == []

    r = client.patch(f"/insurance-policies/{policy['id']}", json={"product_name": None}, headers=agent_headers)
    assert r.status_code == 422

    assert client.delete(f"/insurance-policies/{policy['id']}", headers=agent_headers).status_code == 204
    assert client.get(f"/clients/{owner['id']}/insurance-policies", headers=agent_headers).json() == []
    assert client.delete(f"/insurance-policies/{policy['id']}", headers=agent_headers).status_code == 404


def test_policy_validation(client, agent_headers, new_client):
    owner = new_client()
    r = client.post(
        f"/clients/{owner['id']}/insurance-policies",
        json={"insurance_type": "pet", "product_name": "x", "insurance_company": "y"},
        headers=agent_headers,
    )
    assert r.status_code == 422


def test_other_agent_cannot_edit_policy(client, agent_headers, other_headers, new_client):
    owner = new_client()
    policy = _policy(client, agent_headers, owner["id"])
    r = client.patch(f"/insurance-policies/{policy['id']}", json={"status": "expired"}, headers=other_headers)
    assert r.status_code == 403


def test_meeting_lifecycle(client, agent_headers, new_client):
    owner = new_client()
    start = datetime.now(timezone.utc) + timedelta(days=2)
    payload = {"title": "First consultation", "start_time": _iso(start), "end_time": _iso(start + timedelta(hours=1))}
    r = client.post(f"/clients/{owner['id']}/meetings", json=payload, headers=agent_headers)
    assert r.status_code == 201, r.text
    meeting = r.json()
    assert meeting["meeting_type"] == "first_consultation"
    assert meeting["status"] == "scheduled"

    past = datetime.now(timezone.utc) - timedelta(days=2)
    client.post(
        f"/clients/{owner['id']}/meetings",
        json={"title": "Old", "start_time": _iso(past), "end_time": _iso(past + timedelta(hours=1))},
        headers=agent_headers,
    )
    assert len(client.get(f"/clients/{owner['id']}/meetings", headers=agent_headers).json()) == 2
    upcoming = client.get(f"/clients/{owner['id']}/meetings?upcoming_only=true", headers=agent_headers).json()
    assert [m["title"] for m in upcoming] == ["First consultation"]
    detail = client.get(f"/clients/{owner['id']}", headers=agent_headers).json()
    assert [m["id"] for m in detail["upcoming_meetings"]] == [meeting["id"]]

    r = client.patch(
        f"/meetings/{meeting['id']}", json={"end_time": _iso(start - timedelta(hours=1))}, headers=agent_headers
    )
    assert r.status_code == 422
    r = client.patch(f"/meetings/{meeting['id']}", json={"status": "completed"}, headers=agent_headers)
    assert r.status_code == 200
    assert client.get(f"/clients/{owner['id']}/meetings?upcoming_only=true", headers=agent_headers).json() == []

    assert client.delete(f"/meetings/{meeting['id']}", headers=agent_headers).status_code == 204
    assert client.delete(f"/meetings/{meeting['id']}", headers=agent_headers).status_code == 404


def test_meeting_must_end_after_start(client, agent_headers, new_client):
    owner = new_client()
    start = datetime.now(timezone.utc) + timedelta(days=1)
    r = client.post(
        f"/clients/{owner['id']}/meetings",
        json={"title": "Backwards", "start_time": _iso(start), "end_time": _iso(start)},
        headers=agent_headers,
    )
    assert r.status_code == 422


def test_document_lifecycle(client, agent_headers, new_client):
    owner = new_client()
    policy = _policy(client, agent_headers, owner["id"])
    payload = {
        "document_type": "id_card",
        "file_name": "kim_minsu_id.png",
        "file_path": "uploads/kim_minsu_id.png",
        "mime_type": "image/png",
        "size": 2048,
        "insurance_policy_id": policy["id"],
        "privacy_level": "confidential",
    }
    r = client.post(f"/clients/{owner['id']}/documents", json=payload, headers=agent_headers)
    assert r.status_code == 201, r.text
    document = r.json()
    assert document["file_name"] == "***"

    listed = client.get(f"/clients/{owner['id']}/documents?show_confidential=true", headers=agent_headers).json()
    assert listed[0]["file_name"] == "kim_minsu_id.png"

    r = client.patch(
        f"/documents/{document['id']}", json={"description": "front side", "privacy_level": "public"},
        headers=agent_headers,
    )
    assert r.status_code == 200
    assert r.json()["file_name"] == "kim_minsu_id.png"

    assert client.delete(f"/documents/{document['id']}", headers=agent_headers).status_code == 204
    assert client.get(f"/clients/{owner['id']}/documents", headers=agent_headers).json() == []


def test_document_policy_must_belong_to_client(client, agent_headers, new_client):
    first = new_client()
    second = new_client()
    policy = _policy(client, agent_headers, first["id"])
    r = client.post(
        f"/clients/{second['id']}/documents",
        json={"file_name": "a.pdf", "file_path": "uploads/a.pdf", "insurance_policy_id": policy["id"]},
        headers=agent_headers,
    )
    assert r.status_code == 422
    r = client.post(
        f"/clients/{second['id']}/documents",
        json={"file_name": "a.pdf", "file_path": "uploads/a.pdf", "size": -1},
        headers=agent_headers,
    )
    assert r.status_code == 422


def test_meeting_accepts_mixed_naive_and_aware_times(client, agent_headers, new_client):
    owner = new_client()
    r = client.post(
        f"/clients/{owner['id']}/meetings",
        json={"title": "Mixed", "start_time": "2030-01-01T10:00:00", "end_time": "2030-01-01T11:00:00+00:00"},
        headers=agent_headers,
    )
    assert r.status_code == 201, r.text
    meeting = r.json()

    r = client.post(
        f"/clients/{owner['id']}/meetings",
        json={"title": "Mixed", "start_time": "2030-01-01T12:00:00", "end_time": "2030-01-01T11:00:00+00:00"},
        headers=agent_headers,
    )
    assert r.status_code == 422

    r = client.patch(
        f"/meetings/{meeting['id']}",
        json={"start_time": "2030-01-01T12:00:00+00:00", "end_time": "2030-01-01T11:30:00"},
        headers=agent_headers,
    )
    assert r.status_code == 422


def test_listing_meetings_is_audited(client, agent_headers, new_client):
    owner = new_client()
    assert client.get(f"/clients/{owner['id']}/meetings", headers=agent_headers).json() == []
    assert client.get("/audits/?action_type=meeting_view", headers=agent_headers).json() == []

    start = datetime.now(timezone.utc) + timedelta(days=3)
    client.post(
        f"/clients/{owner['id']}/meetings",
        json={"title": "Review", "start_time": _iso(start), "end_time": _iso(start + timedelta(hours=1))},
        headers=agent_headers,
    )
    client.get(f"/clients/{owner['id']}/meetings", headers=agent_headers)
    rows = client.get("/audits/?action_type=meeting_view", headers=agent_headers).json()
    assert len(rows) == 1
    assert rows[0]["target_id"] == owner["id"]
    assert rows[0]["access_type"] == "view"


def test_confidential_document_hides_storage_path(client, agent_headers, new_client):
    owner = new_client()
    payload = {
        "document_type": "id_card",
        "file_name": "kim_minsu_idcard.pdf",
        "file_path": "clients/kim_minsu_idcard.pdf",
        "privacy_level": "confidential",
    }
    r = client.post(f"/clients/{owner['id']}/documents", json=payload, headers=agent_headers)
    assert r.status_code == 201, r.text
    assert r.json()["file_path"] == "***"

    listed = client.get(f"/clients/{owner['id']}/documents", headers=agent_headers).json()
    assert (listed[0]["file_name"], listed[0]["file_path"]) == ("***", "***")
    detail = client.get(f"/clients/{owner['id']}", headers=agent_headers).json()
    assert detail["documents"][0]["file_path"] == "***"

    revealed = client.get(
        f"/clients/{owner['id']}/documents", headers={**agent_headers, "X-Show-Confidential": "true"}
    ).json()
    assert revealed[0]["file_path"] == "clients/kim_minsu_idcard.pdf"


def test_records_of_deleted_client_are_gone(client, agent_headers, new_client):
    owner = new_client()
    policy = _policy(client, agent_headers, owner["id"])
    start = datetime.now(timezone.utc) + timedelta(days=1)
    meeting = client.post(
        f"/clients/{owner['id']}/meetings",
        json={"title": "Visit", "start_time": _iso(start), "end_time": _iso(start + timedelta(hours=1))},
        headers=agent_headers,
    ).json()
    document = client.post(
        f"/clients/{owner['id']}/documents",
        json={"file_name": "a.pdf", "file_path": "uploads/a.pdf"},
        headers=agent_headers,
    ).json()

    assert client.delete(f"/clients/{owner['id']}", headers=agent_headers).status_code == 204

    assert client.patch(
        f"/insurance-policies/{policy['id']}", json={"status": "expired"}, headers=agent_headers
    ).status_code == 404
    assert client.delete(f"/insurance-policies/{policy['id']}", headers=agent_headers).status_code == 404
    assert client.patch(f"/meetings/{meeting['id']}", json={"status": "completed"}, headers=agent_headers).status_code == 404
    assert client.delete(f"/meetings/{meeting['id']}", headers=agent_headers).status_code == 404
    assert client.patch(
        f"/documents/{document['id']}", json={"description": "x"}, headers=agent_headers
    ).status_code == 404
    assert client.delete(f"/documents/{document['id']}", headers=agent_headers).status_code == 404
