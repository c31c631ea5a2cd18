def _tag(client, headers, **payload):
    r = client.post("/tags/", json={"name": "VIP", **payload}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_and_list_tags(client, agent_headers):
    tag = _tag(client, agent_headers, color="#ff8800")
    assert tag["usage_count"] == 0
    assert tag["privacy_level"] == "public"
    assert client.post("/tags/", json={"name": "vip"}, headers=agent_headers).status_code == 409
    assert client.post("/tags/", json={"name": "x", "color": "orange"}, headers=agent_headers).status_code == 422
    names = [t["name"] for t in client.get("/tags/", headers=agent_headers).json()]
    assert names == ["VIP"]


def test_assign_and_unassign(client, agent_headers, new_client):
    tag = _tag(client, agent_headers)
    target = new_client()

    r = client.post(f"/clients/{target['id']}/tags/{tag['id']}", headers=agent_headers)
    assert r.status_code == 201
    assert r.json()["tag_id"] == tag["id"]
    assert client.post(f"/clients/{target['id']}/tags/{tag['id']}", headers=agent_headers).status_code == 409

    listed = client.get("/tags/", headers=agent_headers).json()
    assert listed[0]["usage_count"] == 1
    client_tags = client.get(f"/clients/{target['id']}/tags", headers=agent_headers).json()
    assert [t["name"] for t in client_tags] == ["VIP"]

    items = client.get(f"/clients/?tag_id={tag['id']}", headers=agent_headers).json()["items"]
    assert [i["id"] for i in items] == [target["id"]]
    assert items[0]["tags"][0]["name"] == "VIP"

    assert client.delete(f"/clients/{target['id']}/tags/{tag['id']}", headers=agent_headers).status_code == 204
    assert client.delete(f"/clients/{target['id']}/tags/{tag['id']}", headers=agent_headers).status_code == 404


def test_update_and_delete_tag(client, agent_headers, new_client):
    tag = _tag(client, agent_headers)
    _tag(client, agent_headers, name="Family")
    target = new_client()
    client.post(f"/clients/{target['id']}/tags/{tag['id']}", headers=agent_headers)

    r = client.patch(f"/tags/{tag['id']}", json={"name": "family"}, headers=agent_headers)
    assert r.status_code == 409
    r = client.patch(f"/tags/{tag['id']}", json={"name": "Premium", "color": "#000000"}, headers=agent_headers)
    assert r.status_code == 200
    assert r.json()["usage_count"] == 1

    assert client.delete(f"/tags/{tag['id']}", headers=agent_headers).status_code == 204
    assert client.get(f"/clients/{target['id']}/tags", headers=agent_headers).json() == []
    assert client.patch(f"/tags/{tag['id']}", json={"name": "Again"}, headers=agent_headers).status_code == 404


def test_tags_are_private_to_agent(client, agent_headers, other_headers, new_client):
    tag = _tag(client, agent_headers)
    assert client.get("/tags/", headers=other_headers).json() == []
    assert client.delete(f"/tags/{tag['id']}", headers=other_headers).status_code == 403

    # The other agent cannot attach someone else's tag to their own client
    r = client.post("/clients/", json={"full_name": "Theirs", "phone": "010-1000-2000"}, headers=other_headers)
    theirs = r.json()
    r = client.post(f"/clients/{theirs['id']}/tags/{tag['id']}", headers=other_headers)
    assert r.status_code == 403


def test_blank_tag_names_are_rejected(client, agent_headers):
    assert client.post("/tags/", json={"name": "   "}, headers=agent_headers).status_code == 422
    tag = _tag(client, agent_headers, name="  Family  ")
    assert tag["name"] == "Family"
    r = client.patch(f"/tags/{tag['id']}", json={"name": " \t "}, headers=agent_headers)
    assert r.status_code == 422
    assert [t["name"] for t in client.get("/tags/", headers=agent_headers).json()] == ["Family"]
