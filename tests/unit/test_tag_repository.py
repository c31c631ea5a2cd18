from surecrm.db import crud, schemas


def _client(db, agent, phone):
    return crud.create_client(db, agent.id, schemas.ClientCreate(full_name="Tagged", phone=phone))


def test_tag_name_lookup_is_case_insensitive(db_session, agent):
    tag = crud.create_tag(db_session, agent.id, schemas.TagCreate(name="  VIP "))
    assert tag.name == "VIP"
    assert tag.privacy_level == "public"
    assert crud.get_active_tag_by_name(db_session, agent.id, "vip").id == tag.id
    assert crud.get_active_tag_by_name(db_session, agent.id, "vip", exclude_id=tag.id) is None


def test_usage_counts_only_count_active_clients(db_session, agent):
    tag = crud.create_tag(db_session, agent.id, schemas.TagCreate(name="family"))
    first = _client(db_session, agent, "010-0000-0001")
    second = _client(db_session, agent, "010-0000-0002")
    crud.assign_tag(db_session, client_id=first.id, tag_id=tag.id, assigned_by=agent.id)
    crud.assign_tag(db_session, client_id=second.id, tag_id=tag.id, assigned_by=agent.id)
    assert crud.get_tag_usage_counts(db_session, [tag.id]) == {tag.id: 2}

    crud.soft_delete_client(db_session, second.id)
    assert crud.get_tag_usage_counts(db_session, [tag.id]) == {tag.id: 1}
    assert crud.get_tag_usage_counts(db_session, []) == {}


def test_delete_tag_removes_assignments(db_session, agent):
    tag = crud.create_tag(db_session, agent.id, schemas.TagCreate(name="cold", color="#123abc"))
    client = _client(db_session, agent, "010-0000-0003")
    crud.assign_tag(db_session, client_id=client.id, tag_id=tag.id)
    assert [t.name for t in crud.get_client_tags(db_session, client.id)] == ["cold"]

    crud.delete_tag(db_session, tag.id)
    assert crud.get_tag(db_session, tag.id) is None
    assert crud.get_client_tags(db_session, client.id) == []
    assert crud.get_tag_assignment(db_session, client.id, tag.id) is None


def test_tags_for_clients_groups_by_client(db_session, agent):
    a = crud.create_tag(db_session, agent.id, schemas.TagCreate(name="a"))
    b = crud.create_tag(db_session, agent.id, schemas.TagCreate(name="b"))
    client = _client(db_session, agent, "010-0000-0004")
    bare = _client(db_session, agent, "010-0000-0005")
    crud.assign_tag(db_session, client_id=client.id, tag_id=b.id)
    crud.assign_tag(db_session, client_id=client.id, tag_id=a.id)
    grouped = crud.get_tags_for_clients(db_session, [client.id, bare.id])
    assert [t.name for t in grouped[client.id]] == ["a", "b"]
    assert grouped[bare.id] == []
    assert crud.unassign_tag(db_session, client.id, a.id) is not None
    assert crud.unassign_tag(db_session, client.id, a.id) is None
