import uuid

import pytest
from fastapi.testclient import TestClient

from surecrm.api.main import app

ADMIN_EMAIL = "admin@surecrm.test"


def make_headers(email, user="tester"):
    return {"x-auth-request-user": user, "x-auth-request-email": email}


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


@pytest.fixture
def agent_headers():
    return make_headers(f"agent_{uuid.uuid4().hex[:8]}@example.com", "agent")


@pytest.fixture
def other_headers():
    return make_headers(f"other_{uuid.uuid4().hex[:8]}@example.com", "other")


@pytest.fixture
def admin_headers():
    return make_headers(ADMIN_EMAIL, "admin")


@pytest.fixture
def new_client(client, agent_headers):
    def _create(**overrides):
        payload = {"full_name": "Kim Minsu", "phone": f"010-{uuid.uuid4().int % 10000:04d}-1234"}
        payload.update(overrides)
        r = client.post("/clients/", json=payload, headers=agent_headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _create
