import os
import uuid

import pytest

# Database settings for code paths that build a Postgres URL; the engine
# itself runs on in-memory SQLite while pytest is loaded.
for _name, _value in {
    "POSTGRES_USER": "testuser",
    "POSTGRES_PASSWORD": "testpass",
    "POSTGRES_HOST": "localhost",
    "POSTGRES_PORT": "5432",
    "POSTGRES_DB": "testdb",
}.items():
    os.environ.setdefault(_name, _value)

from surecrm.db import models  # noqa: E402
from surecrm.db.database import SessionLocal, engine, init_sqlite_schema  # noqa: E402
from surecrm.utils.feature_flags import refresh_feature_flag_cache  # noqa: E402

ADMIN_EMAIL = "admin@surecrm.test"

init_sqlite_schema()


@pytest.fixture(autouse=True)
def _test_env(monkeypatch):
    monkeypatch.delenv("DEV_MODE", raising=False)
    monkeypatch.setenv("ADMIN_EMAILS", ADMIN_EMAIL)
    for name in (
        "FEATURE_AUDIT_LOGGING_ENABLED",
        "FEATURE_BACKOFFICE_ENABLED",
        "FEATURE_DATA_MASKING_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)
    refresh_feature_flag_cache()
    yield
    refresh_feature_flag_cache()


@pytest.fixture(autouse=True)
def _clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(models.Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def agent(db_session):
    user = models.User(email=f"agent_{uuid.uuid4().hex[:8]}@example.com", full_name="Test Agent")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user
