"""SQLite compilation shims for PostgreSQL-specific SQLAlchemy types.

Registers a compiler for JSONB when the active dialect is SQLite so that
``Base.metadata.create_all()`` succeeds against the in-memory database used
by the test suite. Values are stored as plain JSON text; JSONB operators are
not emulated.

Imported for side-effects by surecrm.db.models.base.
"""
from __future__ import annotations

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.compiler import compiles


@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(element, compiler, **kw):  # pragma: no cover - trivial
    return "JSON"
