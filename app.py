"""
App assembly entry point.

Re-exports the FastAPI `app` from `surecrm.api.main` so that
`uvicorn app:app` works from the repository root.
"""

from surecrm.api.main import app  # noqa: F401
