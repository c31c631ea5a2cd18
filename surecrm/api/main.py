"""
FastAPI app assembly: middleware and router wiring.
"""
import logging
import os

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.requests import Request
from starlette.responses import JSONResponse

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)

from surecrm.db.database import get_db
from surecrm.api.admin import router as admin_router
from surecrm.api.audits import router as audits_router
from surecrm.api.clients import router as clients_router
from surecrm.api.contact_history import router as contact_history_router
from surecrm.api.documents import router as documents_router
from surecrm.api.insurance import router as insurance_router
from surecrm.api.meetings import router as meetings_router
from surecrm.api.pipeline import router as pipeline_router
from surecrm.api.tags import router as tags_router
from surecrm.utils.runtime import dev_mode_active

# Database schema is managed by Alembic migrations.

app = FastAPI(
    title="SureCRM Service",
    description="API for insurance agents managing clients, policies, meetings and documents.",
    version="1.0.0",
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

origins = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:8000",
]
extra_origins = os.getenv("CORS_ALLOWED_ORIGINS", "")
origins.extend(o.strip() for o in extra_origins.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

WRITE_METHODS = ("POST", "PUT", "PATCH", "DELETE")


# Middleware: enforce read-only for unauthenticated requests
@app.middleware("http")
async def enforce_readonly_for_guests(request: Request, call_next):
    if request.method in WRITE_METHODS and not dev_mode_active():
        h = request.headers
        user_present = (
            h.get("x-auth-request-user")
            or h.get("x-auth-request-email")
            or h.get("x-forwarded-user")
            or h.get("x-forwarded-email")
        )
        if not user_present:
            logger.info("guest_write_rejected: %s %s", request.method, request.url.path)
            return JSONResponse(
                {"detail": "Guest mode is read-only. Sign in to perform changes."},
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
    return await call_next(request)


app.include_router(clients_router)
app.include_router(pipeline_router)
app.include_router(insurance_router)
app.include_router(meetings_router)
app.include_router(documents_router)
app.include_router(contact_history_router)
app.include_router(tags_router)
app.include_router(audits_router)
app.include_router(admin_router)


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok", "service": "surecrm-service"}
