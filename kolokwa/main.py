"""KoloKwa TechGuild – FastAPI application."""
# Load .env before any app code that might read config
from dotenv import load_dotenv
from pathlib import Path
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from kolokwa.config import get_settings
from kolokwa.database import Base, SessionLocal, engine
from kolokwa.exceptions import KoloKwaError
# Import models so Base.metadata has all tables before create_all (schema source of truth)
from kolokwa.models import Event, StaffUser, User, PendingSignup, Participant  # noqa: F401
from kolokwa.routers import auth, events, participant, verify
from kolokwa.seed import seed_initial_admin, seed_sample_event

log = logging.getLogger("uvicorn.error")

settings = get_settings()
app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KoloKwaError)
async def kolokwa_error_handler(request: Request, exc: KoloKwaError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    error_id = str(uuid.uuid4())
    log.error("Unhandled exception %s on %s %s: %s", error_id, request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error_id": error_id},
    )


app.include_router(auth.router)
app.include_router(events.router)
app.include_router(verify.router)
app.include_router(participant.router)


@app.on_event("startup")
def startup():
    if settings.mailgun_api_key and settings.mailgun_domain:
        log.info("[Mailgun] App using domain=%s (invitation emails use this)", settings.mailgun_domain)
    elif settings.sendgrid_api_key:
        log.info("[SendGrid] App using SendGrid for invitation emails")
    else:
        log.warning("[Mail] Not configured - event signups will answer 503; set MAILGUN_API_KEY and MAILGUN_DOMAIN in .env and restart")
    if engine is None:
        log.warning("[DB] DATABASE_URL is empty - store-backed routes will answer 503")
        return
    try:
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        try:
            seed_initial_admin(db)
            if settings.seed_sample_event:
                seed_sample_event(db)
        finally:
            db.close()
    except SQLAlchemyError as e:
        log.warning("Database startup failed (tables/seed skipped). Check DATABASE_URL and network. Error: %s", e)


@app.get("/")
def root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
