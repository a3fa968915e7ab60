import os
import logging
from pathlib import Path
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from sqlalchemy import inspect

from .routers import analytics, contact, investment, newsletter, waitlist
from .config import get_settings, clear_settings_cache
from .database import Base, engine
from .exceptions import IntakeError, ValidationFailed
from .services.email_service import get_email_config_info
from .utils import error_response, success_response

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# .env is only present in local development
backend_dir = Path(__file__).parent.parent
env_path = backend_dir / ".env"
loaded = load_dotenv(dotenv_path=env_path)
if loaded:
    logger.info(f"Environment loaded from: {env_path}")

clear_settings_cache()

# Register every model on Base.metadata before create_all()
from . import models  # noqa: F401,E402

app_settings = get_settings()

app = FastAPI(title=app_settings.app_name, version="0.1.0", redirect_slashes=False)

allowed_origins = [
    "http://localhost:3000",
    "http://localhost:3001",
]

cors_origin_env = os.getenv("CORS_ORIGIN", "")
cors_origin_configured = cors_origin_env and cors_origin_env != "http://localhost:3000"

if cors_origin_configured:
    for origin in (o.strip() for o in cors_origin_env.split(",")):
        if origin and origin not in allowed_origins:
            allowed_origins.append(origin)

# Production without an explicit CORS_ORIGIN: the site may be served from several domains
if app_settings.environment == "production" and not cors_origin_configured:
    logger.warning("⚠️ CORS_ORIGIN not configured in production, allowing every origin")
    allowed_origins = ["*"]

logger.info(f"🌐 Allowed CORS origins: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins if "*" not in allowed_origins else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _field_name(loc) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query")]
    return ".".join(parts) if parts else str(loc[0]) if loc else "request"


@app.exception_handler(IntakeError)
async def intake_error_handler(request: Request, exc: IntakeError):
    data = {"errors": exc.errors} if isinstance(exc, ValidationFailed) else None
    return error_response(exc.message, status_code=exc.status_code, data=data)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [{"field": _field_name(err.get("loc", ())), "message": err.get("msg", "Invalid value")} for err in exc.errors()]
    failure = ValidationFailed(errors)
    return error_response(failure.message, status_code=failure.status_code, data={"errors": errors})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return error_response(IntakeError.default_message, status_code=500)


def create_tables():
    """Create missing tables."""
    try:
        expected_tables = list(Base.metadata.tables.keys())
        logger.info(f"Creating tables: {', '.join(expected_tables)}")

        Base.metadata.create_all(bind=engine)

        existing_tables = inspect(engine).get_table_names()
        missing_tables = [t for t in expected_tables if t not in existing_tables]
        if missing_tables:
            logger.warning(f"⚠️  Missing tables: {', '.join(missing_tables)}")
        else:
            logger.info("✅ All tables created/verified")
    except Exception as e:
        logger.error(f"❌ ERROR creating tables: {str(e)}", exc_info=True)
        raise


# Do not block startup when the database is unreachable
try:
    create_tables()
except Exception as e:
    logger.error(f"❌ Error creating tables at startup: {str(e)}", exc_info=True)
    logger.warning("⚠️ The server keeps starting, but database endpoints may fail")

app.include_router(waitlist.router, prefix="/api")
app.include_router(contact.router, prefix="/api")
app.include_router(newsletter.router, prefix="/api")
app.include_router(investment.router, prefix="/api")
app.include_router(analytics.router, prefix="/api")


@app.get("/", tags=["root"])
async def root():
    return success_response({"name": app_settings.app_name}, f"Welcome to the {app_settings.brand_name} backend")


@app.get("/api/health", tags=["health"])
async def health():
    settings = get_settings()
    return success_response(
        {
            "status": "ok",
            "server": "alive",
            "environment": settings.environment,
            "email": get_email_config_info(settings),
            "webhookConfigured": bool(settings.slack_webhook_url),
        }
    )


@app.get("/favicon.ico", tags=["static"])
async def favicon():
    return Response(status_code=204)
