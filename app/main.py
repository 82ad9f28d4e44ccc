from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.logging import configure_logging
from app.models import additional_survey, burnout_survey, profile, time_entry  # noqa: F401
from app.routers.activities import router as activities_router
from app.routers.admin import router as admin_router
from app.routers.auth import router as auth_router
from app.routers.profile import router as profile_router
from app.routers.surveys import router as surveys_router
from app.routers.time_entries import router as time_entries_router

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(
    title="SPARC",
    lifespan=lifespan,
)


def field_errors_from(errors) -> dict:
    field_errors = {}
    for error in errors:
        ctx = error.get("ctx") or {}
        if isinstance(ctx.get("field_errors"), dict):
            field_errors.update(ctx["field_errors"])
            continue

        loc = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES]
        name = ".".join(loc) or "__root__"
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        field_errors.setdefault(name, message)
    return field_errors


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=422, content={"detail": {"field_errors": field_errors_from(exc.errors())}})


@app.middleware("http")
async def catch_unhandled_exceptions(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled exception")
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


app.include_router(auth_router)
app.include_router(activities_router)
app.include_router(time_entries_router)
app.include_router(profile_router)
app.include_router(surveys_router)
app.include_router(admin_router)


@app.get("/")
def root():
    return {"status": "SPARC running"}


@app.get("/health")
def health():
    return {
        "status": "ok",
        "version": "1.0.0",
    }
