"""FastAPI application entrypoint: ``uvicorn onboard.api.app:app``."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException

from onboard import __version__
from onboard.api.routers import auth, employees, health, profile
from onboard.config import settings
from onboard.database import close_db, init_db
from onboard.errors import OnboardError, ValidationFailed
from onboard.logger import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.API_KEY:
        logger.warning("API_KEY not set, employee endpoints are open")
    await init_db()
    yield
    await close_db()


async def onboard_error_handler(request: Request, exc: OnboardError) -> JSONResponse:
    body = {"error": exc.message}
    if isinstance(exc, ValidationFailed) and exc.fields:
        body["fields"] = {to_camel(name): message for name, message in exc.fields.items()}
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body)


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    fields = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        fields[".".join(location) or "body"] = error.get("msg", "Invalid value")
    return JSONResponse(
        status_code=422,
        content={"error": "Missing or invalid request data", "fields": fields},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


def create_app() -> FastAPI:
    app = FastAPI(title="Employee Onboarding API", version=__version__, lifespan=lifespan)

    app.add_exception_handler(OnboardError, onboard_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(health.router)
    app.include_router(employees.router, prefix="/employees", tags=["employees"])
    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(profile.router, prefix="/profile", tags=["profile"])

    app.mount(
        "/media",
        StaticFiles(directory=settings.MEDIA_ROOT, check_dir=False),
        name="media",
    )
    return app


app = create_app()
