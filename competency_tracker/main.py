"""Competency Tracker - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from competency_tracker.core.config import BASE_DIR, get_settings
from competency_tracker.core.errors import AppError
from competency_tracker.core.logging import configure_logging
from competency_tracker.db.base import Base
from competency_tracker.db.session import engine, AsyncSessionLocal
from competency_tracker.routers import admin, api, auth, web
from competency_tracker.services.seeding import seed_admins, seed_competencies

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        await seed_competencies(db)
        await seed_admins(db, settings.builtin_admin_emails)

    logger.info("%s ready", settings.app_name)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Apprenticeship competency tracking",
    lifespan=lifespan,
)


def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    """Admin routes answer {"error": ...}; everything else {"success": false, "message": ...}."""
    if request.url.path.startswith("/api/admin"):
        body = {"error": message}
    else:
        body = {"success": False, "message": message}
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return error_response(request, exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        field = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"{field}: {errors[0].get('msg')}" if field else errors[0].get("msg")
    else:
        message = "Invalid request"
    return error_response(request, 400, message)


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    return error_response(request, 500, "Internal server error")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Endpoint not found" if exc.status_code == 404 else str(exc.detail)
    return error_response(request, exc.status_code, message)


app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

app.include_router(web.router)
app.include_router(auth.router)
app.include_router(api.router)
app.include_router(admin.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
