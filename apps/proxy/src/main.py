from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import logging, time

from config import settings
from api.v1.router import router as v1_router
from services.weather import weather_service
from services.weather_errors import (
    InvalidRequest,
    MalformedUpstreamResponse,
    MissingLocation,
    UpstreamUnavailable,
)

logger = logging.getLogger("weatherproxy")
if not logger.handlers:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

def _failure(status_code: int, message: str, errors: dict[str, list[str]] | None = None) -> JSONResponse:
    body: dict[str, object] = {"success": False, "message": message}
    if errors is not None:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=body)

def _validation_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("query", "body", "path")]
        field = ".".join(loc) or "request"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return errors

def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError):
        return _failure(400, "Validation error", _validation_errors(exc))

    @app.exception_handler(InvalidRequest)
    async def _invalid_request(request: Request, exc: InvalidRequest):
        logger.error("Invalid request on %s: %s", request.url.path, exc)
        return _failure(400, "Validation error", {exc.field or "request": [str(exc)]})

    @app.exception_handler(MissingLocation)
    async def _missing_location(request: Request, exc: MissingLocation):
        logger.error("Invalid request on %s: %s", request.url.path, exc)
        return _failure(400, str(exc))

    @app.exception_handler(UpstreamUnavailable)
    async def _upstream_unavailable(request: Request, exc: UpstreamUnavailable):
        logger.error("Weather API error on %s: %s", request.url.path, exc)
        return _failure(503, "Weather provider is unavailable")

    @app.exception_handler(MalformedUpstreamResponse)
    async def _malformed_upstream(request: Request, exc: MalformedUpstreamResponse):
        logger.error("Weather API error on %s: %s", request.url.path, exc)
        return _failure(502, "Weather provider returned an invalid response")

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception("Unexpected error on %s", request.url.path)
        if request.url.path.rstrip("/").endswith("/forecast"):
            return _failure(500, "Failed to retrieve weather forecast")
        return _failure(500, "Failed to retrieve weather data")

def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, version=settings.app_version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        dur_ms = (time.perf_counter() - start) * 1000.0
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, dur_ms)
        return response

    register_error_handlers(app)

    @app.get("/", tags=["meta"])
    async def root():
        return {"name": settings.app_name, "version": settings.app_version}

    @app.get("/health", tags=["meta"])
    async def health():
        return JSONResponse({"status": "ok", "version": settings.app_version})

    app.include_router(v1_router)

    @app.on_event("startup")
    async def _startup():
        if not settings.openweather_api_key:
            logger.warning("OPENWEATHER_API_KEY is not set; upstream calls will be rejected by the provider.")

    @app.on_event("shutdown")
    async def _shutdown():
        await weather_service.close()

    return app

app = create_app()
