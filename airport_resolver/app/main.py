from __future__ import annotations

import asyncio
from dataclasses import asdict
import logging
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from airport_resolver.app.config import settings
from airport_resolver.app.credentials import CredentialCache
from airport_resolver.app.errors import ResolveErrorType, error_type_for, http_status_for, message_for
from airport_resolver.app.http import ApiError, RetryingClient
from airport_resolver.app.resolver import LocationResolver, ResolvedLocation
from airport_resolver.app.services.amadeus import AmadeusLocationClient
from airport_resolver.app.services.weather import fetch_weather_forecast


logging.basicConfig(level=settings.log_level, format=settings.log_format)
logger = logging.getLogger(__name__)


http_client = RetryingClient(
    retries=settings.upstream_retries,
    delay_seconds=settings.upstream_retry_delay_seconds,
    timeout_seconds=settings.http_timeout_seconds,
)
# One credential for the whole process, shared by every resolution.
credentials = CredentialCache(
    host=settings.amadeus_host,
    client_id=settings.amadeus_client_id,
    client_secret=settings.amadeus_client_secret,
    http=http_client,
    refresh_margin_seconds=settings.token_refresh_margin_seconds,
)
resolver = LocationResolver(
    locations=AmadeusLocationClient(
        host=settings.amadeus_host,
        credentials=credentials,
        http=http_client,
        page_limit=settings.location_page_limit,
    )
)


app = FastAPI(title="Airport Resolver", version="0.1.0")


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Any = None


class ErrorEnvelope(BaseModel):
    error: ErrorBody


def api_error(status_code: int, code: str, message: str, details: Any = None) -> JSONResponse:
    envelope = ErrorEnvelope(error=ErrorBody(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=jsonable_encoder(envelope, exclude_none=True))


def get_resolver() -> LocationResolver:
    return resolver


def get_http_client() -> RetryingClient:
    return http_client


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
    return api_error(exc.status_code, code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return api_error(400, "VALIDATION_ERROR", "Invalid request parameters.", details=jsonable_encoder(exc.errors()))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return api_error(500, ResolveErrorType.INTERNAL_ERROR.value, message_for(ResolveErrorType.INTERNAL_ERROR))


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


def _public(location: ResolvedLocation | None) -> dict[str, Any] | None:
    return location.to_public_dict() if location else None


@app.get("/resolve-airports", response_model=None)
async def resolve_airports(
    origin: str | None = None,
    destination: str | None = None,
    compare: str | None = None,
    location_resolver: LocationResolver = Depends(get_resolver),
) -> dict[str, Any] | JSONResponse:
    if not (origin or "").strip() or not (destination or "").strip():
        return api_error(400, "VALIDATION_ERROR", "Both origin and destination are required.")

    queries: dict[str, str | None] = {"origin": origin, "destination": destination}
    if (compare or "").strip():
        queries["compare"] = compare

    batch = await location_resolver.resolve_many(queries)
    error_type = batch.error_type
    if error_type is not ResolveErrorType.NONE:
        logger.info("Airport resolution failed", extra={"queries": queries, "fields": batch.failed_fields()})
        return api_error(
            http_status_for(error_type),
            error_type.value,
            message_for(error_type),
            details={"fields": batch.failed_fields()},
        )

    return {
        "origin": _public(batch.location("origin")),
        "destination": _public(batch.location("destination")),
        "compare": _public(batch.location("compare")),
    }


@app.get("/weather-forecast", response_model=None)
async def weather_forecast(
    city: str | None = None,
    http: RetryingClient = Depends(get_http_client),
) -> dict[str, Any] | JSONResponse:
    name = (city or "").strip()
    if not name:
        return api_error(400, "VALIDATION_ERROR", "A destination city is required.")

    try:
        forecast = await asyncio.to_thread(fetch_weather_forecast, name, http=http)
    except ApiError as err:
        error_type = error_type_for(err)
        logger.warning(
            "Weather forecast failed",
            extra={"city": name, "status": err.status, "code": err.code, "error_type": error_type.value},
        )
        return api_error(http_status_for(error_type), error_type.value, message_for(error_type))

    if forecast is None:
        return api_error(404, "NOT_FOUND", f'Could not find weather location for "{name}".')
    return {"found": True, **asdict(forecast)}
