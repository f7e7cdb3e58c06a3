from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from dach_flights.config import Settings, settings as default_settings
from dach_flights.core.cache import TokenCache
from dach_flights.core.exceptions import FlightSearchError, ServerError, ValidationError
from dach_flights.core.filters import filter_by_max_hours
from dach_flights.models import ErrorResponse, SearchResponse
from dach_flights.skills.normalize_offers import normalize_offers
from dach_flights.skills.search_offers import build_query, fetch_offers
from typing import Optional
import httpx
import logging

# Setup Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/flight-search"

def utc_timestamp() -> str:
    """ISO 8601 in UTC with milliseconds and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

def error_response(exc: FlightSearchError) -> JSONResponse:
    body = ErrorResponse(error=exc.error, details=exc.details)
    return JSONResponse(body.model_dump(exclude_none=True), status_code=exc.status_code)

def create_app(settings: Optional[Settings] = None, http_client: Optional[httpx.AsyncClient] = None) -> FastAPI:
    settings = settings or default_settings

    def attach_client(app: FastAPI, client: httpx.AsyncClient):
        app.state.http_client = client
        app.state.token_cache = TokenCache(
            client,
            token_url=settings.token_url,
            client_id=settings.AMADEUS_CLIENT_ID,
            client_secret=settings.AMADEUS_CLIENT_SECRET,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # A client passed in by the caller stays owned by the caller
        if http_client is not None:
            yield
            return
        async with httpx.AsyncClient() as client:
            attach_client(app, client)
            yield

    app = FastAPI(title="DACH Flight Search", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    if http_client is not None:
        attach_client(app, http_client)

    @app.middleware("http")
    async def cors_headers(request: Request, call_next):
        response = await call_next(request)
        if request.url.path != SEARCH_PATH:
            return response
        origin = request.headers.get("origin")
        if origin and origin in settings.allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
        response.headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.options(SEARCH_PATH)
    async def search_preflight():
        return Response(status_code=204)

    @app.post(SEARCH_PATH)
    async def search_flights(request: Request):
        try:
            try:
                payload = await request.json()
            except ValueError as e:
                raise ValidationError(f"Invalid JSON body: {e}") from e

            query = build_query(payload)
            logger.info(f"Search request: {query.origin}->{query.destination} on {query.depart_date}")

            raw_offers = await fetch_offers(
                app.state.http_client, app.state.token_cache, settings.offers_url, query
            )
            offers = normalize_offers(raw_offers, query.currency)
            results = filter_by_max_hours(offers, query.max_flight_hours)
            logger.info(f"{len(results)} of {len(offers)} offers within duration limit")

            body = SearchResponse(
                query=query,
                fetched_at=utc_timestamp(),
                count=len(results),
                results=results,
            )
            return JSONResponse(body.model_dump(by_alias=True))
        except FlightSearchError as e:
            return error_response(e)
        except Exception as e:
            logger.exception("Unexpected error during flight search")
            return error_response(ServerError(str(e)))

    @app.get("/health")
    def health_check():
        return {"status": "ok", "env": settings.ENV}

    return app

app = create_app()
