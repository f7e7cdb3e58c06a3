from dach_flights.core.cache import TokenCache
from dach_flights.core.exceptions import OriginNotAllowedError, UpstreamApiError, ValidationError
from dach_flights.core.whitelist import is_allowed_origin, normalize_code
from dach_flights.models import SearchQuery, SearchRequest
from typing import Any
import httpx
import logging
import pydantic

logger = logging.getLogger(__name__)

PAGE_SIZE = 20

def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")

def build_query(payload: Any) -> SearchQuery:
    """
    Validate the raw request body and turn it into an immutable SearchQuery.
    Raises ValidationError / OriginNotAllowedError.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        req = SearchRequest.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(str(e)) from e

    if _blank(req.origin) or _blank(req.destination) or _blank(req.depart_date) or not req.adults:
        raise ValidationError()

    origin = normalize_code(req.origin)
    destination = normalize_code(req.destination)

    if not is_allowed_origin(origin):
        logger.warning(f"Rejected origin {origin!r} (not in DACH whitelist)")
        raise OriginNotAllowedError()

    max_hours = req.max_flight_hours
    return SearchQuery(
        origin=origin,
        destination=destination,
        depart_date=req.depart_date,
        return_date=req.return_date or None,
        adults=min(max(req.adults, 1), 9),
        currency=req.currency or "EUR",
        max_flight_hours=max_hours if max_hours and max_hours > 0 else None,
    )

def build_search_params(query: SearchQuery) -> dict:
    """Query parameters for GET /v2/shopping/flight-offers."""
    params = {
        "originLocationCode": query.origin,
        "destinationLocationCode": query.destination,
        "departureDate": query.depart_date,
        "adults": str(query.adults),
        "currencyCode": query.currency,
        "max": str(PAGE_SIZE),
        "nonStop": "false",
    }
    if query.return_date:
        params["returnDate"] = query.return_date
    return params

async def fetch_offers(client: httpx.AsyncClient, token_cache: TokenCache, offers_url: str, query: SearchQuery) -> list:
    """Call Amadeus flight-offers search and return the raw `data` list."""
    token = await token_cache.get_token()

    logger.info(f"Searching Amadeus: {query.origin}->{query.destination} on {query.depart_date}")
    resp = await client.get(
        offers_url,
        params=build_search_params(query),
        headers={"Authorization": f"Bearer {token}"},
    )
    if not resp.is_success:
        logger.warning(f"Amadeus API error {resp.status_code}: {resp.text[:200]}")
        raise UpstreamApiError(resp.text, status_code=resp.status_code)

    data = resp.json()
    offers = data.get("data") if isinstance(data, dict) else None
    return offers if isinstance(offers, list) else []
