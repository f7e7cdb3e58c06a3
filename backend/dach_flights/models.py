from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional


class WireModel(BaseModel):
    """snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchRequest(WireModel):
    # Loose on purpose: presence is checked by the handler, not the schema
    origin: Optional[str] = None
    destination: Optional[str] = None
    depart_date: Optional[str] = None
    return_date: Optional[str] = None
    adults: Optional[int] = 1
    currency: Optional[str] = "EUR"
    max_flight_hours: Optional[float] = None

    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")


class SearchQuery(WireModel):
    origin: str
    destination: str
    depart_date: str
    return_date: Optional[str] = None
    adults: int = Field(default=1, ge=1, le=9)
    currency: str = "EUR"
    max_flight_hours: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class Segment(WireModel):
    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    depart: Optional[str] = None
    arrive: Optional[str] = None
    carrier: Optional[str] = None
    number: Optional[str] = None


class Itinerary(WireModel):
    duration_hours: float = 0.0
    segments: List[Segment] = []


class NormalizedOffer(WireModel):
    price: Optional[str] = None
    currency: Optional[str] = None
    total_duration_hours: float = 0.0
    itineraries: List[Itinerary] = []
    airlines: List[str] = []


class SearchResponse(WireModel):
    query: SearchQuery
    fetched_at: str
    count: int
    results: List[NormalizedOffer]


class ErrorResponse(WireModel):
    error: str
    details: Optional[str] = None
