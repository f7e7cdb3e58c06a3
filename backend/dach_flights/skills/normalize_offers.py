from dach_flights.models import NormalizedOffer, Itinerary, Segment
from typing import Any, List, Optional
import math
import re

HOURS_RE = re.compile(r'(\d+)H')
MINUTES_RE = re.compile(r'(\d+)M')

def round_tenth(value: float) -> float:
    """Round half-up to one decimal (2.25 -> 2.3, unlike round())."""
    return math.floor(value * 10 + 0.5) / 10

def iso_duration_to_hours(pt_duration: Any) -> float:
    """Parse ISO 8601 duration (PT7H30M) to hours, e.g. 7.5. Anything else is 0."""
    # Amadeus uses PTxxHxxM format
    if not isinstance(pt_duration, str) or not pt_duration.startswith('PT'):
        return 0
    h = HOURS_RE.search(pt_duration)
    m = MINUTES_RE.search(pt_duration)
    hours = (int(h.group(1)) if h else 0) + (int(m.group(1)) / 60 if m else 0)
    return round_tenth(hours)

def _dig(obj: Any, *keys: str) -> Any:
    """Walk nested dicts, None as soon as a level is missing."""
    for key in keys:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj

def _list(value: Any) -> list:
    return value if isinstance(value, list) else []

def _text(value: Any) -> Optional[str]:
    return None if value is None else str(value)

def normalize_segment(raw: Any) -> Segment:
    return Segment(
        from_=_text(_dig(raw, 'departure', 'iataCode')),
        to=_text(_dig(raw, 'arrival', 'iataCode')),
        depart=_text(_dig(raw, 'departure', 'at')),
        arrive=_text(_dig(raw, 'arrival', 'at')),
        carrier=_text(_dig(raw, 'carrierCode')),
        number=_text(_dig(raw, 'number')),
    )

def normalize_itinerary(raw: Any) -> Itinerary:
    return Itinerary(
        duration_hours=iso_duration_to_hours(_dig(raw, 'duration')),
        segments=[normalize_segment(s) for s in _list(_dig(raw, 'segments'))],
    )

def collect_airlines(raw: Any, itineraries: List[Itinerary]) -> List[str]:
    """Validating carriers first, then segment carriers, first occurrence wins."""
    codes = [_text(c) for c in _list(_dig(raw, 'validatingAirlineCodes'))]
    codes += [s.carrier for it in itineraries for s in it.segments]
    return list(dict.fromkeys(c for c in codes if c))

def normalize_offer(raw: Any, fallback_currency: Optional[str] = None) -> NormalizedOffer:
    itineraries = [normalize_itinerary(it) for it in _list(_dig(raw, 'itineraries'))]
    currency = _dig(raw, 'price', 'currency')

    return NormalizedOffer(
        price=_text(_dig(raw, 'price', 'total')),
        currency=_text(currency) if currency is not None else fallback_currency,
        total_duration_hours=round_tenth(sum(it.duration_hours for it in itineraries)),
        itineraries=itineraries,
        airlines=collect_airlines(raw, itineraries),
    )

def normalize_offers(raw_offers: Any, fallback_currency: Optional[str] = None) -> List[NormalizedOffer]:
    return [normalize_offer(raw, fallback_currency) for raw in _list(raw_offers)]
