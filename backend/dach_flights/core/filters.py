from dach_flights.models import NormalizedOffer
from typing import List, Optional

def filter_by_max_hours(offers: List[NormalizedOffer], max_hours: Optional[float]) -> List[NormalizedOffer]:
    """
    Keep offers whose total flight time (all itineraries) fits into max_hours.
    A missing or non-positive limit keeps everything.
    """
    if not max_hours or max_hours <= 0:
        return list(offers)
    return [o for o in offers if o.total_duration_hours <= max_hours]
