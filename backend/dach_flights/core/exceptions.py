from typing import Optional


class FlightSearchError(Exception):
    """Base for every failure the search endpoint reports to the caller."""

    status_code = 500
    error = "Server error"

    def __init__(self, details: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(details or self.error)
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class ValidationError(FlightSearchError):
    status_code = 400
    error = "Missing required fields"


class OriginNotAllowedError(FlightSearchError):
    status_code = 400
    error = "Origin not allowed (DACH only)"


class UpstreamAuthError(FlightSearchError):
    """Token exchange rejected. `upstream_status` keeps the provider's code."""

    error = "Amadeus OAuth failed"

    def __init__(self, details: Optional[str] = None, upstream_status: Optional[int] = None):
        super().__init__(details)
        self.upstream_status = upstream_status


class UpstreamApiError(FlightSearchError):
    error = "Amadeus API error"


class ServerError(FlightSearchError):
    pass
