import json
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient

from dach_flights.config import Settings
from dach_flights.main import create_app


def make_offer(price="312.40", currency="EUR", durations=("PT8H35M", "PT9H10M"), carriers=("LH", "UA")):
    itineraries = []
    for i, duration in enumerate(durations):
        itineraries.append({
            "duration": duration,
            "segments": [
                {
                    "departure": {"iataCode": "FRA", "at": f"2025-06-0{i + 1}T10:00:00"},
                    "arrival": {"iataCode": "JFK", "at": f"2025-06-0{i + 1}T12:35:00"},
                    "carrierCode": carriers[i % len(carriers)],
                    "number": f"40{i}",
                }
            ],
        })
    return {
        "type": "flight-offer",
        "id": "1",
        "price": {"total": price, "currency": currency},
        "itineraries": itineraries,
        "validatingAirlineCodes": ["LH"],
    }


class FakeAmadeus:
    """In-process stand-in for the Amadeus token + flight-offers endpoints."""

    def __init__(self):
        self.token_calls = []
        self.search_calls = []
        self.token_status = 200
        self.token_body = {"access_token": "tok-1", "expires_in": 1799}
        self.search_status = 200
        self.offers = [make_offer()]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/security/oauth2/token":
            self.token_calls.append(parse_qs(request.content.decode()))
            if self.token_status != 200:
                return httpx.Response(self.token_status, text='{"error":"invalid_client"}')
            return httpx.Response(200, json=self.token_body)
        if request.url.path == "/v2/shopping/flight-offers":
            self.search_calls.append(request)
            if self.search_status != 200:
                return httpx.Response(self.search_status, text=json.dumps({"errors": [{"code": 477}]}))
            return httpx.Response(200, json={"meta": {"count": len(self.offers)}, "data": self.offers})
        return httpx.Response(404)


@pytest.fixture
def amadeus():
    return FakeAmadeus()


@pytest.fixture
def settings():
    return Settings(
        AMADEUS_CLIENT_ID="client-id",
        AMADEUS_CLIENT_SECRET="client-secret",
        AMADEUS_ENV="test",
        ALLOWED_ORIGINS="https://reise.example.de, https://app.example.ch",
        ALLOWED_ORIGIN="",
        ENV="testing",
    )


@pytest.fixture
def client(amadeus, settings):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(amadeus))
    app = create_app(settings, http_client=http_client)
    with TestClient(app) as c:
        yield c
