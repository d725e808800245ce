"""Shared fixtures for the airport resolver test suite.

Provides fake ``requests`` responses, a recording sleep, a controllable
clock and a FastAPI test client whose dependencies can be overridden.
"""

import os
import sys
from unittest.mock import MagicMock

import pytest

# Add project root to path so `import airport_resolver` works without installing.
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from airport_resolver.app.http import RetryingClient
from airport_resolver.app.services.amadeus import LocationCandidate


# ============================================================
# HTTP FAKES
# ============================================================

def _fake_response(status_code=200, payload=None, *, invalid_json=False):
    resp = MagicMock()
    resp.status_code = status_code
    if invalid_json:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = payload
    return resp


@pytest.fixture
def make_response():
    """Factory for fake requests.Response objects."""
    return _fake_response


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)

    @property
    def total(self):
        return sum(self.calls)


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def session():
    """Stand-in for requests.Session; configure ``session.request``."""
    return MagicMock()


@pytest.fixture
def retrying_client(session, sleeper):
    return RetryingClient(session=session, retries=2, delay_seconds=4.0, sleep=sleeper)


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


# ============================================================
# PROVIDER DATA
# ============================================================

def amadeus_location(iata, name, *, sub_type="CITY", city=None, country=None):
    """One item as found in the Amadeus reference-data/locations `data` list."""
    return {
        "type": "location",
        "subType": sub_type,
        "name": name,
        "iataCode": iata,
        "address": {"cityName": city or name, "countryCode": country},
    }


@pytest.fixture
def location_payload():
    return amadeus_location


@pytest.fixture
def dublin_candidates():
    return [
        LocationCandidate(iata_code="DBN", name="DUBLIN", sub_type="CITY", city_name="DUBLIN", country_code="US"),
        LocationCandidate(iata_code="DUB", name="DUBLIN", sub_type="CITY", city_name="DUBLIN", country_code="IE"),
    ]


# ============================================================
# API CLIENT
# ============================================================

@pytest.fixture
def app_module():
    from airport_resolver.app import main

    main.app.dependency_overrides.clear()
    yield main
    main.app.dependency_overrides.clear()


@pytest.fixture
def api_client(app_module):
    from fastapi.testclient import TestClient

    with TestClient(app_module.app) as client:
        yield client
