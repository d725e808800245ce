from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

from airport_resolver.app.credentials import CredentialCache
from airport_resolver.app.errors import ResolveErrorType, error_type_for
from airport_resolver.app.http import ApiError, RetryingClient, safe_json


logger = logging.getLogger(__name__)


CITY = "CITY"
AIRPORT_OR_CITY = "AIRPORT,CITY"


@dataclass(frozen=True)
class LocationCandidate:
    iata_code: str
    name: str
    sub_type: str
    city_name: str | None = None
    country_code: str | None = None

    @classmethod
    def from_payload(cls, raw: Any) -> LocationCandidate | None:
        if not isinstance(raw, dict):
            return None
        code = str(raw.get("iataCode") or "").strip().upper()
        if not code:
            return None
        address = raw.get("address") or {}
        if not isinstance(address, dict):
            address = {}
        return cls(
            iata_code=code,
            name=str(raw.get("name") or code),
            sub_type=str(raw.get("subType") or ""),
            city_name=address.get("cityName") or None,
            country_code=address.get("countryCode") or None,
        )


@dataclass(frozen=True)
class SearchResult:
    locations: tuple[LocationCandidate, ...] = ()
    error_type: ResolveErrorType = ResolveErrorType.NONE

    @property
    def ok(self) -> bool:
        return self.error_type is ResolveErrorType.NONE


class AmadeusLocationClient:
    def __init__(self, *, host: str, credentials: CredentialCache, http: RetryingClient, page_limit: int = 10) -> None:
        self.host = host
        self.credentials = credentials
        self.http = http
        self.page_limit = page_limit

    @property
    def locations_url(self) -> str:
        return f"https://{self.host}/v1/reference-data/locations"

    def find_locations(self, keyword: str) -> SearchResult:
        # A city match covers every airport serving that city (DUB for Dublin,
        # not DBN), so only widen the search when no city comes back.
        result = self.search(keyword, CITY)
        if result.ok and not result.locations:
            result = self.search(keyword, AIRPORT_OR_CITY)
        if result.ok and not result.locations:
            logger.info("No Amadeus locations found", extra={"keyword": keyword})
            return SearchResult(error_type=ResolveErrorType.NOT_FOUND)
        return result

    def search(self, keyword: str, sub_type: str) -> SearchResult:
        params = {"keyword": keyword, "subType": sub_type, "page[limit]": self.page_limit}
        try:
            headers = {"Authorization": f"Bearer {self.credentials.get_token()}"}
            resp = self.http.get(self.locations_url, headers=headers, params=params)
        except ApiError as err:
            error_type = error_type_for(err)
            logger.warning(
                "Amadeus locations error",
                extra={
                    "keyword": keyword,
                    "sub_type": sub_type,
                    "status": err.status,
                    "code": err.code,
                    "details": err.details,
                    "error_type": error_type.value,
                },
            )
            return SearchResult(error_type=error_type)

        payload = safe_json(resp)
        items = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            logger.warning(
                "Amadeus locations response has no data list",
                extra={"keyword": keyword, "sub_type": sub_type, "status": resp.status_code},
            )
            return SearchResult(error_type=ResolveErrorType.UPSTREAM_BAD_RESPONSE)

        candidates = [LocationCandidate.from_payload(item) for item in items]
        return SearchResult(locations=tuple(c for c in candidates if c is not None))
