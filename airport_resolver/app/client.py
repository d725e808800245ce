from __future__ import annotations

from typing import Any

from airport_resolver.app.http import ApiError, RetryingClient, safe_json
from airport_resolver.app.messages import to_user_message
from airport_resolver.app.resolver import ResolvedLocation


class ResolverApiClient:
    """Calls this service's HTTP API the way a UI would.

    Error responses come back as ``ApiError`` with the envelope's code and the
    HTTP status intact, so ``describe`` can pick a precise message.
    """

    def __init__(self, *, base_url: str, http: RetryingClient | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http if http is not None else RetryingClient()

    def resolve_airports(
        self, origin: str, destination: str, compare: str | None = None
    ) -> dict[str, ResolvedLocation | None]:
        params = {"origin": origin, "destination": destination}
        if compare:
            params["compare"] = compare

        data = self._get_json("/resolve-airports", params)
        try:
            return {
                name: ResolvedLocation.from_public_dict(data[name]) if isinstance(data.get(name), dict) else None
                for name in ("origin", "destination", "compare")
            }
        except (KeyError, ValueError) as e:
            raise ApiError(f"Malformed resolved location: {e}", status=200, code="UPSTREAM_BAD_RESPONSE") from e

    def weather_forecast(self, city: str) -> dict[str, Any]:
        return self._get_json("/weather-forecast", {"city": city})

    @staticmethod
    def describe(error: BaseException) -> str:
        return to_user_message(error)

    def _get_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        resp = self.http.get(f"{self.base_url}{path}", params=params)
        data = safe_json(resp)
        if not isinstance(data, dict):
            raise ApiError("Unexpected response shape", status=resp.status_code, code="UPSTREAM_BAD_RESPONSE")
        return data
