from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import time
from typing import Any, Callable

from airport_resolver.app.errors import ConfigurationError
from airport_resolver.app.http import ApiError, RetryingClient, safe_json


logger = logging.getLogger(__name__)


# Amadeus test and production tokens both live for 30 minutes.
DEFAULT_EXPIRES_IN = 1799.0


@dataclass(frozen=True)
class Credential:
    token: str
    expires_at: float  # epoch seconds


class CredentialCache:
    """Bearer token for the Amadeus API, shared by every location search.

    The token is refreshed lazily once it is within ``refresh_margin_seconds``
    of expiring. Two callers racing on an expired token may both refresh; the
    credential is replaced as a single value, so the last refresh wins.
    """

    def __init__(
        self,
        *,
        host: str,
        client_id: str | None,
        client_secret: str | None,
        http: RetryingClient,
        clock: Callable[[], float] = time.time,
        refresh_margin_seconds: float = 60,
    ) -> None:
        self.host = host
        self.client_id = client_id
        self.client_secret = client_secret
        self.http = http
        self.clock = clock
        self.refresh_margin_seconds = refresh_margin_seconds
        self._credential: Credential | None = None

    @property
    def token_url(self) -> str:
        return f"https://{self.host}/v1/security/oauth2/token"

    @property
    def credential(self) -> Credential | None:
        return self._credential

    def get_token(self) -> str:
        if not self.client_id or not self.client_secret:
            raise ConfigurationError("Amadeus credentials are not configured (AMADEUS_CLIENT_ID/SECRET).")

        now = self.clock()
        cached = self._credential
        if cached is not None and now < cached.expires_at - self.refresh_margin_seconds:
            return cached.token

        fresh = self._acquire(now)
        self._credential = fresh
        return fresh.token

    def invalidate(self) -> None:
        self._credential = None

    def _acquire(self, now: float) -> Credential:
        data = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        try:
            resp = self.http.post(self.token_url, headers=headers, data=data)
        except ApiError as err:
            logger.error("Amadeus token request failed", extra={"status": err.status, "code": err.code, "details": err.details})
            raise

        payload = safe_json(resp)
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            logger.error("Amadeus token response has no access_token", extra={"payload": payload})
            raise ApiError(
                "Amadeus auth failed: missing access_token",
                status=resp.status_code,
                code="UPSTREAM_BAD_RESPONSE",
            )

        expires_in = _lifetime(payload.get("expires_in", DEFAULT_EXPIRES_IN))
        logger.debug("Refreshed Amadeus token", extra={"expires_in": expires_in})
        return Credential(token=str(token), expires_at=now + expires_in)


def _lifetime(raw: Any) -> float:
    try:
        seconds = float(raw)
    except (TypeError, ValueError):
        seconds = 0.0
    if isinstance(raw, bool) or not math.isfinite(seconds) or seconds <= 0:
        logger.warning("Unusable expires_in in token response, using default", extra={"expires_in": raw})
        return DEFAULT_EXPIRES_IN
    return seconds
