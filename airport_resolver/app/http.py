from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
import time
from typing import Any, Callable

import requests


logger = logging.getLogger(__name__)


# Gateway-class statuses that usually clear up on a short retry.
TRANSIENT_STATUSES = frozenset({502, 503, 504})


class ErrorKind(str, Enum):
    HTTP = "http"  # a response arrived with a non-2xx status (or an unusable body)
    NETWORK = "network"  # no response reached us at all


@dataclass
class ApiError(Exception):
    """A failed HTTP call, carrying enough to build a user-facing message.

    ``kind`` tells transport failures apart from error responses, so callers
    never need to inspect the underlying ``requests`` exception.
    """

    message: str
    kind: ErrorKind = ErrorKind.HTTP
    status: int | None = None
    code: str | None = None
    details: Any = None
    cause: Exception | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.message} (status={self.status}, code={self.code})"
        return self.message

    @property
    def is_network(self) -> bool:
        return self.kind is ErrorKind.NETWORK

    @classmethod
    def from_response(cls, resp: Any) -> ApiError:
        status = int(resp.status_code)
        message, code, details = _parse_error_envelope(safe_json(resp))
        return cls(
            message=message or f"Request failed with status {status}",
            kind=ErrorKind.HTTP,
            status=status,
            code=code or "UNKNOWN_ERROR",
            details=details,
        )

    @classmethod
    def network(cls, url: str, exc: Exception) -> ApiError:
        return cls(
            message=f"Network error calling {url}: {exc.__class__.__name__}",
            kind=ErrorKind.NETWORK,
            code="NETWORK_ERROR",
            cause=exc,
        )


def safe_json(resp: Any) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def is_success(status: int) -> bool:
    return 200 <= status < 300


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) and value.strip() else None


def _parse_error_envelope(data: Any) -> tuple[str | None, str | None, Any]:
    if not isinstance(data, dict):
        return None, None, None

    # Our own envelope: {"error": {"code", "message", "details"?}}
    error = data.get("error")
    if isinstance(error, dict):
        code = error.get("code")
        return _text(error.get("message")), str(code) if code is not None else None, error.get("details")

    # Amadeus envelope: {"errors": [{"status", "code", "title", "detail"}]}
    errors = data.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        first = errors[0]
        code = first.get("code")
        message = _text(first.get("detail")) or _text(first.get("title"))
        return message, str(code) if code is not None else None, errors

    return None, None, None


class RetryingClient:
    def __init__(
        self,
        *,
        session: Any | None = None,
        retries: int = 2,
        delay_seconds: float = 4.0,
        timeout_seconds: float = 15.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.session = session if session is not None else requests.Session()
        self.retries = retries
        self.delay_seconds = delay_seconds
        self.timeout_seconds = timeout_seconds
        self.sleep = sleep

    def request(
        self,
        method: str,
        url: str,
        *,
        retries: int | None = None,
        delay_seconds: float | None = None,
        **kwargs: Any,
    ) -> Any:
        """Send a request, retrying transient failures with a fixed delay.

        Returns the response on 2xx. Raises ``ApiError`` on any other status,
        or once the retry budget is spent on 502/503/504 or network errors.
        """
        budget = max(0, self.retries if retries is None else retries)
        delay = self.delay_seconds if delay_seconds is None else delay_seconds
        kwargs.setdefault("timeout", self.timeout_seconds)

        last_error: ApiError | None = None
        for attempt in range(budget + 1):
            has_more = attempt < budget
            try:
                resp = self.session.request(method, url, **kwargs)
            except requests.RequestException as exc:
                last_error = ApiError.network(url, exc)
                if not has_more:
                    raise last_error from exc
            else:
                if is_success(resp.status_code):
                    return resp
                last_error = ApiError.from_response(resp)
                if resp.status_code not in TRANSIENT_STATUSES or not has_more:
                    raise last_error

            logger.warning(
                "Request failed, retrying",
                extra={
                    "url": url,
                    "status": last_error.status,
                    "code": last_error.code,
                    "attempt": attempt + 1,
                    "max_attempts": budget + 1,
                    "delay_seconds": delay,
                },
            )
            self.sleep(delay)

        raise last_error or ApiError(f"Request to {url} was never attempted")

    def get(self, url: str, **kwargs: Any) -> Any:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Any:
        return self.request("POST", url, **kwargs)
