from __future__ import annotations

from enum import Enum
from functools import reduce
from typing import Iterable

from airport_resolver.app.http import ApiError


class ResolveErrorType(str, Enum):
    NONE = "NONE"
    NOT_FOUND = "NOT_FOUND"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    UPSTREAM_BAD_RESPONSE = "UPSTREAM_BAD_RESPONSE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ConfigurationError(Exception):
    """Required settings (e.g. provider credentials) are missing."""


# Higher wins when several resolutions fail at once.
_SEVERITY: dict[ResolveErrorType, int] = {
    ResolveErrorType.UPSTREAM_UNAVAILABLE: 4,
    ResolveErrorType.UPSTREAM_BAD_RESPONSE: 3,
    ResolveErrorType.NOT_FOUND: 2,
    ResolveErrorType.INTERNAL_ERROR: 1,
    ResolveErrorType.NONE: 0,
}

_HTTP_STATUS: dict[ResolveErrorType, int] = {
    ResolveErrorType.NOT_FOUND: 404,
    ResolveErrorType.UPSTREAM_UNAVAILABLE: 503,
    ResolveErrorType.UPSTREAM_BAD_RESPONSE: 502,
    ResolveErrorType.INTERNAL_ERROR: 500,
}

_MESSAGES: dict[ResolveErrorType, str] = {
    ResolveErrorType.NOT_FOUND: "Could not resolve one or more locations.",
    ResolveErrorType.UPSTREAM_UNAVAILABLE: "The upstream provider is temporarily unavailable.",
    ResolveErrorType.UPSTREAM_BAD_RESPONSE: "The upstream provider returned an unexpected response.",
    ResolveErrorType.INTERNAL_ERROR: "An internal error occurred.",
}


def pick_worst_error(a: ResolveErrorType, b: ResolveErrorType) -> ResolveErrorType:
    return a if _SEVERITY[a] >= _SEVERITY[b] else b


def worst_error(error_types: Iterable[ResolveErrorType]) -> ResolveErrorType:
    return reduce(pick_worst_error, error_types, ResolveErrorType.NONE)


def error_type_for(err: ApiError) -> ResolveErrorType:
    if err.is_network:
        return ResolveErrorType.UPSTREAM_UNAVAILABLE
    if err.status is not None and err.status >= 500:
        return ResolveErrorType.UPSTREAM_UNAVAILABLE
    return ResolveErrorType.UPSTREAM_BAD_RESPONSE


def http_status_for(error_type: ResolveErrorType) -> int:
    return _HTTP_STATUS.get(error_type, 500)


def message_for(error_type: ResolveErrorType) -> str:
    return _MESSAGES.get(error_type, _MESSAGES[ResolveErrorType.INTERNAL_ERROR])
