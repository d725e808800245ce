from __future__ import annotations

import requests

from airport_resolver.app.http import ApiError


NETWORK_MESSAGE = "Network error. Please check your connection and try again."
NOT_FOUND_MESSAGE = "We couldn't find that location. Try adding the country (e.g., \"Dublin, Ireland\")."
UNAVAILABLE_MESSAGE = "Service temporarily unavailable. Please try again in a moment."
BAD_RESPONSE_MESSAGE = "Provider error. Please try again."
RATE_LIMIT_MESSAGE = "Too many requests right now. Please try again shortly."
SERVER_MESSAGE = "Server problem. Please try again shortly."
REQUEST_MESSAGE = "There was an issue with the request. Please check your inputs and try again."
GENERIC_MESSAGE = "Something went wrong. Please try again."


def to_user_message(error: BaseException | None) -> str:
    """Short, non-technical sentence for any error the client can raise.

    Never raises and never returns an empty string.
    """
    if isinstance(error, requests.RequestException):
        return NETWORK_MESSAGE
    if not isinstance(error, ApiError):
        return GENERIC_MESSAGE
    if error.is_network:
        return NETWORK_MESSAGE

    code = error.code
    if code == "VALIDATION_ERROR":
        message = error.message if isinstance(error.message, str) else ""
        return message.strip() or REQUEST_MESSAGE
    if code == "NOT_FOUND":
        return NOT_FOUND_MESSAGE
    if code == "UPSTREAM_UNAVAILABLE":
        return UNAVAILABLE_MESSAGE
    if code == "UPSTREAM_BAD_RESPONSE":
        return BAD_RESPONSE_MESSAGE

    status = error.status
    if not isinstance(status, int):
        return GENERIC_MESSAGE
    if status == 429:
        return RATE_LIMIT_MESSAGE
    if status >= 500:
        return SERVER_MESSAGE
    return REQUEST_MESSAGE
