"""Tests for to_user_message."""

import pytest
import requests

from airport_resolver.app.http import ApiError, ErrorKind
from airport_resolver.app import messages
from airport_resolver.app.messages import to_user_message


class TestTransportErrors:
    def test_requests_exception(self):
        assert to_user_message(requests.ConnectionError("refused")) == messages.NETWORK_MESSAGE

    def test_network_api_error(self):
        err = ApiError.network("https://example.test", requests.Timeout("slow"))
        assert to_user_message(err) == messages.NETWORK_MESSAGE

    def test_network_kind_wins_over_code(self):
        err = ApiError("x", kind=ErrorKind.NETWORK, code="NOT_FOUND")
        assert to_user_message(err) == messages.NETWORK_MESSAGE


class TestEnvelopeCodes:
    def test_validation_uses_server_message(self):
        err = ApiError("Both origin and destination are required.", status=400, code="VALIDATION_ERROR")
        assert to_user_message(err) == "Both origin and destination are required."

    @pytest.mark.parametrize("body_message", [{"origin": "required"}, 42])
    def test_validation_envelope_with_non_text_message(self, make_response, body_message):
        resp = make_response(400, {"error": {"code": "VALIDATION_ERROR", "message": body_message}})
        text = to_user_message(ApiError.from_response(resp))
        assert isinstance(text, str) and text.strip()

    def test_validation_error_built_with_non_text_message(self):
        err = ApiError({"origin": "required"}, status=400, code="VALIDATION_ERROR")
        assert to_user_message(err) == messages.REQUEST_MESSAGE

    def test_blank_validation_message(self):
        err = ApiError("   ", status=400, code="VALIDATION_ERROR")
        assert to_user_message(err) == messages.REQUEST_MESSAGE

    @pytest.mark.parametrize(
        "code, expected",
        [
            ("NOT_FOUND", messages.NOT_FOUND_MESSAGE),
            ("UPSTREAM_UNAVAILABLE", messages.UNAVAILABLE_MESSAGE),
            ("UPSTREAM_BAD_RESPONSE", messages.BAD_RESPONSE_MESSAGE),
        ],
    )
    def test_known_codes(self, code, expected):
        assert to_user_message(ApiError("ignored", status=418, code=code)) == expected

    def test_not_found_hints_at_country(self):
        assert "country" in messages.NOT_FOUND_MESSAGE


class TestStatusFallback:
    @pytest.mark.parametrize(
        "status, expected",
        [
            (429, messages.RATE_LIMIT_MESSAGE),
            (500, messages.SERVER_MESSAGE),
            (504, messages.SERVER_MESSAGE),
            (400, messages.REQUEST_MESSAGE),
            (403, messages.REQUEST_MESSAGE),
        ],
    )
    def test_by_status(self, status, expected):
        assert to_user_message(ApiError("raw upstream text", status=status, code="UNKNOWN_ERROR")) == expected

    def test_missing_status(self):
        assert to_user_message(ApiError("no status")) == messages.GENERIC_MESSAGE


class TestAnything:
    @pytest.mark.parametrize("error", [None, ValueError("x"), KeyError("k"), RuntimeError(""), ApiError("")])
    def test_never_empty(self, error):
        text = to_user_message(error)
        assert isinstance(text, str) and text.strip()

    def test_unknown_exception_is_generic(self):
        assert to_user_message(ZeroDivisionError()) == messages.GENERIC_MESSAGE

    def test_raw_message_not_leaked(self):
        err = ApiError("Traceback: db password=hunter2", status=500, code="INTERNAL_ERROR")
        assert "hunter2" not in to_user_message(err)
