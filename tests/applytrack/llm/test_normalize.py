from applytrack.llm._normalize import (
    backend_error_from_response,
    error_message_from_body,
    from_sdk_error,
)
from applytrack.llm.errors import BackendError, MissingContentError, TransportError


def test_error_message_prefers_error_message_field():
    body = '{"error": {"message": "model not found", "type": "invalid_request_error"}}'
    assert error_message_from_body(body, "Not Found") == "model not found"


def test_error_message_falls_back_to_raw_text():
    assert error_message_from_body("upstream timeout", "Gateway Timeout") == "upstream timeout"
    assert error_message_from_body('{"detail": "nope"}') == '{"detail": "nope"}'
    assert error_message_from_body('{"error": "flat string"}') == '{"error": "flat string"}'


def test_error_message_uses_reason_or_default_for_empty_body():
    assert error_message_from_body("", "Bad Request") == "Bad Request"
    assert error_message_from_body(None, None) == "Unknown error"


def test_backend_error_from_response(make_response):
    resp = make_response(
        status_code=404, reason="Not Found", json_data={"error": {"message": "no such model"}}
    )
    err = backend_error_from_response(resp)
    assert isinstance(err, BackendError)
    assert err.status == 404
    assert str(err) == "no such model"


def test_from_sdk_error_with_code_is_backend_error():
    class _Err(Exception):
        code = 403
        message = "permission denied"

    err = from_sdk_error(_Err("x"), context="Gemini")
    assert isinstance(err, BackendError)
    assert err.status == 403
    assert err.message == "permission denied"


def test_from_sdk_error_without_message_uses_str():
    class _Err(Exception):
        code = 500

    err = from_sdk_error(_Err("internal"), context="Gemini")
    assert err.message == "internal"


def test_from_sdk_error_without_code_is_transport_error():
    err = from_sdk_error(TimeoutError("timed out"), context="Gemini (m)")
    assert isinstance(err, TransportError)
    assert str(err) == "Gemini (m): timed out"


def test_from_sdk_error_passes_through_our_errors():
    original = MissingContentError("empty")
    assert from_sdk_error(original, context="x") is original
