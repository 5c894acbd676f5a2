"""Error Hierarchy — codes, statuses, envelopes, and UnknownError wrapping."""

from app.core.errors import (
    AuthenticationError,
    DatabaseConnectionError,
    DigitalIdError,
    ErrorCategory,
    ErrorContext,
    OriginNotAllowedError,
    SeedError,
    UnknownError,
)


def test_connection_error_shape():
    err = DatabaseConnectionError("timeout")
    assert err.code == "DATABASE_CONNECTION_ERROR"
    assert err.category == ErrorCategory.INITIALIZATION
    assert err.http_status == 500
    assert err.message == "Database connect failed: timeout"
    assert not isinstance(err, ConnectionError)


def test_seed_error_shape():
    err = SeedError("IntegrityError")
    assert err.code == "SEED_ERROR"
    assert err.http_status == 500
    assert "IntegrityError" in err.message


def test_to_response_envelope():
    body = AuthenticationError().to_response()["error"]
    assert body["code"] == "UNAUTHORIZED"
    assert body["message"] == "Unauthorized"
    assert body["category"] == "authentication"
    assert body["severity"] == "warning"
    assert "timestamp" in body


def test_origin_error_keeps_origin():
    err = OriginNotAllowedError("http://evil.test")
    assert err.origin == "http://evil.test"
    assert err.http_status == 403


def test_unknown_error_wraps_untyped_exceptions():
    wrapped = UnknownError.wrap(ValueError("bad"))
    assert isinstance(wrapped, UnknownError)
    assert wrapped.code == "UNKNOWN_ERROR"
    assert wrapped.message == "ValueError: bad"


def test_unknown_error_passes_typed_errors_through():
    err = SeedError("x")
    assert UnknownError.wrap(err) is err
    assert isinstance(err, DigitalIdError)


def test_envelope_carries_request_path_when_known():
    err = AuthenticationError(context=ErrorContext(path="/api/v1/users/me"))
    assert err.to_response()["error"]["path"] == "/api/v1/users/me"
    assert "path" not in AuthenticationError().to_response()["error"]
