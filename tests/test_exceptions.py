"""Tests for loginn exceptions."""

from loginn.exceptions import (
    AccountNotVerifiedError,
    AmbiguousAccountError,
    ConditionFailedError,
    ConflictError,
    IdentityNotFoundError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidRequestError,
    InvalidTokenError,
    LoginnError,
    MalformedTokenError,
    NotFoundError,
    TokenNotFoundError,
    UnauthorizedError,
    UpstreamUnavailableError,
)


# ==================== Base Exceptions ====================


def test_loginn_error():
    """Test base LoginnError."""
    error = LoginnError("Test error", "TEST_CODE")
    assert str(error) == "Test error"
    assert error.message == "Test error"
    assert error.code == "TEST_CODE"


def test_all_errors_inherit_from_base():
    """Test every error can be caught as LoginnError."""
    errors = [
        InvalidRequestError("Missing username parameter in request"),
        InvalidEmailError("nope"),
        NotFoundError(),
        AmbiguousAccountError("alice"),
        ConflictError("alice"),
        InvalidCredentialsError(),
        AccountNotVerifiedError("alice", "svcA"),
        UnauthorizedError(),
        TokenNotFoundError(),
        InvalidTokenError(),
        MalformedTokenError(),
        IdentityNotFoundError("alice"),
        UpstreamUnavailableError("boom", "get_item"),
        ConditionFailedError("svcA", "alice"),
    ]
    for error in errors:
        assert isinstance(error, LoginnError)
        assert error.kind != LoginnError.kind


# ==================== Request Exceptions ====================


def test_invalid_request_error():
    error = InvalidRequestError("Missing password parameter in request")
    assert error.kind == "InvalidRequest"
    assert error.code == "INVALID_REQUEST"


def test_invalid_email_error_is_invalid_request():
    """Test InvalidEmailError is also an InvalidRequestError."""
    error = InvalidEmailError("not-an-email", "The email address is not valid")
    assert isinstance(error, InvalidRequestError)
    assert error.code == "INVALID_EMAIL"
    assert error.kind == "InvalidEmail"
    assert error.email == "not-an-email"
    assert "not-an-email" in str(error)


# ==================== Account Exceptions ====================


def test_conflict_error_for_service():
    error = ConflictError("alice", "svcA")
    assert "alice" in str(error)
    assert "svcA" in str(error)
    assert error.code == "CONFLICT"
    assert error.service == "svcA"


def test_conflict_error_for_username():
    """Test ConflictError without a service reports a taken username."""
    error = ConflictError("alice")
    assert "already taken" in str(error)
    assert error.service is None


def test_ambiguous_account_error():
    error = AmbiguousAccountError("alice", ["svcA", "svcB"])
    assert "alice" in str(error)
    assert error.services == ["svcA", "svcB"]
    assert error.kind == "AmbiguousAccount"


def test_invalid_credentials_error_message():
    """Test wrong password and unknown user share one message."""
    error = InvalidCredentialsError()
    assert str(error) == "Invalid username or password"


def test_account_not_verified_error():
    error = AccountNotVerifiedError("alice", "svcA")
    assert error.username == "alice"
    assert error.service == "svcA"
    assert error.code == "ACCOUNT_NOT_VERIFIED"


# ==================== Upstream Exceptions ====================


def test_upstream_unavailable_error():
    error = UpstreamUnavailableError("Failed to send email", "send_email")
    assert error.operation == "send_email"
    assert error.retryable is True
    assert error.code == "UPSTREAM_UNAVAILABLE"


def test_identity_not_found_error():
    error = IdentityNotFoundError("alice")
    assert error.login_key == "alice"
    assert "alice" in str(error)
