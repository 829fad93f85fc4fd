"""Tests for the request/response surface."""

import pytest

from loginn import handlers


@pytest.mark.asyncio
async def test_lifecycle_through_handlers(service, outbox):
    registered = await handlers.register(
        service,
        {"username": "alice", "password": "s3cret!", "email": "alice@x.com", "service": "svcA"},
    )
    assert registered == {"username": "alice", "email": "alice@x.com", "service": "svcA"}

    verified = await handlers.verify_email(
        service, {"username": "alice", "token": outbox.last_to("alice@x.com").token}
    )
    assert verified == {"location": "svcA"}

    session = await handlers.authenticate(
        service, {"username": "alice", "password": "s3cret!", "service": "svcA"}
    )
    assert set(session) == {"username", "service", "session_token"}

    validated = await handlers.validate(
        service, {"username": "alice", "service": "svcA", "token": session["session_token"]}
    )
    assert validated == {"username": "alice"}

    refreshed = await handlers.refresh_token(
        service, {"username": "alice", "service": "svcA", "token": session["session_token"]}
    )
    assert refreshed["session_token"]

    reset = await handlers.request_password_reset(service, {"username": "alice", "service": "svcA"})
    assert reset == {"username": "alice", "service": "svcA"}
    changed = await handlers.change_password(
        service,
        {"username": "alice", "password": "n3w-pass", "token": outbox.last_to("alice@x.com").token},
    )
    assert changed == {"username": "alice", "service": "svcA"}

    deleted = await handlers.delete_user(
        service, {"email": "alice@x.com", "password": "n3w-pass", "service": "svcA"}
    )
    assert deleted == {"username": "alice", "service": "svcA"}


@pytest.mark.asyncio
async def test_missing_field_error_response(service):
    response = await handlers.register(service, {"username": "alice", "password": "s3cret!"})

    assert response == {
        "error": {
            "kind": "InvalidRequest",
            "code": "INVALID_REQUEST",
            "message": "Missing email parameter in request",
        }
    }


@pytest.mark.asyncio
async def test_reserved_service_error_response(service):
    response = await handlers.register(
        service,
        {"username": "alice", "password": "s3cret!", "email": "alice@x.com", "service": "#account"},
    )

    assert response["error"]["kind"] == "InvalidRequest"
    assert response["error"]["code"] == "INVALID_SERVICE"


@pytest.mark.asyncio
async def test_not_found_error_response(service):
    response = await handlers.authenticate(service, {"username": "nobody", "password": "pw"})

    assert response["error"]["kind"] == "NotFound"
    assert response["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_unauthorized_error_response(service):
    response = await handlers.validate(
        service, {"username": "nobody", "service": "svcA", "token": "garbage"}
    )

    assert response["error"]["kind"] == "Unauthorized"


def test_every_operation_has_a_handler():
    assert set(handlers.HANDLERS) == {
        "register",
        "verify_email",
        "authenticate",
        "validate",
        "refresh_token",
        "request_password_reset",
        "change_password",
        "delete_user",
    }
