"""Request surface: flat event dicts in, flat result dicts out.

Each handler takes the CredentialService and the request event, which
carries the fields ``username``, ``password``, ``email``, ``service`` and
``token`` as needed. Failures from the LoginnError taxonomy are returned as

    {"error": {"kind": "NotFound", "code": "NOT_FOUND", "message": "..."}}

Anything else propagates to the caller.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, Mapping

import structlog

from loginn.exceptions import LoginnError
from loginn.service import CredentialService

log = structlog.get_logger()

Event = Mapping[str, Any]
Response = Dict[str, Any]


def error_response(error: LoginnError) -> Response:
    return {"error": {"kind": error.kind, "code": error.code, "message": error.message}}


async def _run(name: str, call: Callable[[], Awaitable[Any]]) -> Response:
    try:
        result = await call()
    except LoginnError as e:
        log.info("request_failed", handler=name, kind=e.kind, code=e.code)
        return error_response(e)
    return result.to_dict()


async def register(service: CredentialService, event: Event) -> Response:
    return await _run(
        "register",
        lambda: service.register(
            event.get("username"), event.get("password"), event.get("email"), event.get("service")
        ),
    )


async def verify_email(service: CredentialService, event: Event) -> Response:
    return await _run(
        "verify_email",
        lambda: service.verify(event.get("username"), event.get("token")),
    )


async def authenticate(service: CredentialService, event: Event) -> Response:
    return await _run(
        "authenticate",
        lambda: service.authenticate(
            event.get("password"),
            service=event.get("service"),
            username=event.get("username"),
            email=event.get("email"),
        ),
    )


async def validate(service: CredentialService, event: Event) -> Response:
    return await _run(
        "validate",
        lambda: service.validate(event.get("username"), event.get("service"), event.get("token")),
    )


async def refresh_token(service: CredentialService, event: Event) -> Response:
    return await _run(
        "refresh_token",
        lambda: service.refresh(event.get("username"), event.get("service"), event.get("token")),
    )


async def request_password_reset(service: CredentialService, event: Event) -> Response:
    return await _run(
        "request_password_reset",
        lambda: service.request_password_reset(event.get("username"), event.get("service")),
    )


async def change_password(service: CredentialService, event: Event) -> Response:
    return await _run(
        "change_password",
        lambda: service.change_password(
            event.get("username"), event.get("password"), event.get("token")
        ),
    )


async def delete_user(service: CredentialService, event: Event) -> Response:
    return await _run(
        "delete_user",
        lambda: service.delete(
            event.get("password"),
            service=event.get("service"),
            username=event.get("username"),
            email=event.get("email"),
        ),
    )


HANDLERS: Dict[str, Callable[[CredentialService, Event], Awaitable[Response]]] = {
    "register": register,
    "verify_email": verify_email,
    "authenticate": authenticate,
    "validate": validate,
    "refresh_token": refresh_token,
    "request_password_reset": request_password_reset,
    "change_password": change_password,
    "delete_user": delete_user,
}
