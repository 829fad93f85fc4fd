"""AWS Lambda entry points for the Loginn credential service.

One Lambda function is deployed per operation, each pointing its handler
setting at the matching function below (e.g. ``loginn_handler.register``).
The service is built once per container and reused across invocations.

Environment Variables:
    AWS_REGION: Region of the table, identity pool and SES identity
    LOGINN_TABLE_NAME: Registrations table (default "users")
    LOGINN_IDENTITY_POOL_ID: Cognito identity pool id
    LOGINN_MAIL_SOURCE: Verified SES sender address
    LOGINN_VERIFY_URL / LOGINN_RESET_URL: Base URLs of the emailed links

See loginn.config.Settings for the full list.
"""

import asyncio

from loginn import create_factory, handlers
from loginn.config import Settings
from loginn.log_config import configure_logging

_service = None


def _get_service():
    global _service
    if _service is None:
        configure_logging()
        _service = create_factory("aws", settings=Settings.from_env()).create_service()
    return _service


def _invoke(name, event):
    return asyncio.run(handlers.HANDLERS[name](_get_service(), event or {}))


def register(event, context):
    return _invoke("register", event)


def verify_email(event, context):
    return _invoke("verify_email", event)


def authenticate(event, context):
    return _invoke("authenticate", event)


def validate(event, context):
    return _invoke("validate", event)


def refresh_token(event, context):
    return _invoke("refresh_token", event)


def request_password_reset(event, context):
    return _invoke("request_password_reset", event)


def change_password(event, context):
    return _invoke("change_password", event)


def delete_user(event, context):
    return _invoke("delete_user", event)
