"""Runtime configuration for Loginn components."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_DEVELOPER_PROVIDER = "login.loginns"


def _optional_int(value: Optional[str], default: Optional[int]) -> Optional[int]:
    # An empty string or "none" disables the setting
    if value is None:
        return default
    if value.strip().lower() in ("", "none", "0"):
        return None
    return int(value)


def _bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Configuration for the AWS-backed service.

    Example:
        >>> settings = Settings.from_env()
        >>> factory = create_factory("aws", settings=settings)
    """

    region: str = "eu-west-1"
    table_name: str = "users"
    email_index_name: Optional[str] = None
    identity_pool_id: str = ""
    developer_provider_name: str = DEFAULT_DEVELOPER_PROVIDER
    mail_source: str = ""
    verify_url: str = "https://loginn.example.com/verify"
    reset_url: str = "https://loginn.example.com/change_password.html"
    bcrypt_rounds: int = 10

    # Single-use token lifetimes in seconds, None never expires
    verification_token_ttl: Optional[int] = 86400
    password_reset_token_ttl: Optional[int] = 3600

    # Federation session token lifetime in seconds
    session_token_duration: int = 900
    verify_session_signature: bool = True

    # Upstream call bounds
    connect_timeout: float = 3.0
    read_timeout: float = 5.0
    read_retries: int = 2

    endpoint_url: Optional[str] = None  # For LocalStack testing

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            region=env.get("AWS_REGION", defaults.region),
            table_name=env.get("LOGINN_TABLE_NAME", defaults.table_name),
            email_index_name=env.get("LOGINN_EMAIL_INDEX") or None,
            identity_pool_id=env.get("LOGINN_IDENTITY_POOL_ID", defaults.identity_pool_id),
            developer_provider_name=env.get(
                "LOGINN_DEVELOPER_PROVIDER", defaults.developer_provider_name
            ),
            mail_source=env.get("LOGINN_MAIL_SOURCE", defaults.mail_source),
            verify_url=env.get("LOGINN_VERIFY_URL", defaults.verify_url),
            reset_url=env.get("LOGINN_RESET_URL", defaults.reset_url),
            bcrypt_rounds=int(env.get("LOGINN_BCRYPT_ROUNDS", defaults.bcrypt_rounds)),
            verification_token_ttl=_optional_int(
                env.get("LOGINN_VERIFICATION_TOKEN_TTL"), defaults.verification_token_ttl
            ),
            password_reset_token_ttl=_optional_int(
                env.get("LOGINN_RESET_TOKEN_TTL"), defaults.password_reset_token_ttl
            ),
            session_token_duration=int(
                env.get("LOGINN_SESSION_TOKEN_DURATION", defaults.session_token_duration)
            ),
            verify_session_signature=_bool(
                env.get("LOGINN_VERIFY_SESSION_SIGNATURE"), defaults.verify_session_signature
            ),
            connect_timeout=float(env.get("LOGINN_CONNECT_TIMEOUT", defaults.connect_timeout)),
            read_timeout=float(env.get("LOGINN_READ_TIMEOUT", defaults.read_timeout)),
            read_retries=int(env.get("LOGINN_READ_RETRIES", defaults.read_retries)),
            endpoint_url=env.get("LOGINN_ENDPOINT_URL") or None,
        )
