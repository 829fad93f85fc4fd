"""Tests for Settings."""

import pytest

from loginn.config import DEFAULT_DEVELOPER_PROVIDER, Settings


def test_settings_defaults():
    settings = Settings()
    assert settings.table_name == "users"
    assert settings.developer_provider_name == DEFAULT_DEVELOPER_PROVIDER
    assert settings.bcrypt_rounds == 10
    assert settings.session_token_duration == 900
    assert settings.verification_token_ttl == 86400
    assert settings.password_reset_token_ttl == 3600
    assert settings.email_index_name is None


def test_settings_from_empty_env_uses_defaults():
    assert Settings.from_env({}) == Settings()


def test_settings_from_env():
    settings = Settings.from_env(
        {
            "AWS_REGION": "us-east-1",
            "LOGINN_TABLE_NAME": "accounts",
            "LOGINN_EMAIL_INDEX": "email-index",
            "LOGINN_IDENTITY_POOL_ID": "us-east-1:1234",
            "LOGINN_MAIL_SOURCE": "no-reply@loginn.io",
            "LOGINN_BCRYPT_ROUNDS": "12",
            "LOGINN_SESSION_TOKEN_DURATION": "3600",
            "LOGINN_VERIFY_SESSION_SIGNATURE": "false",
            "LOGINN_READ_RETRIES": "0",
            "LOGINN_ENDPOINT_URL": "http://localhost:4566",
        }
    )
    assert settings.region == "us-east-1"
    assert settings.table_name == "accounts"
    assert settings.email_index_name == "email-index"
    assert settings.identity_pool_id == "us-east-1:1234"
    assert settings.mail_source == "no-reply@loginn.io"
    assert settings.bcrypt_rounds == 12
    assert settings.session_token_duration == 3600
    assert settings.verify_session_signature is False
    assert settings.read_retries == 0
    assert settings.endpoint_url == "http://localhost:4566"


@pytest.mark.parametrize("value", ["", "none", "None", "0"])
def test_token_ttl_can_be_disabled(value):
    """Test an empty, 'none' or zero TTL disables token expiry."""
    settings = Settings.from_env({"LOGINN_RESET_TOKEN_TTL": value})
    assert settings.password_reset_token_ttl is None


def test_token_ttl_from_env():
    settings = Settings.from_env({"LOGINN_VERIFICATION_TOKEN_TTL": "600"})
    assert settings.verification_token_ttl == 600


def test_invalid_number_raises():
    with pytest.raises(ValueError):
        Settings.from_env({"LOGINN_BCRYPT_ROUNDS": "many"})
