"""Tests for factories and interface compliance."""

from abc import ABC

import pytest

from loginn import (
    AwsFactory,
    CognitoIdentityFederation,
    CognitoSessionVerifier,
    CredentialService,
    CredentialStore,
    DynamoDBCredentialStore,
    IdentityFederation,
    LoginnFactory,
    MockFactory,
    NotificationSender,
    SesNotificationSender,
    Settings,
    create_factory,
)


def test_interfaces_are_abstract():
    for interface in (CredentialStore, IdentityFederation, NotificationSender, LoginnFactory):
        assert issubclass(interface, ABC)
        with pytest.raises(TypeError):
            interface()  # type: ignore


def test_credential_store_has_required_methods():
    required_methods = [
        "get_by_key",
        "put_if_absent",
        "conditional_update",
        "query_by_username",
        "query_by_email",
        "delete",
        "release_username",
    ]
    for method in required_methods:
        assert hasattr(CredentialStore, method), f"CredentialStore missing method: {method}"


def test_create_mock_factory():
    factory = create_factory("mock")

    assert isinstance(factory, MockFactory)
    assert isinstance(factory.create_service(), CredentialService)


def test_mock_factory_shares_components():
    factory = create_factory("mock")

    assert factory.create_credential_store() is factory.create_credential_store()
    assert factory.create_identity_federation() is factory.federation
    assert factory.create_notification_sender() is factory.notifier


def test_create_aws_factory(aws_credentials):
    settings = Settings(identity_pool_id="eu-west-1:1234", mail_source="no-reply@loginn.io")

    factory = create_factory("aws", settings=settings)

    assert isinstance(factory, AwsFactory)
    assert isinstance(factory.create_credential_store(), DynamoDBCredentialStore)
    assert isinstance(factory.create_identity_federation(), CognitoIdentityFederation)
    assert isinstance(factory.create_notification_sender(), SesNotificationSender)
    assert isinstance(factory.create_session_verifier(), CognitoSessionVerifier)
    assert isinstance(factory.create_service(), CredentialService)


def test_aws_factory_caches_clients(aws_credentials):
    factory = AwsFactory(Settings(identity_pool_id="eu-west-1:1234", mail_source="no-reply@loginn.io"))

    assert factory.create_credential_store() is factory.create_credential_store()


def test_aws_factory_requires_identity_pool(aws_credentials):
    factory = AwsFactory(Settings(mail_source="no-reply@loginn.io"))

    with pytest.raises(ValueError, match="identity pool"):
        factory.create_identity_federation()


def test_aws_factory_requires_mail_source(aws_credentials):
    factory = AwsFactory(Settings(identity_pool_id="eu-west-1:1234"))

    with pytest.raises(ValueError, match="mail source"):
        factory.create_notification_sender()


def test_unknown_provider_type():
    with pytest.raises(ValueError, match="Unknown provider type"):
        create_factory("ldap")
