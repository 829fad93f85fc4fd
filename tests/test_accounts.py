"""Tests for account resolution and identity binding."""

from unittest.mock import AsyncMock

import pytest

from loginn.accounts import resolve_registration, select_registration
from loginn.exceptions import (
    AmbiguousAccountError,
    IdentityNotFoundError,
    InvalidRequestError,
    NotFoundError,
    UpstreamUnavailableError,
)
from loginn.identity import IdentityBindingManager
from loginn.identity_providers import MockIdentityFederation
from loginn.models import Registration
from loginn.retry import with_retries
from loginn.stores import MockCredentialStore


def _registration(service, username="alice", email="alice@x.com"):
    return Registration(service=service, username=username, email=email, password_hash="h")


@pytest.fixture
def store(clock):
    return MockCredentialStore(clock=clock)


# ==================== Resolution rule ====================


def test_select_none_registered():
    with pytest.raises(NotFoundError) as exc_info:
        select_registration([], "alice")
    assert str(exc_info.value) == "User not registered"


def test_select_single_registration_without_service():
    only = _registration("svcA")
    assert select_registration([only], "alice") is only


def test_select_by_service():
    registrations = [_registration("svcA"), _registration("svcB")]
    assert select_registration(registrations, "alice", "svcB").service == "svcB"


def test_select_unknown_service():
    with pytest.raises(NotFoundError) as exc_info:
        select_registration([_registration("svcA")], "alice", "svcC")
    assert str(exc_info.value) == "No user registered for svcC"


def test_select_ambiguous_without_service():
    registrations = [_registration("svcA"), _registration("svcB")]

    with pytest.raises(AmbiguousAccountError) as exc_info:
        select_registration(registrations, "alice")

    assert exc_info.value.services == ["svcA", "svcB"]


@pytest.mark.asyncio
async def test_resolve_by_email(store):
    await store.put_if_absent(_registration("svcA"))

    registration = await resolve_registration(store, email="alice@x.com")

    assert registration.username == "alice"


@pytest.mark.asyncio
async def test_resolve_prefers_username(store):
    await store.put_if_absent(_registration("svcA"))
    await store.put_if_absent(_registration("svcA", username="bob", email="bob@x.com"))

    registration = await resolve_registration(store, username="bob", email="alice@x.com")

    assert registration.username == "bob"


@pytest.mark.asyncio
async def test_resolve_requires_identifier(store):
    with pytest.raises(InvalidRequestError):
        await resolve_registration(store)


# ==================== Identity binding ====================


@pytest.fixture
def federation(clock):
    return MockIdentityFederation("s" * 64, clock=clock)


@pytest.mark.asyncio
async def test_revoke_if_orphaned_keeps_shared_identity(store, federation):
    manager = IdentityBindingManager(store, federation)
    await store.put_if_absent(_registration("svcB"))
    binding = await manager.ensure_identity("alice")

    assert await manager.revoke_if_orphaned("alice") is False
    assert await manager.lookup_identity("alice") == binding.identity_id


@pytest.mark.asyncio
async def test_revoke_if_orphaned_revokes_and_releases(store, federation):
    manager = IdentityBindingManager(store, federation)
    await manager.ensure_identity("alice")

    assert await manager.revoke_if_orphaned("alice") is True
    with pytest.raises(IdentityNotFoundError):
        await manager.lookup_identity("alice")


@pytest.mark.asyncio
async def test_revoke_if_orphaned_without_identity(store, federation):
    """Test a never-verified account only releases its username."""
    manager = IdentityBindingManager(store, federation)
    await store.put_if_absent(_registration("svcA"))
    await store.delete("svcA", "alice")

    assert await manager.revoke_if_orphaned("alice") is False
    await store.put_if_absent(_registration("svcA", email="new-alice@x.com"))


# ==================== Retries ====================


@pytest.mark.asyncio
async def test_with_retries_recovers():
    read = AsyncMock(side_effect=[UpstreamUnavailableError("boom", "query"), "ok"])

    assert await with_retries(read, retries=2, base_delay=0) == "ok"
    assert read.await_count == 2


@pytest.mark.asyncio
async def test_with_retries_gives_up():
    read = AsyncMock(side_effect=UpstreamUnavailableError("boom", "query"))

    with pytest.raises(UpstreamUnavailableError):
        await with_retries(read, retries=1, base_delay=0)
    assert read.await_count == 2


@pytest.mark.asyncio
async def test_with_retries_does_not_retry_other_errors():
    read = AsyncMock(side_effect=NotFoundError())

    with pytest.raises(NotFoundError):
        await with_retries(read, retries=3, base_delay=0)
    assert read.await_count == 1
