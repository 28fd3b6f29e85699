"""
End-to-end scenarios against the in-memory fake backend.
Exercises the client, session manager and property collection together over ASGI.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from galactavista.models.session import SessionState
from galactavista.repositories.credentials import FileCredentialRepository, InMemoryCredentialRepository
from galactavista.services.auth import AuthSessionManager
from galactavista.services.property import PropertyCollection
from galactavista.utils.exceptions import AuthenticationError, ForbiddenError, NotFoundError
from tests.conftest import PropertyFactory, UserFactory

AGENT = {
    "email": "agent@example.com",
    "password": "agent-password",
    "first_name": "Alex",
    "last_name": "Morgan",
    "role": "agent",
}

BUYER = {
    "email": "buyer@example.com",
    "password": "buyer-password",
    "first_name": "Sam",
    "last_name": "Buyer",
    "role": "buyer",
}


@pytest.fixture
def session_manager(backend_api):
    return AuthSessionManager(backend_api, InMemoryCredentialRepository())


@pytest.fixture
async def agent_session(session_manager):
    await session_manager.register(AGENT)
    await session_manager.login(AGENT["email"], AGENT["password"])
    return session_manager


class TestPropertyLifecycle:
    """Create, read, update and delete a listing as an agent."""

    @pytest.mark.asyncio
    async def test_created_property_round_trips(self, agent_session, backend_api):
        """A created property reads back equal to what the server returned on create."""
        collection = PropertyCollection(backend_api)
        data = PropertyFactory.create_property_data()

        created = await collection.create(data)
        fetched = await collection.fetch_one(created.id)

        assert fetched == created
        for key, value in data.items():
            assert getattr(fetched, key) == value
        assert fetched.agent.email == AGENT["email"]

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, agent_session, backend_api):
        collection = PropertyCollection(backend_api)
        cabin = await collection.create(PropertyFactory.create_property_data())
        await collection.create(PropertyFactory.create_property_data(
            title="Downtown condo", price=275000, property_type="condo", description="Walk to everything."
        ))

        state = await collection.fetch({"query": "lake", "min_price": 300000})
        assert [p.id for p in state.items] == [cabin.id]
        assert state.pagination.total == 1

        updated = await collection.update(cabin.id, {"price": 340000, "status": "pending"})
        assert updated.price == 340000
        assert collection.items[0].status.value == "pending"

        await collection.delete(cabin.id)
        assert collection.items == []

        with pytest.raises(NotFoundError):
            await collection.fetch_one(cabin.id)

    @pytest.mark.asyncio
    async def test_agent_listing_only_own_properties(self, agent_session, backend_api):
        collection = PropertyCollection(backend_api)
        await collection.create(PropertyFactory.create_property_data(title="Mine"))

        other = AuthSessionManager(backend_api, InMemoryCredentialRepository())
        await other.register({**AGENT, "email": "other.agent@example.com"})
        await other.login("other.agent@example.com", AGENT["password"])
        await collection.create(PropertyFactory.create_property_data(title="Theirs"))

        page = await collection.fetch_by_agent()

        assert [p.title for p in page.data] == ["Theirs"]

    @pytest.mark.asyncio
    async def test_buyer_cannot_create(self, session_manager, backend_api):
        await session_manager.register(BUYER)
        await session_manager.login(BUYER["email"], BUYER["password"])
        collection = PropertyCollection(backend_api)

        with pytest.raises(ForbiddenError):
            await collection.create(PropertyFactory.create_property_data())

        assert collection.error == "Only agents can create properties"
        assert collection.items == []


class TestSessionScenarios:
    """Session persistence and expiry against the fake backend."""

    @pytest.mark.asyncio
    async def test_register_then_login(self, session_manager):
        user = await session_manager.register(AGENT)
        assert session_manager.state == SessionState.UNAUTHENTICATED

        session = await session_manager.login(AGENT["email"], AGENT["password"])

        assert session.user.id == user.id
        assert session.authenticated

    @pytest.mark.asyncio
    async def test_wrong_password(self, session_manager):
        await session_manager.register(AGENT)

        with pytest.raises(AuthenticationError):
            await session_manager.login(AGENT["email"], "not-the-password")

        assert not session_manager.is_authenticated

    @pytest.mark.asyncio
    async def test_session_survives_restart(self, backend_api, tmp_path):
        """A new manager over the same file store restores the session."""
        store_path = tmp_path / "credentials.json"
        first = AuthSessionManager(backend_api, FileCredentialRepository(store_path))
        await first.register(AGENT)
        await first.login(AGENT["email"], AGENT["password"])
        backend_api.clear_token()

        second = AuthSessionManager(backend_api, FileCredentialRepository(store_path))
        session = await second.initialize()
        profile = await second.refresh_profile()

        assert session.authenticated
        assert profile.email == AGENT["email"]

    @pytest.mark.asyncio
    async def test_profile_update_reads_back(self, agent_session):
        user = await agent_session.update_profile({"phone": "555-0100"})

        assert user.phone == "555-0100"
        assert agent_session.user.phone == "555-0100"

    @pytest.mark.asyncio
    async def test_rejected_token_ends_session(self, backend_api):
        """A stored token the server no longer accepts ends the session on first use."""
        await AuthSessionManager(backend_api, InMemoryCredentialRepository()).register(AGENT)
        forged = jwt.encode(
            {"sub": "1", "exp": int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())},
            "some-other-secret",
            algorithm="HS256",
        )
        store = InMemoryCredentialRepository({
            "token": forged,
            "user": json.dumps(UserFactory.create_user_payload()),
        })
        manager = AuthSessionManager(backend_api, store)
        await manager.initialize()
        assert manager.is_authenticated

        with pytest.raises(AuthenticationError) as exc_info:
            await manager.refresh_profile()
        await manager.handle_authentication_error(exc_info.value)

        assert manager.state == SessionState.UNAUTHENTICATED
        assert store.items == {}

    @pytest.mark.asyncio
    async def test_health(self, backend_api):
        health = await backend_api.health_check()

        assert health.status == "ok"
