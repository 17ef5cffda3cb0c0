"""
Shared pytest fixtures for the RCON bridge test suite.

This module provides fixtures that are automatically available to all test files:
- Isolated ItemCatalog instances loaded from in-memory item lists
- Fake console session factories that record connect/send/disconnect calls
- An in-memory fake RCON server socket for exercising the real wire codec
- A fake command generator and a fully wired VoiceCommandService
- FastAPI TestClient instances

Nothing here touches the network. The test doubles themselves live in
tests/fakes.py.
"""

import pytest
from fastapi.testclient import TestClient

from rcon_bridge.catalog import ItemCatalog, ItemValidator
from rcon_bridge.errors import ConnectError
from rcon_bridge.pipeline import CommandPipeline
from rcon_bridge.players import PlayerResolver
from rcon_bridge.rcon import CommandExecutor
from rcon_bridge.service import VoiceCommandService
from tests.constants import CATALOG_ITEMS
from tests.fakes import FakeGenerator, FakeRconSocket, FakeSessionFactory, bread_request

# ============================================================================
# CATALOG FIXTURES
# ============================================================================


@pytest.fixture
def catalog() -> ItemCatalog:
    """An ItemCatalog loaded with CATALOG_ITEMS."""
    cat = ItemCatalog()
    cat.load(CATALOG_ITEMS)
    return cat


@pytest.fixture
def validator(catalog: ItemCatalog) -> ItemValidator:
    return ItemValidator(catalog)


# ============================================================================
# CONSOLE FIXTURES
# ============================================================================


@pytest.fixture
def session_factory() -> FakeSessionFactory:
    """Factory handing out well-behaved FakeSession objects."""
    return FakeSessionFactory()


@pytest.fixture
def failing_connect_factory() -> FakeSessionFactory:
    """Factory whose sessions always fail to connect."""
    return FakeSessionFactory(connect_error=ConnectError("connection refused"))


@pytest.fixture
def fake_rcon_socket() -> FakeRconSocket:
    return FakeRconSocket()


# ============================================================================
# SERVICE AND API FIXTURES
# ============================================================================


@pytest.fixture
def fake_generator() -> FakeGenerator:
    """Generator that always answers "give alice bread 5"."""
    return FakeGenerator(bread_request())


@pytest.fixture
def resolver() -> PlayerResolver:
    return PlayerResolver(default_player="alice", device_users={"bob": "Bobcraft"})


@pytest.fixture
def service(
    catalog: ItemCatalog,
    resolver: PlayerResolver,
    fake_generator: FakeGenerator,
    session_factory: FakeSessionFactory,
) -> VoiceCommandService:
    """A VoiceCommandService with fake generator and fake console sessions."""
    pipeline = CommandPipeline(
        validator=ItemValidator(catalog),
        executor=CommandExecutor(session_factory),
    )
    return VoiceCommandService(
        catalog=catalog,
        resolver=resolver,
        generator=fake_generator,
        pipeline=pipeline,
        session_factory=session_factory,
    )


@pytest.fixture
def test_client(service: VoiceCommandService) -> TestClient:
    """
    Create a FastAPI TestClient around the fake-backed service.

    Example:
        def test_health(test_client):
            assert test_client.get("/healthz").json()["ok"] is True
    """
    from rcon_bridge.api.server import create_app

    return TestClient(create_app(service))
