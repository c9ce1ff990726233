"""Pytest configuration and fixtures."""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import pytest

from daoshell.application.orchestrator import SessionOrchestrator
from daoshell.domain.events.event_types import EventType
from daoshell.domain.interfaces.organization_client import ConnectionOptions, OrganizationClient
from daoshell.infrastructure.adapters.memory_history import MemoryHistory
from daoshell.models.organization import Identity


class MockEventBus:
    """Mock event bus for testing."""

    def __init__(self):
        self.published_events: List[Tuple[EventType, Any]] = []

    def publish(self, event_type: EventType, payload: Any) -> None:
        self.published_events.append((event_type, payload))

    def subscribe(self, event_type: EventType, callback) -> None:
        pass

    def unsubscribe(self, event_type: EventType, callback) -> None:
        pass

    def get_events_of_type(self, event_type: EventType) -> List[Any]:
        return [p for et, p in self.published_events if et == event_type]

    def clear(self):
        self.published_events.clear()


class FakeOrganizationClient(OrganizationClient):
    """Organization client recording every call made by the shell."""

    def __init__(self, dao: str, options: ConnectionOptions):
        self.dao = dao
        self.options = options
        self.callbacks = options.callbacks
        self.cancelled = False
        self.cancel_count = 0
        self.account_updates: List[List[str]] = []
        self.identities: Dict[str, str] = {}
        self.modify_error: Optional[Exception] = None
        self.resolve_error: Optional[Exception] = None
        self.modification_requests: List[str] = []

    def cancel(self) -> None:
        self.cancelled = True
        self.cancel_count += 1

    def set_accounts(self, accounts: List[str]) -> None:
        self.account_updates.append(list(accounts))

    async def modify_address_identity(self, address: str, identity: Dict[str, Any]) -> str:
        if self.modify_error is not None:
            raise self.modify_error
        self.identities[address] = identity["name"]
        return "saved"

    async def resolve_address_identity(self, address: str) -> Optional[Identity]:
        if self.resolve_error is not None:
            raise self.resolve_error
        name = self.identities.get(address)
        return Identity(name=name, address=address) if name else None

    async def request_address_identity_modification(self, address: str) -> str:
        self.modification_requests.append(address)
        return "requested"


class ControllableConnector:
    """
    Connector whose constructions complete only when the test says so.

    Each call records the DAO and options and waits on its own future.
    """

    def __init__(self):
        self.calls: List[Tuple[str, ConnectionOptions]] = []
        self.clients: List[FakeOrganizationClient] = []
        self._pending: List[Tuple[str, ConnectionOptions, asyncio.Future]] = []

    async def __call__(self, dao: str, options: ConnectionOptions) -> OrganizationClient:
        future = asyncio.get_running_loop().create_future()
        self.calls.append((dao, options))
        self._pending.append((dao, options, future))
        return await future

    def _take(self, dao: str) -> Tuple[str, ConnectionOptions, asyncio.Future]:
        for entry in self._pending:
            if entry[0] == dao:
                self._pending.remove(entry)
                return entry
        raise AssertionError(f"No pending construction for {dao}")

    def resolve(self, dao: str) -> FakeOrganizationClient:
        _, options, future = self._take(dao)
        client = FakeOrganizationClient(dao, options)
        self.clients.append(client)
        future.set_result(client)
        return client

    def fail(self, dao: str, error: Exception) -> None:
        _, _, future = self._take(dao)
        future.set_exception(error)

    def options_for(self, dao: str) -> ConnectionOptions:
        for called_dao, options in reversed(self.calls):
            if called_dao == dao:
                return options
        raise AssertionError(f"{dao} was never connected")

    @property
    def alive(self) -> List[FakeOrganizationClient]:
        return [client for client in self.clients if not client.cancelled]


async def _settle(rounds: int = 10) -> None:
    """Let pending tasks and callbacks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def settle():
    return _settle


@pytest.fixture
def connector() -> ControllableConnector:
    return ControllableConnector()


@pytest.fixture
def event_bus() -> MockEventBus:
    return MockEventBus()


@pytest.fixture
def make_orchestrator(connector, event_bus):
    """Build an orchestrator over a memory history starting at ``path``."""

    def factory(path: str = "/", **config) -> SessionOrchestrator:
        preferences = config.pop("preferences", None)
        config.setdefault("identity", {"resolve_retry_delay_sec": 0.01})
        config.setdefault("known_app_ids", ["0xvoting"])
        config.setdefault("providers", {"provider": "http://localhost:8545", "wallet_provider": None})
        return SessionOrchestrator(
            history=MemoryHistory(path),
            connector=connector,
            config=config,
            event_bus=event_bus,
            preferences=preferences,
        )

    return factory
