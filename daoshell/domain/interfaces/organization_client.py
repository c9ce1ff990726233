"""Organization client interface: the remote side of a DAO session."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from ...models.organization import AppInstance, DaoAddress, Identity, RepoInfo
from ...models.requests import IdentityIntentRequest, PathRequest


class OrganizationClient(ABC):
    """
    Live handle to the remote state of one organization.

    Produced by an :data:`OrganizationConnector`. While alive it invokes
    the :class:`ClientCallbacks` it was constructed with, at any time and
    in any order, as remote state changes.
    """

    @abstractmethod
    def cancel(self) -> None:
        """Stop all subscriptions. No callback may fire afterwards."""
        pass

    @abstractmethod
    def set_accounts(self, accounts: List[str]) -> None:
        """Set the signer accounts used for reads and writes."""
        pass

    @abstractmethod
    async def modify_address_identity(self, address: str, identity: Dict[str, Any]) -> None:
        """
        Store a label for an address.

        Args:
            address: Address to label.
            identity: Identity fields, e.g. ``{"name": "Alice"}``.
        """
        pass

    @abstractmethod
    async def resolve_address_identity(self, address: str) -> Optional[Identity]:
        """Look up the label stored for an address."""
        pass

    @abstractmethod
    async def request_address_identity_modification(self, address: str) -> Any:
        """Ask the client to open an identity modification for an address."""
        pass


@dataclass(frozen=True)
class ClientCallbacks:
    """Callback slots an organization client invokes as remote state changes."""
    on_dao_address: Callable[[DaoAddress], None]
    on_web3: Callable[[Any], None]
    on_apps: Callable[[Sequence[AppInstance]], None]
    on_permissions: Callable[[Dict[str, Any]], None]
    on_forwarders: Callable[[Sequence[Any]], None]
    on_app_identifiers: Callable[[Dict[str, str]], None]
    on_installed_repos: Callable[[Sequence[RepoInfo]], None]
    on_transaction: Callable[[Any], None]
    on_signatures: Callable[[Any], None]
    on_identity_intent: Callable[[IdentityIntentRequest], None]
    on_request_path: Callable[[PathRequest], None]


@dataclass(frozen=True)
class ConnectionOptions:
    """Construction-time configuration of an organization client."""
    provider: str
    wallet_provider: Optional[str]
    wallet_account: Optional[str]
    callbacks: ClientCallbacks


# Connects to a DAO (address or name) and returns its client once connected.
OrganizationConnector = Callable[[str, ConnectionOptions], Awaitable[OrganizationClient]]
