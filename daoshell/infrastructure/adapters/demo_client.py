"""
Demo organization client for running the shell without a network.

Streams a fixed organization (apps, permissions, identifiers and installed
repositories) through the client callbacks with small delays, the way a
live client reports remote state as it arrives. Identity labels are kept
in memory.
"""

from __future__ import annotations
import asyncio
import hashlib
from typing import Any, Dict, Iterable, List, Optional

from ...domain.interfaces.organization_client import (
    ConnectionOptions,
    OrganizationClient,
    OrganizationConnector,
)
from ...domain.routing import strip_ens_suffix
from ...domain.symbols import ARAGONID_ENS_DOMAIN
from ...models.organization import AppInstance, DaoAddress, Identity, RepoInfo, RepoVersion
from ...models.requests import IdentityIntentRequest, PathRequest, PendingRequest
from ...utils.logging_setup import get_logger

logger = get_logger(__name__)


VOTING_APP_ID = "0x9fa3927f639745e587912d4b0fea7ef9013bf93fb907d29faeab57417ba6e1d4"
TOKEN_MANAGER_APP_ID = "0x6b20a3010614eeebf2138ccec99f028a61c811b3b1a3343b6ff635985c75c91f"
FINANCE_APP_ID = "0xbf8491150dafc5dcaee5b861414dca922de09ccffa344964ae167212e8c673ae"
VAULT_APP_ID = "0x7e852e0fcfce6551c13800f1e7476f982525c2b5277ba14b24339c68416336d1"

DEMO_APPS = (
    AppInstance(proxy_address="0x11a0", app_id=VOTING_APP_ID, name="Voting", is_forwarder=True),
    AppInstance(proxy_address="0x22b0", app_id=TOKEN_MANAGER_APP_ID, name="Tokens", is_forwarder=True),
    AppInstance(proxy_address="0x33c0", app_id=FINANCE_APP_ID, name="Finance"),
    AppInstance(proxy_address="0x44d0", app_id=VAULT_APP_ID, name="Vault", has_web_app=False),
)

DEMO_IDENTIFIERS = {"0x22b0": "DEMO", "0x44d0": "main"}

DEMO_REPOS = (
    RepoInfo(VOTING_APP_ID, RepoVersion("1.1.2"), RepoVersion("2.0.4"), name="voting"),
    RepoInfo(TOKEN_MANAGER_APP_ID, RepoVersion("2.0.1"), RepoVersion("2.1.0"), name="token-manager"),
    RepoInfo(FINANCE_APP_ID, RepoVersion("2.1.0"), RepoVersion("2.1.0"), name="finance"),
)


def _demo_address(dao: str) -> str:
    """Stable fake address for a DAO name."""
    if dao.startswith("0x"):
        return dao.lower()
    return "0x" + hashlib.sha256(strip_ens_suffix(dao).encode()).hexdigest()[:40]


class DemoOrganizationClient(OrganizationClient):
    """
    Offline organization client.

    Callbacks are delivered from a background task started by
    :meth:`start`; :meth:`cancel` stops it and nothing is delivered after.
    """

    def __init__(self, dao: str, options: ConnectionOptions, delay_sec: float = 0.2):
        self.dao = dao
        self.options = options
        self.delay_sec = delay_sec
        self.accounts: List[str] = []
        self.cancelled = False
        self._labels: Dict[str, str] = {}
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._stream())

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._task is not None:
            self._task.cancel()
        logger.debug(f"Demo client for {self.dao} cancelled")

    def set_accounts(self, accounts: List[str]) -> None:
        self.accounts = list(accounts)
        logger.debug(f"Demo client accounts: {self.accounts}")

    async def modify_address_identity(self, address: str, identity: Dict[str, Any]) -> None:
        await asyncio.sleep(self.delay_sec)
        name = identity.get("name")
        if name:
            self._labels[address.lower()] = name
        else:
            self._labels.pop(address.lower(), None)

    async def resolve_address_identity(self, address: str) -> Optional[Identity]:
        name = self._labels.get(address.lower())
        if name is None:
            return None
        return Identity(name=name, address=address)

    async def request_address_identity_modification(self, address: str) -> Any:
        request = PendingRequest()
        self.options.callbacks.on_identity_intent(
            IdentityIntentRequest(address=address, resolve=request.resolve, reject=request.reject)
        )
        return await request.future

    async def request_path(self, app_address: str, path: str) -> Any:
        """Ask the shell to change the sub-path of ``app_address``."""
        request = PendingRequest()
        self.options.callbacks.on_request_path(
            PathRequest(app_address=app_address, path=path, resolve=request.resolve, reject=request.reject)
        )
        return await request.future

    async def _stream(self) -> None:
        callbacks = self.options.callbacks
        domain = self.dao if "." in self.dao else f"{self.dao}.{ARAGONID_ENS_DOMAIN}"

        steps = (
            lambda: callbacks.on_dao_address(DaoAddress(address=_demo_address(self.dao), domain=domain)),
            lambda: callbacks.on_web3({"provider": self.options.provider}),
            lambda: callbacks.on_apps(DEMO_APPS),
            lambda: callbacks.on_forwarders([app for app in DEMO_APPS if app.is_forwarder]),
            lambda: callbacks.on_app_identifiers(dict(DEMO_IDENTIFIERS)),
            lambda: callbacks.on_permissions(self._permissions()),
            lambda: callbacks.on_installed_repos(DEMO_REPOS),
            lambda: callbacks.on_transaction(None),
            lambda: callbacks.on_signatures(None),
        )
        for step in steps:
            await asyncio.sleep(self.delay_sec)
            if self.cancelled:
                return
            step()

    def _permissions(self) -> Dict[str, Any]:
        # Every role is granted to and managed by the voting app
        voting = DEMO_APPS[0].proxy_address
        roles = {
            "0x22b0": "MINT_ROLE",
            "0x33c0": "CREATE_PAYMENTS_ROLE",
            "0x44d0": "TRANSFER_ROLE",
        }
        return {
            app: {role: {"allowed_entities": [voting], "manager": voting}}
            for app, role in roles.items()
        }


def make_demo_connector(
    delay_sec: float = 0.2,
    fail_daos: Iterable[str] = (),
) -> OrganizationConnector:
    """
    Build a connector producing :class:`DemoOrganizationClient` instances.

    Args:
        delay_sec: Delay before connecting and between streamed callbacks.
        fail_daos: DAO names whose connection fails.
    """
    failing = {strip_ens_suffix(dao) for dao in fail_daos}

    async def connect(dao: str, options: ConnectionOptions) -> OrganizationClient:
        await asyncio.sleep(delay_sec)
        if strip_ens_suffix(dao) in failing:
            raise ConnectionError(f"No organization found at {dao}")
        client = DemoOrganizationClient(dao, options, delay_sec=delay_sec)
        client.start()
        logger.info(f"Demo client connected to {dao}")
        return client

    return connect
