"""
Terminal Dashboard using rich library.

Live view of the session snapshot:
- Header: environment, location, connectivity
- Organization: address, load statuses, upgrade hint
- Apps: installed apps with their identifiers
- Activity: pending transactions, signatures, identity edit, signer checks
- Repos and permissions (optional)

The dashboard only renders what the snapshot holds; it derives nothing
beyond formatting.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Optional
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..domain.services.wallet_validator import WalletValidation, validate_wallet
from ..domain.symbols import LoadStatus
from ..models.session_state import SessionState
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)

STATUS_STYLES = {
    LoadStatus.UNLOADED: "dim",
    LoadStatus.LOADING: "yellow",
    LoadStatus.READY: "green",
    LoadStatus.ERROR: "bold red",
}

WALLET_MESSAGES = {
    WalletValidation.NO_WEB3: ("No wallet provider detected", "red"),
    WalletValidation.ACCOUNT_LOCKED: ("Wallet locked: unlock an account to sign", "yellow"),
    WalletValidation.WRONG_NETWORK: ("Wallet is on the wrong network", "red"),
    WalletValidation.OK: ("Ready to sign", "green"),
}


class SessionDashboard:
    """
    Terminal dashboard for the session snapshot.

    ``update`` re-raises the session's fatal error so the caller can stop
    normal rendering and exit.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        env: str = "dev",
        network: Optional[Dict[str, Any]] = None,
        wallet_account: Optional[Callable[[], Optional[str]]] = None,
        console: Optional[Console] = None,
    ):
        """
        Initialize dashboard.

        Args:
            config: Dashboard configuration dict.
            env: Environment name (dev, demo).
            network: Network settings (type, wallet network type, wallet provider).
            wallet_account: Returns the active wallet account, if any.
            console: Console to render to.
        """
        self.config = config
        self.env = env
        self.network = network or {}
        self.show_permissions = config.get("show_permissions", False)
        self.refresh_per_second = config.get("refresh_per_second", 4)
        self.console = console or Console()
        self.live: Optional[Live] = None
        self._wallet_account = wallet_account or (lambda: None)
        self._last_state: Optional[SessionState] = None
        self.layout = self._create_layout()

    def _create_layout(self) -> Layout:
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=7),
        )
        layout["body"].split_row(
            Layout(name="org", ratio=2),
            Layout(name="apps", ratio=3),
        )
        return layout

    def start(self) -> None:
        """Start live rendering."""
        self.live = Live(
            self.layout,
            console=self.console,
            refresh_per_second=self.refresh_per_second,
        )
        self.live.start()
        logger.info("Session dashboard started")

    def stop(self) -> None:
        """Stop live rendering."""
        if self.live:
            self.live.stop()
            self.live = None
            logger.info("Session dashboard stopped")

    def update(self, state: SessionState) -> None:
        """
        Render the latest snapshot.

        Raises:
            FatalError: The session ended with a fatal error.
        """
        self._last_state = state
        state.raise_if_fatal()

        self.layout["header"].update(self.render_header(state))
        self.layout["org"].update(self.render_organization(state))
        self.layout["apps"].update(self.render_apps(state))
        self.layout["footer"].update(self.render_activity(state))

    def render_header(self, state: SessionState) -> Panel:
        header = Text("DAO Shell", style="bold cyan")

        header.append("  |  ", style="dim")
        header.append(self.env.upper(), style="bold magenta" if self.env == "demo" else "bold yellow")

        header.append("  |  ", style="dim")
        header.append(state.locator.path if state.locator else "-", style="white")

        header.append("  |  ", style="dim")
        if state.connected:
            header.append("ONLINE", style="bold green")
        else:
            header.append("OFFLINE", style="bold red")

        header.justify = "center"
        return Panel(header, style="bold")

    def render_organization(self, state: SessionState) -> Panel:
        if not state.has_organization:
            onboarding = state.onboarding_status
            text = Text(f"No organization loaded ({onboarding})", style="dim")
            return Panel(text, title="Organization", border_style="dim")

        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Field", style="dim")
        table.add_column("Value")

        table.add_row("DAO", state.locator.dao)
        table.add_row("Domain", state.dao_address.domain or "-")
        table.add_row("Address", state.dao_address.address or "-")
        table.add_row("Status", Text(state.dao_status.value, style=STATUS_STYLES[state.dao_status]))
        table.add_row("Apps", Text(state.apps_status.value, style=STATUS_STYLES[state.apps_status]))
        table.add_row("Permissions", "loading" if state.permissions_loading else f"{len(state.permissions)} apps")
        table.add_row("Generation", str(state.generation))
        if state.can_upgrade_org:
            table.add_row("Upgrade", Text("New major versions available", style="bold yellow"))

        border_style = "red" if state.dao_status is LoadStatus.ERROR else "blue"
        return Panel(table, title="Organization", border_style=border_style)

    def render_apps(self, state: SessionState) -> Panel:
        apps = state.apps_with_identifiers
        if not apps:
            return Panel(Text("No apps", style="dim"), title="Apps", border_style="dim")

        active = state.locator.instance_id if state.locator else None
        show_system = state.system_apps_opened

        table = Table(show_header=True, box=None, padding=(0, 1), expand=True)
        table.add_column("Name", style="bold")
        table.add_column("Identifier")
        table.add_column("Proxy", style="dim")
        table.add_column("Forwarder", justify="center")
        if self.show_permissions:
            table.add_column("Roles", justify="right")

        for app in apps:
            if not app.has_web_app and not show_system:
                continue
            name = Text(app.name or app.app_id[:10])
            if app.proxy_address == active:
                name.stylize("reverse")
            row = [name, app.identifier or "", app.proxy_address, "yes" if app.is_forwarder else ""]
            if self.show_permissions:
                row.append(str(len(state.permissions.get(app.proxy_address, {}))))
            table.add_row(*row)

        title = f"Apps ({len(apps)})" + ("" if show_system else " - system apps hidden")
        return Panel(table, title=title, border_style="blue")

    def render_activity(self, state: SessionState) -> Panel:
        lines = []

        if state.transaction_bag is not None:
            lines.append(Text(f"Transaction pending: {state.transaction_bag}", style="yellow"))
            lines.append(self._render_signer_check(is_transaction=True))
        if state.signature_bag is not None:
            lines.append(Text(f"Signature requested: {state.signature_bag}", style="yellow"))
            lines.append(self._render_signer_check(is_transaction=False))

        intent = state.identity_intent
        if intent is not None:
            label = intent.label or "(no label)"
            lines.append(Text(f"Editing identity of {intent.address}: {label}", style="cyan"))

        if state.repos:
            upgradable = [repo.name or repo.app_id[:10] for repo in state.repos
                          if repo.current_version.major < repo.latest_version.major]
            summary = f"{len(state.repos)} repos installed"
            if upgradable:
                summary += f", major updates: {', '.join(upgradable)}"
            lines.append(Text(summary, style="dim"))

        if not lines:
            return Panel(Text("Nothing pending", style="dim"), title="Activity", border_style="dim")
        return Panel(Group(*lines), title="Activity", border_style="yellow")

    def _render_signer_check(self, is_transaction: bool) -> Text:
        result = validate_wallet(
            has_web3=bool(self.network.get("wallet_provider")),
            wallet_connected=bool(self._wallet_account()),
            is_transaction=is_transaction,
            network_type=self.network.get("type", ""),
            wallet_network_type=self.network.get("wallet_network_type", self.network.get("type", "")),
        )
        message, style = WALLET_MESSAGES[result]
        return Text(f"  Signer: {message}", style=style)
