"""
Path parsing and building for the shell's hash routes.

Routes:
    /                                   start (welcome)
    /open                               start, action "open"
    /create                             setup, action "create"
    /<dao>[/<instanceId>[/<path...>]]   organization, instance defaults to "home"

Preferences screens are requested through the query string:
    ?preferences=/<screen>[/<data>]
"""

from __future__ import annotations
from typing import Optional
from urllib.parse import parse_qs, quote

from .symbols import ARAGONID_ENS_DOMAIN, HOME_INSTANCE_ID, AppMode
from ..models.locator import Locator, Preferences


def strip_ens_suffix(dao: str) -> str:
    """Remove the name-service suffix from a DAO name, if present."""
    suffix = f".{ARAGONID_ENS_DOMAIN}"
    if dao.endswith(suffix):
        return dao[: -len(suffix)]
    return dao


def has_ens_suffix(dao: Optional[str]) -> bool:
    return bool(dao) and dao.endswith(f".{ARAGONID_ENS_DOMAIN}")


def parse_preferences(search: str) -> Optional[Preferences]:
    """Extract the preferences screen (and optional data) from a query string."""
    if not search:
        return None
    values = parse_qs(search.lstrip("?")).get("preferences")
    if not values:
        return None
    parts = [part for part in values[0].split("/") if part]
    if not parts:
        return None
    return Preferences(screen=parts[0], data="/".join(parts[1:]))


def get_preferences_search(screen: str, data: Optional[str] = None) -> str:
    """Build the query string opening a preferences screen."""
    value = f"/{screen}"
    if data:
        value += f"/{data}"
    return f"?preferences={quote(value, safe='/')}"


def parse_path(pathname: str, search: str = "") -> Locator:
    """Parse a raw location into a :class:`Locator`."""
    pathname = pathname or "/"
    parts = [part for part in pathname.split("/") if part]
    base = dict(
        pathname=pathname,
        search=search or "",
        preferences=parse_preferences(search),
    )

    if not parts:
        return Locator(mode=AppMode.START, **base)

    if parts[0] == "open":
        return Locator(mode=AppMode.START, action="open", **base)

    if parts[0] == "create":
        return Locator(mode=AppMode.SETUP, action="create", **base)

    instance_id = parts[1] if len(parts) > 1 else HOME_INSTANCE_ID
    instance_path = "/" + "/".join(parts[2:])
    return Locator(
        mode=AppMode.ORG,
        dao=parts[0],
        instance_id=instance_id,
        instance_path=instance_path,
        **base,
    )


def get_app_path(
    *,
    mode: AppMode = AppMode.ORG,
    dao: Optional[str] = None,
    instance_id: Optional[str] = None,
    instance_path: Optional[str] = None,
    action: Optional[str] = None,
    search: str = "",
) -> str:
    """
    Build the visible path for a location.

    The DAO name is kept as given; suffixed names are normalized by the
    navigation coordinator once the path is parsed back.
    """
    if mode is AppMode.SETUP:
        path = "/create"
    elif mode is AppMode.START or not dao:
        path = f"/{action}" if action else "/"
    else:
        path = f"/{dao}"
        if instance_id and (instance_id != HOME_INSTANCE_ID or (instance_path or "/") != "/"):
            path += f"/{instance_id}"
            if instance_path and instance_path != "/":
                path += instance_path if instance_path.startswith("/") else f"/{instance_path}"
    return f"{path}{search or ''}"


def get_locator_path(locator: Locator, search: Optional[str] = None) -> str:
    """Path of ``locator``, optionally with a different query string."""
    return get_app_path(
        mode=locator.mode,
        dao=locator.dao,
        instance_id=locator.instance_id,
        instance_path=locator.instance_path,
        action=locator.action,
        search=locator.search if search is None else search,
    )
