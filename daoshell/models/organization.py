"""Organization data models streamed by the organization client."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DaoAddress:
    """Resolved identity of the current organization."""
    address: str = ""
    domain: str = ""


@dataclass(frozen=True)
class AppInstance:
    """An application instance installed in the organization."""
    proxy_address: str
    app_id: str
    name: str = ""
    has_web_app: bool = True
    is_forwarder: bool = False
    identifier: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RepoVersion:
    """A published version of an application repository."""
    version: str
    content_uri: str = ""

    @property
    def major(self) -> int:
        """Major component of a dotted ``x.y.z`` version string."""
        head = self.version.split(".")[0].strip()
        return int(head) if head.isdigit() else 0


@dataclass(frozen=True)
class RepoInfo:
    """Installed repository with the version in use and the latest one."""
    app_id: str
    current_version: RepoVersion
    latest_version: RepoVersion
    name: str = ""


@dataclass(frozen=True)
class Identity:
    """Human label attached to an address."""
    name: Optional[str] = None
    address: Optional[str] = None
