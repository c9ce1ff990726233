"""Organization upgrade detection over installed repositories."""

from __future__ import annotations
from typing import Iterable, Optional

from ...models.organization import RepoInfo


class RepoUpgradeDetector:
    """
    Decides whether the organization has upgradable apps.

    Only repositories whose app id is recognized are considered, and only
    the major version component is compared: ``1.4.0 -> 1.9.2`` is not an
    upgrade, ``1.4.0 -> 2.0.0`` is.
    """

    def __init__(self, known_app_ids: Optional[Iterable[str]] = None):
        self._known_app_ids = {app_id.lower() for app_id in (known_app_ids or [])}

    def is_known_repo(self, app_id: str) -> bool:
        return app_id.lower() in self._known_app_ids

    def has_major_upgrade(self, repo: RepoInfo) -> bool:
        return repo.current_version.major < repo.latest_version.major

    def can_upgrade_org(self, repos: Iterable[RepoInfo]) -> bool:
        return any(
            self.is_known_repo(repo.app_id) and self.has_major_upgrade(repo)
            for repo in repos
        )
