"""Domain services: pure logic over session state."""

from .repo_upgrades import RepoUpgradeDetector
from .session_reducer import reduce_session, is_stale
from .wallet_validator import WalletValidation, validate_wallet

__all__ = [
    "RepoUpgradeDetector",
    "reduce_session",
    "is_stale",
    "WalletValidation",
    "validate_wallet",
]
