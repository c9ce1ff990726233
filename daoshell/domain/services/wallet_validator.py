"""Wallet readiness checks gating the signer panel."""

from __future__ import annotations
from enum import Enum


class WalletValidation(Enum):
    """Outcome of validating the wallet before signing."""
    NO_WEB3 = "no_web3"
    ACCOUNT_LOCKED = "account_locked"
    WRONG_NETWORK = "wrong_network"
    OK = "ok"


def validate_wallet(
    has_web3: bool,
    wallet_connected: bool,
    is_transaction: bool,
    network_type: str,
    wallet_network_type: str,
) -> WalletValidation:
    """
    Check that the wallet can sign the current request.

    Checks run in order: a wallet provider must exist, an account must be
    unlocked, and for on-chain transactions only, the wallet must be on the
    shell's network. Off-chain signatures work on any network.
    """
    if not has_web3:
        return WalletValidation.NO_WEB3
    if not wallet_connected:
        return WalletValidation.ACCOUNT_LOCKED
    if is_transaction and wallet_network_type != network_type:
        return WalletValidation.WRONG_NETWORK
    return WalletValidation.OK
