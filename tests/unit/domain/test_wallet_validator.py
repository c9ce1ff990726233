"""Unit tests for wallet validation."""

from daoshell.domain.services.wallet_validator import WalletValidation, validate_wallet


def test_no_provider_checked_first():
    assert validate_wallet(False, False, True, "main", "rinkeby") == WalletValidation.NO_WEB3


def test_locked_account():
    assert validate_wallet(True, False, True, "main", "rinkeby") == WalletValidation.ACCOUNT_LOCKED


def test_wrong_network_for_transactions():
    assert validate_wallet(True, True, True, "main", "rinkeby") == WalletValidation.WRONG_NETWORK


def test_signatures_ignore_network():
    assert validate_wallet(True, True, False, "main", "rinkeby") == WalletValidation.OK


def test_ok():
    assert validate_wallet(True, True, True, "main", "main") == WalletValidation.OK
