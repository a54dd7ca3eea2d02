"""Unit tests for the TokenLedger class."""

from __future__ import annotations

import pytest

from flowermarket.config_schema import AccountConfig, LedgerConfig
from flowermarket.market.ledger import TokenLedger, TransferResult


@pytest.fixture
def ledger() -> TokenLedger:
    """Create a fresh TokenLedger instance for each test."""
    return TokenLedger()


class TestAccounts:
    """Tests for account creation and balance queries."""

    def test_initial_balances(self, ledger: TokenLedger) -> None:
        ledger.create_account("alice", starting_balance=100)
        assert ledger.balance_of("alice") == 100
        assert ledger.account_exists("alice")

    def test_unknown_account_has_zero(self, ledger: TokenLedger) -> None:
        assert ledger.balance_of("nobody") == 0
        assert not ledger.account_exists("nobody")

    def test_negative_starting_balance_rejected(self, ledger: TokenLedger) -> None:
        with pytest.raises(ValueError):
            ledger.create_account("alice", starting_balance=-1)

    def test_mint_and_total_supply(self, ledger: TokenLedger) -> None:
        ledger.create_account("alice", starting_balance=10)
        ledger.mint("bob", 15)
        assert ledger.balance_of("bob") == 15
        assert ledger.total_supply() == 25

    @pytest.mark.parametrize("amount", [1.5, True, "5"])
    def test_mint_rejects_non_integer(self, ledger: TokenLedger, amount: object) -> None:
        with pytest.raises(ValueError):
            ledger.mint("bob", amount)  # type: ignore[arg-type]
        assert ledger.balance_of("bob") == 0

    def test_from_config(self) -> None:
        """Configured accounts are created with their balances."""
        config = LedgerConfig(
            symbol="TKN",
            accounts=[
                AccountConfig(id="alice", starting_balance=50),
                AccountConfig(id="bob"),
            ],
        )
        ledger = TokenLedger.from_config(config)

        assert ledger.symbol == "TKN"
        assert ledger.balance_of("alice") == 50
        assert ledger.account_exists("bob")
        assert ledger.balance_of("bob") == 0


class TestApprove:
    """Tests for allowances."""

    def test_approve_sets_allowance(self, ledger: TokenLedger) -> None:
        result = ledger.approve("alice", "registry", 30)
        assert result.success is True
        assert ledger.allowance("alice", "registry") == 30

    def test_approve_replaces_previous(self, ledger: TokenLedger) -> None:
        ledger.approve("alice", "registry", 30)
        ledger.approve("alice", "registry", 5)
        assert ledger.allowance("alice", "registry") == 5

    def test_negative_approve_rejected(self, ledger: TokenLedger) -> None:
        result = ledger.approve("alice", "registry", -5)
        assert result.success is False
        assert ledger.allowance("alice", "registry") == 0

    @pytest.mark.parametrize("amount", [2.5, True])
    def test_non_integer_approve_rejected(self, ledger: TokenLedger, amount: object) -> None:
        result = ledger.approve("alice", "registry", amount)  # type: ignore[arg-type]
        assert result.success is False
        assert "integer" in result.reason
        assert ledger.allowance("alice", "registry") == 0


class TestTransfer:
    """Tests for direct transfers."""

    def test_transfer_moves_balance(self, ledger: TokenLedger) -> None:
        ledger.create_account("alice", starting_balance=100)
        result = ledger.transfer("alice", "bob", 40)

        assert result == TransferResult.ok("alice", "bob", 40)
        assert ledger.balance_of("alice") == 60
        assert ledger.balance_of("bob") == 40

    def test_transfer_insufficient_balance(self, ledger: TokenLedger) -> None:
        ledger.create_account("alice", starting_balance=10)
        result = ledger.transfer("alice", "bob", 11)

        assert result.success is False
        assert "insufficient balance" in result.reason
        assert ledger.balance_of("alice") == 10


class TestTransferFrom:
    """Tests for allowance-based transfers used by purchases."""

    @pytest.fixture
    def funded(self, ledger: TokenLedger) -> TokenLedger:
        ledger.create_account("buyer", starting_balance=100)
        ledger.create_account("seller", starting_balance=0)
        return ledger

    def test_transfer_from_spends_allowance(self, funded: TokenLedger) -> None:
        funded.approve("buyer", "registry", 50)

        result = funded.transfer_from("registry", "buyer", "seller", 30)

        assert result.success is True
        assert funded.balance_of("buyer") == 70
        assert funded.balance_of("seller") == 30
        assert funded.allowance("buyer", "registry") == 20

    def test_insufficient_allowance(self, funded: TokenLedger) -> None:
        funded.approve("buyer", "registry", 5)

        result = funded.transfer_from("registry", "buyer", "seller", 30)

        assert result.success is False
        assert "insufficient allowance" in result.reason
        assert funded.balance_of("buyer") == 100
        assert funded.allowance("buyer", "registry") == 5

    def test_insufficient_balance_keeps_allowance(self, funded: TokenLedger) -> None:
        funded.approve("buyer", "registry", 500)

        result = funded.transfer_from("registry", "buyer", "seller", 101)

        assert result.success is False
        assert "insufficient balance" in result.reason
        assert funded.allowance("buyer", "registry") == 500

    def test_allowance_is_per_spender(self, funded: TokenLedger) -> None:
        funded.approve("buyer", "someone_else", 50)
        result = funded.transfer_from("registry", "buyer", "seller", 10)
        assert result.success is False

    def test_zero_amount_succeeds_without_allowance(self, funded: TokenLedger) -> None:
        result = funded.transfer_from("registry", "buyer", "seller", 0)
        assert result.success is True
        assert funded.balance_of("buyer") == 100

    def test_self_transfer_consumes_allowance_only(self, funded: TokenLedger) -> None:
        funded.approve("buyer", "registry", 10)

        result = funded.transfer_from("registry", "buyer", "buyer", 10)

        assert result.success is True
        assert funded.balance_of("buyer") == 100
        assert funded.allowance("buyer", "registry") == 0

    def test_empty_recipient_rejected(self, funded: TokenLedger) -> None:
        funded.approve("buyer", "registry", 10)
        result = funded.transfer_from("registry", "buyer", "", 10)
        assert result.success is False
        assert funded.balance_of("buyer") == 100

    def test_negative_amount_rejected(self, funded: TokenLedger) -> None:
        result = funded.transfer_from("registry", "buyer", "seller", -1)
        assert result.success is False

    def test_fractional_amount_rejected(self, funded: TokenLedger) -> None:
        """Balances stay whole numbers."""
        funded.approve("buyer", "registry", 10)

        assert funded.transfer_from("registry", "buyer", "seller", 0.5).success is False  # type: ignore[arg-type]
        assert funded.transfer("buyer", "seller", 1.5).success is False  # type: ignore[arg-type]
        assert funded.balance_of("buyer") == 100
        assert funded.balance_of("seller") == 0
        assert funded.allowance("buyer", "registry") == 10
