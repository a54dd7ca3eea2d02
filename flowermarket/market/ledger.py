"""Token ledger used to pay for flowers

The registry never holds balances. During a purchase it asks a ledger to
move the price from the buyer to the current owner, spending an allowance
the buyer granted to the registry beforehand. Anything that implements
``PaymentLedger`` can play that role.

``TokenLedger`` is an in-memory fungible token with integer balances and
allowances. Balances are discrete units, so plain ints are used throughout.

Failed transfers are reported through ``TransferResult`` rather than by
raising, so callers branch on ``result.success`` before touching their own
state.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from ..config_schema import LedgerConfig


logger = logging.getLogger(__name__)


def _amount_error(amount: object, what: str) -> str:
    """Return why ``amount`` is not a valid token amount, or "" if it is."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        return f"{what} must be an integer, got {type(amount).__name__}"
    if amount < 0:
        return f"{what} must be >= 0, got {amount}"
    return ""


@dataclass(frozen=True)
class TransferResult:
    """Outcome of a ledger transfer.

    ``reason`` is empty on success and a human-readable explanation on
    failure.
    """

    success: bool
    from_id: str
    to_id: str
    amount: int
    reason: str = ""

    @classmethod
    def ok(cls, from_id: str, to_id: str, amount: int) -> "TransferResult":
        return cls(success=True, from_id=from_id, to_id=to_id, amount=amount)

    @classmethod
    def rejected(
        cls, from_id: str, to_id: str, amount: int, reason: str
    ) -> "TransferResult":
        return cls(
            success=False, from_id=from_id, to_id=to_id, amount=amount, reason=reason
        )


class PaymentLedger(Protocol):
    """The one ledger operation the registry consumes."""

    def transfer_from(
        self, spender: str, from_id: str, to_id: str, amount: int
    ) -> TransferResult:
        """Move ``amount`` from ``from_id`` to ``to_id`` on behalf of ``spender``.

        Authorized by an allowance ``from_id`` previously granted to
        ``spender``. Must leave balances untouched when it fails.
        """
        ...


class TokenLedger:
    """
    In-memory fungible token.

    - balances: {account_id: amount}
    - allowances: {owner_id: {spender_id: amount}}

    Accounts are created implicitly on first credit. Unknown accounts have
    a balance and allowance of 0. All mutations are serialized by one lock.
    """

    symbol: str
    balances: dict[str, int]
    allowances: dict[str, dict[str, int]]
    _lock: threading.Lock

    def __init__(self, symbol: str = "cUSD") -> None:
        self.symbol = symbol
        self.balances = {}
        self.allowances = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: "LedgerConfig") -> "TokenLedger":
        """Create a ledger with the configured symbol and starting accounts."""
        ledger = cls(symbol=config.symbol)
        for account in config.accounts:
            ledger.create_account(account.id, starting_balance=account.starting_balance)
        return ledger

    def create_account(self, account_id: str, starting_balance: int = 0) -> None:
        """Create (or reset) an account with a starting balance."""
        if not account_id:
            raise ValueError("account_id must be a non-empty string")
        error = _amount_error(starting_balance, "starting_balance")
        if error:
            raise ValueError(error)
        with self._lock:
            self.balances[account_id] = starting_balance

    # ===== QUERIES =====

    def balance_of(self, account_id: str) -> int:
        """Get balance (0 for unknown accounts)."""
        return self.balances.get(account_id, 0)

    def allowance(self, owner_id: str, spender_id: str) -> int:
        """Get how much ``spender_id`` may still move out of ``owner_id``."""
        return self.allowances.get(owner_id, {}).get(spender_id, 0)

    def total_supply(self) -> int:
        """Sum of all balances."""
        return sum(self.balances.values())

    def account_exists(self, account_id: str) -> bool:
        return account_id in self.balances

    # ===== MUTATIONS =====

    def mint(self, account_id: str, amount: int) -> None:
        """Credit new tokens to an account."""
        error = _amount_error(amount, "mint amount")
        if error:
            raise ValueError(error)
        with self._lock:
            self.balances[account_id] = self.balance_of(account_id) + amount

    def approve(self, owner_id: str, spender_id: str, amount: int) -> TransferResult:
        """Set (not add to) the allowance ``owner_id`` grants ``spender_id``."""
        error = _amount_error(amount, "allowance")
        if error:
            return TransferResult.rejected(owner_id, spender_id, amount, error)
        with self._lock:
            self.allowances.setdefault(owner_id, {})[spender_id] = amount
        logger.debug("%s approved %s to spend %d %s", owner_id, spender_id, amount, self.symbol)
        return TransferResult.ok(owner_id, spender_id, amount)

    def transfer(self, from_id: str, to_id: str, amount: int) -> TransferResult:
        """Move tokens directly from the caller's own account."""
        with self._lock:
            rejection = self._check_transfer(from_id, to_id, amount)
            if rejection:
                return TransferResult.rejected(from_id, to_id, amount, rejection)
            self._move(from_id, to_id, amount)
        return TransferResult.ok(from_id, to_id, amount)

    def transfer_from(
        self, spender: str, from_id: str, to_id: str, amount: int
    ) -> TransferResult:
        """Move tokens on behalf of ``from_id``, spending ``spender``'s allowance.

        Checks run before any mutation; a rejected transfer changes nothing.
        ``from_id == to_id`` is allowed and only consumes allowance.
        """
        with self._lock:
            rejection = self._check_transfer(from_id, to_id, amount)
            if not rejection:
                granted = self.allowance(from_id, spender)
                if granted < amount:
                    rejection = (
                        f"insufficient allowance: {spender} may spend {granted} "
                        f"of {from_id}'s {self.symbol}, needs {amount}"
                    )
            if rejection:
                logger.debug("transfer_from rejected: %s", rejection)
                return TransferResult.rejected(from_id, to_id, amount, rejection)
            if amount:
                self.allowances[from_id][spender] = granted - amount
            self._move(from_id, to_id, amount)
        logger.debug(
            "%s moved %d %s from %s to %s", spender, amount, self.symbol, from_id, to_id
        )
        return TransferResult.ok(from_id, to_id, amount)

    def _check_transfer(self, from_id: str, to_id: str, amount: int) -> str:
        """Return a rejection reason, or "" if the transfer is valid."""
        error = _amount_error(amount, "amount")
        if error:
            return error
        if not to_id:
            return "recipient must be a non-empty account id"
        balance = self.balance_of(from_id)
        if balance < amount:
            return f"insufficient balance: {from_id} has {balance} {self.symbol}, needs {amount}"
        return ""

    def _move(self, from_id: str, to_id: str, amount: int) -> None:
        # Caller holds the lock and has validated the transfer
        self.balances[from_id] = self.balance_of(from_id) - amount
        self.balances[to_id] = self.balance_of(to_id) + amount
