"""Flower registry - append-only store of flowers with paid ownership transfer

Flowers live in a dense list addressed by integer index. Indices are handed
out in creation order and never reused; records are never deleted.

**Purchase flow:**
1. Buyer approves the registry (``registry_id``) on the ledger for at least
   the flower's price.
2. Buyer calls ``buy(buyer, index)``.
3. Registry asks the ledger to move ``price`` from buyer to current owner.
4. Only if the ledger reports success does the registry hand the flower to
   the buyer and take it off sale.

Every operation, reads included, runs under one registry lock, so callers
never observe a half-applied mutation. An operation that re-enters the
registry from inside another one (e.g. a ledger calling back during
``buy``) fails with ``ReentrantCall`` and changes nothing. The outer
``buy`` still commits exactly when the ledger reports success.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, TYPE_CHECKING

from .assets import Asset, AssetDict, empty_asset
from .errors import (
    InvalidArgument,
    OutOfRange,
    PaymentRejected,
    ReentrantCall,
    Unauthorized,
)
from .ledger import PaymentLedger

if TYPE_CHECKING:
    from ..config_schema import RegistryConfig


logger = logging.getLogger(__name__)


def _require_identity(value: Any, role: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidArgument(
            f"{role} must be a non-empty identity, got {value!r}", role=role
        )
    return value


class FlowerRegistry:
    """
    Append-only registry of flowers.

    - ledger: payment capability used by ``buy``
    - registry_id: identity the registry spends buyer allowances as
    - strict_reads: out-of-range ``read`` raises ``OutOfRange`` when True,
      returns the empty record when False

    Mutations on an out-of-range index always raise ``OutOfRange``.
    """

    ledger: PaymentLedger
    registry_id: str
    strict_reads: bool
    _assets: list[Asset]
    _lock: threading.RLock
    _active: str | None

    def __init__(
        self,
        ledger: PaymentLedger,
        registry_id: str = "flower_registry",
        strict_reads: bool = True,
    ) -> None:
        self.ledger = ledger
        self.registry_id = _require_identity(registry_id, "registry_id")
        self.strict_reads = strict_reads
        self._assets = []
        # Re-entrant so a same-thread re-entry reaches the guard instead of deadlocking
        self._lock = threading.RLock()
        self._active = None

    @classmethod
    def from_config(
        cls,
        ledger: PaymentLedger,
        config: "RegistryConfig | None" = None,
    ) -> "FlowerRegistry":
        """Create a registry from the ``registry`` config section.

        Uses the globally loaded config when none is given.
        """
        if config is None:
            from ..config import get_validated_config
            config = get_validated_config().registry
        return cls(ledger, registry_id=config.id, strict_reads=config.strict_reads)

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        """Serialize an operation and reject re-entry while one is active."""
        with self._lock:
            if self._active is not None:
                logger.warning(
                    "Rejected re-entrant '%s' during '%s'", name, self._active
                )
                raise ReentrantCall(name, self._active)
            self._active = name
            try:
                yield
            finally:
                self._active = None

    def _get(self, index: int) -> Asset:
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidArgument(
                f"index must be an integer, got {type(index).__name__}", index=index
            )
        if not 0 <= index < len(self._assets):
            raise OutOfRange(index, len(self._assets))
        return self._assets[index]

    # ===== CREATE =====

    def create(
        self,
        caller: str,
        name: str,
        description: str,
        image: str,
        price: int,
        for_sale: bool,
    ) -> int:
        """Register a flower owned by ``caller`` and return its index."""
        _require_identity(caller, "caller")
        if isinstance(price, bool) or not isinstance(price, int):
            raise InvalidArgument(
                f"price must be an integer, got {type(price).__name__}", price=price
            )
        if price < 0:
            raise InvalidArgument(f"price must be >= 0, got {price}", price=price)

        with self._operation("create"):
            self._assets.append(
                Asset(
                    owner=caller,
                    name=name,
                    description=description,
                    image=image,
                    price=price,
                    for_sale=bool(for_sale),
                )
            )
            index = len(self._assets) - 1
        logger.info("%s registered flower %d (%r, price %d)", caller, index, name, price)
        return index

    # ===== READ =====

    def read(self, index: int) -> AssetDict:
        """Snapshot a flower.

        Out-of-range indices raise ``OutOfRange`` in strict mode and return
        the empty record otherwise.
        """
        with self._operation("read"):
            try:
                asset = self._get(index)
            except OutOfRange:
                if self.strict_reads:
                    raise
                return empty_asset().to_dict(index)
            return asset.to_dict(index)

    def count(self) -> int:
        """Number of flowers ever registered."""
        with self._operation("count"):
            return len(self._assets)

    # ===== BUY =====

    def buy(self, caller: str, index: int) -> AssetDict:
        """Pay the current owner the flower's price and take ownership.

        Self-purchase is allowed and the for-sale flag is not checked.
        Nothing changes unless the ledger transfer succeeds.

        Raises:
            OutOfRange: unknown index
            PaymentRejected: the ledger refused the transfer
        """
        _require_identity(caller, "caller")
        with self._operation("buy"):
            asset = self._get(index)
            seller = asset.owner
            price = asset.price

            result = self.ledger.transfer_from(self.registry_id, caller, seller, price)

            if not result.success:
                logger.warning(
                    "Purchase of flower %d by %s rejected: %s", index, caller, result.reason
                )
                raise PaymentRejected(index, caller, seller, price, result.reason)

            asset.for_sale = False
            asset.owner = caller
            snapshot = asset.to_dict(index)
        logger.info("%s bought flower %d from %s for %d", caller, index, seller, price)
        return snapshot

    # ===== GIFT =====

    def gift(self, caller: str, index: int, recipient: str) -> AssetDict:
        """Hand a flower to ``recipient`` without payment. Owner only."""
        _require_identity(recipient, "recipient")
        with self._operation("gift"):
            asset = self._get(index)
            if asset.owner != caller:
                logger.warning("%s tried to gift flower %d owned by %s", caller, index, asset.owner)
                raise Unauthorized(index, caller, asset.owner)
            asset.owner = recipient
            snapshot = asset.to_dict(index)
        logger.info("%s gifted flower %d to %s", caller, index, recipient)
        return snapshot

    # ===== TOGGLE SALE STATUS =====

    def toggle_for_sale(self, caller: str, index: int) -> bool:
        """Flip the for-sale flag and return its new value. Owner only."""
        with self._operation("toggle_for_sale"):
            asset = self._get(index)
            if asset.owner != caller:
                logger.warning(
                    "%s tried to toggle flower %d owned by %s", caller, index, asset.owner
                )
                raise Unauthorized(index, caller, asset.owner)
            asset.for_sale = not asset.for_sale
            for_sale = asset.for_sale
        logger.info("%s set flower %d for_sale=%s", caller, index, for_sale)
        return for_sale
