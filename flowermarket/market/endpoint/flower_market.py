"""Flower market endpoint - method-dispatch front for the flower registry

Callers invoke methods by name with a positional ``args`` list:

    market.invoke("create", ["Rose", "red", "https://img/rose.png", 10, True], "alice")
    market.invoke("buy", [0], "bob")
    market.invoke("toggle_for_sale", [0], "bob")
    market.invoke("gift", [0, "carol"], "bob")

Argument shape and types are checked here; ownership and payment rules
are enforced by the registry, whose failures come back as structured
error responses. Before ``buy``, the buyer must approve the registry's id
on the token ledger for at least the flower's price.
"""

from __future__ import annotations

from typing import Any

from ...config_schema import MarketConfig
from ..errors import ErrorCode, validation_error
from ..registry import FlowerRegistry
from .base import MarketEndpoint
from .types import CountResult, CreateResult, FlowerResult, ToggleResult


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class FlowerMarketEndpoint(MarketEndpoint):
    """
    Endpoint exposing create/read/buy/gift/toggle_for_sale/count.

    Method descriptions are configurable via config.yaml.
    """

    registry: FlowerRegistry

    def __init__(
        self,
        registry: FlowerRegistry,
        market_config: MarketConfig | None = None
    ) -> None:
        """
        Args:
            registry: The flower registry to front
            market_config: Optional market config (uses global if not provided)
        """
        if market_config is None:
            from ...config import get_validated_config
            market_config = get_validated_config().market
        methods_cfg = market_config.methods

        super().__init__(
            endpoint_id=market_config.id,
            description=market_config.description
        )
        self.registry = registry

        self.register_method("create", self._create, methods_cfg.create.description)
        self.register_method("read", self._read, methods_cfg.read.description)
        self.register_method("buy", self._buy, methods_cfg.buy.description)
        self.register_method("gift", self._gift, methods_cfg.gift.description)
        self.register_method(
            "toggle_for_sale", self._toggle_for_sale, methods_cfg.toggle_for_sale.description
        )
        self.register_method("count", self._count, methods_cfg.count.description)

    def _index_arg(self, method: str, args: list[Any], example: str) -> int | dict[str, Any]:
        """Extract the leading index argument or build the error response."""
        if not args:
            return validation_error(
                f"{method} requires [index]. Example: {self.id}.{method}({example})",
                code=ErrorCode.MISSING_ARGUMENT,
                required=["index"],
            )
        index = args[0]
        if not _is_int(index):
            if isinstance(index, str) and index.isdigit():
                return validation_error(
                    f"Index must be an integer, got str: '{index}'. "
                    f"Use {int(index)} instead of '{index}'.",
                    code=ErrorCode.INVALID_TYPE,
                    provided=index,
                )
            return validation_error(
                f"Index must be an integer, got {type(index).__name__}: {index!r}.",
                code=ErrorCode.INVALID_TYPE,
                provided=index,
            )
        return index

    def _create(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        """Register a flower owned by the invoker.

        Args: [name, description, image, price, for_sale]
        """
        if len(args) < 5:
            return validation_error(
                f"create requires [name, description, image, price, for_sale] "
                f"(5 args, got {len(args)}). "
                f"Example: {self.id}.create(['Rose', 'red', 'https://img/rose.png', 10, True])",
                code=ErrorCode.MISSING_ARGUMENT,
                required=["name", "description", "image", "price", "for_sale"],
            )
        name, description, image, price, for_sale = args[:5]

        for field_name, value in (("name", name), ("description", description), ("image", image)):
            if not isinstance(value, str):
                return validation_error(
                    f"{field_name} must be a string, got {type(value).__name__}",
                    code=ErrorCode.INVALID_TYPE,
                    field=field_name,
                )
        if not _is_int(price):
            return validation_error(
                f"Price must be an integer, got {type(price).__name__}: {price!r}.",
                code=ErrorCode.INVALID_TYPE,
                provided=price,
            )
        if not isinstance(for_sale, bool):
            return validation_error(
                f"for_sale must be true or false, got {type(for_sale).__name__}: {for_sale!r}.",
                code=ErrorCode.INVALID_TYPE,
                provided=for_sale,
            )

        index = self.registry.create(invoker_id, name, description, image, price, for_sale)
        result: CreateResult = {
            "success": True,
            "index": index,
            "owner": invoker_id,
            "count": index + 1,
        }
        return dict(result)

    def _read(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        """Read a flower. Args: [index]"""
        index = self._index_arg("read", args, "[0]")
        if isinstance(index, dict):
            return index
        result: FlowerResult = {"success": True, "flower": self.registry.read(index)}
        return dict(result)

    def _buy(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        """Buy a flower, paying its price to the current owner. Args: [index]"""
        index = self._index_arg("buy", args, "[0]")
        if isinstance(index, dict):
            return index
        result: FlowerResult = {"success": True, "flower": self.registry.buy(invoker_id, index)}
        return dict(result)

    def _gift(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        """Give an owned flower away. Args: [index, recipient]"""
        if len(args) < 2:
            return validation_error(
                f"gift requires [index, recipient]. Example: {self.id}.gift([0, 'carol'])",
                code=ErrorCode.MISSING_ARGUMENT,
                required=["index", "recipient"],
            )
        index = self._index_arg("gift", args, "[0, 'carol']")
        if isinstance(index, dict):
            return index
        recipient = args[1]
        if not isinstance(recipient, str):
            return validation_error(
                f"recipient must be a string, got {type(recipient).__name__}",
                code=ErrorCode.INVALID_TYPE,
                provided=recipient,
            )
        result: FlowerResult = {
            "success": True,
            "flower": self.registry.gift(invoker_id, index, recipient),
        }
        return dict(result)

    def _toggle_for_sale(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        """Flip the for-sale flag of an owned flower. Args: [index]"""
        index = self._index_arg("toggle_for_sale", args, "[0]")
        if isinstance(index, dict):
            return index
        result: ToggleResult = {
            "success": True,
            "index": index,
            "for_sale": self.registry.toggle_for_sale(invoker_id, index),
        }
        return dict(result)

    def _count(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        """Number of flowers ever registered. Args: []"""
        result: CountResult = {"success": True, "count": self.registry.count()}
        return dict(result)

    def get_interface(self) -> dict[str, Any]:
        """Get detailed interface schema for the flower market."""
        index_schema = {
            "type": "integer",
            "description": "Flower index (0-based, creation order)",
            "minimum": 0,
        }
        schemas: dict[str, dict[str, Any]] = {
            "create": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Flower name"},
                    "description": {"type": "string", "description": "Free-form description"},
                    "image": {"type": "string", "description": "Image URL or reference"},
                    "price": {
                        "type": "integer",
                        "description": "Price in ledger units, fixed at creation",
                        "minimum": 0,
                    },
                    "for_sale": {"type": "boolean", "description": "Initial sale status"},
                },
                "required": ["name", "description", "image", "price", "for_sale"],
            },
            "read": {
                "type": "object",
                "properties": {"index": index_schema},
                "required": ["index"],
            },
            "buy": {
                "type": "object",
                "properties": {"index": index_schema},
                "required": ["index"],
            },
            "gift": {
                "type": "object",
                "properties": {
                    "index": index_schema,
                    "recipient": {"type": "string", "description": "New owner"},
                },
                "required": ["index", "recipient"],
            },
            "toggle_for_sale": {
                "type": "object",
                "properties": {"index": index_schema},
                "required": ["index"],
            },
            "count": {"type": "object", "properties": {}},
        }
        return {
            "description": self.description,
            "dataType": "service",
            "tools": [
                {
                    "name": method.name,
                    "description": method.description,
                    "inputSchema": schemas[method.name],
                }
                for method in self.methods.values()
            ],
        }
