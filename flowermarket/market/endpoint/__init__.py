"""Market endpoint - named-method access to the flower registry

- base: MarketEndpoint dispatch table
- flower_market: FlowerMarketEndpoint (create/read/buy/gift/toggle_for_sale/count)
"""

from .base import EndpointMethod, MarketEndpoint
from .flower_market import FlowerMarketEndpoint

__all__ = [
    "EndpointMethod",
    "MarketEndpoint",
    "FlowerMarketEndpoint",
]
