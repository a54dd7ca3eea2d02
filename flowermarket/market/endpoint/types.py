"""Market endpoint - Type definitions

Shared TypedDict definitions for endpoint listings and method results.
"""

from typing import TypedDict

from ..assets import AssetDict


class MethodInfo(TypedDict):
    """Information about an endpoint method for listing."""
    name: str
    description: str


class EndpointDict(TypedDict):
    """Endpoint summary for discovery."""
    id: str
    description: str
    methods: list[MethodInfo]


class CreateResult(TypedDict):
    """Result from create."""
    success: bool
    index: int
    owner: str
    count: int


class FlowerResult(TypedDict):
    """Result from read, buy and gift."""
    success: bool
    flower: AssetDict


class ToggleResult(TypedDict):
    """Result from toggle_for_sale."""
    success: bool
    index: int
    for_sale: bool


class CountResult(TypedDict):
    """Result from count."""
    success: bool
    count: int
