"""Flower asset records held by the registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


# Owner of the empty record returned by lenient out-of-range reads.
# Never the owner of a registered flower.
NULL_OWNER: str = ""


class AssetDict(TypedDict):
    """Snapshot of a flower as returned by reads."""

    index: int
    owner: str
    name: str
    description: str
    image: str
    price: int
    for_sale: bool


@dataclass
class Asset:
    """A registered flower.

    ``name``, ``description``, ``image`` and ``price`` are fixed at creation.
    Only ``owner`` and ``for_sale`` change over the life of the record, and
    only the registry mutates them.
    """

    owner: str
    name: str
    description: str
    image: str
    price: int
    for_sale: bool

    def to_dict(self, index: int) -> AssetDict:
        """Snapshot this record under its registry index."""
        return {
            "index": index,
            "owner": self.owner,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "price": self.price,
            "for_sale": self.for_sale,
        }


def empty_asset() -> Asset:
    """The zero record: no owner, empty strings, price 0, not for sale."""
    return Asset(
        owner=NULL_OWNER,
        name="",
        description="",
        image="",
        price=0,
        for_sale=False,
    )
