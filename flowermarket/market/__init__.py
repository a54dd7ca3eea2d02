# Flower market package
from .assets import Asset, AssetDict, NULL_OWNER, empty_asset
from .errors import (
    ErrorCategory, ErrorCode, ErrorResponse,
    RegistryError, Unauthorized, PaymentRejected, OutOfRange, InvalidArgument, ReentrantCall,
    validation_error, resource_error,
)
from .ledger import PaymentLedger, TokenLedger, TransferResult
from .registry import FlowerRegistry
from .endpoint import MarketEndpoint, FlowerMarketEndpoint

__all__ = [
    "Asset", "AssetDict", "NULL_OWNER", "empty_asset",
    "ErrorCategory", "ErrorCode", "ErrorResponse",
    "RegistryError", "Unauthorized", "PaymentRejected", "OutOfRange",
    "InvalidArgument", "ReentrantCall",
    "validation_error", "resource_error",
    "PaymentLedger", "TokenLedger", "TransferResult",
    "FlowerRegistry",
    "MarketEndpoint", "FlowerMarketEndpoint",
]
