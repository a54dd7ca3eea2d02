"""Pydantic schema for configuration validation.

All config values are validated at startup. Typos and invalid values
fail fast with clear error messages.

Usage:
    from flowermarket.config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# REGISTRY MODEL
# =============================================================================

class RegistryConfig(StrictModel):
    """Flower registry configuration."""

    id: str = Field(
        default="flower_registry",
        min_length=1,
        description="Identity the registry spends buyer allowances as"
    )
    strict_reads: bool = Field(
        default=True,
        description="Raise OutOfRange on out-of-range reads instead of returning an empty record"
    )


# =============================================================================
# LEDGER MODEL
# =============================================================================

class AccountConfig(StrictModel):
    """A token account created when the ledger is built from config."""

    id: str = Field(min_length=1, description="Account identity")
    starting_balance: int = Field(default=0, ge=0, description="Initial balance")


class LedgerConfig(StrictModel):
    """Reference token ledger configuration."""

    symbol: str = Field(default="cUSD", description="Token symbol used in messages")
    accounts: list[AccountConfig] = Field(
        default_factory=list,
        description="Accounts to create at startup"
    )

    @field_validator("accounts")
    @classmethod
    def unique_account_ids(cls, v: list[AccountConfig]) -> list[AccountConfig]:
        """Each account may be configured only once."""
        seen: set[str] = set()
        for account in v:
            if account.id in seen:
                raise ValueError(f"Duplicate ledger account: {account.id}")
            seen.add(account.id)
        return v


# =============================================================================
# MARKET ENDPOINT MODEL
# =============================================================================

class MethodConfig(StrictModel):
    """Configuration for a single endpoint method."""

    description: str = Field(description="Method description shown to callers")


class MarketMethodsConfig(StrictModel):
    """Descriptions for each flower market method."""

    create: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Register a flower. Args: [name, description, image, price, for_sale]"
        )
    )
    read: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Read a flower by index. Args: [index]"
        )
    )
    buy: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description=(
                "Buy a flower, paying its price to the owner. "
                "Approve the registry first. Args: [index]"
            )
        )
    )
    gift: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Give a flower you own to someone else. Args: [index, recipient]"
        )
    )
    toggle_for_sale: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Flip the for-sale flag of a flower you own. Args: [index]"
        )
    )
    count: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Number of flowers ever registered. Args: []"
        )
    )


class MarketConfig(StrictModel):
    """Market endpoint configuration."""

    id: str = Field(default="flower_market", min_length=1, description="Endpoint ID")
    description: str = Field(
        default="Register, trade and gift flowers paid for in tokens",
        description="Endpoint description"
    )
    methods: MarketMethodsConfig = Field(default_factory=MarketMethodsConfig)


# =============================================================================
# LOGGING MODEL
# =============================================================================

class LoggingConfig(StrictModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level"
    )
    format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="logging.basicConfig format string"
    )


# =============================================================================
# ROOT CONFIG MODEL
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model.

    All fields have sensible defaults, so an empty config file is valid.
    """

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    market: MarketConfig = Field(default_factory=MarketConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# LOADING FUNCTIONS
# =============================================================================

def load_validated_config(config_path: str | Path = "config/config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw_config)


def validate_config_dict(config_dict: dict[str, Any]) -> AppConfig:
    """Validate a configuration dictionary.

    Raises:
        pydantic.ValidationError: If config is invalid.
    """
    return AppConfig.model_validate(config_dict)


__all__ = [
    "AppConfig",
    "RegistryConfig",
    "LedgerConfig",
    "AccountConfig",
    "MarketConfig",
    "MarketMethodsConfig",
    "MethodConfig",
    "LoggingConfig",
    "StrictModel",
    "load_validated_config",
    "validate_config_dict",
]
