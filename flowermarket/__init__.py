"""Flower market source package.

This package contains:
- config: Configuration loading and management
- market: Flower registry, token ledger, errors and the market endpoint
"""

from __future__ import annotations

__all__: list[str] = []
