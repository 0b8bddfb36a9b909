"""Pydantic models and shared types for the exchange."""

from cpamm.models.events import (
    AssetSoldForBase,
    BaseSoldForAsset,
    Event,
    LiquidityAdded,
    LiquidityRemoved,
    PoolCreated,
)
from cpamm.models.types import (
    Address,
    Uint256,
    is_valid_address,
    is_zero_address,
    normalize_address,
    require_uint256,
)

__all__ = [
    # Types
    "Address",
    "Uint256",
    "normalize_address",
    "is_valid_address",
    "is_zero_address",
    "require_uint256",
    # Events
    "Event",
    "PoolCreated",
    "LiquidityAdded",
    "LiquidityRemoved",
    "AssetSoldForBase",
    "BaseSoldForAsset",
]
