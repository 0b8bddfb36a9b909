"""Pydantic models for events emitted by the registry and the pools.

Field aliases follow the camelCase convention used on the wire.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Discriminator, Field

from cpamm.models.types import Address, Uint256


class PoolCreated(BaseModel):
    """A pool was created for an asset."""

    name: Literal["PoolCreated"] = "PoolCreated"
    asset: Address
    pool: Address

    model_config = {"populate_by_name": True, "frozen": True}


class LiquidityAdded(BaseModel):
    """A provider deposited both assets and received shares."""

    name: Literal["LiquidityAdded"] = "LiquidityAdded"
    pool: Address
    provider: Address
    base_amount: Uint256 = Field(alias="baseAmount")
    asset_amount: Uint256 = Field(alias="assetAmount")
    shares_minted: Uint256 = Field(alias="sharesMinted")

    model_config = {"populate_by_name": True, "frozen": True}


class LiquidityRemoved(BaseModel):
    """A provider burned shares for a proportional payout."""

    name: Literal["LiquidityRemoved"] = "LiquidityRemoved"
    pool: Address
    provider: Address
    base_amount: Uint256 = Field(alias="baseAmount")
    asset_amount: Uint256 = Field(alias="assetAmount")
    shares_burned: Uint256 = Field(alias="sharesBurned")

    model_config = {"populate_by_name": True, "frozen": True}


class AssetSoldForBase(BaseModel):
    name: Literal["AssetSoldForBase"] = "AssetSoldForBase"
    pool: Address
    trader: Address
    asset_in: Uint256 = Field(alias="assetIn")
    base_out: Uint256 = Field(alias="baseOut")

    model_config = {"populate_by_name": True, "frozen": True}


class BaseSoldForAsset(BaseModel):
    name: Literal["BaseSoldForAsset"] = "BaseSoldForAsset"
    pool: Address
    trader: Address
    base_in: Uint256 = Field(alias="baseIn")
    asset_out: Uint256 = Field(alias="assetOut")

    model_config = {"populate_by_name": True, "frozen": True}


Event = Annotated[
    PoolCreated | LiquidityAdded | LiquidityRemoved | AssetSoldForBase | BaseSoldForAsset,
    Discriminator("name"),
]
