"""Request and response bodies of the HTTP API."""

from enum import Enum

from pydantic import BaseModel, Field

from cpamm.models.events import Event
from cpamm.models.pool import PoolState
from cpamm.models.types import Address, Uint256

_CONFIG = {"populate_by_name": True}


class DepositRequest(BaseModel):
    amount: Uint256

    model_config = _CONFIG


class AccountResponse(BaseModel):
    address: Address
    balance: Uint256

    model_config = _CONFIG


class DeployAssetRequest(BaseModel):
    """Deploy a token ledger owned (and initially held) by owner."""

    symbol: str = Field(min_length=1, max_length=16)
    owner: Address
    initial_supply: Uint256 = Field(default=0, alias="initialSupply")
    decimals: int = Field(default=18, ge=0, le=36)

    model_config = _CONFIG


class AssetResponse(BaseModel):
    address: Address
    symbol: str
    owner: Address
    decimals: int
    total_supply: Uint256 = Field(alias="totalSupply")

    model_config = _CONFIG


class ApproveRequest(BaseModel):
    owner: Address
    spender: Address
    amount: Uint256

    model_config = _CONFIG


class AssetBalanceResponse(BaseModel):
    asset: Address
    account: Address
    balance: Uint256

    model_config = _CONFIG


class CreatePoolRequest(BaseModel):
    asset: Address

    model_config = _CONFIG


class AddLiquidityRequest(BaseModel):
    provider: Address
    asset_amount: Uint256 = Field(alias="assetAmount", description="Maximum asset amount offered")
    base_amount: Uint256 = Field(alias="baseAmount", description="Base currency attached")
    min_shares: Uint256 = Field(default=0, alias="minShares")

    model_config = _CONFIG


class AddLiquidityResponse(BaseModel):
    shares_minted: Uint256 = Field(alias="sharesMinted")
    pool: PoolState

    model_config = _CONFIG


class RemoveLiquidityRequest(BaseModel):
    provider: Address
    shares: Uint256
    min_base: Uint256 = Field(default=0, alias="minBase")
    min_asset: Uint256 = Field(default=0, alias="minAsset")

    model_config = _CONFIG


class RemoveLiquidityResponse(BaseModel):
    base_amount: Uint256 = Field(alias="baseAmount")
    asset_amount: Uint256 = Field(alias="assetAmount")
    pool: PoolState

    model_config = _CONFIG


class SwapAssetForBaseRequest(BaseModel):
    trader: Address
    asset_in: Uint256 = Field(alias="assetIn")
    min_base_out: Uint256 = Field(default=0, alias="minBaseOut")
    recipient: Address | None = None

    model_config = _CONFIG


class SwapBaseForAssetRequest(BaseModel):
    trader: Address
    base_in: Uint256 = Field(alias="baseIn")
    min_asset_out: Uint256 = Field(default=0, alias="minAssetOut")
    recipient: Address | None = None

    model_config = _CONFIG


class SwapResponse(BaseModel):
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")
    pool: PoolState

    model_config = _CONFIG


class QuoteDirection(str, Enum):
    """Which side of the pool is sold."""

    ASSET_FOR_BASE = "asset-for-base"
    BASE_FOR_ASSET = "base-for-asset"


class QuoteResponse(BaseModel):
    direction: QuoteDirection
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = _CONFIG


class EventsResponse(BaseModel):
    events: list[Event]
