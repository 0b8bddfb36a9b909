"""API endpoints for the exchange."""

import structlog
from fastapi import APIRouter, Depends, Query, status

from cpamm.environment import Environment, get_default_environment
from cpamm.models.api import (
    AccountResponse,
    AddLiquidityRequest,
    AddLiquidityResponse,
    ApproveRequest,
    AssetBalanceResponse,
    AssetResponse,
    CreatePoolRequest,
    DeployAssetRequest,
    DepositRequest,
    EventsResponse,
    QuoteDirection,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    SwapAssetForBaseRequest,
    SwapBaseForAssetRequest,
    SwapResponse,
)
from cpamm.models.pool import PoolState
from cpamm.models.types import normalize_address, require_uint256

logger = structlog.get_logger()

router = APIRouter()


def get_environment() -> Environment:
    """Dependency provider for the execution environment.

    Override this in tests to inject a fresh environment:
        app.dependency_overrides[get_environment] = lambda: env
    """
    return get_default_environment()


# --- Accounts and assets ---


@router.post("/accounts/{address}/deposit")
def deposit(
    address: str,
    request: DepositRequest,
    env: Environment = Depends(get_environment),
) -> AccountResponse:
    """Credit base currency to an account (simulation faucet)."""
    account = normalize_address(address)
    with env.lock:
        env.native.deposit(account, request.amount)
        return AccountResponse(address=account, balance=env.native.balance_of(account))


@router.get("/accounts/{address}")
def get_account(address: str, env: Environment = Depends(get_environment)) -> AccountResponse:
    account = normalize_address(address)
    return AccountResponse(address=account, balance=env.native.balance_of(account))


@router.post("/assets", status_code=status.HTTP_201_CREATED)
def deploy_asset(
    request: DeployAssetRequest,
    env: Environment = Depends(get_environment),
) -> AssetResponse:
    with env.lock:
        token = env.deploy_asset(
            symbol=request.symbol,
            owner=request.owner,
            initial_supply=request.initial_supply,
            decimals=request.decimals,
        )
    return AssetResponse(
        address=token.address,
        symbol=token.symbol,
        owner=token.owner,
        decimals=token.decimals,
        total_supply=token.total_supply,
    )


@router.post("/assets/{asset}/approve")
def approve(
    asset: str,
    request: ApproveRequest,
    env: Environment = Depends(get_environment),
) -> dict[str, str]:
    with env.lock:
        token = env.get_asset(asset)
        token.approve(request.owner, request.spender, request.amount)
        return {"allowance": str(token.allowance(request.owner, request.spender))}


@router.get("/assets/{asset}/balances/{account}")
def get_asset_balance(
    asset: str,
    account: str,
    env: Environment = Depends(get_environment),
) -> AssetBalanceResponse:
    token = env.get_asset(asset)
    return AssetBalanceResponse(
        asset=token.address,
        account=normalize_address(account),
        balance=token.balance_of(account),
    )


# --- Pools ---


@router.post("/pools", status_code=status.HTTP_201_CREATED)
def create_pool(
    request: CreatePoolRequest,
    env: Environment = Depends(get_environment),
) -> PoolState:
    with env.lock:
        pool = env.create_pool(request.asset)
        return pool.state()


@router.get("/pools/{asset}")
def get_pool(asset: str, env: Environment = Depends(get_environment)) -> PoolState:
    return env.get_pool(asset).state()


@router.get("/pools/{asset}/shares/{account}")
def get_shares(
    asset: str,
    account: str,
    env: Environment = Depends(get_environment),
) -> dict[str, str]:
    pool = env.get_pool(asset)
    return {"account": normalize_address(account), "shares": str(pool.shares_of(account))}


@router.post("/pools/{asset}/liquidity")
def add_liquidity(
    asset: str,
    request: AddLiquidityRequest,
    env: Environment = Depends(get_environment),
) -> AddLiquidityResponse:
    with env.lock:
        pool = env.get_pool(asset)
        shares = pool.add_liquidity(
            request.provider,
            request.asset_amount,
            request.base_amount,
            min_shares=request.min_shares,
        )
        return AddLiquidityResponse(shares_minted=shares, pool=pool.state())


@router.post("/pools/{asset}/liquidity/remove")
def remove_liquidity(
    asset: str,
    request: RemoveLiquidityRequest,
    env: Environment = Depends(get_environment),
) -> RemoveLiquidityResponse:
    with env.lock:
        pool = env.get_pool(asset)
        base_amount, asset_amount = pool.remove_liquidity(
            request.provider,
            request.shares,
            min_base=request.min_base,
            min_asset=request.min_asset,
        )
        return RemoveLiquidityResponse(
            base_amount=base_amount,
            asset_amount=asset_amount,
            pool=pool.state(),
        )


@router.post("/pools/{asset}/swaps/asset-for-base")
def swap_asset_for_base(
    asset: str,
    request: SwapAssetForBaseRequest,
    env: Environment = Depends(get_environment),
) -> SwapResponse:
    with env.lock:
        pool = env.get_pool(asset)
        base_out = pool.swap_asset_for_base(
            request.trader,
            request.asset_in,
            request.min_base_out,
            recipient=request.recipient,
        )
        return SwapResponse(amount_in=request.asset_in, amount_out=base_out, pool=pool.state())


@router.post("/pools/{asset}/swaps/base-for-asset")
def swap_base_for_asset(
    asset: str,
    request: SwapBaseForAssetRequest,
    env: Environment = Depends(get_environment),
) -> SwapResponse:
    with env.lock:
        pool = env.get_pool(asset)
        asset_out = pool.swap_base_for_asset(
            request.trader,
            request.base_in,
            request.min_asset_out,
            recipient=request.recipient,
        )
        return SwapResponse(amount_in=request.base_in, amount_out=asset_out, pool=pool.state())


@router.get("/pools/{asset}/quote")
def quote(
    asset: str,
    direction: QuoteDirection,
    amount_in: str = Query(alias="amountIn", pattern=r"^[0-9]+$"),
    env: Environment = Depends(get_environment),
) -> QuoteResponse:
    """Price an exact-input swap against the current reserves."""
    amount = require_uint256("amountIn", int(amount_in))
    pool = env.get_pool(asset)
    if direction is QuoteDirection.ASSET_FOR_BASE:
        amount_out = pool.get_base_out(amount)
    else:
        amount_out = pool.get_asset_out(amount)
    return QuoteResponse(direction=direction, amount_in=amount, amount_out=amount_out)


@router.get("/events")
def list_events(
    name: str | None = None,
    env: Environment = Depends(get_environment),
) -> EventsResponse:
    return EventsResponse(events=env.events.records(name))
