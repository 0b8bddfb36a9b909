"""Execution environment wiring ledgers, registry and event log together.

The environment plays the role of the chain the pools live on: it owns the
base currency ledger, the deployed asset ledgers, the pool registry and
the shared event log. The registry, the deployed ledgers and the
environment itself are tracked by the base ledger's journal, so a failed
pool operation undoes whatever its receive hooks changed in any of them.
"""

from __future__ import annotations

import hashlib
import threading

import structlog

from cpamm.config import ServiceConfig
from cpamm.errors import AlreadyExists, InvalidAsset, UnknownAsset, UnknownPool
from cpamm.events import EventLog
from cpamm.ledger.asset import Token
from cpamm.ledger.native import NativeLedger
from cpamm.models.types import is_zero_address, normalize_address
from cpamm.pools.pool import Pool
from cpamm.pools.registry import PoolRegistry

logger = structlog.get_logger()


class Environment:
    """In-memory execution environment for pools and assets."""

    def __init__(self, base_symbol: str = "BASE") -> None:
        self.native = NativeLedger(symbol=base_symbol)
        self.events = EventLog()
        self.registry = PoolRegistry(native=self.native, events=self.events)
        self._assets: dict[str, Token] = {}
        self._nonce = 0
        # Mutating calls from concurrent request handlers run one at a time
        self.lock = threading.RLock()
        self.native.journal.track(self)

    def deploy_asset(
        self,
        symbol: str,
        owner: str,
        initial_supply: int = 0,
        decimals: int = 18,
        address: str | None = None,
    ) -> Token:
        """Deploy a new Token ledger, optionally minting to its owner.

        Raises:
            AlreadyExists: If an asset is already deployed at address
        """
        if address is None:
            self._nonce += 1
            seed = f"{symbol}:{self._nonce}".encode()
            address = "0x" + hashlib.sha3_256(seed).digest()[-20:].hex()
        address = normalize_address(address)
        if address in self._assets:
            raise AlreadyExists(f"Asset already deployed at {address}", asset=address)

        token = Token(address=address, symbol=symbol, owner=owner, decimals=decimals)
        if initial_supply:
            token.mint(owner, owner, initial_supply)
        self._assets[address] = token
        self.native.journal.track(token)
        logger.info("asset_deployed", symbol=symbol, asset=address[-8:], supply=initial_supply)
        return token

    def get_asset(self, address: str) -> Token:
        """Raises UnknownAsset if nothing is deployed at address."""
        token = self._assets.get(normalize_address(address))
        if token is None:
            raise UnknownAsset(f"No asset deployed at {address}", asset=address)
        return token

    def create_pool(self, asset_address: str) -> Pool:
        """Create the pool for a deployed asset.

        Raises:
            InvalidAsset: If asset_address is the null address
            UnknownAsset: If nothing is deployed at asset_address
            AlreadyExists: If the asset already has a pool
        """
        if is_zero_address(asset_address):
            raise InvalidAsset("Cannot create a pool for the null asset", asset=asset_address)
        return self.registry.create_pool(self.get_asset(asset_address))

    def get_pool(self, asset_address: str) -> Pool:
        """Raises UnknownPool if the asset has no pool."""
        pool = self.registry.lookup(normalize_address(asset_address))
        if pool is None:
            raise UnknownPool(f"No pool for asset {asset_address}", asset=asset_address)
        return pool

    def snapshot(self) -> tuple[dict[str, Token], int]:
        return dict(self._assets), self._nonce

    def restore(self, state: tuple[dict[str, Token], int]) -> None:
        assets, self._nonce = state
        self._assets = dict(assets)


_default_environment: Environment | None = None


def get_default_environment() -> Environment:
    """Process-wide environment used by the HTTP API."""
    global _default_environment
    if _default_environment is None:
        _default_environment = Environment(base_symbol=ServiceConfig.from_env().base_symbol)
    return _default_environment


def reset_default_environment() -> Environment:
    """Replace the process-wide environment with a fresh one."""
    global _default_environment
    _default_environment = Environment(base_symbol=ServiceConfig.from_env().base_symbol)
    return _default_environment
