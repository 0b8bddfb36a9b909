"""Pool registry: at most one pool per asset.

The registry is an insert-only store. Entries are created by create_pool
and never replaced. The only removal is the rollback of a failed
operation that created the entry, so a pool handle, once committed, stays
the only pool for its asset.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator

import structlog

from cpamm.constants import REGISTRY_ADDRESS, ZERO_ADDRESS
from cpamm.errors import AlreadyExists, InvalidAddress, InvalidAsset
from cpamm.events import EventLog
from cpamm.ledger.asset import AssetLedger
from cpamm.ledger.native import NativeLedger
from cpamm.models.events import PoolCreated
from cpamm.models.types import normalize_address
from cpamm.pools.pool import Pool

logger = structlog.get_logger()


def derive_pool_address(registry: str, asset: str) -> str:
    """Deterministic pool address for (registry, asset).

    Args:
        registry: Registry address
        asset: Asset ledger address

    Returns:
        Last 20 bytes of sha3-256(registry || asset) as a 0x-prefixed address
    """
    digest = hashlib.sha3_256(bytes.fromhex(registry[2:]) + bytes.fromhex(asset[2:])).digest()
    return "0x" + digest[-20:].hex()


def _address_key(address: object) -> str | None:
    """Normalized form of address, or None if it is not an address."""
    try:
        return normalize_address(address)  # type: ignore[arg-type]
    except InvalidAddress:
        return None


class PoolRegistry:
    """Registry of pools keyed by asset address.

    Args:
        native: Base currency ledger shared by every pool
        events: Event log receiving PoolCreated and the pools' events
        address: Registry address, used to derive pool addresses
    """

    def __init__(
        self,
        native: NativeLedger,
        events: EventLog | None = None,
        address: str = REGISTRY_ADDRESS,
    ) -> None:
        self.native = native
        self.events = events if events is not None else EventLog()
        self.address = normalize_address(address)
        self._asset_to_pool: dict[str, Pool] = {}
        self._pool_to_asset: dict[str, str] = {}
        self.native.journal.track(self)

    def create_pool(self, asset: AssetLedger | None) -> Pool:
        """Create the pool for an asset.

        Not idempotent: a second call for the same asset fails rather than
        handing out the existing pool.

        Args:
            asset: Ledger of the asset to pair with the base currency

        Returns:
            The new, empty pool

        Raises:
            InvalidAsset: If asset is None or has the null address
            AlreadyExists: If a pool for this asset exists
        """
        address = getattr(asset, "address", None)
        asset_key = _address_key(address)
        if asset is None or asset_key is None or asset_key == ZERO_ADDRESS:
            raise InvalidAsset("Asset must be a ledger with a non-null address", asset=repr(address))

        existing = self._asset_to_pool.get(asset_key)
        if existing is not None:
            raise AlreadyExists(
                f"Pool for asset {asset_key} already exists",
                asset=asset_key,
                pool=existing.address,
            )

        pool = Pool(
            address=derive_pool_address(self.address, asset_key),
            asset=asset,
            native=self.native,
            events=self.events,
        )
        self._asset_to_pool[asset_key] = pool
        self._pool_to_asset[pool.address] = asset_key

        self.native.journal.emit(self.events, PoolCreated(asset=asset_key, pool=pool.address))
        logger.info("pool_created", asset=asset_key[-8:], pool=pool.address[-8:])
        return pool

    def lookup(self, asset: str) -> Pool | None:
        """Get the pool for an asset, or None if there is none."""
        key = _address_key(asset)
        return None if key is None else self._asset_to_pool.get(key)

    def asset_for_pool(self, pool_address: str) -> str | None:
        """Reverse lookup: asset address of a pool."""
        key = _address_key(pool_address)
        return None if key is None else self._pool_to_asset.get(key)

    def pools(self) -> Iterator[Pool]:
        """Iterate over pools in creation order."""
        return iter(list(self._asset_to_pool.values()))

    @property
    def pool_count(self) -> int:
        return len(self._asset_to_pool)

    def __contains__(self, asset: object) -> bool:
        return isinstance(asset, str) and self.lookup(asset) is not None

    def snapshot(self) -> tuple[dict[str, Pool], dict[str, str]]:
        return dict(self._asset_to_pool), dict(self._pool_to_asset)

    def restore(self, state: tuple[dict[str, Pool], dict[str, str]]) -> None:
        asset_to_pool, pool_to_asset = state
        self._asset_to_pool = dict(asset_to_pool)
        self._pool_to_asset = dict(pool_to_asset)
