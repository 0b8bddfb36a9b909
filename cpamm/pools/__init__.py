"""Pools and the pool registry."""

from .pool import Pool
from .registry import PoolRegistry, derive_pool_address

__all__ = [
    "Pool",
    "PoolRegistry",
    "derive_pool_address",
]
