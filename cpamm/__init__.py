"""cpamm - constant product automated market maker."""

__version__ = "0.1.0"

from cpamm.environment import Environment, get_default_environment  # noqa: E402
from cpamm.pools import Pool, PoolRegistry  # noqa: E402

__all__ = ["Environment", "Pool", "PoolRegistry", "get_default_environment", "__version__"]
