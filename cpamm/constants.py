"""Protocol constants for the constant-product exchange.

Centralizes the fixed fee and the well-known addresses.
"""

# Largest amount any ledger or reserve may hold
UINT256_MAX = 2**256 - 1

# Swap fee applied to the input leg: 997/1000 = 0.3% fee
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

# Null account / asset identifier
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Default address of the pool registry in a fresh environment
REGISTRY_ADDRESS = "0x00000000000000000000000000000000000f4c70"
