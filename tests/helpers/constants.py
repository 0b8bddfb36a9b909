"""Shared account constants for tests.

All addresses are lowercase for consistency with normalize_address().
"""

OWNER = "0x00000000000000000000000000000000000000aa"  # Deploys and mints test assets
ALICE = "0xa1a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1"
BOB = "0xb0b0b0b0b0b0b0b0b0b0b0b0b0b0b0b0b0b0b0b0"
CAROL = "0xc0c0c0c0c0c0c0c0c0c0c0c0c0c0c0c0c0c0c0c0"
MALLORY = "0xdeaddeaddeaddeaddeaddeaddeaddeaddeaddead"

# One whole unit at 18 decimals
E18 = 10**18
