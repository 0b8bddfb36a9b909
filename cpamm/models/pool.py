"""Read-only views of pool state."""

from pydantic import BaseModel, Field

from cpamm.models.types import Address, Uint256


class PoolState(BaseModel):
    """Snapshot of a pool's reserves and share supply."""

    asset: Address = Field(description="Address of the pooled asset ledger")
    address: Address = Field(description="The pool's own account")
    asset_reserve: Uint256 = Field(alias="assetReserve")
    base_reserve: Uint256 = Field(alias="baseReserve")
    total_shares: Uint256 = Field(alias="totalShares")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def is_empty(self) -> bool:
        return self.total_shares == 0
