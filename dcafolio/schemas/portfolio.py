"""Portfolio holding and trade schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from dcafolio.models.portfolio import AssetType, PortfolioHolding
from dcafolio.schemas.transaction import TransactionResponse


class HoldingBase(BaseModel):
    """Base holding schema."""

    portfolio_id: UUID
    asset_type: str = Field(default=AssetType.CRYPTO.value, min_length=1, max_length=30)
    symbol: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=100)
    quantity: float = Field(..., ge=0)
    average_buy_price: Optional[float] = Field(None, ge=0)
    current_price: Optional[float] = Field(None, ge=0)
    price_change_percentage_24h: Optional[float] = None


class HoldingIn(HoldingBase):
    """Holding supplied by the caller, with its live quote."""

    id: UUID = Field(default_factory=uuid4)

    def to_model(self) -> PortfolioHolding:
        return PortfolioHolding(**self.model_dump())


class HoldingResponse(HoldingBase):
    """Holding with derived valuation."""

    id: UUID
    current_value: float
    total_cost: float
    profit_loss: float
    profit_loss_percentage: float

    class Config:
        from_attributes = True


class HoldingsRequest(BaseModel):
    """Holdings of one portfolio."""

    holdings: List[HoldingIn] = []


class AllocationSliceResponse(BaseModel):
    """Share of value held in one asset class."""

    category: str
    value: float
    percentage: float

    class Config:
        from_attributes = True


class PortfolioMetricsResponse(BaseModel):
    """Portfolio-level metrics."""

    total_value: float
    total_cost: float
    profit_loss: float
    profit_loss_percentage: float
    day_change: float
    day_change_percentage: float
    holdings_count: int
    allocation: List[AllocationSliceResponse]
    top_performers: List[HoldingResponse]
    worst_performers: List[HoldingResponse]

    class Config:
        from_attributes = True


class BuyRequest(BaseModel):
    """Add to a holding."""

    holding: HoldingIn
    quantity: float
    price: float
    fee: float = 0.0
    executed_at: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=500)


class TradeResponse(BaseModel):
    """Holding after a buy and its ledger entry."""

    holding: HoldingResponse
    transaction: TransactionResponse

    class Config:
        from_attributes = True


class SellRequest(BaseModel):
    """Sell part or all of a holding.

    ``destination_holdings`` are the current holdings of the destination
    portfolio, used to merge the proceeds into an existing position.
    """

    holding: HoldingIn
    quantity: float
    price: float
    fee: float = 0.0
    executed_at: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=500)
    destination_portfolio_id: Optional[UUID] = None
    destination_holdings: List[HoldingIn] = []
    convert_to_cash: bool = False


class SellResponse(BaseModel):
    """Outcome of a sell."""

    holding: Optional[HoldingResponse]
    removed: bool
    transaction: TransactionResponse
    realized_profit_loss: float
    net_proceeds: float
    destination_holding: Optional[HoldingResponse] = None
    destination_transaction: Optional[TransactionResponse] = None

    class Config:
        from_attributes = True
