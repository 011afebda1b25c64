"""Transaction and performance schemas."""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from dcafolio.models.portfolio import PortfolioHistoryPoint
from dcafolio.models.transaction import Transaction, TransactionType


class TransactionBase(BaseModel):
    """Base transaction schema."""

    portfolio_id: UUID
    type: TransactionType
    asset_type: str
    symbol: str = Field(..., min_length=1, max_length=20)
    quantity: float = Field(..., gt=0)
    price_per_unit: float = Field(..., ge=0)
    fee: float = Field(default=0.0, ge=0)
    transaction_date: datetime
    notes: Optional[str] = None
    cost_basis_per_unit: Optional[float] = None
    realized_profit_loss: Optional[float] = None


class TransactionIn(TransactionBase):
    """Ledger entry supplied by the caller."""

    id: UUID = Field(default_factory=uuid4)
    total_value: Optional[float] = None

    def to_model(self) -> Transaction:
        return Transaction(**self.model_dump())


class TransactionResponse(TransactionBase):
    """Ledger entry."""

    id: UUID
    total_value: float
    holding_id: Optional[UUID] = None
    destination_portfolio_id: Optional[UUID] = None
    related_transaction_id: Optional[UUID] = None

    class Config:
        from_attributes = True


class HistoryPoint(BaseModel):
    """Portfolio value on a given day."""

    date: date
    value: float = Field(..., ge=0)

    def to_model(self) -> PortfolioHistoryPoint:
        return PortfolioHistoryPoint(date=self.date, value=self.value)


class TransactionsRequest(BaseModel):
    """Transactions to summarize."""

    transactions: List[TransactionIn] = []


class TransactionSummaryResponse(BaseModel):
    """Totals per transaction type."""

    total_bought: float
    total_sold: float
    total_transfers_in: float
    total_transfers_out: float
    total_fees: float
    net_flow: float
    transaction_count: int

    class Config:
        from_attributes = True


class PerformanceRequest(BaseModel):
    """Inputs for trade performance metrics."""

    transactions: List[TransactionIn] = []
    history: List[HistoryPoint] = []
    total_return: float = 0.0
    total_return_percentage: float = 0.0


class PerformanceResponse(BaseModel):
    """Trade performance metrics."""

    total_return: float
    total_return_percentage: float
    win_rate: float
    average_win: float
    average_loss: float
    profit_factor: float
    max_drawdown: float
    max_drawdown_value: float
    sharpe_ratio: float
    number_of_trades: int
    winning_trades: int
    losing_trades: int
    average_holding_period_days: float

    class Config:
        from_attributes = True
