"""Portfolio holding model."""

import enum
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from dcafolio.core.exceptions import ValidationError


class AssetType(str, enum.Enum):
    CRYPTO = "crypto"
    STOCK = "stock"
    METAL = "metal"
    REAL_ESTATE = "real_estate"
    CASH = "cash"


@dataclass(frozen=True)
class PortfolioHolding:
    """Quantity of one asset held in a portfolio, with its cost basis.

    ``asset_type`` is a free-form tag; the values of :class:`AssetType`
    are the ones the app knows about. ``current_price`` and
    ``price_change_percentage_24h`` are live quote data supplied by the
    caller.
    """

    portfolio_id: uuid.UUID
    asset_type: str
    symbol: str
    name: str
    quantity: float
    average_buy_price: Optional[float] = None
    current_price: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        if isinstance(self.asset_type, AssetType):
            object.__setattr__(self, "asset_type", self.asset_type.value)
        if self.quantity < 0:
            raise ValidationError(f"Holding quantity cannot be negative ({self.symbol})")

    @property
    def current_value(self) -> float:
        if self.current_price is None:
            return 0.0
        return self.quantity * self.current_price

    @property
    def total_cost(self) -> float:
        if self.average_buy_price is None:
            return 0.0
        return self.quantity * self.average_buy_price

    @property
    def profit_loss(self) -> float:
        return self.current_value - self.total_cost

    @property
    def profit_loss_percentage(self) -> float:
        total_cost = self.total_cost
        if total_cost <= 0:
            return 0.0
        return (self.current_value - total_cost) / total_cost * 100

    @property
    def is_profit(self) -> bool:
        return self.profit_loss >= 0


@dataclass(frozen=True)
class PortfolioHistoryPoint:
    """Portfolio value on a given day."""

    date: date
    value: float
