"""Transaction model."""

import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from dcafolio.core.exceptions import InvalidChoiceError


class TransactionType(str, enum.Enum):
    BUY = "buy"
    SELL = "sell"
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"

    @property
    def is_incoming(self) -> bool:
        return self in (TransactionType.BUY, TransactionType.TRANSFER_IN)

    @classmethod
    def parse(cls, value) -> "TransactionType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidChoiceError("transaction type", value, [t.value for t in cls]) from None


@dataclass(frozen=True)
class Transaction:
    """Immutable ledger entry.

    ``total_value`` is derived when not supplied: gross cost plus fee for
    incoming entries, gross proceeds minus fee for outgoing ones.
    """

    portfolio_id: uuid.UUID
    type: TransactionType
    asset_type: str
    symbol: str
    quantity: float
    price_per_unit: float
    fee: float = 0.0
    total_value: Optional[float] = None
    transaction_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    holding_id: Optional[uuid.UUID] = None
    notes: Optional[str] = None
    cost_basis_per_unit: Optional[float] = None
    realized_profit_loss: Optional[float] = None
    destination_portfolio_id: Optional[uuid.UUID] = None
    related_transaction_id: Optional[uuid.UUID] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        object.__setattr__(self, "type", TransactionType.parse(self.type))
        if self.total_value is None:
            gross = self.quantity * self.price_per_unit
            total = gross + self.fee if self.type.is_incoming else gross - self.fee
            object.__setattr__(self, "total_value", total)

    @property
    def signed_quantity(self) -> float:
        return self.quantity if self.type.is_incoming else -self.quantity
