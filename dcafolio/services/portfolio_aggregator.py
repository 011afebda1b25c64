"""Portfolio valuation, allocation and trade bookkeeping."""

import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from dcafolio.core.config import settings
from dcafolio.core.exceptions import SellValidationError, ValidationError
from dcafolio.models.portfolio import AssetType, PortfolioHolding
from dcafolio.models.transaction import Transaction, TransactionType

logger = logging.getLogger(__name__)


@dataclass
class AllocationSlice:
    """Share of portfolio value held in one asset class."""

    category: str
    value: float
    percentage: float


@dataclass
class PortfolioStatistics:
    """Portfolio-level metrics."""

    total_value: float
    total_cost: float
    profit_loss: float
    profit_loss_percentage: float
    day_change: float
    day_change_percentage: float
    holdings_count: int
    allocation: List[AllocationSlice] = field(default_factory=list)
    top_performers: List[PortfolioHolding] = field(default_factory=list)
    worst_performers: List[PortfolioHolding] = field(default_factory=list)


@dataclass
class TradeResult:
    """Holding after a buy, with the ledger entry that produced it."""

    holding: PortfolioHolding
    transaction: Transaction


@dataclass
class SellResult:
    """Outcome of a sell.

    ``holding`` is ``None`` when the position was closed. The destination
    fields are set only when proceeds were posted to another portfolio.
    """

    holding: Optional[PortfolioHolding]
    transaction: Transaction
    realized_profit_loss: float
    net_proceeds: float
    destination_holding: Optional[PortfolioHolding] = None
    destination_transaction: Optional[Transaction] = None

    @property
    def removed(self) -> bool:
        return self.holding is None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PortfolioAggregator:
    """Service for portfolio metrics and buy/sell bookkeeping."""

    def __init__(self, quantity_epsilon: Optional[float] = None, cash_symbol: Optional[str] = None):
        self.quantity_epsilon = quantity_epsilon if quantity_epsilon is not None else settings.QUANTITY_EPSILON
        self.cash_symbol = cash_symbol or settings.CASH_SYMBOL

    # ------------------------------------------------------------------
    # Valuation
    # ------------------------------------------------------------------

    def total_value(self, holdings: Sequence[PortfolioHolding]) -> float:
        return sum((h.current_value for h in holdings), 0.0)

    def total_cost(self, holdings: Sequence[PortfolioHolding]) -> float:
        return sum((h.total_cost for h in holdings), 0.0)

    def total_profit_loss(self, holdings: Sequence[PortfolioHolding]) -> float:
        return self.total_value(holdings) - self.total_cost(holdings)

    def total_profit_loss_percentage(self, holdings: Sequence[PortfolioHolding]) -> float:
        """P/L over cost, in percent. Zero when nothing was paid."""
        total_cost = self.total_cost(holdings)
        if total_cost == 0:
            return 0.0
        return (self.total_value(holdings) - total_cost) / total_cost * 100

    def day_change(self, holdings: Sequence[PortfolioHolding]) -> float:
        """Value change over 24h; holdings without a 24h figure are skipped."""
        return sum(
            (
                h.current_value * (h.price_change_percentage_24h / 100)
                for h in holdings
                if h.price_change_percentage_24h is not None
            ),
            0.0,
        )

    def day_change_percentage(self, holdings: Sequence[PortfolioHolding]) -> float:
        day_change = self.day_change(holdings)
        previous_value = self.total_value(holdings) - day_change
        if previous_value <= 0:
            return 0.0
        return day_change / previous_value * 100

    def allocation(self, holdings: Sequence[PortfolioHolding]) -> List[AllocationSlice]:
        """Value per asset class as a share of the total, largest first."""
        total_value = self.total_value(holdings)
        if total_value <= 0:
            return []

        by_type: Dict[str, float] = defaultdict(float)
        for holding in holdings:
            by_type[holding.asset_type] += holding.current_value

        slices = [
            AllocationSlice(category=category, value=value, percentage=value / total_value * 100)
            for category, value in by_type.items()
        ]
        slices.sort(key=lambda s: (-s.value, s.category))
        return slices

    def top_performers(self, holdings: Sequence[PortfolioHolding], limit: int = 3) -> List[PortfolioHolding]:
        return sorted(holdings, key=lambda h: h.profit_loss_percentage, reverse=True)[:limit]

    def worst_performers(self, holdings: Sequence[PortfolioHolding], limit: int = 3) -> List[PortfolioHolding]:
        return sorted(holdings, key=lambda h: h.profit_loss_percentage)[:limit]

    def statistics(self, holdings: Sequence[PortfolioHolding]) -> PortfolioStatistics:
        """All portfolio-level metrics in one pass over the caller's holdings."""
        total_value = self.total_value(holdings)
        total_cost = self.total_cost(holdings)
        return PortfolioStatistics(
            total_value=total_value,
            total_cost=total_cost,
            profit_loss=total_value - total_cost,
            profit_loss_percentage=self.total_profit_loss_percentage(holdings),
            day_change=self.day_change(holdings),
            day_change_percentage=self.day_change_percentage(holdings),
            holdings_count=len(holdings),
            allocation=self.allocation(holdings),
            top_performers=self.top_performers(holdings),
            worst_performers=self.worst_performers(holdings),
        )

    # ------------------------------------------------------------------
    # Trades
    # ------------------------------------------------------------------

    def buy(
        self,
        holding: PortfolioHolding,
        quantity: float,
        price: float,
        fee: float = 0.0,
        executed_at: Optional[datetime] = None,
        transaction_type: TransactionType = TransactionType.BUY,
        notes: Optional[str] = None,
        related_transaction_id: Optional[uuid.UUID] = None,
    ) -> TradeResult:
        """Add to a holding and recompute its weighted-average cost.

        The fee is folded into the cost basis. When the existing units have
        no recorded cost, the incoming lot sets the average.
        """
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than zero")
        if price < 0:
            raise ValidationError("Price cannot be negative")
        if fee < 0:
            raise ValidationError("Fee cannot be negative")

        new_quantity = holding.quantity + quantity
        lot_cost = quantity * price + fee
        if holding.average_buy_price is None:
            average = lot_cost / quantity
        else:
            average = (holding.total_cost + lot_cost) / new_quantity
        updated = replace(holding, quantity=new_quantity, average_buy_price=average)
        transaction = Transaction(
            portfolio_id=holding.portfolio_id,
            holding_id=holding.id,
            type=transaction_type,
            asset_type=holding.asset_type,
            symbol=holding.symbol,
            quantity=quantity,
            price_per_unit=price,
            fee=fee,
            transaction_date=executed_at or _utcnow(),
            notes=notes,
            related_transaction_id=related_transaction_id,
        )
        return TradeResult(holding=updated, transaction=transaction)

    def sell(
        self,
        holding: PortfolioHolding,
        quantity: float,
        price: float,
        fee: float = 0.0,
        executed_at: Optional[datetime] = None,
        notes: Optional[str] = None,
        destination_portfolio_id: Optional[uuid.UUID] = None,
        destination_holdings: Sequence[PortfolioHolding] = (),
        convert_to_cash: bool = False,
    ) -> SellResult:
        """Sell part or all of a holding.

        Net proceeds can be posted to ``destination_portfolio_id``, either
        as cash or re-bought as the same asset at the sale price.
        ``destination_holdings`` are that portfolio's current holdings.
        """
        self._validate_sell(holding, quantity, price, fee, destination_portfolio_id, convert_to_cash)

        executed_at = executed_at or _utcnow()
        gross_proceeds = quantity * price
        net_proceeds = gross_proceeds - fee
        cost_basis_per_unit = holding.average_buy_price or 0.0
        realized = net_proceeds - quantity * cost_basis_per_unit

        remaining = max(holding.quantity - quantity, 0.0)
        if remaining <= self.quantity_epsilon:
            updated: Optional[PortfolioHolding] = None
            logger.info("Closed %s position in portfolio %s", holding.symbol, holding.portfolio_id)
        else:
            updated = replace(holding, quantity=remaining)

        sell_id = uuid.uuid4()
        destination_holding = None
        destination_transaction = None
        if destination_portfolio_id is not None:
            if net_proceeds > 0:
                posted = self._post_to_destination(
                    holding,
                    price,
                    net_proceeds,
                    destination_portfolio_id,
                    destination_holdings,
                    convert_to_cash,
                    executed_at,
                    sell_id,
                )
                destination_holding = posted.holding
                destination_transaction = posted.transaction
            else:
                logger.warning(
                    "Sale of %s left no proceeds to post to portfolio %s",
                    holding.symbol,
                    destination_portfolio_id,
                )

        transaction = Transaction(
            id=sell_id,
            portfolio_id=holding.portfolio_id,
            holding_id=holding.id,
            type=TransactionType.SELL,
            asset_type=holding.asset_type,
            symbol=holding.symbol,
            quantity=quantity,
            price_per_unit=price,
            fee=fee,
            total_value=net_proceeds,
            transaction_date=executed_at,
            notes=notes,
            cost_basis_per_unit=cost_basis_per_unit,
            realized_profit_loss=realized,
            destination_portfolio_id=destination_portfolio_id,
            related_transaction_id=destination_transaction.id if destination_transaction else None,
        )

        return SellResult(
            holding=updated,
            transaction=transaction,
            realized_profit_loss=realized,
            net_proceeds=net_proceeds,
            destination_holding=destination_holding,
            destination_transaction=destination_transaction,
        )

    def _validate_sell(
        self,
        holding: PortfolioHolding,
        quantity: float,
        price: float,
        fee: float,
        destination_portfolio_id: Optional[uuid.UUID],
        convert_to_cash: bool,
    ) -> None:
        if quantity <= 0:
            raise SellValidationError("Quantity must be greater than zero")
        if price <= 0:
            raise SellValidationError("Sale price must be greater than zero")
        if fee < 0:
            raise SellValidationError("Fee cannot be negative")
        if quantity - holding.quantity > self.quantity_epsilon:
            raise SellValidationError(
                f"Cannot sell more than available quantity "
                f"({quantity:g} requested, {holding.quantity:g} held)"
            )
        if fee > quantity * price:
            raise SellValidationError("Fee cannot exceed gross proceeds")
        if convert_to_cash and destination_portfolio_id is None:
            raise SellValidationError("Converting to cash requires a destination portfolio")
        if destination_portfolio_id is not None and destination_portfolio_id == holding.portfolio_id:
            raise SellValidationError("Destination portfolio must differ from the source portfolio")

    def _post_to_destination(
        self,
        source: PortfolioHolding,
        price: float,
        net_proceeds: float,
        destination_portfolio_id: uuid.UUID,
        destination_holdings: Sequence[PortfolioHolding],
        convert_to_cash: bool,
        executed_at: datetime,
        sell_id: uuid.UUID,
    ) -> TradeResult:
        if convert_to_cash:
            symbol, asset_type, name = self.cash_symbol, AssetType.CASH.value, self.cash_symbol
            quantity, unit_price, current_price = net_proceeds, 1.0, 1.0
            transaction_type = TransactionType.TRANSFER_IN
        else:
            symbol, asset_type, name = source.symbol, source.asset_type, source.name
            quantity, unit_price, current_price = net_proceeds / price, price, source.current_price
            transaction_type = TransactionType.BUY

        existing = self._find_holding(destination_holdings, symbol, asset_type)
        if existing is None:
            existing = PortfolioHolding(
                portfolio_id=destination_portfolio_id,
                asset_type=asset_type,
                symbol=symbol,
                name=name,
                quantity=0.0,
                current_price=current_price,
                price_change_percentage_24h=None if convert_to_cash else source.price_change_percentage_24h,
            )
        elif existing.portfolio_id != destination_portfolio_id:
            raise SellValidationError(
                f"Holding {existing.symbol} does not belong to destination portfolio {destination_portfolio_id}"
            )

        logger.debug(
            "Posting %g %s to portfolio %s from sale %s",
            quantity,
            symbol,
            destination_portfolio_id,
            sell_id,
        )
        return self.buy(
            existing,
            quantity,
            unit_price,
            executed_at=executed_at,
            transaction_type=transaction_type,
            notes=f"Proceeds from {source.symbol} sale",
            related_transaction_id=sell_id,
        )

    @staticmethod
    def _find_holding(
        holdings: Sequence[PortfolioHolding], symbol: str, asset_type: str
    ) -> Optional[PortfolioHolding]:
        for holding in holdings:
            if holding.symbol.upper() == symbol.upper() and holding.asset_type == asset_type:
                return holding
        return None


# Singleton instance
portfolio_aggregator = PortfolioAggregator()
