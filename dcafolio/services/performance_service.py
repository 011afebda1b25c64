"""Trading performance metrics computed from the transaction ledger."""

import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Sequence, Tuple

import numpy as np

from dcafolio.core.config import settings
from dcafolio.models.portfolio import PortfolioHistoryPoint
from dcafolio.models.transaction import Transaction, TransactionType

logger = logging.getLogger(__name__)

TRADING_DAYS = 252


@dataclass
class TransactionSummary:
    """Totals per transaction type."""

    total_bought: float
    total_sold: float
    total_transfers_in: float
    total_transfers_out: float
    total_fees: float
    transaction_count: int

    @property
    def net_flow(self) -> float:
        return self.total_bought + self.total_transfers_in - self.total_sold - self.total_transfers_out


@dataclass
class PerformanceMetrics:
    """Closed-trade and value-history statistics."""

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


def summarize_transactions(transactions: Sequence[Transaction]) -> TransactionSummary:
    """Gross amounts moved per type, plus fees."""
    totals: Dict[TransactionType, float] = defaultdict(float)
    fees = 0.0
    for tx in transactions:
        totals[tx.type] += tx.quantity * tx.price_per_unit
        fees += tx.fee
    return TransactionSummary(
        total_bought=totals[TransactionType.BUY],
        total_sold=totals[TransactionType.SELL],
        total_transfers_in=totals[TransactionType.TRANSFER_IN],
        total_transfers_out=totals[TransactionType.TRANSFER_OUT],
        total_fees=fees,
        transaction_count=len(transactions),
    )


def _trade_pnl(trade: Transaction) -> Optional[float]:
    """Realized P/L, falling back to the recorded cost basis."""
    if trade.realized_profit_loss is not None:
        return trade.realized_profit_loss
    if trade.cost_basis_per_unit is not None:
        return (trade.price_per_unit - trade.cost_basis_per_unit) * trade.quantity
    return None


def _win_loss(trades: Sequence[Transaction]) -> Tuple[int, int, float, float]:
    wins: List[float] = []
    losses: List[float] = []
    for trade in trades:
        pnl = _trade_pnl(trade)
        if pnl is None:
            continue
        if pnl >= 0:
            wins.append(pnl)
        else:
            losses.append(abs(pnl))
    avg_win = float(np.mean(wins)) if wins else 0.0
    avg_loss = float(np.mean(losses)) if losses else 0.0
    return len(wins), len(losses), avg_win, avg_loss


def _history_values(history: Sequence[PortfolioHistoryPoint]) -> np.ndarray:
    ordered = sorted(history, key=lambda p: p.date)
    return np.array([p.value for p in ordered], dtype=float)


def _max_drawdown(history: Sequence[PortfolioHistoryPoint]) -> Tuple[float, float]:
    """Largest peak-to-trough drop as (percent, value). Both positive."""
    if len(history) < 2:
        return 0.0, 0.0
    values = _history_values(history)
    peaks = np.maximum.accumulate(values)
    drops = peaks - values
    pct = np.where(peaks > 0, drops / np.where(peaks > 0, peaks, 1) * 100, 0.0)
    idx = int(np.argmax(pct))
    if pct[idx] <= 0:
        return 0.0, 0.0
    return float(pct[idx]), float(drops[idx])


def _sharpe_ratio(history: Sequence[PortfolioHistoryPoint], risk_free_rate: float) -> float:
    """Annualized Sharpe ratio from period-over-period returns."""
    if len(history) < 3:
        return 0.0
    values = _history_values(history)
    previous, current = values[:-1], values[1:]
    mask = previous > 0
    if not mask.any():
        return 0.0
    returns = (current[mask] - previous[mask]) / previous[mask]
    std = float(np.std(returns))
    if std == 0:
        return 0.0
    annual_return = float(np.mean(returns)) * TRADING_DAYS
    annual_std = std * np.sqrt(TRADING_DAYS)
    return float((annual_return - risk_free_rate) / annual_std)


def _average_holding_period(transactions: Sequence[Transaction]) -> float:
    """Mean days between a buy lot and the sale that consumed it (FIFO)."""
    lots: Dict[str, Deque[List]] = defaultdict(deque)
    periods: List[float] = []

    for tx in sorted(transactions, key=lambda t: t.transaction_date):
        symbol = tx.symbol.upper()
        if tx.type.is_incoming:
            lots[symbol].append([tx.transaction_date, tx.quantity])
            continue

        remaining = tx.quantity
        queue = lots[symbol]
        while remaining > 0 and queue:
            bought_at, lot_quantity = queue[0]
            periods.append((tx.transaction_date - bought_at).total_seconds() / 86400)
            if lot_quantity <= remaining:
                remaining -= lot_quantity
                queue.popleft()
            else:
                queue[0][1] = lot_quantity - remaining
                remaining = 0

    return float(np.mean(periods)) if periods else 0.0


class PerformanceService:
    """Service for trade statistics."""

    def __init__(self, risk_free_rate: Optional[float] = None):
        self.risk_free_rate = risk_free_rate if risk_free_rate is not None else settings.RISK_FREE_RATE

    def calculate(
        self,
        transactions: Sequence[Transaction],
        history: Sequence[PortfolioHistoryPoint] = (),
        total_return: float = 0.0,
        total_return_percentage: float = 0.0,
    ) -> PerformanceMetrics:
        """Compute all metrics; sells are the closed trades."""
        closed_trades = [tx for tx in transactions if tx.type == TransactionType.SELL]
        wins, losses, avg_win, avg_loss = _win_loss(closed_trades)
        decided = wins + losses
        max_dd_pct, max_dd_value = _max_drawdown(history)

        return PerformanceMetrics(
            total_return=total_return,
            total_return_percentage=total_return_percentage,
            win_rate=wins / decided * 100 if decided else 0.0,
            average_win=avg_win,
            average_loss=avg_loss,
            profit_factor=abs(avg_win / avg_loss) if avg_loss else 0.0,
            max_drawdown=max_dd_pct,
            max_drawdown_value=max_dd_value,
            sharpe_ratio=_sharpe_ratio(history, self.risk_free_rate),
            number_of_trades=len(closed_trades),
            winning_trades=wins,
            losing_trades=losses,
            average_holding_period_days=_average_holding_period(transactions),
        )


# Singleton instance
performance_service = PerformanceService()
