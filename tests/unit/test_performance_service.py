"""Tests for transaction summaries and performance metrics."""

from datetime import date, datetime, timezone

import pytest

from dcafolio.core.exceptions import InvalidChoiceError
from dcafolio.models.portfolio import PortfolioHistoryPoint
from dcafolio.models.transaction import Transaction, TransactionType
from dcafolio.services.performance_service import PerformanceService, summarize_transactions


@pytest.fixture
def service():
    return PerformanceService(risk_free_rate=0.04)


@pytest.fixture
def make_transaction(portfolio_id):
    def _make(type, quantity, price, day=1, month=1, symbol="BTC", **kwargs) -> Transaction:
        return Transaction(
            portfolio_id=portfolio_id,
            type=type,
            asset_type="crypto",
            symbol=symbol,
            quantity=quantity,
            price_per_unit=price,
            transaction_date=datetime(2024, month, day, tzinfo=timezone.utc),
            **kwargs,
        )

    return _make


def _history(*values):
    return [PortfolioHistoryPoint(date=date(2024, 1, i + 1), value=v) for i, v in enumerate(values)]


def test_summarize_transactions(make_transaction):
    transactions = [
        make_transaction(TransactionType.BUY, 1, 100, fee=1),
        make_transaction(TransactionType.SELL, 0.5, 200, fee=1),
        make_transaction(TransactionType.TRANSFER_IN, 2, 10),
    ]
    summary = summarize_transactions(transactions)

    assert summary.total_bought == 100
    assert summary.total_sold == 100
    assert summary.total_transfers_in == 20
    assert summary.total_transfers_out == 0
    assert summary.total_fees == 2
    assert summary.transaction_count == 3
    assert summary.net_flow == 20


def test_derived_total_value(make_transaction):
    assert make_transaction(TransactionType.BUY, 1, 100, fee=1).total_value == 101
    assert make_transaction(TransactionType.SELL, 1, 100, fee=1).total_value == 99
    assert make_transaction(TransactionType.TRANSFER_OUT, 2, 100).signed_quantity == -2


def test_unknown_transaction_type(make_transaction):
    with pytest.raises(InvalidChoiceError, match="transaction type"):
        make_transaction("swap", 1, 100)


def test_empty_metrics(service):
    metrics = service.calculate([])
    assert metrics.win_rate == 0
    assert metrics.profit_factor == 0
    assert metrics.max_drawdown == 0
    assert metrics.sharpe_ratio == 0
    assert metrics.average_holding_period_days == 0


def test_win_loss_statistics(service, make_transaction):
    trades = [
        make_transaction(TransactionType.SELL, 1, 200, realized_profit_loss=100),
        make_transaction(TransactionType.SELL, 1, 50, realized_profit_loss=-50),
        make_transaction(TransactionType.SELL, 1, 300, realized_profit_loss=200),
        make_transaction(TransactionType.BUY, 1, 100),
    ]
    metrics = service.calculate(trades, total_return=250, total_return_percentage=25)

    assert metrics.number_of_trades == 3
    assert metrics.winning_trades == 2
    assert metrics.losing_trades == 1
    assert metrics.win_rate == pytest.approx(200 / 3)
    assert metrics.average_win == pytest.approx(150)
    assert metrics.average_loss == pytest.approx(50)
    assert metrics.profit_factor == pytest.approx(3)
    assert metrics.total_return == 250


def test_pnl_from_cost_basis(service, make_transaction):
    trade = make_transaction(TransactionType.SELL, 2, 150, cost_basis_per_unit=100)
    metrics = service.calculate([trade])
    assert metrics.winning_trades == 1
    assert metrics.average_win == pytest.approx(100)


def test_max_drawdown(service):
    metrics = service.calculate([], _history(100, 120, 90, 130))
    assert metrics.max_drawdown == pytest.approx(25.0)
    assert metrics.max_drawdown_value == pytest.approx(30.0)


def test_sharpe_ratio(service):
    assert service.calculate([], _history(100, 110)).sharpe_ratio == 0
    assert service.calculate([], _history(100, 100, 100)).sharpe_ratio == 0
    assert service.calculate([], _history(100, 110, 115, 130)).sharpe_ratio > 0


def test_fifo_holding_period(service, make_transaction):
    transactions = [
        make_transaction(TransactionType.BUY, 1, 100, day=1),
        make_transaction(TransactionType.BUY, 1, 100, day=11),
        make_transaction(TransactionType.SELL, 1.5, 120, day=21),
    ]
    metrics = service.calculate(transactions)
    assert metrics.average_holding_period_days == pytest.approx(15.0)


def test_holding_period_per_symbol(service, make_transaction):
    transactions = [
        make_transaction(TransactionType.BUY, 1, 100, day=1, symbol="ETH"),
        make_transaction(TransactionType.BUY, 1, 100, day=5),
        make_transaction(TransactionType.TRANSFER_OUT, 1, 100, day=9),
    ]
    metrics = service.calculate(transactions)
    assert metrics.average_holding_period_days == pytest.approx(4.0)
