"""Portfolio metrics and trade endpoints."""

import logging
from typing import List

from fastapi import APIRouter, Request

from dcafolio.core.rate_limit import RATE_LIMITS, limiter
from dcafolio.schemas.portfolio import (
    AllocationSliceResponse,
    BuyRequest,
    HoldingsRequest,
    PortfolioMetricsResponse,
    SellRequest,
    SellResponse,
    TradeResponse,
)
from dcafolio.schemas.transaction import (
    PerformanceRequest,
    PerformanceResponse,
    TransactionsRequest,
    TransactionSummaryResponse,
)
from dcafolio.services.performance_service import performance_service, summarize_transactions
from dcafolio.services.portfolio_aggregator import portfolio_aggregator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/metrics", response_model=PortfolioMetricsResponse)
@limiter.limit(RATE_LIMITS["api_read"])
async def portfolio_metrics(request: Request, data: HoldingsRequest) -> PortfolioMetricsResponse:
    """Value, cost, P/L, day change and allocation for the given holdings."""
    holdings = [h.to_model() for h in data.holdings]
    stats = portfolio_aggregator.statistics(holdings)
    return PortfolioMetricsResponse.model_validate(stats)


@router.post("/allocation", response_model=List[AllocationSliceResponse])
@limiter.limit(RATE_LIMITS["api_read"])
async def allocation(request: Request, data: HoldingsRequest) -> List[AllocationSliceResponse]:
    holdings = [h.to_model() for h in data.holdings]
    return [
        AllocationSliceResponse.model_validate(s)
        for s in portfolio_aggregator.allocation(holdings)
    ]


@router.post("/buy", response_model=TradeResponse)
@limiter.limit(RATE_LIMITS["api_write"])
async def buy(request: Request, data: BuyRequest) -> TradeResponse:
    """Add to a holding; the average cost includes the fee."""
    result = portfolio_aggregator.buy(
        data.holding.to_model(),
        data.quantity,
        data.price,
        fee=data.fee,
        executed_at=data.executed_at,
        notes=data.notes,
    )
    return TradeResponse.model_validate(result)


@router.post("/sell", response_model=SellResponse)
@limiter.limit(RATE_LIMITS["api_write"])
async def sell(request: Request, data: SellRequest) -> SellResponse:
    """Sell part or all of a holding, optionally posting proceeds elsewhere."""
    result = portfolio_aggregator.sell(
        data.holding.to_model(),
        data.quantity,
        data.price,
        fee=data.fee,
        executed_at=data.executed_at,
        notes=data.notes,
        destination_portfolio_id=data.destination_portfolio_id,
        destination_holdings=[h.to_model() for h in data.destination_holdings],
        convert_to_cash=data.convert_to_cash,
    )
    logger.info(
        "Sold %g %s from portfolio %s (realized %.2f)",
        data.quantity,
        data.holding.symbol,
        data.holding.portfolio_id,
        result.realized_profit_loss,
    )
    return SellResponse.model_validate(result)


@router.post("/performance", response_model=PerformanceResponse)
@limiter.limit(RATE_LIMITS["api_read"])
async def performance(request: Request, data: PerformanceRequest) -> PerformanceResponse:
    """Win rate, drawdown, Sharpe ratio and holding period."""
    metrics = performance_service.calculate(
        [t.to_model() for t in data.transactions],
        [p.to_model() for p in data.history],
        total_return=data.total_return,
        total_return_percentage=data.total_return_percentage,
    )
    return PerformanceResponse.model_validate(metrics)


@router.post("/transactions/summary", response_model=TransactionSummaryResponse)
@limiter.limit(RATE_LIMITS["api_read"])
async def transactions_summary(
    request: Request, data: TransactionsRequest
) -> TransactionSummaryResponse:
    summary = summarize_transactions([t.to_model() for t in data.transactions])
    return TransactionSummaryResponse.model_validate(summary)
