"""Pydantic schemas."""

from dcafolio.schemas.reminder import (
    DCAInvestmentResponse,
    DCAPlanRequest,
    DCAPlanResponse,
    DCAReminderIn,
    DCAReminderResponse,
    DueRemindersRequest,
    DueRemindersResponse,
    FrequencyInfo,
    NextOccurrenceRequest,
    NextOccurrenceResponse,
    ReminderActionRequest,
    ReminderInvestRequest,
    ReminderInvestResponse,
)
from dcafolio.schemas.risk import (
    RiskActionRequest,
    RiskCategoryResponse,
    RiskCheckRequest,
    RiskCheckResponse,
    RiskEvaluateRequest,
    RiskEvaluateResponse,
    RiskInvestRequest,
    RiskInvestResponse,
    RiskReminderIn,
    RiskReminderResponse,
    RiskResumeRequest,
)
from dcafolio.schemas.transaction import (
    HistoryPoint,
    PerformanceRequest,
    PerformanceResponse,
    TransactionIn,
    TransactionResponse,
    TransactionsRequest,
    TransactionSummaryResponse,
)
from dcafolio.schemas.portfolio import (
    AllocationSliceResponse,
    BuyRequest,
    HoldingIn,
    HoldingResponse,
    HoldingsRequest,
    PortfolioMetricsResponse,
    SellRequest,
    SellResponse,
    TradeResponse,
)

__all__ = [
    "AllocationSliceResponse",
    "BuyRequest",
    "DCAInvestmentResponse",
    "DCAPlanRequest",
    "DCAPlanResponse",
    "DCAReminderIn",
    "DCAReminderResponse",
    "DueRemindersRequest",
    "DueRemindersResponse",
    "FrequencyInfo",
    "HistoryPoint",
    "HoldingIn",
    "HoldingResponse",
    "HoldingsRequest",
    "NextOccurrenceRequest",
    "NextOccurrenceResponse",
    "PerformanceRequest",
    "PerformanceResponse",
    "PortfolioMetricsResponse",
    "ReminderActionRequest",
    "ReminderInvestRequest",
    "ReminderInvestResponse",
    "RiskActionRequest",
    "RiskCategoryResponse",
    "RiskCheckRequest",
    "RiskCheckResponse",
    "RiskEvaluateRequest",
    "RiskEvaluateResponse",
    "RiskInvestRequest",
    "RiskInvestResponse",
    "RiskReminderIn",
    "RiskReminderResponse",
    "RiskResumeRequest",
    "SellRequest",
    "SellResponse",
    "TradeResponse",
    "TransactionIn",
    "TransactionResponse",
    "TransactionsRequest",
    "TransactionSummaryResponse",
]
