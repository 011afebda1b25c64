"""Domain records."""

from dcafolio.models.portfolio import AssetType, PortfolioHistoryPoint, PortfolioHolding
from dcafolio.models.reminder import DCAFrequency, DCAInvestment, DCAReminder, FrequencyOption
from dcafolio.models.risk_reminder import (
    RiskBand,
    RiskBasedDCAReminder,
    RiskCategory,
    RiskCondition,
    RiskReminderState,
)
from dcafolio.models.transaction import Transaction, TransactionType

__all__ = [
    "AssetType",
    "DCAFrequency",
    "DCAInvestment",
    "DCAReminder",
    "FrequencyOption",
    "PortfolioHistoryPoint",
    "PortfolioHolding",
    "RiskBand",
    "RiskBasedDCAReminder",
    "RiskCategory",
    "RiskCondition",
    "RiskReminderState",
    "Transaction",
    "TransactionType",
]
