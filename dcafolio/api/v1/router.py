"""API v1 router."""

from fastapi import APIRouter

from dcafolio.api.v1.endpoints import portfolios, reminders, risk_reminders

api_router = APIRouter()

api_router.include_router(reminders.router, prefix="/reminders", tags=["Reminders"])
api_router.include_router(
    risk_reminders.router, prefix="/risk-reminders", tags=["Risk Reminders"]
)
api_router.include_router(portfolios.router, prefix="/portfolios", tags=["Portfolios"])
