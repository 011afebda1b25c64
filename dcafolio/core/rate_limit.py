"""Rate limiting configuration using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from dcafolio.core.config import settings

# Create limiter instance
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)

# Specific rate limits for different endpoint types
RATE_LIMITS = {
    # Pure reads / calculations
    "api_read": "120/minute",
    # Endpoints returning mutated records
    "api_write": "60/minute",
    # Schedule generation walks every day of the plan
    "plan_generate": "20/minute",
}
