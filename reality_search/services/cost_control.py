"""Process-wide cost control: per-client rate limiting plus the daily miss budget."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..config import Settings, get_settings
from .miss_budget import DailyMissBudget
from .rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)


class CostControl:
    """Owns the shared counters consulted before and during a search."""

    def __init__(
        self,
        rate_limiter: Optional[SlidingWindowRateLimiter] = None,
        miss_budget: Optional[DailyMissBudget] = None,
    ):
        self.rate_limiter = rate_limiter or SlidingWindowRateLimiter()
        self.miss_budget = miss_budget or DailyMissBudget()

    @classmethod
    def from_settings(cls, settings: Settings) -> "CostControl":
        return cls(
            rate_limiter=SlidingWindowRateLimiter(
                max_requests=settings.rate_limit_max_requests,
                window_seconds=settings.rate_limit_window_seconds,
            ),
            miss_budget=DailyMissBudget(daily_limit=settings.daily_miss_budget),
        )

    def snapshot(self) -> Dict[str, Any]:
        return {
            "rate_limit": {
                "max_requests": self.rate_limiter.max_requests,
                "window_seconds": self.rate_limiter.window_seconds,
                "tracked_identities": self.rate_limiter.tracked_identities(),
            },
            "miss_budget": self.miss_budget.snapshot(),
        }

    def reset(self) -> None:
        """Clear all counters (tests)."""
        self.rate_limiter.reset()
        self.miss_budget.reset()


# Global instance
_cost_control: Optional[CostControl] = None


def get_cost_control() -> CostControl:
    """Get the process-wide CostControl instance."""
    global _cost_control
    if _cost_control is None:
        _cost_control = CostControl.from_settings(get_settings())
        logger.info(
            f"Cost control ready: {_cost_control.rate_limiter.max_requests} req/"
            f"{_cost_control.rate_limiter.window_seconds:g}s per client, "
            f"daily miss budget {_cost_control.miss_budget.daily_limit}"
        )
    return _cost_control


def reset_cost_control() -> None:
    """Drop the process-wide instance so the next call rebuilds it from settings."""
    global _cost_control
    _cost_control = None
