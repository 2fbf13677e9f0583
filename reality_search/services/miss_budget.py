"""Daily budget of upstream calls made with server-owned keys.

Every cache miss that reaches an upstream provider on the server's key costs
money, so the process admits at most ``daily_limit`` such calls per UTC day.
"""
from __future__ import annotations

import logging
import threading
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class DailyMissBudget:
    """Lock-guarded counter that resets when the UTC date changes."""

    def __init__(self, daily_limit: int = 1500):
        self.daily_limit = daily_limit
        self._day: Optional[date] = None
        self._consumed = 0
        self._lock = threading.Lock()

    def _roll_over(self, today: date) -> None:
        if self._day != today:
            if self._day is not None:
                logger.info(f"Miss budget reset for {today.isoformat()} ({self._consumed} used on {self._day.isoformat()})")
            self._day = today
            self._consumed = 0

    def try_consume(self, today: Optional[date] = None) -> bool:
        """
        Take one unit of today's budget.

        Returns:
            False (and consumes nothing) when the budget is spent
        """
        today = today or utc_today()
        with self._lock:
            self._roll_over(today)
            if self._consumed >= self.daily_limit:
                logger.warning(f"Daily miss budget exhausted ({self._consumed}/{self.daily_limit})")
                return False
            self._consumed += 1
            return True

    def remaining(self, today: Optional[date] = None) -> int:
        today = today or utc_today()
        with self._lock:
            self._roll_over(today)
            return max(0, self.daily_limit - self._consumed)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "day": self._day.isoformat() if self._day else None,
                "consumed": self._consumed,
                "limit": self.daily_limit,
            }

    def reset(self) -> None:
        with self._lock:
            self._day = None
            self._consumed = 0
