"""
Services

- CostControl: per-client rate limiting and the daily miss budget
- AttemptExecutor: sequential failover over planned attempts
- SearchService: the full request pipeline
"""

from .attempt_executor import AttemptExecutor, AttemptOutcome, WalkState, advance
from .cost_control import CostControl, get_cost_control, reset_cost_control
from .miss_budget import DailyMissBudget
from .rate_limiter import RateLimitDecision, SlidingWindowRateLimiter
from .search import SearchOutcome, SearchService
from .stats import compute_stats

__all__ = [
    "AttemptExecutor",
    "AttemptOutcome",
    "CostControl",
    "DailyMissBudget",
    "RateLimitDecision",
    "SearchOutcome",
    "SearchService",
    "SlidingWindowRateLimiter",
    "WalkState",
    "advance",
    "compute_stats",
    "get_cost_control",
    "reset_cost_control",
]
