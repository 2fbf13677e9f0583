"""
Routing Module

Deterministic provider routing for a search request.

Components:
- CountryCoverageResolver: per-provider exact and proxy country coverage
- AttemptPlanner: ordered, duplicate-free provider attempts
- resolve_language_plan: language hints forwarded upstream
"""

from .country_coverage import CountryCoverageResolver
from .attempt_planner import AttemptPlanner
from .language_plan import resolve_language_plan

__all__ = [
    "CountryCoverageResolver",
    "AttemptPlanner",
    "resolve_language_plan",
]
