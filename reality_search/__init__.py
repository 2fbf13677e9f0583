"""reality-search: country-targeted web search routed across several upstream providers."""

__version__ = "1.0.0"
