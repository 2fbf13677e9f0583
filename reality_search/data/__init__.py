"""Static reference tables."""
from .iso_countries import (
    ISO_COUNTRIES,
    ISO_COUNTRY_CODES,
    ISO_COUNTRY_COUNT,
    country_name,
    parse_country_code,
)

__all__ = [
    "ISO_COUNTRIES",
    "ISO_COUNTRY_CODES",
    "ISO_COUNTRY_COUNT",
    "country_name",
    "parse_country_code",
]
