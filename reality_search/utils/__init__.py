"""
Utilities

Collaborators used to annotate results (domain, TLD, inferred country,
language) plus query normalization, URL canonicalization and log redaction.
"""

from .lang import detect_lang
from .logging_security import SecureLogger, log_secure
from .normalize import MAX_QUERY_LENGTH, normalize_query
from .tld import get_domain, get_tld, infer_country_from_tld
from .url import canonicalize_url, dedup_by_canonical_url

__all__ = [
    "MAX_QUERY_LENGTH",
    "SecureLogger",
    "canonicalize_url",
    "dedup_by_canonical_url",
    "detect_lang",
    "get_domain",
    "get_tld",
    "infer_country_from_tld",
    "log_secure",
    "normalize_query",
]
