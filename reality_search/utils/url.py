"""Canonical URLs and result deduplication."""
from __future__ import annotations

from typing import List, Sequence, TypeVar
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

# Tracking parameters dropped besides every utm_* key
TRACKING_PARAMS = frozenset({"gclid", "fbclid", "mc_cid", "mc_eid", "igshid"})

# Schemes whose empty path serializes as "/"
_HIERARCHICAL_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})

T = TypeVar("T")


def _is_tracking_param(key: str) -> bool:
    key = key.lower()
    return key.startswith("utm_") or key in TRACKING_PARAMS


def canonicalize_url(raw_url: str) -> str:
    """
    Normalized form of *raw_url* used as the deduplication key.

    Lower-cases the host, drops the fragment and tracking parameters and
    sorts the remaining parameters by (key, value). Input that is not an
    absolute URL comes back trimmed but otherwise unchanged. Never raises.
    """
    value = (raw_url or "").strip()
    if not value:
        return ""

    try:
        parts = urlsplit(value)
    except ValueError:
        return value
    if not parts.scheme or not parts.netloc:
        return value

    userinfo, at, hostport = parts.netloc.rpartition("@")
    netloc = f"{userinfo}{at}{hostport.lower()}"

    path = parts.path
    if not path and parts.scheme.lower() in _HIERARCHICAL_SCHEMES:
        path = "/"

    kept = [
        (key, val)
        for key, val in parse_qsl(parts.query, keep_blank_values=True)
        if not _is_tracking_param(key)
    ]
    kept.sort()

    return urlunsplit((parts.scheme.lower(), netloc, path, urlencode(kept), ""))


def dedup_by_canonical_url(results: Sequence[T]) -> List[T]:
    """
    Drop later results whose canonical URL was already seen.

    Stable and order-preserving. Results with a blank URL are always kept.
    """
    seen = set()
    out: List[T] = []
    for result in results:
        raw = (getattr(result, "url", "") or "").strip()
        if not raw:
            out.append(result)
            continue

        key = canonicalize_url(raw) or raw
        if key in seen:
            continue
        seen.add(key)
        out.append(result)
    return out
