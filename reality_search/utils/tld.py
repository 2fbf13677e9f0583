"""Domain, TLD and TLD-to-country helpers."""
from __future__ import annotations

import re
from urllib.parse import urlsplit

from ..data.iso_countries import ISO_COUNTRY_CODES

UNKNOWN = "unknown"

TWO_LEVEL_SUFFIXES = (
    "co.uk",
    "org.uk",
    "ac.uk",
    "com.au",
    "net.au",
    "org.au",
    "co.jp",
    "com.br",
    "co.nz",
    "co.za",
    "com.mx",
    "com.ar",
    "com.tr",
    "com.sa",
    "com.eg",
)

# ccTLDs that differ from the ISO code they stand for
TLD_COUNTRY_EXCEPTIONS = {
    "uk": "GB",
    "tp": "TL",
}

_TWO_LETTERS = re.compile(r"^[a-z]{2}$")


def get_domain(url: str) -> str:
    """Lower-cased host of *url*, or "" when it has none."""
    try:
        return (urlsplit((url or "").strip()).hostname or "").lower()
    except ValueError:
        return ""


def get_tld(hostname: str) -> str:
    host = (hostname or "").lower().rstrip(".")
    if not host:
        return UNKNOWN

    for suffix in TWO_LEVEL_SUFFIXES:
        if host == suffix or host.endswith(f".{suffix}"):
            return suffix

    labels = [label for label in host.split(".") if label]
    if len(labels) < 2:
        return UNKNOWN
    return labels[-1]


def infer_country_from_tld(tld: str) -> str:
    """ISO code suggested by the last label of *tld*, or "unknown"."""
    base = (tld or "").lower().split(".")[-1]
    if not base:
        return UNKNOWN

    if base in TLD_COUNTRY_EXCEPTIONS:
        return TLD_COUNTRY_EXCEPTIONS[base]

    if not _TWO_LETTERS.match(base):
        return UNKNOWN
    code = base.upper()
    return code if code in ISO_COUNTRY_CODES else UNKNOWN
