"""Query normalization."""
import re

MAX_QUERY_LENGTH = 256

_WHITESPACE = re.compile(r"\s+")


def normalize_query(raw: str) -> str:
    """Trim, collapse internal whitespace, lowercase and cap at MAX_QUERY_LENGTH."""
    collapsed = _WHITESPACE.sub(" ", (raw or "").strip()).lower()
    return collapsed[:MAX_QUERY_LENGTH]
