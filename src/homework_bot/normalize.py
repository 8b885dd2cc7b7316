from __future__ import annotations
import re

_QUOTE_MAP = {
    "’": "'",
    "‘": "'",
    "‚": "'",
    "‛": "'",
    "“": "\"",
    "”": "\"",
    "„": "\"",
    "‟": "\"",
}

_WS_RE = re.compile(r"\s+")

def _straight_quotes(s: str) -> str:
    for src, dst in _QUOTE_MAP.items():
        s = s.replace(src, dst)
    return s

def normalize(s: str | None) -> str:
    """Canonical form of extracted or typed text: lowercase, straight quotes,
    single spaces, no surrounding whitespace."""
    if not s:
        return ""
    s = _straight_quotes(s.lower())
    s = _WS_RE.sub(" ", s)
    return s.strip()
