"""Text cleanup for feed metadata."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

_WHITESPACE_RE = re.compile(r"\s+")


def strip_html(value: str | None) -> str:
    """Strip tags from ``value`` and collapse whitespace."""
    if not value:
        return ""
    if "<" not in value and "&" not in value:
        return _WHITESPACE_RE.sub(" ", value).strip()
    text = BeautifulSoup(value, "html.parser").get_text(" ")
    return _WHITESPACE_RE.sub(" ", text).strip()
