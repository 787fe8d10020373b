"""Feed URL normalization for deduplication."""

from __future__ import annotations

from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

# Query keys used only for attribution; dropped before comparing feed URLs.
TRACKING_PARAMS = frozenset(
    {
        # UTM
        "utm_source",
        "utm_medium",
        "utm_campaign",
        "utm_term",
        "utm_content",
        # Referral / ad click
        "ref",
        "source",
        "fbclid",
        "gclid",
        "gclsrc",
        # Google Analytics
        "_ga",
        "_gid",
    }
)

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_.~".
_COMPONENT_SAFE = "!*'()"


def normalize_feed_url(url: str) -> str:
    """Normalize a feed URL so equivalent URLs compare equal.

    Lowercases the host, drops a trailing slash from the path (unless the path
    is just "/"), removes tracking query parameters and sorts the remaining
    ones by key. Spaces in the query are encoded as %20, never "+".

    Args:
        url: The URL to normalize.

    Returns:
        The normalized URL, or ``url`` unchanged when it cannot be parsed.

    Examples:
        >>> normalize_feed_url("https://Example.com/feed/?utm_source=twitter")
        'https://example.com/feed'
        >>> normalize_feed_url("https://example.com/feed?zebra=1&apple=2")
        'https://example.com/feed?apple=2&zebra=1'
    """
    try:
        parts = urlsplit(url)
        # Reading the port validates it; a bad port means an unparsable URL.
        _ = parts.port
    except (TypeError, ValueError):
        return url

    if not parts.scheme or not parts.netloc or not parts.hostname:
        return url

    userinfo, at, hostport = parts.netloc.rpartition("@")
    netloc = f"{userinfo}{at}{hostport.lower()}"

    path = parts.path
    if path != "/" and path.endswith("/"):
        path = path.rstrip("/") or "/"

    pairs = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key.lower() not in TRACKING_PARAMS
    ]
    # Case-insensitive first, lowercase before uppercase on ties; independent of
    # the process locale. sorted() is stable, so duplicate keys keep their order.
    pairs = sorted(pairs, key=lambda pair: (pair[0].casefold(), pair[0].swapcase()))
    query = "&".join(
        f"{quote(key, safe=_COMPONENT_SAFE)}={quote(value, safe=_COMPONENT_SAFE)}"
        for key, value in pairs
    )

    return urlunsplit((parts.scheme, netloc, path, query, parts.fragment))
