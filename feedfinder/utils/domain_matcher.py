"""Domain matching helpers."""

from __future__ import annotations

from urllib.parse import urlsplit


def is_subdomain_of(domain: str, base_domain: str) -> bool:
    """Return True when ``domain`` equals ``base_domain`` or is a subdomain of it.

    >>> is_subdomain_of("podcasts.apple.com", "apple.com")
    True
    >>> is_subdomain_of("notapple.com", "apple.com")
    False
    """
    normalized_domain = domain.strip().lower().rstrip(".")
    normalized_base = base_domain.strip().lower().rstrip(".")
    if not normalized_domain or not normalized_base:
        return False
    return normalized_domain == normalized_base or normalized_domain.endswith(
        f".{normalized_base}"
    )


def hostname_of(url: str) -> str | None:
    """Lowercased hostname of ``url``, or None when it has none or fails to parse."""
    try:
        hostname = urlsplit(url.strip()).hostname
    except (AttributeError, ValueError):
        return None
    return hostname or None
