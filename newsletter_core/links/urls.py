"""
URL helpers for link extraction: normalization, dedup keys, categorization.
"""

from typing import Iterable, List
from urllib.parse import quote, urlsplit, urlunsplit

from .types import ExtractedLink, LinkType


DEFAULT_PORTS = {"http": 80, "https": 443, "ftp": 21}

# Schemes whose URLs must carry a host; every other scheme is opaque
HIERARCHICAL_SCHEMES = ("http", "https", "ftp")

# Reserved characters and existing %XX escapes pass through quote() untouched
PATH_SAFE = "/%:@!$&'()*+,;="
QUERY_SAFE = PATH_SAFE + "?"

UNSUBSCRIBE_MARKERS = ("unsubscribe", "opt-out")

SOCIAL_DOMAINS = (
    "facebook.com",
    "twitter.com",
    "linkedin.com",
    "instagram.com",
    "youtube.com",
)


def _remove_dot_segments(path: str) -> str:
    """Resolve "." and ".." segments of an absolute path (RFC 3986, 5.2.4)."""
    segments = path.split("/")
    output = []
    for segment in segments[1:]:
        if segment == "..":
            if output:
                output.pop()
        elif segment != ".":
            output.append(segment)
    if segments[-1] in (".", ".."):
        output.append("")
    return "/" + "/".join(output)


def normalize_url(url: str) -> str:
    """
    Rewrite a URL to its canonical absolute form.

    For http, https and ftp: lowercases scheme and host, drops default ports,
    resolves dot segments, turns an empty path into "/" and percent-encodes
    non-ASCII characters of path, query and fragment. Other schemes (mailto:,
    tel:, ...) only get their scheme lowercased.

    Raises:
        ValueError: if the URL has no scheme, or a hierarchical URL has no host
    """
    url = url.strip()
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if not scheme:
        raise ValueError(f"Not an absolute URL: {url!r}")

    if scheme not in HIERARCHICAL_SCHEMES:
        opaque = url[len(scheme) + 1:]
        if not opaque:
            raise ValueError(f"Empty {scheme}: URL")
        return f"{scheme}:{opaque}"

    host = (parts.hostname or "").lower()
    if not host:
        raise ValueError(f"Not an absolute URL: {url!r}")

    netloc = host
    if ":" in host:
        netloc = f"[{host}]"
    port = parts.port  # raises ValueError for an invalid port
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        netloc = f"{netloc}:{port}"
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    path = quote(_remove_dot_segments(parts.path or "/"), safe=PATH_SAFE)
    query = quote(parts.query, safe=QUERY_SAFE)
    fragment = quote(parts.fragment, safe=QUERY_SAFE)
    return urlunsplit((scheme, netloc, path, query, fragment))


def is_valid_url(url: str) -> bool:
    try:
        normalize_url(url)
    except ValueError:
        return False
    return True


def dedup_key(url: str) -> str:
    """Normalized URL, or the raw string when it cannot be parsed."""
    try:
        return normalize_url(url)
    except ValueError:
        return url.strip()


def categorize_link(url: str) -> LinkType:
    """Categorize a link based on its URL. Unsubscribe wins over social."""
    lower_url = url.lower()

    if any(marker in lower_url for marker in UNSUBSCRIBE_MARKERS):
        return LinkType.UNSUBSCRIBE

    if any(domain in lower_url for domain in SOCIAL_DOMAINS):
        return LinkType.SOCIAL

    return LinkType.EXTERNAL


def deduplicate_links(links: Iterable[ExtractedLink]) -> List[ExtractedLink]:
    """Keep the first record for each normalized URL."""
    seen = set()
    unique = []
    for link in links:
        key = dedup_key(link.url)
        if key in seen:
            continue
        seen.add(key)
        unique.append(link)
    return unique
