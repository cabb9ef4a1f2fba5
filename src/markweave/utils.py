"""Utility functions for markweave."""

import logging
import re
from typing import Any
from urllib.parse import quote, urljoin, urlparse

from markweave.exceptions import generate_correlation_id

LOGGER = logging.getLogger(__name__)


def log_with_correlation(
    logger: logging.Logger,
    level: int,
    message: str,
    correlation_id: str | None = None,
    **kwargs: Any,
) -> None:
    """
    Log a message with correlation ID and additional context.

    Args:
        logger: Logger instance to use.
        level: Logging level (e.g., logging.INFO, logging.ERROR).
        message: Log message format string.
        correlation_id: Optional correlation ID. If None, generates a new one.
        **kwargs: Additional context to include in log extra fields.
    """
    corr_id = correlation_id or generate_correlation_id()
    extra = {"correlation_id": corr_id, **kwargs}
    logger.log(level, message, extra=extra)


def parse_comma_separated(v: str | list[str] | tuple[str, ...]) -> list[str]:
    """
    Parse a comma-separated string (or an iterable of such strings) into a list.

    Args:
        v: Either a comma-separated string or already a list of strings.

    Returns:
        List of trimmed, non-empty strings.

    Examples:
        >>> parse_comma_separated("nav, .ad ,#sidebar")
        ['nav', '.ad', '#sidebar']

        >>> parse_comma_separated(["nav,footer", ".ad"])
        ['nav', 'footer', '.ad']
    """
    items = [v] if isinstance(v, str) else list(v)
    result = []
    for item in items:
        for part in item.split(","):
            part = part.strip()
            if part:
                result.append(part)
    return result


# URL normalisation utilities

# RFC 3986 reserved characters plus "%" stay literal; "(", ")" and space never do
_URL_SAFE_CHARS = ":/?#[]@!$&'*+,;=%"

# A "%" that does not start a valid percent-escape
_LONE_PERCENT_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def resolve_url(url: str, base_url: str | None = None) -> str:
    """
    Resolve a possibly-relative URL against a base URL.

    Uses standard relative-reference resolution. Absolute URLs (and
    scheme-only URLs such as ``mailto:``) are returned unchanged. Without a
    base URL relative references pass through unresolved.

    Args:
        url: URL as found in the document.
        base_url: Optional base URL.

    Returns:
        Resolved URL string.
    """
    url = url.strip()
    if not base_url or urlparse(url).scheme:
        return url
    return urljoin(base_url, url)


def encode_url(url: str) -> str:
    """
    Percent-encode characters that are unsafe inside Markdown link syntax.

    Spaces, parentheses, non-ASCII and other unsafe characters are encoded.
    Existing percent-escapes are left alone so nothing is double-encoded.

    Args:
        url: URL to encode.

    Returns:
        Encoded URL string.
    """
    url = _LONE_PERCENT_RE.sub("%25", url)
    return quote(url, safe=_URL_SAFE_CHARS)


def normalise_link(url: str, base_url: str | None = None) -> str:
    """
    Resolve and then percent-encode a link target.

    Args:
        url: URL as found in an href/src attribute.
        base_url: Optional base URL for relative references.

    Returns:
        URL ready to be written into Markdown.
    """
    return encode_url(resolve_url(url, base_url))


def has_scheme(url: str) -> bool:
    """Return True for absolute URLs such as ``https://...`` or ``mailto:...``."""
    return bool(urlparse(url).scheme)
