"""Utility functions for wikiedit."""

import re

SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


def is_external(href: str) -> bool:
    """
    True when href carries a URL scheme.

    Examples:
        >>> is_external("https://example.com")
        True
        >>> is_external("Half-Life 2")
        False
    """
    return bool(SCHEME_RE.match(href.strip()))


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace('\r\n', '\n').replace('\r', '\n')
