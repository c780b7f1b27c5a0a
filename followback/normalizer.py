"""Canonicalization of raw identifiers into handles."""

import re
from functools import lru_cache
from typing import Optional, Pattern, Tuple

DEFAULT_DOMAIN = "instagram.com"

_INVALID_HANDLE_CHARS = re.compile(r"[^a-z0-9._]")


@lru_cache(maxsize=16)
def _prefix_patterns(domain: str) -> Tuple[Pattern, Pattern]:
    escaped = re.escape(domain)
    return (
        re.compile(rf"^https?://(www\.)?{escaped}/", re.IGNORECASE),
        re.compile(rf"^{escaped}/", re.IGNORECASE),
    )


def normalize_handle(raw: Optional[str], domain: str = DEFAULT_DOMAIN) -> str:
    """Turn a profile URL, ``@handle`` or bare word into a canonical handle.

    The steps run in a fixed order: trim, strip the platform URL prefix, cut
    the query string and everything after the first path segment, drop one
    leading ``@``, lowercase, and finally remove anything outside
    ``[a-z0-9._]``.

    Args:
        raw: Untrusted identifier, may be None or blank
        domain: Web domain of the platform whose URLs should be stripped

    Returns:
        The handle, or an empty string when nothing usable is left.
        Applying the function to its own output returns it unchanged.
    """
    if not raw or not isinstance(raw, str):
        return ""

    value = raw.strip()
    if not value:
        return ""

    with_protocol, bare = _prefix_patterns(domain.lower())
    value = with_protocol.sub("", value, count=1)
    value = bare.sub("", value, count=1)

    value = value.split("?", 1)[0].split("/", 1)[0]

    if value.startswith("@"):
        value = value[1:]

    value = value.lower()
    return _INVALID_HANDLE_CHARS.sub("", value)
