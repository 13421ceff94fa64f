"""
Input validators for the allocation path.

Validation runs before any repository call, so a rejected request never
touches the store.
"""

import re
from typing import Any, Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError

from shortlink_app.models.mapping import SHORT_CODE_MAX_LENGTH
from shortlink_app.services.exceptions import InvalidInput

MAX_URL_LENGTH = 2048  # RFC 7230 practical limit

_url_adapter = TypeAdapter(AnyUrl)
_short_code_pattern = re.compile(r'^[0-9a-zA-Z]+$')


def validate_long_url(long_url: Any) -> str:
    """
    Check that long_url is an absolute URL with at least a scheme and a host.

    The URL is returned exactly as submitted; the parsed form is only used
    for validation, so the stored long_url matches what the client sent.
    Whitespace anywhere is rejected; the parser would trim it silently.

    Raises:
        InvalidInput: If the URL is missing, too long, contains whitespace,
            or is not absolute
    """
    if not isinstance(long_url, str) or not long_url.strip():
        raise InvalidInput("Invalid or missing URL")

    if len(long_url) > MAX_URL_LENGTH:
        raise InvalidInput(f"URL exceeds {MAX_URL_LENGTH} characters")

    if any(ch.isspace() for ch in long_url):
        raise InvalidInput(f"URL must not contain whitespace: {long_url!r}")

    try:
        parsed = _url_adapter.validate_python(long_url)
    except ValidationError:
        raise InvalidInput(f"Invalid URL: {long_url!r}") from None

    if not parsed.scheme or not parsed.host:
        raise InvalidInput(f"URL must include a scheme and host: {long_url!r}")

    return long_url


def sanitize_short_code(short_code: str, max_length: int = SHORT_CODE_MAX_LENGTH) -> Optional[str]:
    """
    Return short_code if it could be a valid code, None otherwise.

    Lets lookups skip the store for input that can never match.
    """
    if not short_code or not isinstance(short_code, str):
        return None
    if len(short_code) > max_length:
        return None
    if not _short_code_pattern.match(short_code):
        return None
    return short_code
