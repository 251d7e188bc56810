"""Structural URL check: does this look like a Substack post?

Pure and synchronous; no network access happens here.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from mcp_substack.events import EventLog, record_event
from mcp_substack.scraper.models import ValidationResult

SUBSTACK_HOST_SUFFIX = ".substack.com"

# Custom-domain publications keep Substack's ``/p/<slug>`` post paths.
_POST_PATH = re.compile(r"^/p/[\w-]+", re.ASCII)

_HOST_SCHEMES = {"http", "https"}

# Browsers strip C0 controls and spaces around a URL, nothing else.
_URL_TRIM = "".join(map(chr, range(0x21)))

_SINGLE_DOT = {".", "%2e"}
_DOUBLE_DOT = {"..", ".%2e", "%2e.", "%2e%2e"}


def _remove_dot_segments(path: str) -> str:
    """Resolve ``.`` and ``..`` segments the way browsers do.

    Empty segments are kept, so ``//`` survives unlike ``posixpath.normpath``.
    """
    if not path.startswith("/"):
        return path
    output: list[str] = []
    segments = path[1:].split("/")
    for index, segment in enumerate(segments):
        lowered = segment.lower()
        last = index == len(segments) - 1
        if lowered in _DOUBLE_DOT:
            if output:
                output.pop()
            if last:
                output.append("")
        elif lowered in _SINGLE_DOT:
            if last:
                output.append("")
        else:
            output.append(segment)
    return "/" + "/".join(output)

MALFORMED = "malformed URL"
NOT_SUBSTACK = "not a Substack URL"


def validate_url(url: object, events: EventLog | None = None) -> ValidationResult:
    """Return whether *url* is plausibly a Substack post.

    A URL is admissible when its host ends with ``.substack.com`` or its path
    starts with ``/p/`` followed by word characters or hyphens.  Anything that
    does not parse as an absolute URL is rejected without raising.
    """
    try:
        if not isinstance(url, str):
            raise ValueError(f"expected a string, got {type(url).__name__}")
        parts = urlsplit(url.strip(_URL_TRIM))
        if not parts.scheme:
            raise ValueError("missing URL scheme")
        if not parts.hostname and (parts.netloc or parts.scheme in _HOST_SCHEMES):
            raise ValueError("missing host")
        # Raises ValueError for out-of-range or non-numeric ports.
        _ = parts.port
    except ValueError as exc:
        record_event(events, "url.malformed", url=url, error=str(exc))
        return ValidationResult(url=url, admissible=False, reason=MALFORMED)

    host = parts.hostname or ""
    path = _remove_dot_segments(parts.path or "/")
    record_event(events, "url.validating", hostname=host, pathname=path, full_url=url)

    on_substack = host.endswith(SUBSTACK_HOST_SUFFIX)
    admissible = on_substack or bool(_POST_PATH.match(path))
    record_event(
        events,
        "url.validated",
        is_valid=admissible,
        matched_pattern="substack.com domain" if on_substack else "custom domain",
    )
    return ValidationResult(
        url=url,
        admissible=admissible,
        reason=None if admissible else NOT_SUBSTACK,
        host=host,
        path=path,
    )
