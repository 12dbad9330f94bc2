"""URL normalization and relative link resolution."""

import re
from urllib.parse import SplitResult, urlsplit

from favicon_api.core.exceptions import InvalidURLError
from favicon_api.models.origin import Origin

_HTTP_PREFIX = re.compile(r"^https?://", re.IGNORECASE)
_SCHEME_PREFIX = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


def _split(url: str) -> SplitResult | None:
    try:
        return urlsplit(url)
    except ValueError:
        return None


def normalize_url(raw: str) -> Origin:
    """
    Parse user input into an Origin.

    Input without a usable host and without an http(s) prefix is retried once
    with ``http://`` prepended, so ``example.com`` becomes
    ``http://example.com``.

    Raises:
        InvalidURLError: If no host can be extracted.
    """
    candidate = (raw or "").strip()
    if not candidate:
        raise InvalidURLError("URL cannot be empty")

    parts = _split(candidate)
    if (parts is None or not parts.hostname) and not _HTTP_PREFIX.match(candidate):
        parts = _split(f"http://{candidate}")

    if parts is None or not parts.hostname:
        raise InvalidURLError(f"Invalid URL: {raw}", details={"url": raw})

    try:
        port = parts.port
    except ValueError as e:
        raise InvalidURLError(f"Invalid port in URL: {raw}", details={"url": raw}) from e

    return Origin(
        scheme=(parts.scheme or "http").lower(),
        host=parts.hostname,
        port=port,
    )


def resolve_link(candidate: str, base_url: str) -> str | None:
    """
    Resolve an href or Location value against the URL it was found on.

    ``..`` segments cancel the nearest preceding segment; traversal above the
    root is clamped at the root.

    Returns:
        Absolute URL, or None if the base URL has no scheme or host.
    """
    candidate = candidate.strip()
    if _SCHEME_PREFIX.match(candidate):
        return candidate

    base = _split(base_url)
    if base is None or not base.scheme or not base.netloc:
        return None

    if candidate.startswith("//"):
        return f"{base.scheme}:{candidate}"

    root = f"{base.scheme}://{base.netloc}"
    if candidate.startswith("/"):
        return root + candidate

    # Keep query and fragment out of segment processing
    path, suffix = candidate, ""
    match = re.search(r"[?#]", candidate)
    if match:
        path, suffix = candidate[: match.start()], candidate[match.start():]

    base_dir = base.path.rsplit("/", 1)[0] if "/" in base.path else ""

    segments: list[str] = []
    for segment in f"{base_dir}/{path}".split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if segments:
                segments.pop()
            continue
        segments.append(segment)

    resolved = root + "/" + "/".join(segments)
    if path.endswith("/") and segments:
        resolved += "/"
    return resolved + suffix
