"""Network collaborator: fetch a page and hand back decoded HTML.

One GET per call, no retries.  Anything other than HTTP 200 is a
:class:`~tabgather.exceptions.FetchError`; transport failures are reported
with status code 0.
"""

import logging

import httpx

from .exceptions import FetchError
from .models import SiteProfile

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0

_FETCH_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,*/*;q=0.8"
    ),
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}

_ACCEPT_LANGUAGE = {
    "ja": "ja-JP,ja;q=0.9,en-US;q=0.8,en;q=0.7",
}
_DEFAULT_ACCEPT_LANGUAGE = "en-US,en;q=0.9,ja;q=0.8"


def request_headers(profile: SiteProfile | None = None) -> dict[str, str]:
    """Browser-like headers, with Accept-Language matching the site's language."""
    headers = dict(_FETCH_HEADERS)
    language = profile.language if profile else ""
    headers["Accept-Language"] = _ACCEPT_LANGUAGE.get(language, _DEFAULT_ACCEPT_LANGUAGE)
    return headers


def fetch_html(
    url: str,
    profile: SiteProfile | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    client: httpx.Client | None = None,
) -> str:
    """GET *url* and return its body as text.

    When *profile* names an ``encoding`` (j-total.net pages are Shift-JIS
    whatever the headers say) the body is decoded with it; otherwise httpx
    picks the charset from the response.

    Raises FetchError on a non-200 response or a transport failure.
    """
    headers = request_headers(profile)
    try:
        if client is None:
            resp = httpx.get(url, headers=headers, follow_redirects=True, timeout=timeout)
        else:
            resp = client.get(url, headers=headers, follow_redirects=True, timeout=timeout)
    except httpx.RequestError as exc:
        logger.debug("request to %s failed: %s", url, exc)
        raise FetchError(url, 0, str(exc)) from exc
    if resp.status_code != 200:
        raise FetchError(url, resp.status_code)

    if profile is not None and profile.encoding:
        resp.encoding = profile.encoding
    logger.debug("fetched %s (%d bytes, %s)", url, len(resp.content), resp.encoding)
    return resp.text
