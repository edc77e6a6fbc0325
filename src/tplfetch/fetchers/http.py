"""Redirect-following HTTP GET on top of httpx.

Redirects are followed by hand so the hop bound, the missing-Location case
and the final status are all reported through our own error types.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator

import httpx

from tplfetch import __version__
from tplfetch.core.errors import HttpStatus, MissingRedirectLocation, NetworkError, TooManyRedirects

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 10
REDIRECT_CODES = frozenset({301, 302, 307, 308})
DEFAULT_USER_AGENT = f"tplfetch/{__version__}"


def new_client(*, user_agent: str | None = None) -> httpx.Client:
    """Client with redirects disabled and no timeout."""
    return httpx.Client(
        follow_redirects=False,
        timeout=None,
        headers={"User-Agent": user_agent or DEFAULT_USER_AGENT},
    )


@contextlib.contextmanager
def open_stream(url: str, *, client: httpx.Client | None = None) -> Iterator[httpx.Response]:
    """Yield a streaming 200 response for *url*, following redirects.

    Raises HttpStatus for any other final status, MissingRedirectLocation,
    TooManyRedirects after MAX_REDIRECTS hops, and NetworkError for
    transport failures (including ones raised while the caller reads the
    body) and for a Location header that is not a valid URL.
    """
    owns_client = client is None
    if client is None:
        client = new_client()
    current = url
    try:
        for hop in range(MAX_REDIRECTS + 1):
            with client.stream("GET", current, follow_redirects=False) as response:
                status = response.status_code
                if status in REDIRECT_CODES:
                    location = response.headers.get("location")
                    if not location:
                        raise MissingRedirectLocation(status, current)
                    response.read()
                    target = str(response.url.join(location))
                    logger.debug("HTTP %s %s -> %s (hop %d)", status, current, target, hop + 1)
                    current = target
                    continue
                if status != 200:
                    raise HttpStatus(status, current)
                yield response
                return
        raise TooManyRedirects(url, MAX_REDIRECTS)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise NetworkError(current, exc) from exc
    finally:
        if owns_client:
            client.close()
