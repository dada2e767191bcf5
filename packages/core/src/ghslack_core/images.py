"""Image URL extraction and fetching.

GitHub stores pasted screenshots behind short-lived signed URLs that only
appear in the rendered HTML of a body. Slack cannot fetch them itself, so the
notifier downloads each one and re-uploads it into the thread.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Optional

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


def host_prefix_filter(prefix: str | None) -> Optional[Callable[[str], bool]]:
    """Return a predicate accepting URLs that start with *prefix*, or None for no filtering."""
    if not prefix:
        return None
    return lambda url: url.startswith(prefix)


def extract_image_urls(html: str | None, accept: Optional[Callable[[str], bool]] = None) -> list[str]:
    """Return the ``src`` of every ``<img>`` in *html*, in document order.

    Duplicates are kept. Malformed markup yields whatever the parser could
    recover; this never raises.
    """
    if not html:
        return []
    soup = BeautifulSoup(html, "html.parser")
    urls = []
    for img in soup.find_all("img"):
        src = img.get("src")
        if not src:
            continue
        if accept is not None and not accept(src):
            continue
        urls.append(src)
    return urls


def fetch_images(
    urls: Iterable[str],
    session: requests.Session | None = None,
    timeout: float = 30,
) -> Iterator[tuple[str, bytes]]:
    """Yield ``(url, content)`` for each URL, fetching lazily one at a time.

    Consumed by the uploader so only one image buffer is alive at once. Any
    HTTP or network error propagates and stops the iteration.
    """
    http = session or requests.Session()
    for url in urls:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
        logger.debug("Fetched image %s (%d bytes)", url.split("?", 1)[0], len(response.content))
        yield url, response.content
