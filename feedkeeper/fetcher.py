"""
Feed Fetcher - retrieve a remote feed document.

Handles:
- One GET per call, redirects followed hop by hop, no retries
- A total deadline covering every hop
- SSRF protection via URL validation of every hop
- Classifying every failure as NetworkError
"""

import asyncio
import logging
from dataclasses import dataclass

import aiohttp
from yarl import URL

from .exceptions import NetworkError
from .url_validator import validate_public_url

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = {301, 302, 303, 307, 308}
MAX_REDIRECTS = 10


@dataclass
class FetchedDocument:
    """Raw response of a successful feed fetch."""
    url: str
    final_url: str
    body: bytes
    content_type: str | None = None
    etag: str | None = None


class Fetcher:
    """Fetches feed documents over HTTP."""

    def __init__(
        self,
        timeout: float = 30,
        user_agent: str | None = None,
        block_private_networks: bool = True,
    ):
        self.timeout = timeout
        self.user_agent = user_agent or "feedkeeper/1.0"
        self.block_private_networks = block_private_networks
        self.headers = {
            "User-Agent": self.user_agent,
            "Accept": (
                "application/atom+xml,application/rss+xml,application/feed+json,"
                "application/json;q=0.9,application/xml;q=0.9,text/xml;q=0.9,*/*;q=0.8"
            ),
        }

    async def fetch(self, url: str) -> FetchedDocument:
        """
        Fetch url and return its body.

        Redirects are followed one hop at a time so that, with blocking on,
        every Location is checked before it is requested.

        Raises:
            SSRFError: If URL or a redirect targets an internal network (when blocking is on)
            NetworkError: On non-2xx status, transport failure, too many redirects or timeout
        """
        try:
            document = await asyncio.wait_for(self._follow(url), timeout=self.timeout)
        except aiohttp.ClientResponseError as e:
            logger.warning(f"Fetching {url} returned HTTP {e.status}")
            raise NetworkError(f"Fetching {url} failed: HTTP {e.status} {e.message}") from e
        except asyncio.TimeoutError as e:
            logger.warning(f"Fetching {url} timed out after {self.timeout}s")
            raise NetworkError(f"Fetching {url} timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            logger.warning(f"Fetching {url} failed: {e}")
            raise NetworkError(f"Fetching {url} failed: {e}") from e

        logger.info(f"Fetched {url} ({len(document.body)} bytes from {document.final_url})")
        return document

    async def _follow(self, url: str) -> FetchedDocument:
        target = url
        async with aiohttp.ClientSession(headers=self.headers) as session:
            for _hop in range(MAX_REDIRECTS + 1):
                if self.block_private_networks:
                    # getaddrinfo blocks, keep it off the event loop
                    await asyncio.to_thread(validate_public_url, target)

                async with session.get(target, allow_redirects=False) as resp:
                    location = resp.headers.get("Location")
                    if resp.status in REDIRECT_STATUSES and location:
                        target = str(resp.url.join(URL(location)))
                        logger.debug(f"Fetching {url}: redirected to {target}")
                        continue

                    resp.raise_for_status()
                    return FetchedDocument(
                        url=url,
                        final_url=str(resp.url),
                        body=await resp.read(),
                        content_type=resp.headers.get("Content-Type"),
                        etag=resp.headers.get("ETag"),
                    )

        raise NetworkError(f"Fetching {url} failed: more than {MAX_REDIRECTS} redirects")
