"""Download stored audio by its public URL.

The pipeline only knows an entry's ``audio_url``; ``AudioFetcher`` turns
that into bytes, converting every transport or HTTP failure into
``UpstreamFetchError`` so the caller can record it on the entry.
"""

import logging

import httpx

from pravas.core.exceptions import UpstreamFetchError

logger = logging.getLogger(__name__)


class AudioFetcher:
    """Thin async wrapper around httpx for fetching audio blobs.

    Args:
        timeout: Seconds before a download is abandoned.
        transport: Optional httpx transport (tests inject ``httpx.MockTransport``).
    """

    def __init__(self, timeout: float = 60.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, url: str) -> bytes:
        """Return the body at *url*.

        Raises:
            UpstreamFetchError: On connection, timeout, HTTP status errors,
                or an empty body.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                resp = await client.get(url)
                resp.raise_for_status()
        except httpx.TimeoutException as exc:
            raise UpstreamFetchError(f"Timed out fetching audio from {url}") from exc
        except httpx.HTTPStatusError as exc:
            raise UpstreamFetchError(
                f"Audio fetch returned HTTP {exc.response.status_code} for {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamFetchError(f"Could not fetch audio from {url}: {exc}") from exc

        if not resp.content:
            raise UpstreamFetchError(f"Audio at {url} is empty")
        logger.debug("Fetched %d bytes of audio from %s", len(resp.content), url)
        return resp.content
