"""Fetch recipe pages from third-party links."""

import asyncio
import logging
from typing import Optional

import httpx

from ficha_tecnica.config import Settings, settings as default_settings
from ficha_tecnica.utils.exceptions import FetchError, ValidationError
from ficha_tecnica.utils.validators import validate_url

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


async def _check_request_url(request: httpx.Request) -> None:
    """Request hook: validate every hop, including redirect targets."""
    await asyncio.to_thread(validate_url, str(request.url))


class LinkFetcher:
    """Downloads the raw body of a recipe page."""

    def __init__(
        self,
        settings: Settings = default_settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = settings.fetch_timeout
        self._transport = transport

    async def fetch(self, url: str) -> str:
        """
        GET ``url`` and return the response body unparsed.

        Raises:
            FetchError: On an invalid or private URL (also after a redirect),
                timeout, network error or non-2xx status.
        """
        try:
            validated_url = await asyncio.to_thread(validate_url, url)
        except ValidationError as e:
            logger.warning("Rejected recipe link %s: %s", url[:200], e)
            raise FetchError(url) from e

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT},
                event_hooks={"request": [_check_request_url]},
                transport=self._transport,
            ) as client:
                response = await client.get(validated_url)
                response.raise_for_status()
        except ValidationError as e:
            logger.warning("Rejected redirect while fetching %s: %s", validated_url, e)
            raise FetchError(url) from e
        except httpx.TimeoutException as e:
            logger.warning("Timeout fetching %s", validated_url)
            raise FetchError(url) from e
        except httpx.HTTPStatusError as e:
            logger.warning("HTTP %d from %s", e.response.status_code, validated_url)
            raise FetchError(url) from e
        except httpx.HTTPError as e:
            logger.warning("Request error fetching %s: %s", validated_url, e)
            raise FetchError(url) from e

        logger.info(
            "Fetched %s (HTTP %d, %d chars)",
            validated_url,
            response.status_code,
            len(response.text),
        )
        return response.text
