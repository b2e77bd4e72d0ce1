import json
import logging
from typing import Any, Optional

import httpx

from portfolio_relay.core.config import settings
from portfolio_relay.core.exceptions import UpstreamDecodeError, UpstreamFetchError

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


class UpstreamClient:
    """Fetches the published portfolio snapshot over HTTP."""

    def __init__(
        self,
        url: str | None = None,
        timeout_sec: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = settings.UPSTREAM_DATA_URL if url is None else url
        self.timeout_sec = (
            settings.UPSTREAM_TIMEOUT_SEC if timeout_sec is None else timeout_sec
        )
        self.transport = transport

    async def fetch_document(self) -> Any:
        """
        GET the upstream URL and decode its JSON body.

        Raises:
            UpstreamFetchError: network failure, timeout or non-2xx status
            UpstreamDecodeError: body is not valid JSON
        """
        logger.info("Fetching portfolio snapshot from %s", self.url)
        async with httpx.AsyncClient(
            timeout=self.timeout_sec, transport=self.transport
        ) as client:
            try:
                resp = await client.get(self.url)
            except httpx.HTTPError as exc:
                raise UpstreamFetchError(f"Failed to fetch data: {exc}") from exc

        if not resp.is_success:
            raise UpstreamFetchError(
                f"Failed to fetch data: {resp.status_code} {resp.reason_phrase}",
                status_code=resp.status_code,
            )

        try:
            return json.loads(resp.text, parse_constant=_reject_constant)
        except ValueError as exc:
            raise UpstreamDecodeError(f"Upstream returned malformed JSON: {exc}") from exc
