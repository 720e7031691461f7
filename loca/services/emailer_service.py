"""HTTP client for the external emailer service.

The emailer renders a document template for one record and mails it to
every recipient it knows for that record.  One POST carries one
``{templateName, recordId, params}`` message and answers with a JSON array
holding one status entry per recipient.
"""
from __future__ import annotations

import json
import logging
from types import TracebackType
from typing import Any

import httpx

from loca.core.config import settings
from loca.core.errors import EmailerError

logger = logging.getLogger(__name__)


class EmailerClient:
    def __init__(
        self,
        url: str | None,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def __aenter__(self) -> EmailerClient:
        self._http = self._new_http_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def send(self, payload: dict[str, Any]) -> list[dict[str, Any]]:
        """POST one message; return the per-recipient status entries."""
        if not self.url:
            raise EmailerError("EMAILER_URL is not configured")

        if self._http is not None:
            response = await self._post(self._http, payload)
        else:
            async with self._new_http_client() as http:
                response = await self._post(http, payload)

        logger.info("POST %s %s", self.url, response.status_code)
        logger.debug("data sent: %s", json.dumps(payload))

        if response.status_code >= 400:
            raise EmailerError(
                f"emailer HTTP error: {response.status_code}",
                status_code=response.status_code,
                payload=response.text,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise EmailerError(
                "emailer response is not JSON",
                status_code=response.status_code,
                payload=response.text,
            ) from exc
        logger.debug("response: %s", json.dumps(body))

        if not isinstance(body, list) or not all(isinstance(item, dict) for item in body):
            raise EmailerError(
                "emailer response is not a list of recipient statuses",
                status_code=response.status_code,
                payload=body,
            )
        return body

    async def _post(self, http: httpx.AsyncClient, payload: dict[str, Any]) -> httpx.Response:
        try:
            return await http.post(self.url, json=payload)
        except httpx.TimeoutException as exc:
            raise EmailerError(f"emailer call timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise EmailerError(f"emailer call failed: {exc}") from exc

    def _new_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)


def build_emailer_client() -> EmailerClient:
    return EmailerClient(settings.emailer_url, timeout=settings.emailer_timeout)
