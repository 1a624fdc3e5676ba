"""Async HTTP client for the read-only endpoints used to locate funds.

Wrap the Polymarket Data API (``/value``, ``/positions``) and the Safe
Client API owner lookup.  Each call reports a ``ProbeOutcome`` instead of
raising, so the funder resolver can tell "no funds" apart from "API
unavailable" without blanket exception suppression.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, cast

import httpx

from wallet_trading.clients.polymarket._constants import (
    DATA_API_URL,
    HTTP_BAD_REQUEST,
    HTTP_INTERNAL_ERROR,
    POLYGON_CHAIN_ID,
    SAFE_CLIENT_URL,
)

logger = logging.getLogger(__name__)


class ProbeOutcome(Enum):
    """Result of a single read-only probe."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    TRANSIENT_ERROR = "transient_error"


@dataclass(frozen=True)
class SafeLookup:
    """Outcome of a proxy-wallet registry lookup.

    Args:
        outcome: Whether any safe was found, none, or the lookup failed.
        safes: Safe addresses owned by the EOA, in registry order.

    """

    outcome: ProbeOutcome
    safes: tuple[str, ...] = ()


class DataApiClient:
    """Async client for the Data API and the Safe Client registry.

    Args:
        http_client: Shared ``httpx.AsyncClient``; one is created when omitted.
        data_api_url: Base URL for the Polymarket Data API.
        safe_client_url: Base URL for the Safe Client API.
        chain_id: Chain used for the registry lookup.
        timeout: Request timeout in seconds for a created client.

    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        data_api_url: str = DATA_API_URL,
        safe_client_url: str = SAFE_CLIENT_URL,
        chain_id: int = POLYGON_CHAIN_ID,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Shared ``httpx.AsyncClient``; one is created when omitted.
            data_api_url: Base URL for the Polymarket Data API.
            safe_client_url: Base URL for the Safe Client API.
            chain_id: Chain used for the registry lookup.
            timeout: Request timeout in seconds for a created client.

        """
        self.data_api_url = data_api_url.rstrip("/")
        self.safe_client_url = safe_client_url.rstrip("/")
        self.chain_id = chain_id
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def get_safes(self, owner: str) -> SafeLookup:
        """List smart-contract wallets owned by an EOA on the configured chain.

        Args:
            owner: EOA address.

        Returns:
            Lookup outcome with the safe addresses, if any.

        """
        url = f"{self.safe_client_url}/v1/chains/{self.chain_id}/owners/{owner}/safes"
        data = await self._get_json(url)
        if isinstance(data, ProbeOutcome):
            return SafeLookup(outcome=data)
        safes: Any = data.get("safes") if isinstance(data, dict) else None
        if not isinstance(safes, list) or not safes:
            return SafeLookup(outcome=ProbeOutcome.NOT_FOUND)
        addresses = tuple(str(s) for s in cast("list[Any]", safes) if s)
        if not addresses:
            return SafeLookup(outcome=ProbeOutcome.NOT_FOUND)
        return SafeLookup(outcome=ProbeOutcome.FOUND, safes=addresses)

    async def probe_value(self, user: str) -> ProbeOutcome:
        """Check whether an address has a positive aggregate position value.

        The endpoint returns either ``[{"user": ..., "value": ...}]`` or a
        bare object with a ``value`` key.

        Args:
            user: Address to probe.

        Returns:
            ``FOUND`` for a positive value.

        """
        data = await self._get_json(f"{self.data_api_url}/value", params={"user": user})
        if isinstance(data, ProbeOutcome):
            return data
        raw: Any = None
        if isinstance(data, list) and data:
            first: Any = cast("list[Any]", data)[0]
            raw = first.get("value") if isinstance(first, dict) else None
        elif isinstance(data, dict):
            raw = cast("dict[str, Any]", data).get("value")
        try:
            value = Decimal(str(raw))
        except InvalidOperation:
            return ProbeOutcome.NOT_FOUND
        if value.is_finite() and value > 0:
            return ProbeOutcome.FOUND
        return ProbeOutcome.NOT_FOUND

    async def probe_positions(self, user: str) -> ProbeOutcome:
        """Check whether an address holds at least one position.

        Args:
            user: Address to probe.

        Returns:
            ``FOUND`` when the positions list is non-empty.

        """
        data = await self._get_json(f"{self.data_api_url}/positions", params={"user": user})
        if isinstance(data, ProbeOutcome):
            return data
        if isinstance(data, list) and data:
            return ProbeOutcome.FOUND
        return ProbeOutcome.NOT_FOUND

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """Send a GET request and return parsed JSON or a failure outcome.

        Client errors (4xx) mean the API has nothing for the address and map
        to ``NOT_FOUND``.  Transport errors, server errors and unreadable
        bodies map to ``TRANSIENT_ERROR``.

        Args:
            url: Absolute request URL.
            params: Query parameters.

        Returns:
            Parsed JSON body, or a ``ProbeOutcome`` when the call failed.

        """
        try:
            response = await self._http_client.request("GET", url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("GET %s failed: %s", url, exc)
            return ProbeOutcome.TRANSIENT_ERROR
        if response.status_code >= HTTP_INTERNAL_ERROR:
            logger.warning("GET %s returned HTTP %d", url, response.status_code)
            return ProbeOutcome.TRANSIENT_ERROR
        if response.status_code >= HTTP_BAD_REQUEST:
            logger.debug("GET %s returned HTTP %d", url, response.status_code)
            return ProbeOutcome.NOT_FOUND
        try:
            return response.json()
        except ValueError:
            logger.warning("GET %s returned a non-JSON body", url)
            return ProbeOutcome.TRANSIENT_ERROR

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "DataApiClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()
