"""Submit signed orders to the CLOB with Level 2 HMAC authentication.

The body is serialized exactly once and the same string is both signed
and sent, so field order on the wire always matches the signature.  The
executor never raises: every outcome, including transport failures, comes
back as a result value.
"""

import json
import logging
from typing import Any

import httpx

from wallet_trading.clients.polymarket._constants import (
    CLOB_HOST,
    HTTP_MULTIPLE_CHOICES,
    HTTP_OK,
    ORDER_PATH,
)
from wallet_trading.clients.polymarket.auth.hmac_signer import build_l2_headers
from wallet_trading.clients.polymarket.exceptions import TradeFailed, TradeRejected
from wallet_trading.clients.polymarket.models import ApiCredentials, SignedOrder
from wallet_trading.core.results import Failure, Result, Success
from wallet_trading.core.tracing import log_step

logger = logging.getLogger(__name__)

_OPERATION = "trade"


def serialize_order(signed_order: SignedOrder) -> str:
    """Serialize a signed order to its canonical compact JSON body."""
    return json.dumps(signed_order.to_payload(), separators=(",", ":"))


class TradeExecutor:
    """Post signed orders to the exchange.

    Args:
        http_client: Shared ``httpx.AsyncClient``; one is created when omitted.
        host: Base URL for the CLOB API.
        decode_secret: Treat API secrets as url-safe base64 key material.
        timeout: Request timeout in seconds for a created client.

    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        host: str = CLOB_HOST,
        decode_secret: bool = False,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the executor.

        Args:
            http_client: Shared ``httpx.AsyncClient``; one is created when omitted.
            host: Base URL for the CLOB API.
            decode_secret: Treat API secrets as url-safe base64 key material.
            timeout: Request timeout in seconds for a created client.

        """
        self.host = host.rstrip("/")
        self._decode_secret = decode_secret
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def execute(
        self,
        signed_order: SignedOrder,
        credentials: ApiCredentials,
    ) -> Result[dict[str, Any]]:
        """Submit a signed order.

        The ``POLY_ADDRESS`` header is the order's maker: the funder when
        one was given, otherwise the wallet.  No retry is attempted.

        Args:
            signed_order: Order carrying the wallet signature.
            credentials: API credentials for the wallet.

        Returns:
            ``Success`` with the exchange's JSON response, ``Failure`` with
            ``TradeRejected`` for a non-2xx status, or ``Failure`` with
            ``TradeFailed`` for transport and parse errors.

        """
        wallet = signed_order.order.signer
        try:
            body = serialize_order(signed_order)
            headers = build_l2_headers(
                signed_order.address,
                credentials,
                "POST",
                ORDER_PATH,
                body,
                decode_secret=self._decode_secret,
            )
            log_step(logger, _OPERATION, "submit", wallet, side=signed_order.order.side.value)
            response = await self._http_client.request(
                "POST",
                f"{self.host}{ORDER_PATH}",
                headers=headers,
                content=body.encode("utf-8"),
            )
            text = response.text
            if not HTTP_OK <= response.status_code < HTTP_MULTIPLE_CHOICES:
                log_step(
                    logger,
                    _OPERATION,
                    "rejected",
                    wallet,
                    level=logging.WARNING,
                    status=response.status_code,
                )
                return Failure(TradeRejected(response.status_code, text))
            data: dict[str, Any] = json.loads(text)
        except Exception as exc:  # noqa: BLE001
            log_step(
                logger,
                _OPERATION,
                "failed",
                wallet,
                level=logging.WARNING,
                error=type(exc).__name__,
            )
            return Failure(TradeFailed(str(exc) or type(exc).__name__))
        log_step(logger, _OPERATION, "accepted", wallet, status=response.status_code)
        return Success(data)

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "TradeExecutor":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()
