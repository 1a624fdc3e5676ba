"""Trusted relay for the credential bootstrap calls.

The bootstrapper talks to the exchange only through a ``CredentialRelay``:
wallet registration check, server time, and Level 1 credential issuance.
``ClobRelay`` implements the relay directly against the CLOB REST API
with ``httpx``; a server-side proxy can implement the same protocol.
"""

import json
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol, cast, runtime_checkable

import httpx

from wallet_trading.clients.polymarket._constants import (
    ACCESS_STATUS_PATH,
    API_KEYS_PATH,
    BALANCES_PATH,
    CLOB_HOST,
    CREATE_API_KEY_PATH,
    DERIVE_API_KEY_PATH,
    HTTP_BAD_REQUEST,
    HTTP_CONFLICT,
    HTTP_INTERNAL_ERROR,
    HTTP_TOO_MANY_REQUESTS,
    POLY_ADDRESS,
    POLY_NONCE,
    POLY_SIGNATURE,
    POLY_TIMESTAMP,
    TIME_PATH,
)
from wallet_trading.clients.polymarket.auth.hmac_signer import build_l2_headers
from wallet_trading.clients.polymarket.exceptions import (
    ClockSyncFailed,
    CredentialConflict,
    CredentialIssuanceFailed,
    WalletValidationFailed,
)
from wallet_trading.clients.polymarket.models import ApiCredentials

logger = logging.getLogger(__name__)

_TIME_KEYS = ("timestamp", "ts", "time", "serverTime", "epoch", "unix")


@dataclass(frozen=True)
class WalletValidation:
    """Outcome of the wallet registration check.

    Args:
        registered: Whether the exchange knows the wallet.
        balance: Collateral balance reported by the exchange, when registered.

    """

    registered: bool
    balance: Decimal | None = None


@runtime_checkable
class CredentialRelay(Protocol):
    """Server-side collaborator used by the credential bootstrapper."""

    async def validate_wallet(self, address: str) -> WalletValidation:
        """Check whether the exchange knows the wallet."""
        ...

    async def server_time(self) -> int:
        """Return exchange server time in Unix seconds."""
        ...

    async def create_api_key(
        self, address: str, signature: str, timestamp: int, nonce: int
    ) -> ApiCredentials:
        """Create credentials; raise ``CredentialConflict`` if they already exist."""
        ...

    async def derive_api_key(
        self, address: str, signature: str, timestamp: int, nonce: int
    ) -> ApiCredentials:
        """Re-derive existing credentials with the same L1 signature."""
        ...

    async def access_status(self, address: str) -> bool:
        """Return ``True`` when the exchange requires registration for the wallet."""
        ...

    async def verify_credentials(self, address: str, credentials: ApiCredentials) -> bool:
        """Return ``True`` when the credentials authenticate a Level 2 request."""
        ...


def parse_server_time(data: Any) -> int:
    """Normalise a server-time payload to Unix seconds.

    Accept a bare number or string, or an object carrying the value
    under any of the known timestamp keys.

    Args:
        data: Parsed JSON body of the time endpoint.

    Returns:
        Positive Unix timestamp in seconds.

    Raises:
        ClockSyncFailed: When no positive numeric timestamp is present.

    """
    candidate: Any = data
    if isinstance(data, dict):
        body = cast("dict[str, Any]", data)
        candidate = next((body[k] for k in _TIME_KEYS if body.get(k) is not None), None)
    try:
        value = Decimal(str(candidate).strip())
    except InvalidOperation as exc:
        msg = f"Unparseable server time: {candidate!r}"
        raise ClockSyncFailed(msg) from exc
    if not value.is_finite() or value <= 0:
        msg = f"Invalid server time: {candidate!r}"
        raise ClockSyncFailed(msg)
    return int(value)


class ClobRelay:
    """Relay implementation that calls the CLOB REST API directly.

    Args:
        http_client: Shared ``httpx.AsyncClient``; one is created when omitted.
        host: Base URL for the CLOB API.
        decode_secret: Treat API secrets as url-safe base64 key material
            when signing the verification request.
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
        """Initialize the relay.

        Args:
            http_client: Shared ``httpx.AsyncClient``; one is created when omitted.
            host: Base URL for the CLOB API.
            decode_secret: Treat API secrets as url-safe base64 key material
                when signing the verification request.
            timeout: Request timeout in seconds for a created client.

        """
        self.host = host.rstrip("/")
        self._decode_secret = decode_secret
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def validate_wallet(self, address: str) -> WalletValidation:
        """Check registration by fetching the wallet's exchange balance.

        A client error (4xx) means the exchange has no record of the wallet.

        Args:
            address: Wallet address.

        Returns:
            Registration status and balance.

        Raises:
            WalletValidationFailed: When the exchange cannot be reached, is
                rate limiting, or answers with a server error.

        """
        try:
            response = await self._http_client.request(
                "GET",
                f"{self.host}{BALANCES_PATH}/{address}",
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            msg = f"Wallet validation request failed: {exc}"
            raise WalletValidationFailed(msg) from exc
        status = response.status_code
        if status >= HTTP_INTERNAL_ERROR or status == HTTP_TOO_MANY_REQUESTS:
            msg = f"Wallet validation returned HTTP {status}"
            raise WalletValidationFailed(msg)
        if status >= HTTP_BAD_REQUEST:
            logger.debug("Balance lookup returned HTTP %d", status)
            return WalletValidation(registered=False)
        try:
            data: Any = response.json()
            balance = Decimal(str(data.get("balance") or "0"))
        except (ValueError, AttributeError, InvalidOperation):
            balance = None
        return WalletValidation(registered=True, balance=balance)

    async def server_time(self) -> int:
        """Fetch exchange server time.

        Returns:
            Unix timestamp in seconds.

        Raises:
            ClockSyncFailed: When the request fails or the body has no timestamp.

        """
        try:
            response = await self._http_client.request("GET", f"{self.host}{TIME_PATH}")
        except httpx.HTTPError as exc:
            msg = f"Failed to fetch server time: {exc}"
            raise ClockSyncFailed(msg) from exc
        if response.status_code >= HTTP_BAD_REQUEST:
            msg = f"Failed to fetch server time: {response.status_code} {response.text}"
            raise ClockSyncFailed(msg)
        try:
            data: Any = response.json()
        except ValueError as exc:
            msg = f"Server time response is not JSON: {response.text[:100]}"
            raise ClockSyncFailed(msg) from exc
        return parse_server_time(data)

    async def create_api_key(
        self, address: str, signature: str, timestamp: int, nonce: int
    ) -> ApiCredentials:
        """Create new API credentials with a Level 1 signature.

        Args:
            address: Wallet address that signed the auth message.
            signature: EIP-712 ``ClobAuth`` signature.
            timestamp: Timestamp that was signed.
            nonce: Nonce that was signed.

        Returns:
            Newly issued credentials.

        Raises:
            CredentialConflict: When credentials already exist (HTTP 409).
            CredentialIssuanceFailed: For any other failure.

        """
        response = await self._issue(
            "POST",
            CREATE_API_KEY_PATH,
            address,
            signature,
            timestamp,
            nonce,
            content=json.dumps({}).encode(),
        )
        if response.status_code == HTTP_CONFLICT:
            raise CredentialConflict(msg="API key already exists", status_code=HTTP_CONFLICT)
        return self._parse_credentials(response, "create")

    async def derive_api_key(
        self, address: str, signature: str, timestamp: int, nonce: int
    ) -> ApiCredentials:
        """Re-derive the existing API credentials for the wallet and nonce.

        Args:
            address: Wallet address that signed the auth message.
            signature: EIP-712 ``ClobAuth`` signature.
            timestamp: Timestamp that was signed.
            nonce: Nonce that was signed.

        Returns:
            Existing credentials.

        Raises:
            CredentialIssuanceFailed: When derivation fails.

        """
        response = await self._issue(
            "GET",
            DERIVE_API_KEY_PATH,
            address,
            signature,
            timestamp,
            nonce,
            params={"nonce": nonce},
        )
        return self._parse_credentials(response, "derive")

    async def access_status(self, address: str) -> bool:
        """Check whether the exchange requires the wallet to register first.

        Args:
            address: Wallet address.

        Returns:
            ``True`` only when the exchange reports ``cert_required``; any
            failure reads as ``False``.

        """
        try:
            response = await self._http_client.request(
                "GET", f"{self.host}{ACCESS_STATUS_PATH}", params={"address": address}
            )
            if response.status_code >= HTTP_BAD_REQUEST:
                return False
            data: Any = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Could not check access status: %s", exc)
            return False
        return isinstance(data, dict) and cast("dict[str, Any]", data).get("cert_required") is True

    async def verify_credentials(self, address: str, credentials: ApiCredentials) -> bool:
        """Test credentials with an authenticated ``GET /auth/api-keys``.

        Args:
            address: Wallet address the credentials belong to.
            credentials: Credentials to test.

        Returns:
            ``True`` when the exchange accepts the request.

        """
        headers = build_l2_headers(
            address,
            credentials,
            "GET",
            API_KEYS_PATH,
            decode_secret=self._decode_secret,
        )
        try:
            response = await self._http_client.request(
                "GET", f"{self.host}{API_KEYS_PATH}", headers=headers
            )
        except httpx.HTTPError as exc:
            logger.warning("Credential verification request failed: %s", exc)
            return False
        return response.status_code < HTTP_BAD_REQUEST

    async def _issue(  # noqa: PLR0913
        self,
        method: str,
        path: str,
        address: str,
        signature: str,
        timestamp: int,
        nonce: int,
        *,
        params: dict[str, Any] | None = None,
        content: bytes | None = None,
    ) -> httpx.Response:
        """Send a Level 1 authenticated credential request.

        Raises:
            CredentialIssuanceFailed: When the request cannot be sent.

        """
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            POLY_ADDRESS: address,
            POLY_SIGNATURE: signature,
            POLY_TIMESTAMP: str(timestamp),
            POLY_NONCE: str(nonce),
        }
        try:
            return await self._http_client.request(
                method,
                f"{self.host}{path}",
                headers=headers,
                params=params,
                content=content,
            )
        except httpx.HTTPError as exc:
            msg = f"Credential request failed: {exc}"
            raise CredentialIssuanceFailed(msg) from exc

    @staticmethod
    def _parse_credentials(response: httpx.Response, action: str) -> ApiCredentials:
        """Parse credentials from a Level 1 response.

        Raises:
            CredentialIssuanceFailed: On an error status or incomplete body.

        """
        if response.status_code >= HTTP_BAD_REQUEST:
            msg = f"Failed to {action} API key: {response.status_code} {response.text}"
            raise CredentialIssuanceFailed(msg, status_code=response.status_code)
        try:
            return ApiCredentials.from_response(response.json())
        except (ValueError, AttributeError) as exc:
            msg = f"Invalid credentials from upstream on {action}"
            raise CredentialIssuanceFailed(msg, status_code=response.status_code) from exc

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "ClobRelay":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()
