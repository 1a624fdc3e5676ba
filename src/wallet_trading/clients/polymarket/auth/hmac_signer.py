"""HMAC-SHA256 signature generation for Polymarket CLOB API authentication."""

import base64
import time

from cryptography.hazmat.primitives import hashes, hmac

from wallet_trading.clients.polymarket._constants import (
    POLY_ADDRESS,
    POLY_API_KEY,
    POLY_PASSPHRASE,
    POLY_SIGNATURE,
    POLY_TIMESTAMP,
)
from wallet_trading.clients.polymarket.models import ApiCredentials


def sign_message(key: bytes, message: str) -> str:
    """Compute a base64-encoded HMAC-SHA256 digest of a message.

    Args:
        key: Raw HMAC key bytes.
        message: Message text, encoded as UTF-8 before hashing.

    Returns:
        Standard base64 encoding of the 32-byte digest.

    """
    mac = hmac.HMAC(key, hashes.SHA256())
    mac.update(message.encode("utf-8"))
    return base64.b64encode(mac.finalize()).decode("ascii")


class HmacSigner:
    """Handles HMAC signature generation for Level 2 API requests.

    The CLOB API requires an HMAC-SHA256 signature for authenticated calls.
    The signature is generated from a concatenation of:
    Timestamp + HTTP Method + Request Path + Request Body

    Args:
        secret: API secret issued with the credentials.
        decode_secret: Use the url-safe base64 decoding of ``secret`` as the
            key instead of its UTF-8 bytes.

    """

    def __init__(self, secret: str, *, decode_secret: bool = False) -> None:
        """Initialize the signer with an API secret.

        Args:
            secret: API secret issued with the credentials.
            decode_secret: Use the url-safe base64 decoding of ``secret``
                as the key instead of its UTF-8 bytes.

        """
        self._key = _decode_secret(secret) if decode_secret else secret.encode("utf-8")

    def generate_signature(
        self,
        timestamp: int,
        method: str,
        request_path: str,
        body: str = "",
    ) -> str:
        """Generate an HMAC signature for an API request.

        Args:
            timestamp: Unix timestamp in seconds.
            method: HTTP method (GET, POST, etc.).
            request_path: API endpoint path.
            body: Request body exactly as sent on the wire.

        Returns:
            Base64-encoded signature string.

        """
        message = f"{timestamp}{method}{request_path}{body}"
        return sign_message(self._key, message)


def _decode_secret(secret: str) -> bytes:
    """Decode a url-safe base64 secret, restoring missing padding."""
    padded = secret + "=" * (-len(secret) % 4)
    return base64.urlsafe_b64decode(padded)


def build_l2_headers(
    address: str,
    credentials: ApiCredentials,
    method: str,
    request_path: str,
    body: str = "",
    *,
    decode_secret: bool = False,
) -> dict[str, str]:
    """Generate the full authentication header set for a Level 2 request.

    The timestamp is read from the wall clock on every call; never reuse
    the returned headers for a retry.

    Args:
        address: Address sent in the ``POLY_ADDRESS`` header.
        credentials: API credentials for the wallet.
        method: HTTP method.
        request_path: API endpoint path.
        body: Serialized request body exactly as it will be sent.
        decode_secret: Whether the secret is url-safe base64 encoded key material.

    Returns:
        Dictionary of request headers.

    """
    timestamp = int(time.time())
    signer = HmacSigner(credentials.secret, decode_secret=decode_secret)
    signature = signer.generate_signature(
        timestamp=timestamp,
        method=method.upper(),
        request_path=request_path,
        body=body,
    )
    return {
        "Content-Type": "application/json",
        POLY_ADDRESS: address,
        POLY_SIGNATURE: signature,
        POLY_TIMESTAMP: str(timestamp),
        POLY_API_KEY: credentials.api_key,
        POLY_PASSPHRASE: credentials.passphrase,
    }
