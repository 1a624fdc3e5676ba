"""EIP-712 domains and type schemas shared with the Polymarket exchange.

These are contract constants: any difference from what the exchange
expects makes signature verification fail server-side with nothing more
than a rejected request on the client.
"""

from typing import Any

from wallet_trading.clients.polymarket._constants import (
    CTF_EXCHANGE_ADDRESS,
    POLYGON_CHAIN_ID,
)

CLOB_AUTH_DOMAIN_NAME = "ClobAuthDomain"
CLOB_AUTH_VERSION = "1"
CLOB_AUTH_MESSAGE = "This message attests that I control the given wallet"
CLOB_AUTH_PRIMARY_TYPE = "ClobAuth"

ORDER_DOMAIN_NAME = "Polymarket CTF Exchange"
ORDER_DOMAIN_VERSION = "1"
ORDER_PRIMARY_TYPE = "Order"

CLOB_AUTH_TYPES: dict[str, list[dict[str, str]]] = {
    "ClobAuth": [
        {"name": "address", "type": "address"},
        {"name": "timestamp", "type": "string"},
        {"name": "nonce", "type": "uint256"},
        {"name": "message", "type": "string"},
    ],
}

ORDER_TYPES: dict[str, list[dict[str, str]]] = {
    "Order": [
        {"name": "salt", "type": "uint256"},
        {"name": "maker", "type": "address"},
        {"name": "signer", "type": "address"},
        {"name": "taker", "type": "address"},
        {"name": "tokenId", "type": "uint256"},
        {"name": "makerAmount", "type": "uint256"},
        {"name": "takerAmount", "type": "uint256"},
        {"name": "expiration", "type": "uint256"},
        {"name": "nonce", "type": "uint256"},
        {"name": "feeRateBps", "type": "uint256"},
        {"name": "side", "type": "uint8"},
        {"name": "signatureType", "type": "uint8"},
    ],
}


def clob_auth_domain(chain_id: int = POLYGON_CHAIN_ID) -> dict[str, Any]:
    """Return the signing domain for the credential authentication message."""
    return {
        "name": CLOB_AUTH_DOMAIN_NAME,
        "version": CLOB_AUTH_VERSION,
        "chainId": chain_id,
    }


def clob_auth_message(address: str, timestamp: int, nonce: int = 0) -> dict[str, Any]:
    """Build the ``ClobAuth`` message a wallet signs to obtain credentials.

    Args:
        address: Checksummed wallet address.
        timestamp: Exchange server time in seconds; signed as a string.
        nonce: Credential nonce.

    Returns:
        EIP-712 message dictionary.

    """
    return {
        "address": address,
        "timestamp": str(timestamp),
        "nonce": nonce,
        "message": CLOB_AUTH_MESSAGE,
    }


def order_domain(
    chain_id: int = POLYGON_CHAIN_ID,
    exchange_address: str = CTF_EXCHANGE_ADDRESS,
) -> dict[str, Any]:
    """Return the signing domain for exchange orders.

    Args:
        chain_id: Chain the exchange contract lives on.
        exchange_address: Exchange contract used as ``verifyingContract``.

    Returns:
        EIP-712 domain dictionary.

    """
    return {
        "name": ORDER_DOMAIN_NAME,
        "version": ORDER_DOMAIN_VERSION,
        "chainId": chain_id,
        "verifyingContract": exchange_address,
    }
