"""Authentication module for the Polymarket CLOB API."""

from wallet_trading.clients.polymarket.auth.hmac_signer import (
    HmacSigner,
    build_l2_headers,
    sign_message,
)
from wallet_trading.clients.polymarket.auth.wallet_signer import (
    LocalAccountSigner,
    TypedDataSigner,
)

__all__ = [
    "HmacSigner",
    "LocalAccountSigner",
    "TypedDataSigner",
    "build_l2_headers",
    "sign_message",
]
