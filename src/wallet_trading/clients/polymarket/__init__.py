"""Polymarket client for wallet-authenticated credential bootstrap and trading."""

from wallet_trading.clients.polymarket.credentials import (
    BootstrapState,
    CredentialBootstrapper,
    CredentialStore,
    InMemoryCredentialStore,
)
from wallet_trading.clients.polymarket.exceptions import (
    ClockSyncFailed,
    CredentialIssuanceFailed,
    FunderUnresolved,
    InvalidAddress,
    InvalidOrder,
    PolymarketAPIError,
    PolymarketError,
    TradeFailed,
    TradeRejected,
    UserRejectedSignature,
    WalletNotRegistered,
    WalletValidationFailed,
)
from wallet_trading.clients.polymarket.executor import TradeExecutor
from wallet_trading.clients.polymarket.funder import FunderResolver
from wallet_trading.clients.polymarket.models import (
    ApiCredentials,
    BootstrapOutcome,
    CredentialRecord,
    FunderResolution,
    Order,
    OrderSide,
    SignatureType,
    SignedOrder,
    TradeParams,
)
from wallet_trading.clients.polymarket.orders import OrderBuilder
from wallet_trading.clients.polymarket.relay import ClobRelay, CredentialRelay
from wallet_trading.clients.polymarket.session import TradingSession
from wallet_trading.clients.polymarket.settings import PolymarketSettings

__all__ = [
    "ApiCredentials",
    "BootstrapOutcome",
    "BootstrapState",
    "ClobRelay",
    "ClockSyncFailed",
    "CredentialBootstrapper",
    "CredentialIssuanceFailed",
    "CredentialRecord",
    "CredentialRelay",
    "CredentialStore",
    "FunderResolution",
    "FunderResolver",
    "FunderUnresolved",
    "InMemoryCredentialStore",
    "InvalidAddress",
    "InvalidOrder",
    "Order",
    "OrderBuilder",
    "OrderSide",
    "PolymarketAPIError",
    "PolymarketError",
    "PolymarketSettings",
    "SignatureType",
    "SignedOrder",
    "TradeExecutor",
    "TradeFailed",
    "TradeParams",
    "TradeRejected",
    "TradingSession",
    "UserRejectedSignature",
    "WalletNotRegistered",
    "WalletValidationFailed",
]
