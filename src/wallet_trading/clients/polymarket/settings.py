"""Typed view of the ``polymarket`` configuration section."""

from dataclasses import dataclass
from typing import Any

from wallet_trading.clients.polymarket._constants import (
    CLOB_HOST,
    CTF_EXCHANGE_ADDRESS,
    DATA_API_URL,
    POLYGON_CHAIN_ID,
    SAFE_CLIENT_URL,
)
from wallet_trading.clients.polymarket.orders import DEFAULT_ORDER_TTL
from wallet_trading.core.config import ConfigError, ConfigLoader, get_config

_SECRET_ENCODINGS = {"utf8", "base64url"}


@dataclass(frozen=True)
class PolymarketSettings:
    """Connection and signing settings for one exchange deployment.

    Args:
        clob_host: Base URL for the CLOB API.
        data_api_url: Base URL for the Data API.
        safe_client_url: Base URL for the Safe Client API.
        chain_id: Chain of the exchange.
        exchange_address: Order-signing verifying contract.
        request_timeout: HTTP timeout in seconds.
        order_ttl_seconds: Lifetime of a new order.
        hmac_secret_encoding: ``utf8`` or ``base64url``.
        verify_credentials: Test new credentials before persisting them.

    """

    clob_host: str = CLOB_HOST
    data_api_url: str = DATA_API_URL
    safe_client_url: str = SAFE_CLIENT_URL
    chain_id: int = POLYGON_CHAIN_ID
    exchange_address: str = CTF_EXCHANGE_ADDRESS
    request_timeout: float = 30.0
    order_ttl_seconds: int = DEFAULT_ORDER_TTL
    hmac_secret_encoding: str = "utf8"
    verify_credentials: bool = True

    @property
    def decode_secret(self) -> bool:
        """Return whether API secrets are base64 key material."""
        return self.hmac_secret_encoding == "base64url"

    @classmethod
    def from_config(cls, loader: ConfigLoader | None = None) -> "PolymarketSettings":
        """Build settings from the ``polymarket`` configuration section.

        Args:
            loader: Configuration loader; the global one when omitted.

        Returns:
            Parsed settings, with defaults for missing keys.

        Raises:
            ConfigError: When a value has the wrong type or an unknown encoding.

        """
        section: dict[str, Any] = (loader or get_config()).get_polymarket_config()
        defaults = cls()
        try:
            settings = cls(
                clob_host=str(section.get("clob_host", defaults.clob_host)),
                data_api_url=str(section.get("data_api_url", defaults.data_api_url)),
                safe_client_url=str(section.get("safe_client_url", defaults.safe_client_url)),
                chain_id=int(section.get("chain_id", defaults.chain_id)),
                exchange_address=str(section.get("exchange_address", defaults.exchange_address)),
                request_timeout=float(section.get("request_timeout", defaults.request_timeout)),
                order_ttl_seconds=int(
                    section.get("order_ttl_seconds", defaults.order_ttl_seconds)
                ),
                hmac_secret_encoding=str(
                    section.get("hmac_secret_encoding", defaults.hmac_secret_encoding)
                ).lower(),
                verify_credentials=_as_bool(
                    section.get("verify_credentials", defaults.verify_credentials)
                ),
            )
        except (TypeError, ValueError) as exc:
            msg = f"Invalid polymarket configuration: {exc}"
            raise ConfigError(msg) from exc
        if settings.hmac_secret_encoding not in _SECRET_ENCODINGS:
            msg = f"hmac_secret_encoding must be one of {sorted(_SECRET_ENCODINGS)}"
            raise ConfigError(msg)
        return settings


def _as_bool(value: Any) -> bool:
    """Interpret a YAML or environment value as a boolean."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
