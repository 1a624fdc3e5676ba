"""Shared test configuration and fixtures."""

from collections.abc import Iterator

import pytest

from wallet_trading.clients.polymarket.auth.wallet_signer import LocalAccountSigner
from wallet_trading.core.config import reset_config

# Well-known development key (account 0 of the default Hardhat/Anvil mnemonic)
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"

_POLYMARKET_ENV_VARS = (
    "POLYMARKET_PRIVATE_KEY",
    "POLYMARKET_API_KEY",
    "POLYMARKET_API_SECRET",
    "POLYMARKET_API_PASSPHRASE",
    "POLYMARKET_FUNDER_ADDRESS",
    "POLYMARKET_CLOB_HOST",
    "POLYMARKET_DATA_API_URL",
    "POLYMARKET_SAFE_CLIENT_URL",
    "POLYMARKET_HMAC_SECRET_ENCODING",
)


@pytest.fixture(autouse=True)
def _isolate_environment(  # pyright: ignore[reportUnusedFunction]
    monkeypatch: pytest.MonkeyPatch,
) -> Iterator[None]:
    """Remove developer Polymarket settings and reset the config singleton.

    Tests must never pick up a real private key or API credentials from
    the shell, and each test must see configuration loaded fresh.
    """
    for name in _POLYMARKET_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def private_key() -> str:
    """Return the development private key used across signing tests."""
    return TEST_PRIVATE_KEY


@pytest.fixture
def signer(private_key: str) -> LocalAccountSigner:
    """Create a local signer for the development account."""
    return LocalAccountSigner(private_key)
