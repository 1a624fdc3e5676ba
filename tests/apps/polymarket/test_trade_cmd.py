"""Tests for the Polymarket trade CLI command.

Verify validation, confirmation and result rendering using a mocked
trading session so no real orders are signed or placed.
"""

from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from wallet_trading.apps.polymarket.cli import app
from wallet_trading.clients.polymarket.exceptions import (
    TradeRejected,
    WalletNotRegistered,
)
from wallet_trading.clients.polymarket.models import (
    ApiCredentials,
    BootstrapOutcome,
    CredentialRecord,
    OrderSide,
)
from wallet_trading.core.results import Failure, Result, Success

_WALLET = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
_FUNDER = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
_TOKEN_ID = "71321045679252212594626385532706912750332728571942532289631379312455583992563"
_ORDER_ID = "0xorder789"
_PATCH_TARGET = "wallet_trading.apps.polymarket.cli.trade_cmd.build_session"
_STATUS_BAD_REQUEST = 400


@pytest.fixture
def runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


def _make_outcome() -> BootstrapOutcome:
    """Create a bootstrap outcome for the test wallet.

    Returns:
        BootstrapOutcome with standard test data.

    """
    record = CredentialRecord(
        wallet_address=_WALLET,
        funder_address=_FUNDER,
        credentials=ApiCredentials(api_key="key", secret="secret", passphrase="pass"),
    )
    return BootstrapOutcome(record=record, derived=True)


def _mock_session(
    *,
    connect: Result[BootstrapOutcome] | None = None,
    trade: Result[dict[str, Any]] | None = None,
) -> AsyncMock:
    """Build a mocked TradingSession.

    Args:
        connect: Result to return from connect.
        trade: Result to return from place_trade.

    Returns:
        AsyncMock configured as a TradingSession.

    """
    mock = AsyncMock()
    mock.wallet_address = _WALLET
    mock.connect = AsyncMock(return_value=connect or Success(_make_outcome()))
    mock.place_trade = AsyncMock(
        return_value=trade or Success({"success": True, "orderID": _ORDER_ID, "status": "live"}),
    )
    mock.__aenter__ = AsyncMock(return_value=mock)
    mock.__aexit__ = AsyncMock(return_value=None)
    return mock


def _args(
    *,
    side: str = "buy",
    price: str = "0.65",
    size: str = "10",
    token_id: str = _TOKEN_ID,
) -> list[str]:
    """Build the trade command arguments.

    Returns:
        Argument list for ``runner.invoke``.

    """
    return [
        "trade",
        "--token-id",
        token_id,
        "--side",
        side,
        "--price",
        price,
        "--size",
        size,
    ]


class TestTradeCommand:
    """Test suite for the trade CLI command."""

    def test_trade_with_confirm(self, runner: CliRunner) -> None:
        """Place an order after the user confirms."""
        mock = _mock_session()
        with patch(_PATCH_TARGET, return_value=mock):
            result = runner.invoke(app, _args(), input="y\n")

        assert result.exit_code == 0
        assert "Order Preview" in result.output
        assert f"Funder: {_FUNDER}" in result.output
        assert "Estimated cost: $6.50" in result.output
        assert f"Order ID: {_ORDER_ID}" in result.output
        assert "Status: live" in result.output
        mock.place_trade.assert_awaited_once_with(
            _TOKEN_ID, Decimal("0.65"), Decimal("10.0"), OrderSide.BUY
        )

    def test_trade_cancelled_by_user(self, runner: CliRunner) -> None:
        """Abort the trade when the user declines confirmation."""
        mock = _mock_session()
        with patch(_PATCH_TARGET, return_value=mock):
            result = runner.invoke(app, _args(), input="n\n")

        assert result.exit_code == 0
        assert "Order cancelled." in result.output
        mock.place_trade.assert_not_awaited()

    def test_no_confirm_skips_prompt(self, runner: CliRunner) -> None:
        """Place the order immediately with --no-confirm."""
        mock = _mock_session()
        with patch(_PATCH_TARGET, return_value=mock):
            result = runner.invoke(app, [*_args(side="sell"), "--no-confirm"])

        assert result.exit_code == 0
        assert "WARNING: Confirmation disabled" in result.output
        assert "Sign and place this order?" not in result.output
        assert mock.place_trade.await_args is not None
        assert mock.place_trade.await_args.args[3] is OrderSide.SELL

    def test_invalid_side(self, runner: CliRunner) -> None:
        """Reject a side other than buy or sell."""
        result = runner.invoke(app, _args(side="hold"))

        assert result.exit_code == 1
        assert "Side must be 'buy' or 'sell'" in result.output

    def test_non_numeric_token_id(self, runner: CliRunner) -> None:
        """Reject a token ID that is not a decimal integer."""
        result = runner.invoke(app, _args(token_id="0xabc"))

        assert result.exit_code == 1
        assert "Token ID must be a decimal integer" in result.output

    @pytest.mark.parametrize("price", ["0", "1", "0.005", "1.5"])
    def test_price_out_of_range(self, runner: CliRunner, price: str) -> None:
        """Reject limit prices outside 0.01-0.99."""
        result = runner.invoke(app, _args(price=price))

        assert result.exit_code == 1
        assert "Limit price must be between 0.01 and 0.99" in result.output

    def test_non_positive_size(self, runner: CliRunner) -> None:
        """Reject a zero size."""
        result = runner.invoke(app, _args(size="0"))

        assert result.exit_code == 1
        assert "Size must be positive." in result.output

    def test_connect_failure(self, runner: CliRunner) -> None:
        """Exit with the remediation when the wallet is not registered."""
        mock = _mock_session(connect=Failure(error=WalletNotRegistered()))
        with patch(_PATCH_TARGET, return_value=mock):
            result = runner.invoke(app, _args(), input="y\n")

        assert result.exit_code == 1
        assert WalletNotRegistered.remediation in result.output
        assert "Order Preview" not in result.output
        mock.place_trade.assert_not_awaited()

    def test_trade_rejected(self, runner: CliRunner) -> None:
        """Exit with an error when the exchange rejects the order."""
        mock = _mock_session(
            trade=Failure(error=TradeRejected(_STATUS_BAD_REQUEST, "not enough balance")),
        )
        with patch(_PATCH_TARGET, return_value=mock):
            result = runner.invoke(app, _args(), input="y\n")

        assert result.exit_code == 1
        assert "not enough balance" in result.output
        assert "Order Result" not in result.output

    def test_error_message_rendered(self, runner: CliRunner) -> None:
        """Show the exchange's error message alongside an accepted response."""
        mock = _mock_session(
            trade=Success({"success": True, "orderID": _ORDER_ID, "errorMsg": "partial"}),
        )
        with patch(_PATCH_TARGET, return_value=mock):
            result = runner.invoke(app, _args(), input="y\n")

        assert result.exit_code == 0
        assert "Message: partial" in result.output
        assert "Status: -" in result.output
