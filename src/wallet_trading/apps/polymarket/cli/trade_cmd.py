"""CLI command for wallet-signed trade execution on Polymarket.

Provide the ``trade`` subcommand, which connects the wallet, builds a
limit order, asks the wallet to sign it and submits it with HMAC-signed
headers.  Trades require confirmation by default.
"""

import asyncio
from decimal import Decimal, InvalidOperation
from typing import Annotated

import typer

from wallet_trading.apps.polymarket.cli._helpers import (
    build_session,
    configure_verbose_logging,
    exit_with_failure,
)
from wallet_trading.clients.polymarket.models import OrderSide
from wallet_trading.core.results import Failure

_VALID_SIDES = {side.value for side in OrderSide}
_MIN_PRICE = Decimal("0.01")
_MAX_PRICE = Decimal("0.99")


def trade(  # noqa: PLR0913
    token_id: Annotated[str, typer.Option(help="CLOB token ID of the outcome to trade")],
    side: Annotated[str, typer.Option(help="Order side: buy or sell")],
    price: Annotated[float, typer.Option(help="Limit price (0.01-0.99)")],
    size: Annotated[float, typer.Option(help="Number of shares to trade")],
    no_confirm: Annotated[  # noqa: FBT002
        bool, typer.Option("--no-confirm", help="Skip confirmation prompt")
    ] = False,
    verbose: Annotated[  # noqa: FBT002
        bool, typer.Option("--verbose", "-v", help="Enable step-by-step logging")
    ] = False,
) -> None:
    """Place a wallet-signed limit order on a Polymarket outcome token.

    Args:
        token_id: CLOB token ID (decimal string).
        side: Order side (buy or sell).
        price: Limit price between 0.01 and 0.99.
        size: Number of shares to trade.
        no_confirm: Skip the confirmation prompt.
        verbose: Enable step-by-step logging.

    """
    side_upper = side.upper()
    if side_upper not in _VALID_SIDES:
        typer.echo(f"Error: Side must be 'buy' or 'sell', got '{side}'.", err=True)
        raise typer.Exit(code=1)

    if not token_id.isdigit():
        typer.echo(f"Error: Token ID must be a decimal integer, got '{token_id}'.", err=True)
        raise typer.Exit(code=1)

    try:
        price_dec = Decimal(str(price))
        size_dec = Decimal(str(size))
    except InvalidOperation:
        typer.echo("Error: Invalid price or size.", err=True)
        raise typer.Exit(code=1) from None

    if not (_MIN_PRICE <= price_dec <= _MAX_PRICE):
        typer.echo(
            f"Error: Limit price must be between {_MIN_PRICE} and {_MAX_PRICE}, got {price_dec}.",
            err=True,
        )
        raise typer.Exit(code=1)

    if size_dec <= 0:
        typer.echo("Error: Size must be positive.", err=True)
        raise typer.Exit(code=1)

    if verbose:
        configure_verbose_logging()
    if no_confirm:
        typer.echo("WARNING: Confirmation disabled. Order will be placed immediately.")

    asyncio.run(
        _trade(
            token_id=token_id,
            side=OrderSide(side_upper),
            price=price_dec,
            size=size_dec,
            confirm=not no_confirm,
        )
    )


async def _trade(
    *,
    token_id: str,
    side: OrderSide,
    price: Decimal,
    size: Decimal,
    confirm: bool,
) -> None:
    """Execute the trade workflow asynchronously.

    Connect the wallet, display a preview, optionally confirm, then sign
    and submit.

    Args:
        token_id: CLOB token ID.
        side: Order direction.
        price: Limit price.
        size: Number of shares.
        confirm: Whether to prompt for confirmation.

    """
    session = build_session()
    async with session:
        connected = await session.connect()
        if isinstance(connected, Failure):
            exit_with_failure(connected)
        funder = connected.value.record.funder_address

        typer.echo("\n--- Order Preview ---")
        typer.echo(f"Wallet: {session.wallet_address}")
        typer.echo(f"Funder: {funder}")
        typer.echo(f"Side: {side.value}")
        typer.echo(f"Token: {token_id[:20]}...")
        typer.echo(f"Price: {price:.4f}")
        typer.echo(f"Size: {size:.2f} shares")
        typer.echo(f"Estimated cost: ${price * size:.2f}")

        if confirm:
            proceed = typer.confirm("\nSign and place this order?")
            if not proceed:
                typer.echo("Order cancelled.")
                raise typer.Exit(code=0)

        result = await session.place_trade(token_id, price, size, side)

    if isinstance(result, Failure):
        exit_with_failure(result)

    response = result.value
    typer.echo("\n--- Order Result ---")
    typer.echo(f"Order ID: {response.get('orderID') or response.get('id') or '-'}")
    typer.echo(f"Status: {response.get('status', '-')}")
    if response.get("errorMsg"):
        typer.echo(f"Message: {response['errorMsg']}")
