"""CLI command to discover or verify the funder address for a wallet."""

import asyncio
from typing import Annotated

import typer

from wallet_trading.apps.polymarket.cli._helpers import (
    build_session,
    configure_verbose_logging,
    exit_with_failure,
)
from wallet_trading.core.results import Failure


def funder(
    address: Annotated[
        str | None,
        typer.Option(help="Proxy wallet address to verify instead of auto-discovery"),
    ] = None,
    verbose: Annotated[  # noqa: FBT002
        bool, typer.Option("--verbose", "-v", help="Enable step-by-step logging")
    ] = False,
) -> None:
    """Find the address that holds the wallet's Polymarket funds.

    Without ``--address`` the proxy-wallet registry and portfolio APIs are
    probed automatically.  With ``--address`` the given proxy wallet is
    checked for funds or positions.

    Args:
        address: Manually entered proxy wallet address.
        verbose: Enable step-by-step logging.

    """
    if verbose:
        configure_verbose_logging()
    asyncio.run(_funder(address=address))


async def _funder(*, address: str | None) -> None:
    """Resolve or verify the funder and print the result.

    Args:
        address: Manually entered proxy wallet address, if any.

    """
    session = build_session()
    async with session:
        typer.echo(f"Wallet: {session.wallet_address}")
        if address is None:
            result = await session.resolve_funder()
        else:
            result = await session.use_manual_funder(address)

    if isinstance(result, Failure):
        exit_with_failure(result)
    typer.echo(f"Funder: {result.value.address}")
    typer.echo(f"Source: {result.value.source}")
