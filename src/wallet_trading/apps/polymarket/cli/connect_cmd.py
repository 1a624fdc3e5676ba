"""CLI command to obtain CLOB API credentials with a wallet signature.

The wallet signs the exchange's authentication message once; the issued
credentials can then be exported to the environment so later commands
skip the signature step.
"""

import asyncio
from typing import Annotated

import typer

from wallet_trading.apps.polymarket.cli._helpers import (
    build_session,
    configure_verbose_logging,
    exit_with_failure,
)
from wallet_trading.core.results import Failure


def connect(
    show_secrets: Annotated[  # noqa: FBT002
        bool,
        typer.Option("--show-secrets", help="Print the credentials as shell export lines"),
    ] = False,
    verbose: Annotated[  # noqa: FBT002
        bool, typer.Option("--verbose", "-v", help="Enable step-by-step logging")
    ] = False,
) -> None:
    """Create or re-derive API credentials for the wallet.

    Args:
        show_secrets: Print the credentials as shell ``export`` lines.
        verbose: Enable step-by-step logging.

    """
    if verbose:
        configure_verbose_logging()
    asyncio.run(_connect(show_secrets=show_secrets))


async def _connect(*, show_secrets: bool) -> None:
    """Run the credential bootstrap and print the outcome.

    Args:
        show_secrets: Print the credentials as shell ``export`` lines.

    """
    session = build_session()
    async with session:
        typer.echo(f"Wallet: {session.wallet_address}")
        result = await session.connect()

    if isinstance(result, Failure):
        exit_with_failure(result)

    record = result.value.record
    typer.echo(f"Funder: {record.funder_address}")
    typer.echo("Credentials: " + ("existing" if result.value.derived else "created"))
    if show_secrets:
        creds = record.credentials
        typer.echo(f"export POLYMARKET_API_KEY={creds.api_key}")
        typer.echo(f"export POLYMARKET_API_SECRET={creds.secret}")
        typer.echo(f"export POLYMARKET_API_PASSPHRASE={creds.passphrase}")
        typer.echo(f"export POLYMARKET_FUNDER_ADDRESS={record.funder_address}")
    else:
        typer.echo("Re-run with --show-secrets to print them for your environment.")
