"""Shared helpers for Polymarket CLI commands.

Centralise verbose logging setup, session construction from environment
variables, and the uniform rendering of pipeline failures.
"""

import logging
import os
from typing import NoReturn

import typer

from wallet_trading.clients.polymarket.auth.wallet_signer import LocalAccountSigner
from wallet_trading.clients.polymarket.models import ApiCredentials
from wallet_trading.clients.polymarket.session import TradingSession
from wallet_trading.core.config import ConfigError
from wallet_trading.core.results import Failure


def configure_verbose_logging() -> None:
    """Enable INFO-level logging for pipeline step output."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(message)s",
        datefmt="%H:%M:%S",
    )


def _env_credentials() -> ApiCredentials | None:
    """Return API credentials from the environment when all three are set."""
    api_key = os.environ.get("POLYMARKET_API_KEY") or None
    api_secret = os.environ.get("POLYMARKET_API_SECRET") or None
    api_passphrase = os.environ.get("POLYMARKET_API_PASSPHRASE") or None
    if api_key and api_secret and api_passphrase:
        return ApiCredentials(api_key=api_key, secret=api_secret, passphrase=api_passphrase)
    return None


def build_session() -> TradingSession:
    """Build a trading session from environment variables.

    Read the private key, optional API credentials and optional funder
    address from the environment.  Abort with an error if the private key
    is missing or invalid, or the configuration cannot be loaded.

    Returns:
        Trading session for the wallet behind the private key.

    """
    private_key = os.environ.get("POLYMARKET_PRIVATE_KEY", "")
    if not private_key:
        typer.echo("Error: POLYMARKET_PRIVATE_KEY environment variable is required.", err=True)
        raise typer.Exit(code=1)
    try:
        signer = LocalAccountSigner(private_key)
    except Exception:  # noqa: BLE001
        typer.echo("Error: POLYMARKET_PRIVATE_KEY is not a valid private key.", err=True)
        raise typer.Exit(code=1) from None

    try:
        session = TradingSession(signer)
    except ConfigError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    funder_address = os.environ.get("POLYMARKET_FUNDER_ADDRESS") or None
    credentials = _env_credentials()
    try:
        if credentials is not None:
            session.use_credentials(credentials, funder_address)
        elif funder_address:
            session.use_funder(funder_address)
    except ValueError as exc:
        typer.echo(f"Error: POLYMARKET_FUNDER_ADDRESS: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    return session


def exit_with_failure(failure: Failure) -> NoReturn:
    """Print a failure with its remediation hint and abort.

    Args:
        failure: Failed pipeline result.

    Raises:
        typer.Exit: Always, with exit code 1.

    """
    typer.echo(f"Error: {failure.message}", err=True)
    if failure.error.remediation:
        typer.echo(failure.error.remediation, err=True)
    if failure.retryable:
        typer.echo("This looks temporary; try again shortly.", err=True)
    raise typer.Exit(code=1)
