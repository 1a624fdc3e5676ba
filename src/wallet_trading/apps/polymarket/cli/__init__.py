"""CLI subpackage for the Polymarket wallet trading app.

Create the Typer application and register all command modules.
"""

import typer

from wallet_trading.apps.polymarket.cli.connect_cmd import connect
from wallet_trading.apps.polymarket.cli.funder_cmd import funder
from wallet_trading.apps.polymarket.cli.trade_cmd import trade

app = typer.Typer(help="Polymarket wallet-authenticated trading tools")

app.command()(funder)
app.command()(connect)
app.command()(trade)

__all__ = ["app"]
