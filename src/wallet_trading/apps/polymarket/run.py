"""CLI entry point for the Polymarket wallet trading app.

Provide access to the Typer app and main entry point.  All command
logic lives in the cli subpackage.
"""

from wallet_trading.apps.polymarket.cli import app

__all__ = ["app", "main"]


def main() -> None:
    """Run the Polymarket wallet trading CLI application."""
    app()


if __name__ == "__main__":
    main()
