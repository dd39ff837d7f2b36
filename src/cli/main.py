"""CLI entry point for makelaar-rank."""

import typer

from .brokers import app as brokers_app

app = typer.Typer(
    name="makelaar-rank",
    help="Rank real-estate brokers by listing count on the Funda feed.",
    no_args_is_help=True,
)

# Register subcommands
app.add_typer(brokers_app, name="brokers", help="Broker rankings")


if __name__ == "__main__":
    app()
