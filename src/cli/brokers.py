"""Broker ranking CLI commands."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import orjson
import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from src.aggregation import top_brokers
from src.config import load_config
from src.fetchers.funda import FetchError, FundaFetcher
from src.models.config import FundaConfig
from src.models.listing import BrokerGroup


app = typer.Typer(help="Broker ranking commands")
console = Console(emoji=False)
err_console = Console(stderr=True, emoji=False)

ROW_FORMAT = "{:<40} {:>10} {:>10}"
SEPARATOR = "=" * 62


def setup_logging(verbose: bool = False) -> None:
    """Setup logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )


def render_broker_table(groups: list[BrokerGroup]) -> list[str]:
    """Render broker groups as fixed-width table lines."""
    lines = [ROW_FORMAT.format("Name", "Id", "Count"), SEPARATOR]
    for group in groups:
        lines.append(ROW_FORMAT.format(group.name, group.broker_id, group.count))
    return lines


def _print_lines(lines: list[str]) -> None:
    for line in lines:
        console.print(line, markup=False, highlight=False, soft_wrap=True)


@app.command("top")
def top(
    city: Annotated[
        Optional[str],
        typer.Option("--city", "-c", help="City to search (default from config)")
    ] = None,
    page_size: Annotated[
        Optional[int],
        typer.Option("--page-size", "-p", min=1, max=1000, help="Listings per page")
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", min=0, help="Number of brokers to show")
    ] = None,
    group_by: Annotated[
        str,
        typer.Option("--group-by", "-g", help="Group listings by broker 'name' or 'id'")
    ] = "name",
    output_json: Annotated[
        bool,
        typer.Option("--json", help="Print rankings as JSON instead of tables")
    ] = False,
    config_dir: Annotated[
        Optional[Path],
        typer.Option("--config-dir", help="Directory holding funda.yaml")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging")
    ] = False,
) -> None:
    """Show the brokers with the most listings, overall and with a garden.

    Example:
        makelaar-rank brokers top --city amsterdam
    """
    setup_logging(verbose)
    logger = logging.getLogger(__name__)

    if group_by not in ("name", "id"):
        err_console.print(f"[red]Error:[/red] Unknown group-by: {group_by}")
        raise typer.Exit(1)

    # Load config
    try:
        config_data = load_config("funda", config_dir)
        config = FundaConfig.from_yaml(config_data)
    except FileNotFoundError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except (yaml.YAMLError, ValidationError) as e:
        err_console.print(f"[red]Error:[/red] Invalid configuration: {e}", markup=False)
        raise typer.Exit(1)

    # Override config from CLI args
    if city:
        config.city = city
    if page_size is not None:
        config.pagination.page_size = page_size
    if limit is not None:
        config.top_limit = limit

    logger.debug(f"Config: {config.get_safe_dict()}")

    variants = [
        ("all", config.build_base_query(garden=False)),
        ("garden", config.build_base_query(garden=True)),
    ]
    rankings: dict[str, list[BrokerGroup]] = {}

    try:
        with FundaFetcher(config) as fetcher:
            for variant, base_query in variants:
                records = fetcher.fetch_all(base_query)
                groups = top_brokers(records, config.top_limit, group_by=group_by)  # type: ignore[arg-type]
                rankings[variant] = groups

                if output_json:
                    continue

                if variant == "garden":
                    console.print()
                    console.print(
                        f"With {config.garden_filter} in {config.city.title()}",
                        markup=False,
                        highlight=False,
                    )
                _print_lines(render_broker_table(groups))

    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(130)
    except FetchError as e:
        err_console.print(f"\n[red]Error:[/red] {e}")
        if e.url:
            url = e.url.replace(config.api_key, "***") if config.api_key else e.url
            err_console.print(f"  URL: {url}", markup=False)
        logger.debug("Fetch failed", exc_info=True)
        raise typer.Exit(1)

    if output_json:
        payload = {
            variant: [group.model_dump() for group in groups]
            for variant, groups in rankings.items()
        }
        console.print(
            orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode(),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )


if __name__ == "__main__":
    app()
