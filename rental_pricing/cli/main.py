"""
CLI interface for rental pricing.

Provides command-line access to quoting, metering and aggregation.
"""

import json
import sys
from decimal import Decimal
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rental_pricing.config.loader import PlatformConfig, load_platform_config
from rental_pricing.core.aggregation import aggregate_usage
from rental_pricing.core.errors import MalformedInput, ValidationError
from rental_pricing.core.metering import MeteringInput, meter_usage
from rental_pricing.core.money import format_currency_amount
from rental_pricing.core.pricing import (
    EarningsRequest,
    RentalQuoteRequest,
    estimate_provider_earnings,
    quote_rental_cost,
)
from rental_pricing.logging import setup_logging
from rental_pricing.payments.proofs import verify_payment_proof

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

# USDC is divisible to 6 places
DISPLAY_DECIMALS = 6


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        "-l",
        help="Log level (debug, info, warning, error)"
    ),
):
    """Rental pricing CLI."""
    setup_logging(log_level)
    if ctx.invoked_subcommand is None:
        console.print("Rental Pricing - Use --help to see available commands")


@app.command()
def quote(
    resource_type: str = typer.Option(..., "--resource-type", "-r", help="RAM or GPU"),
    amount: float = typer.Option(..., "--amount", "-a", help="GB of RAM or number of GPUs"),
    duration: float = typer.Option(..., "--duration", "-d", help="Rental duration in minutes"),
    price: float = typer.Option(
        ...,
        "--price",
        "-p",
        help="Price per GB-hour (RAM) or per GPU-minute (GPU)"
    ),
    currency: Optional[str] = typer.Option(None, "--currency", help="Settlement currency"),
    fee: Optional[float] = typer.Option(None, "--fee", "-f", help="Platform fee percent"),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Platform configuration YAML"
    ),
):
    """Quote the cost of a rental."""
    config = _load_config(config_path)
    try:
        result = quote_rental_cost(
            RentalQuoteRequest(
                resource_type=resource_type,
                amount=amount,
                duration_minutes=duration,
                price_per_unit_per_time=price,
                currency=currency,
                platform_fee_percent=fee,
            ),
            config,
        )
    except ValidationError as e:
        _fail(e)

    table = Table(title=f"Rental Quote ({result.resource_type.value})")
    table.add_column("Item")
    table.add_column("Amount", justify="right")
    table.add_row("Resource cost", _format_money(result.resource_cost, result.currency))
    table.add_row("Platform fee", _format_money(result.platform_fee, result.currency))
    table.add_row("Total", _format_money(result.total, result.currency))
    console.print(table)
    sys.exit(EXIT_CODE_PASS)


@app.command()
def meter(
    rental_id: str = typer.Option(..., "--rental-id", help="Rental identifier"),
    start: str = typer.Option(..., "--start", help="Start time, YYYY-MM-DDTHH:MM:SSZ"),
    end: str = typer.Option(..., "--end", help="End time, YYYY-MM-DDTHH:MM:SSZ"),
    resource_type: str = typer.Option(..., "--resource-type", "-r", help="RAM or GPU"),
    amount: float = typer.Option(..., "--amount", "-a", help="GB of RAM or number of GPUs"),
    price: float = typer.Option(
        ...,
        "--price",
        "-p",
        help="Price per GB-hour (RAM) or per GPU-minute (GPU)"
    ),
):
    """Meter a finished rental session into a usage record."""
    try:
        record = meter_usage(MeteringInput(
            rental_id=rental_id,
            start_time=start,
            end_time=end,
            resource_type=resource_type,
            amount=amount,
            price_per_unit_per_time=price,
        ))
    except ValidationError as e:
        _fail(e)

    console.print(f"\n[bold]Rental:[/bold] {record.rental_id}")
    console.print(f"Duration: {record.duration_seconds:,} seconds")
    console.print(f"Cost: {format_currency_amount(record.cost, DISPLAY_DECIMALS)}")
    if record.clamped:
        console.print("[yellow]End time precedes start time; duration clamped to zero[/]")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def aggregate(
    records_file: Path = typer.Argument(..., help="JSON array of usage records"),
):
    """Summarize usage records stored in a JSON file."""
    try:
        with open(records_file, 'r', encoding='utf-8') as f:
            records = json.load(f)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error reading records:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)

    try:
        if not isinstance(records, list):
            raise MalformedInput("records file must contain a JSON array")
        summary = aggregate_usage(records)
    except (KeyError, TypeError, ValueError, ArithmeticError) as e:
        console.print(f"[red]Error:[/] invalid usage records ({escape(str(e))})")
        sys.exit(EXIT_CODE_FAIL)

    console.print("\n[bold]Usage Summary[/bold]")
    console.print("-" * 40)
    console.print(f"Records: {summary.record_count:,}")
    console.print(f"Total duration: {summary.total_duration_seconds:,} seconds")
    console.print(f"Total cost: {format_currency_amount(summary.total_cost, DISPLAY_DECIMALS)}")
    console.print(
        f"Average cost/record: "
        f"{format_currency_amount(summary.average_cost_per_record, DISPLAY_DECIMALS)}"
    )
    sys.exit(EXIT_CODE_PASS)


@app.command()
def earnings(
    resource_type: str = typer.Option(..., "--resource-type", "-r", help="RAM or GPU"),
    amount: float = typer.Option(..., "--amount", "-a", help="GB of RAM or number of GPUs"),
    price: float = typer.Option(
        ...,
        "--price",
        "-p",
        help="Price per GB-hour (RAM) or per GPU-minute (GPU)"
    ),
    utilization: float = typer.Option(75.0, "--utilization", "-u", help="Expected utilization percent"),
):
    """Project provider earnings for an offer."""
    try:
        projection = estimate_provider_earnings(EarningsRequest(
            resource_type=resource_type,
            amount=amount,
            price_per_unit_per_time=price,
            utilization_percent=utilization,
        ))
    except ValidationError as e:
        _fail(e)

    table = Table(title="Provider Earnings")
    table.add_column("Period")
    table.add_column("Earnings", justify="right")
    table.add_row("Hourly rate", _format_money(projection.hourly_rate))
    table.add_row("Daily", _format_money(projection.daily_earnings))
    table.add_row("Monthly", _format_money(projection.monthly_earnings))
    for tier, value in projection.utilization_breakdown.items():
        table.add_row(f"Monthly at {tier}%", _format_money(value))
    console.print(table)
    sys.exit(EXIT_CODE_PASS)


@app.command("verify-proof")
def verify_proof(
    payment_id: str = typer.Argument(..., help="Payment identifier"),
    proof: str = typer.Argument(..., help="Payment proof"),
    expected_hash: str = typer.Argument(..., help="Recorded proof hash"),
):
    """Check a payment proof against its recorded hash."""
    if verify_payment_proof(payment_id, proof, expected_hash):
        console.print("[green]✓[/] Payment proof verified")
        sys.exit(EXIT_CODE_PASS)
    console.print("[red]✗[/] Payment proof does not match")
    sys.exit(EXIT_CODE_FAIL)


def _load_config(path: Optional[Path]) -> PlatformConfig:
    """Load config from YAML when given, otherwise defaults plus environment overrides."""
    try:
        if path is not None:
            return load_platform_config(str(path))
        return PlatformConfig.from_env()
    except (FileNotFoundError, yaml.YAMLError, ValueError) as e:
        console.print(f"[red]Error loading config:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)


def _fail(error: ValidationError):
    """Report a validation error and exit with the failing code."""
    console.print(f"[red]{error.kind}:[/] {escape(error.message)}")
    sys.exit(EXIT_CODE_FAIL)


def _format_money(amount: Decimal, currency: str = "") -> str:
    """Format a money amount at display precision."""
    text = format_currency_amount(amount, DISPLAY_DECIMALS)
    return f"{text} {currency}" if currency else text


if __name__ == "__main__":
    app()
