"""CLI entry point for saucecart."""

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .backend.catalog import CATALOG
from .backend.store import SessionStore
from .config import Config, load_config
from .models import ApiResponse, SaucecartError, ScenarioReport
from .scenarios.runner import ScenarioRunner
from .testdata import generate_test_data
from .tracing import init_tracing

console = Console()


@click.group()
@click.version_option(package_name="saucecart")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Log every store operation")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """saucecart - in-process mock of the shop's cart and checkout API."""
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        config = load_config(Path(config_path) if config_path else None)
    except SaucecartError as e:
        console.print(f"[bold red]✗ {escape(str(e))}[/]")
        ctx.exit(2)
    ctx.obj["config"] = config

    tracing = init_tracing(config)
    ctx.obj["tracing"] = tracing
    ctx.call_on_close(tracing.flush)

    if config.tracing.enabled:
        console.print("[dim]Langfuse tracing enabled[/]")


@main.command()
def products() -> None:
    """List the product catalog."""
    table = Table(title="Catalog")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Price", style="green", justify="right")
    table.add_column("Image", style="dim")

    for product in CATALOG:
        table.add_row(product.id, product.name, product.price, product.image_url)

    console.print(table)


@main.command()
@click.option("--username", "-u", default=None, help="Login username")
@click.option("--password", "-p", default=None, help="Login password")
@click.pass_context
def demo(ctx: click.Context, username: str | None, password: str | None) -> None:
    """Walk through login, cart and checkout against a fresh store."""
    config: Config = ctx.obj["config"]
    store = SessionStore(config, tracing=ctx.obj.get("tracing"))

    username = username if username is not None else config.auth.valid_username
    password = password if password is not None else config.auth.valid_password

    console.print(f"\n[bold blue]🛒 Shopping as:[/] {escape(username)}\n")

    response = store.login(username, password)
    _show_step("login", response)
    if not response.ok:
        ctx.exit(1)
    store.set_token(response.json()["token"])

    _show_step("get products", store.get_products())
    for product in CATALOG:
        _show_step(f"add {product.id}", store.add_to_cart(product.id))
    _show_step("cart", store.get_cart())

    response = store.checkout(generate_test_data().checkout_info())
    _show_step("checkout", response)
    if response.ok:
        _show_step("order details", store.get_order_details(response.json()["orderId"]))

    console.print()


@main.command()
@click.argument("scenario", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "-f", "output_format", type=click.Choice(["table", "json"]), default="table")
@click.pass_context
def run(ctx: click.Context, scenario: str, output_format: str) -> None:
    """Run a scenario file and report mismatched expectations."""
    runner = ScenarioRunner(ctx.obj["config"], tracing=ctx.obj["tracing"])

    try:
        report = runner.run_file(Path(scenario))
    except SaucecartError as e:
        console.print(f"[bold red]✗ {escape(str(e))}[/]")
        ctx.exit(2)

    if output_format == "json":
        click.echo(json.dumps(_report_to_dict(report), indent=2))
    else:
        _show_report(report)

    if not report.passed:
        ctx.exit(1)


def _show_step(label: str, response: ApiResponse) -> None:
    """Print one request outcome."""
    colour = "green" if response.ok else "red"
    console.print(f"[{colour}]{response.status}[/] [cyan]{label}[/] [dim]{escape(response.text())}[/]")


def _show_report(report: ScenarioReport) -> None:
    table = Table(title=f"Scenario: {escape(report.name)}")
    table.add_column("Step", style="cyan", max_width=30)
    table.add_column("Request", style="dim")
    table.add_column("Expected", justify="right")
    table.add_column("Actual", justify="right")
    table.add_column("Result")

    for step in report.steps:
        expected = str(step.expected_status) if step.expected_status is not None else "-"
        result = "[green]✓[/]" if step.passed else f"[red]✗ {escape('; '.join(step.failures))}[/]"
        table.add_row(escape(step.name), escape(f"{step.method} {step.path}"), expected, str(step.actual_status), result)

    console.print(table)

    if report.passed:
        console.print(f"\n[bold green]✓ All {len(report.steps)} steps passed[/]\n")
    else:
        console.print(f"\n[bold red]✗ {report.failed_count} of {len(report.steps)} steps failed[/]\n")


def _report_to_dict(report: ScenarioReport) -> dict:
    return {
        "name": report.name,
        "passed": report.passed,
        "steps": [
            {
                "name": step.name,
                "method": step.method,
                "path": step.path,
                "expected_status": step.expected_status,
                "actual_status": step.actual_status,
                "passed": step.passed,
                "failures": step.failures,
                "body": step.body,
            }
            for step in report.steps
        ],
    }


if __name__ == "__main__":
    main()
