"""CLI entry point for uiperf."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from uiperf.commands import PerfContext, compare_lighthouse_report
from uiperf.errors import UiperfError
from uiperf.models.config import PerfConfig, ScenarioConfig
from uiperf.reporter.metrics_report import MetricsReportManager
from uiperf.suite import PerfSuite

console = Console()

DEFAULT_CONFIG = "uiperf-config.json"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_config(config: str) -> PerfConfig:
    try:
        return PerfConfig.load(config)
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config}[/red]")
        console.print("Run 'uiperf init' to create a default config.")
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """UI performance budgets and Lighthouse baseline checks"""
    setup_logging(verbose)


@cli.command()
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def run(config: str) -> None:
    """Visit every scenario page: measure components, audit, compare."""
    cfg = _load_config(config)
    suite = PerfSuite(cfg)
    result = suite.run()
    result_path = suite.save_result(result)

    console.print("\n[bold green]Performance suite complete[/bold green]")
    table = Table(title="Scenarios")
    table.add_column("Page", style="bold")
    table.add_column("Status")
    table.add_column("Budget violations")
    table.add_column("Lighthouse")
    for scenario in result.scenarios:
        status = "[green]pass[/green]" if scenario.status == "pass" else "[red]error[/red]"
        lighthouse = ", ".join(
            f"{key}: {value}" for key, value in scenario.lighthouse_summary.items()
        ) or "-"
        table.add_row(scenario.page_key, status, str(len(scenario.performance_log)), lighthouse)
    console.print(table)

    for scenario in result.scenarios:
        for entry in scenario.performance_log:
            console.print(f"  [yellow]{entry.metric}[/yellow] {entry.value}")
        if scenario.error_message:
            console.print(f"  [red]{scenario.page_key}: {scenario.error_message}[/red]")

    console.print(f"  Result: [blue]{result_path}[/blue]")
    if result.errors:
        sys.exit(1)


@cli.command()
@click.argument("page_key")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def compare(page_key: str, config: str) -> None:
    """Compare an existing Lighthouse report for PAGE_KEY with its baseline."""
    cfg = _load_config(config)
    try:
        summary = asyncio.run(compare_lighthouse_report(PerfContext(config=cfg), page_key))
    except (FileNotFoundError, UiperfError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if summary is None:
        console.print(f"[yellow]No Lighthouse baseline found for: {page_key}[/yellow]")
        return
    for key, value in summary.items():
        console.print(f"  {key}: {value}")


@cli.command()
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def report(config: str) -> None:
    """Show the merged Lighthouse metrics report."""
    cfg = _load_config(config)
    try:
        metrics = MetricsReportManager(cfg.metrics_report_path).load()
    except UiperfError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if not metrics:
        console.print("[yellow]No Lighthouse metrics recorded yet[/yellow]")
        return
    table = Table(title=str(cfg.metrics_report_path))
    table.add_column("Key", style="bold")
    table.add_column("Result")
    for key in sorted(metrics):
        table.add_row(key, metrics[key])
    console.print(table)


@cli.command()
@click.option("--base-url", "-u", prompt="Base URL", help="Application URL to test")
def init(base_url: str) -> None:
    """Create a default configuration file."""
    config_path = Path(DEFAULT_CONFIG)
    if config_path.exists():
        if not click.confirm(f"{DEFAULT_CONFIG} already exists. Overwrite?"):
            return

    cfg = PerfConfig(
        base_url=base_url,
        scenarios=[ScenarioConfig(page_key="home", path="/")],
    )
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nAdd baselines to:")
    console.print(f"  [blue]{cfg.performance_baselines_path}[/blue]")
    console.print(f"  [blue]{cfg.lighthouse_baselines_path}[/blue]")
    console.print("\nThen run:")
    console.print("  [blue]uiperf run[/blue]")


if __name__ == "__main__":
    cli()
