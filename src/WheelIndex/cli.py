"""Typer-based CLI for WheelIndex with Pydantic v2 configuration.

Commands:
  - run: Regenerate the index for every configured feed (or selected ones)
  - show-config: Print the effective configuration with secrets masked
  - validate-config: Validate a config file
  - schema: Print the JSON schema of the configuration
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from WheelIndex.config import export_config_schema, load_config, validate_config_file
from WheelIndex.errors import ConfigurationError
from WheelIndex.logging_utils import mask_sensitive_data, setup_logging
from WheelIndex.pipeline import build_generator
from WheelIndex.summary import build_summary_record, emit_console_summary

logger = logging.getLogger(__name__)
console = Console()
app = typer.Typer(help="WheelIndex: PEP 503 index generation for object stores")

# ============================================================================
# Commands
# ============================================================================


@app.command()
def run(
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (YAML/JSON)",
        envvar="WHEELINDEX_CONFIG",
    ),
    prefix: Optional[List[str]] = typer.Option(
        None, "--prefix", "-p", help="Only process this feed prefix (repeatable)"
    ),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o", help="Write pages to this directory instead of uploading"
    ),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit console logs as JSON"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Rotating JSON log file"),
    summary_path: Optional[str] = typer.Option(
        None, "--summary-path", help="Write the run summary as JSON to this path"
    ),
    strict: bool = typer.Option(False, "--strict", help="Exit non-zero if any feed failed"),
) -> None:
    """Regenerate index pages for the configured feeds."""
    setup_logging(level=log_level, json_logs=json_logs, log_file=log_file)

    try:
        cfg = load_config(path=config)
        generator = build_generator(cfg, output_dir=output_dir)
        summary = generator.run(prefix or None)
    except ConfigurationError as e:
        console.print(f"[red]✗ Configuration error: {e}[/red]")
        raise typer.Exit(code=1)
    except KeyError as e:
        console.print(f"[red]✗ Unknown feed prefix: {e.args[0]}[/red]")
        raise typer.Exit(code=2)

    emit_console_summary(summary)

    if summary_path:
        path = Path(summary_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(build_summary_record(summary), indent=2), encoding="utf-8")
        logger.info(f"Wrote run summary to {path}")

    if strict and summary.failures:
        console.print(f"[red]✗ {len(summary.failures)} feed(s) failed[/red]")
        raise typer.Exit(code=1)


@app.command("show-config")
def show_config(
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
        envvar="WHEELINDEX_CONFIG",
    ),
) -> None:
    """Print merged effective config with credentials masked."""
    try:
        cfg = load_config(path=config)
    except ConfigurationError as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        raise typer.Exit(code=1)
    data = mask_sensitive_data(cfg.model_dump(mode="json"))
    typer.echo(json.dumps(data, indent=2))


@app.command("validate-config")
def validate_config(
    config: str = typer.Argument(..., help="Path to config file"),
) -> None:
    """Validate a config file."""
    try:
        validate_config_file(config)
    except ConfigurationError as e:
        console.print(f"[red]✗ Invalid: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(Panel(f"[green]✓ Config valid[/green]\n{config}", title="WheelIndex"))


@app.command()
def schema() -> None:
    """Print the JSON schema of the configuration."""
    typer.echo(json.dumps(export_config_schema(), indent=2))


def main() -> None:
    """Invoke the Typer application."""

    app()


if __name__ == "__main__":  # pragma: no cover - manual CLI invocation helper
    main()
