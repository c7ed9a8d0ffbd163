"""
restgen — CLI entrypoint.

Usage:
    python -m restgen.main --help
    python -m restgen.main generate
    python -m restgen.main plan
    python -m restgen.main config check
"""

from __future__ import annotations

import json
import os
import shlex
import sys
from pathlib import Path

import click

from restgen import __version__
from restgen.core.observability.logging_config import (
    FILE_ENV,
    FILE_LEVEL_ENV,
    cli_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="restgen")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to restgen.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """restgen — generate REST model IDL and snapshots from annotated classes."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=cli_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(FILE_ENV),
        log_file_level=os.environ.get(FILE_LEVEL_ENV),
    )


def _load_config_or_exit(ctx: click.Context, as_json: bool):
    from restgen.core.config.loader import ConfigError, load_config

    try:
        return load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"ok": False, "error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--dry-run", is_flag=True, help="Plan but don't execute.")
@click.option("--mock", is_flag=True, help="Use mock adapter (no JVM is launched).")
@click.pass_context
def generate(ctx: click.Context, as_json: bool, dry_run: bool, mock: bool) -> None:
    """Generate IDL and snapshot files for every configured api.

    Examples:

        restgen generate

        restgen -c service/restgen.yml generate --dry-run
    """
    from restgen.core.use_cases.generate import run_generation

    config = _load_config_or_exit(ctx, as_json)
    result = run_generation(config, dry_run=dry_run, mock_mode=mock)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    quiet = ctx.obj.get("quiet", False)

    if result.skipped:
        if not quiet:
            click.secho("⊘ No input directories, nothing to generate", fg="yellow")
        return

    if result.report is None:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    mode_label = "[dry-run] " if dry_run else "[mock] " if mock else ""
    if not quiet:
        click.secho(f"\n⚡ {mode_label}{config.task_name}", fg="cyan", bold=True)
        click.echo(f"   Apis: {len(result.units)} | Invocations: {result.plan.total_actions}")
        click.echo()

    receipts = {r.action_id: r for r in report.receipts}
    for action in result.plan.actions:
        receipt = receipts.get(action.id)
        label = f"{action.api_name} {action.tool}"
        if receipt is None:
            click.secho(f"   · {label} ", fg="white", nl=False)
            click.echo("(not run)")
        elif receipt.ok:
            click.secho(f"   ✓ {label}", fg="green", nl=False)
            timing = f" ({receipt.duration_ms}ms)" if receipt.duration_ms else ""
            click.echo(timing)
        elif receipt.failed:
            click.secho(f"   ✗ {label}", fg="red", nl=False)
            click.echo(f"  {receipt.error}")
        elif not quiet:
            click.secho(f"   ⊘ {label} ", fg="yellow", nl=False)
            click.echo(f"({receipt.output})")

    click.echo()
    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(
        report.status, "white"
    )
    click.secho(
        f"   Result: {report.succeeded + report.skipped}/{result.plan.total_actions} succeeded",
        fg=status_color,
        bold=True,
    )

    if not result.ok:
        click.echo()
        sys.exit(1)

    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, as_json: bool) -> None:
    """Show the generator invocations a run would perform."""
    from restgen.adapters.java.exec import build_command
    from restgen.core.use_cases.generate import plan_generation

    config = _load_config_or_exit(ctx, as_json)

    if not config.input_dirs:
        if as_json:
            click.echo(json.dumps({"skipped": True}, indent=2))
        else:
            click.secho("⊘ No input directories, nothing to generate", fg="yellow")
        return

    execution_plan = plan_generation(config)

    if as_json:
        click.echo(json.dumps(execution_plan.to_dict(), indent=2))
        return

    for step in execution_plan.steps:
        click.secho(f"\n📦 {step.unit.display_name}", fg="cyan", bold=True)
        for action in step.actions:
            click.secho(f"   {action.tool}:", fg="white", bold=True)
            click.echo(f"     {shlex.join(build_command(config.java, action))}")
    click.echo()


@cli.group()
def config() -> None:
    """Generation configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate restgen.yml configuration."""
    from restgen.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.config is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Task: {result.config.task_name}")
        click.echo(f"   Apis: {len(result.config.apis) or 'ungrouped'}")
        click.echo(f"   Input directories: {len(result.config.input_dirs)}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


if __name__ == "__main__":
    cli()
