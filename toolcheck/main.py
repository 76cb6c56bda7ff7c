"""
toolcheck — CLI entrypoint.

Usage:
    python -m toolcheck.main --help
    python -m toolcheck.main check
    python -m toolcheck.main check --autofix
    python -m toolcheck.main list
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from toolcheck import __version__
from toolcheck.core.models.report import RemediationBlock
from toolcheck.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="toolcheck")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to toolcheck.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """toolcheck — verify the Windows build prerequisites."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    else:
        level = os.environ.get("TOOLCHECK_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("TOOLCHECK_LOG_FILE"),
        log_file_level=os.environ.get("TOOLCHECK_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.option(
    "--autofix",
    "auto_fix",
    is_flag=True,
    help="Install missing required tools with an available package manager.",
)
@click.option(
    "--fix-env-only",
    "set_env_only",
    is_flag=True,
    help="Only set missing user environment variables; never install.",
)
@click.option("--quiet", "-q", is_flag=True, help="Only print missing tools.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(
    ctx: click.Context,
    auto_fix: bool,
    set_env_only: bool,
    quiet: bool,
    as_json: bool,
) -> None:
    """Check which build prerequisites are usable.

    Exit code 0 when every required tool is present, 1 when at least
    one is missing, 2 when the check itself could not run.

    Examples:

        toolcheck check

        toolcheck check --autofix

        toolcheck check --fix-env-only --quiet
    """
    from toolcheck.core.models.options import CheckOptions
    from toolcheck.core.use_cases.check import run_check

    if auto_fix and set_env_only:
        raise click.UsageError("--autofix and --fix-env-only are mutually exclusive.")

    options = CheckOptions(quiet=quiet, auto_fix=auto_fix, set_env_only=set_env_only)
    result = run_check(
        options=options,
        config_path=ctx.obj.get("config_path"),
        provider=ctx.obj.get("provider"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.exit_code:
            sys.exit(result.exit_code)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(result.exit_code)

    report = result.report
    assert report is not None

    for outcome in report.outcomes:
        if outcome.present:
            if quiet:
                continue
            click.secho(f"   ✓ {outcome.name} ", fg="green", nl=False)
            env_note = f"  ({outcome.env_var} not set)" if outcome.env_var_missing else ""
            click.echo(f"{outcome.detail}{env_note}")
        elif outcome.required:
            click.secho(f"   ✗ {outcome.name} ", fg="red", nl=False)
            click.echo(f"({outcome.detail})")
        else:
            click.secho(f"   ○ {outcome.name} ", fg="yellow", nl=False)
            click.echo(f"({outcome.detail}, optional)")

    if report.fixes:
        click.echo()
        click.secho("   Fixes:", fg="white", bold=True)
        for fix in report.fixes:
            if fix.ok:
                click.secho(f"     ✓ {fix.requirement}", fg="green", nl=False)
            elif fix.failed:
                click.secho(f"     ✗ {fix.requirement}", fg="red", nl=False)
            else:
                click.secho(f"     ⊘ {fix.requirement}", fg="yellow", nl=False)
            click.echo(f" [{fix.kind}] {fix.command or fix.detail}")
            if fix.command and fix.detail and not fix.ok:
                click.echo(f"       │ {fix.detail}")

    if report.env_hints:
        click.echo()
        click.secho("⚠️  Environment variables not set:", fg="yellow")
        for hint in report.env_hints:
            click.echo(f"     {hint}")

    if not report.success:
        click.echo()
        click.secho("❌ Missing prerequisites. Install with one of:", fg="red", bold=True)
        _echo_remediation(report.remediation)
        click.echo()
        sys.exit(report.exit_code)

    if report.remediation and not quiet:
        click.echo()
        click.secho("   Optional tools can be installed with:", fg="white")
        _echo_remediation(report.remediation)

    if not quiet:
        click.echo()
        click.secho("✅ All required prerequisites are present", fg="green", bold=True)
        click.echo()


def _echo_remediation(blocks: list[RemediationBlock]) -> None:
    for block in blocks:
        click.secho(f"   {block.manager}:", bold=True)
        for command in block.commands:
            click.echo(f"     {command}")


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_requirements(ctx: click.Context, as_json: bool) -> None:
    """List the requirements that `check` probes, in check order."""
    from toolcheck.core.errors import ConfigError
    from toolcheck.core.use_cases.check import EXIT_FATAL, load_catalog

    try:
        view = load_catalog(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(EXIT_FATAL)

    if as_json:
        click.echo(json.dumps(view.to_dict(), indent=2))
        return

    click.secho(f"\n📋 Requirements: {len(view.requirements)}", fg="cyan", bold=True)
    if view.config_path:
        click.echo(f"   Config: {view.config_path}")
    click.echo(f"   Package managers: {', '.join(view.package_managers)}")
    click.echo()

    for req in view.requirements:
        label = "" if req.required else " (optional)"
        click.secho(f"   • {req.name}{label}", bold=True, nl=False)
        click.echo(f"  → {req.cli}")
        for directory in req.install_dirs:
            click.echo(f"       dir: {directory}")
        if req.env_var:
            click.echo(f"       env: {req.env_var}")
        for manager in view.package_managers:
            rem = req.remediation_for(manager)
            if rem:
                click.echo(f"       {manager}: {rem.text}")

    click.echo()


if __name__ == "__main__":
    cli()
