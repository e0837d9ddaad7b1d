"""
restartmonkey — CLI entrypoint.

Usage:
    restartmonkey --help
    restartmonkey --cron                  # what the periodic job runs
    restartmonkey --dry-run --verbose run
    restartmonkey scan
    restartmonkey config check
    restartmonkey facts
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from restartmonkey import __version__
from restartmonkey.core.observability.logging_config import resolve_level, setup_logging


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="restartmonkey")
@click.option("--verbose", "-v", is_flag=True, help="Run verbosely.")
@click.option("--debug", is_flag=True, help="Print debug information.")
@click.option(
    "--cron", "-c", is_flag=True,
    help="Only report errors and warnings, overwritten by verbose or debug.",
)
@click.option("--dry-run", "-d", is_flag=True, help="Don't do anything for real.")
@click.option(
    "--wait-count", "-w", type=click.IntRange(min=0), default=None,
    help="Schedule service restart after n runs.",
)
@click.option(
    "--config", "config_path", type=click.Path(dir_okay=False), default=None,
    help="Path to restartmonkey.conf (default: /etc/restartmonkey.conf).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    debug: bool,
    cron: bool,
    dry_run: bool,
    wait_count: int | None,
    config_path: str | None,
) -> None:
    """restartmonkey — restart services that still use replaced libraries."""
    ctx.ensure_object(dict)
    ctx.obj["dry_run"] = dry_run
    ctx.obj["wait_count"] = wait_count
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    level = resolve_level(
        verbose=verbose or debug,
        debug=debug,
        cron=cron,
        env_level=os.environ.get("RESTARTMONKEY_LOG_LEVEL"),
    )
    setup_logging(
        level=level,
        log_file=os.environ.get("RESTARTMONKEY_LOG_FILE"),
        log_file_level=os.environ.get("RESTARTMONKEY_LOG_FILE_LEVEL"),
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option(
    "--job-file", type=click.Path(dir_okay=False), default=None,
    help="Job table (default: /var/spool/restartmonkey/jobs.json).",
)
@click.option(
    "--reboot-file", type=click.Path(dir_okay=False), default=None,
    help="Reboot marker (default: /var/run/reboot-monkey).",
)
@click.pass_context
def run(
    ctx: click.Context,
    as_json: bool = False,
    job_file: str | None = None,
    reboot_file: str | None = None,
) -> None:
    """Detect affected services and restart, schedule or flag them."""
    from restartmonkey.core.context import RunOptions
    from restartmonkey.core.use_cases.run import run_restartmonkey

    options = RunOptions(
        dry_run=ctx.obj.get("dry_run", False),
        wait_count=ctx.obj.get("wait_count"),
        config_path=ctx.obj.get("config_path"),
        job_file=Path(job_file) if job_file else None,
        reboot_file=Path(reboot_file) if reboot_file else None,
    )
    result = run_restartmonkey(options)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option(
    "--reboot-file", type=click.Path(dir_okay=False), default=None,
    help="Reboot marker to report (default: /var/run/reboot-monkey).",
)
def scan(as_json: bool, reboot_file: str | None) -> None:
    """Show processes using replaced libraries or executables (read-only)."""
    from restartmonkey.core.use_cases.scan import run_scan

    report = run_scan(reboot_file=Path(reboot_file) if reboot_file else None)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    if not report.lines:
        click.secho("✅ No processes use replaced libraries or executables", fg="green")
        return

    for line in report.lines:
        click.echo(line)


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate restartmonkey.conf and show the effective policy."""
    from restartmonkey.core.use_cases.config_check import check_config

    result = check_config(path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)
        return

    if not result.valid:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")
        click.echo()
        sys.exit(1)

    assert result.policy is not None  # guaranteed when valid
    click.secho("✅ Configuration is valid", fg="green", bold=True)
    source = result.path if result.exists else f"{result.path} (missing, defaults only)"
    click.echo(f"   File: {source}")
    click.echo(f"   OS levels: {', '.join(result.levels)}")
    click.echo(f"   Blacklist: {', '.join(result.policy.effective_blacklist())}")
    click.echo(f"   Must reboot: {', '.join(result.policy.effective_must_reboot()) or '-'}")
    click.echo(f"   Whitelist: {', '.join(sorted(result.policy.config.whitelist)) or '-'}")
    click.echo(f"   Ignore: {', '.join(sorted(result.policy.config.ignore)) or '-'}")
    click.echo()


@cli.command()
@click.option(
    "--reboot-file", type=click.Path(dir_okay=False), default=None,
    help="Reboot marker to read (default: /var/run/reboot-monkey).",
)
def facts(reboot_file: str | None) -> None:
    """Print the reboot fact read by external monitoring."""
    from restartmonkey.core.use_cases.facts import reboot_fact

    for key, value in reboot_fact(Path(reboot_file) if reboot_file else None).items():
        click.echo(f"{key}={value}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
