"""
opcache-preload — CLI entrypoint.

Usage:
    python -m opcache_preload.main --help
    python -m opcache_preload.main generate
    python -m opcache_preload.main config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from opcache_preload import __version__
from opcache_preload.core.observability.logging_config import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="opcache-preload")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to preload.yml or composer.json (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """OPcache preload — generate a script that primes the opcode cache."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    configure_logging(debug=debug, verbose=verbose, quiet=quiet)


@cli.command()
@click.option(
    "--no-status-check",
    is_flag=True,
    help="Do not include OPcache status checks in the generated file "
    "(useful when it is included from another script).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def generate(ctx: click.Context, no_status_check: bool, as_json: bool) -> None:
    """Generate the preload file.

    Writes a PHP script (vendor/preload.php by default) that calls
    opcache_compile_file() for every discovered source file.

    --no-status-check overrides the no-status-check setting of the
    configuration file.
    """
    from opcache_preload.core.use_cases.preload import run_preload

    result = run_preload(
        config_path=ctx.obj.get("config_path"),
        no_status_check=no_status_check,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    if not ctx.obj.get("quiet"):
        click.secho(f"Preload file created successfully at {result.output_path}.", fg="green")
    if ctx.obj.get("verbose") or ctx.obj.get("debug"):
        click.secho(f"Preload script contains {result.count} files.", fg="yellow")
    if ctx.obj.get("debug"):
        click.secho(f"Elapsed time: {result.elapsed:.2f} sec.", fg="yellow")


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """List the files that would be preloaded, without writing anything."""
    from opcache_preload.core.use_cases.preload import list_files

    result = list_files(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    for path in result.files:
        click.echo(path)

    if not ctx.obj.get("quiet"):
        click.secho(f"\n{result.count} file(s)", fg="cyan", err=True)


@cli.group()
def config() -> None:
    """Preload configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate the preload configuration."""
    from opcache_preload.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)
        return

    if result.valid:
        assert result.config is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Config:     {result.config_path}")
        click.echo(f"   Template:   {result.template_path}")
        click.echo(f"   Files:      {len(result.config.files)}")
        click.echo(f"   Paths:      {len(result.config.paths)}")
        click.echo(f"   Extensions: {', '.join(result.config.extensions) or '(none)'}")
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


if __name__ == "__main__":
    cli()
