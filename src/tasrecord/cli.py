"""tasctl - inspect, validate and compose record/replay scripts."""

from __future__ import annotations

import json
import logging
import sys
import traceback
from pathlib import Path

import click

from tasrecord import __version__
from tasrecord.config import ScriptConfig
from tasrecord.determinism import random_seed
from tasrecord.errors import TasError
from tasrecord.inspection import canonical_lines, summarize
from tasrecord.script.codec import Header, encode_header


def handle_error(error: Exception, debug: bool) -> None:
    """Handle errors with structured output.

    Script errors already carry their ``path:line:col: error:`` prefix.

    Args:
        error: The exception that occurred
        debug: Whether to show full traceback
    """
    if debug:
        traceback.print_exc()
    elif isinstance(error, TasError):
        click.echo(str(error), err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def load_config(config_path: Path | None, strict_lines: bool) -> ScriptConfig:
    config = ScriptConfig.from_yaml(config_path) if config_path else ScriptConfig()
    if strict_lines:
        config = config.with_overrides(strict_line_length=True)
    return config


def parse_seed(ctx: click.Context, param: click.Parameter, value: str | None) -> int | None:
    if value is None:
        return None
    if len(value) != 8 or any(c not in "0123456789abcdef" for c in value):
        raise click.BadParameter("expected 8 lowercase hex digits")
    return int(value, 16)


@click.group()
@click.version_option(version=__version__, prog_name="tasctl")
@click.option('--config', '-c', type=click.Path(exists=True, path_type=Path), help='Session YAML config')
@click.option('--strict-lines', is_flag=True, help='Treat over-long lines as errors')
@click.option('--debug', is_flag=True, help='Enable debug mode (show full tracebacks)')
@click.option('--verbose', '-v', is_flag=True, help='Log engine activity')
@click.pass_context
def cli(ctx: click.Context, config: Path | None, strict_lines: bool, debug: bool, verbose: bool):
    """tasctl - Deterministic record-and-replay scripts."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['strict_lines'] = strict_lines
    ctx.obj['debug'] = debug


@cli.command()
@click.argument('script', type=click.Path(path_type=Path))
@click.pass_context
def check(ctx: click.Context, script: Path):
    """Validate a script's header and every body line.

    Exits with status 1 and a path:line:col diagnostic on the first
    malformed line.

    Examples:
      tasctl check run.tas
    """
    debug = ctx.obj.get("debug", False)

    try:
        config = load_config(ctx.obj.get("config_path"), ctx.obj.get("strict_lines", False))
        summary = summarize(script, config)
        click.echo(
            f"{script}: ok ({summary.decisions} decisions, "
            f"{summary.rng_draws} rng draws, {summary.lines} lines)"
        )
    except Exception as e:
        handle_error(e, debug)


@cli.command()
@click.argument('script', type=click.Path(path_type=Path))
@click.option('--json', 'as_json', is_flag=True, help='Print JSON instead of text')
@click.pass_context
def info(ctx: click.Context, script: Path, as_json: bool):
    """Show a script's header and what it records.

    Examples:
      tasctl info run.tas
      tasctl info run.tas --json
    """
    debug = ctx.obj.get("debug", False)

    try:
        config = load_config(ctx.obj.get("config_path"), ctx.obj.get("strict_lines", False))
        summary = summarize(script, config)
        data = summary.to_dict()

        if as_json:
            click.echo(json.dumps(data, indent=2, sort_keys=True))
            return

        click.echo(f"Script: {script}")
        if summary.header.test_mode:
            click.echo("Header: @test")
        else:
            click.echo(f"Seed: {data['seed']}")
        click.echo(f"Decisions: {summary.decisions}")
        for name, count in data["decision_counts"].items():
            click.echo(f"  - {name}: {count}")
        click.echo(f"RNG draws: {summary.rng_draws}")
        for tag, count in data["rng_tags"].items():
            click.echo(f"  - {tag}: {count}")

    except Exception as e:
        handle_error(e, debug)


@cli.command()
@click.argument('script', type=click.Path(path_type=Path))
@click.option('--out', '-o', type=click.Path(path_type=Path), help='Write here instead of stdout')
@click.option('--in-place', '-i', is_flag=True, help='Rewrite the script itself')
@click.option('--check', 'check_only', is_flag=True, help='Exit 1 if the script is not canonical')
@click.pass_context
def fmt(ctx: click.Context, script: Path, out: Path | None, in_place: bool, check_only: bool):
    """Rewrite a script in canonical form.

    Drops comments and blank lines and normalizes spacing; the decoded
    content is unchanged.

    Examples:
      tasctl fmt run.tas
      tasctl fmt run.tas --in-place
      tasctl fmt run.tas --check
    """
    debug = ctx.obj.get("debug", False)

    try:
        if out is not None and in_place:
            raise click.UsageError("--out and --in-place are mutually exclusive")

        config = load_config(ctx.obj.get("config_path"), ctx.obj.get("strict_lines", False))
        text = "".join(canonical_lines(script, config))

        if check_only:
            if script.read_bytes() != text.encode("utf-8"):
                click.echo(f"{script}: not canonical", err=True)
                sys.exit(1)
            click.echo(f"{script}: canonical")
            return

        target = script if in_place else out
        if target is None:
            click.echo(text, nl=False)
        else:
            target.write_bytes(text.encode("utf-8"))
            click.echo(f"Wrote {target}")

    except click.UsageError:
        raise
    except Exception as e:
        handle_error(e, debug)


@cli.command()
@click.argument('script', type=click.Path(path_type=Path))
@click.option('--seed', callback=parse_seed, help='Seed as 8 lowercase hex digits (default: random)')
@click.option('--test', 'test_header', is_flag=True, help='Write the @test header instead of a seed')
@click.option('--force', is_flag=True, help='Overwrite an existing script')
@click.pass_context
def new(ctx: click.Context, script: Path, seed: int | None, test_header: bool, force: bool):
    """Create a script holding only a header, ready for hand-written decisions.

    Examples:
      tasctl new run.tas
      tasctl new run.tas --seed 0000beef
      tasctl new run.tas --test
    """
    debug = ctx.obj.get("debug", False)

    try:
        if seed is not None and test_header:
            raise click.UsageError("--seed and --test are mutually exclusive")
        if script.exists() and not force:
            click.echo(f"{script} already exists (use --force to overwrite)", err=True)
            sys.exit(1)

        if test_header:
            header = Header(test_mode=True)
        else:
            header = Header(seed=random_seed() if seed is None else seed)

        script.write_bytes(encode_header(header).encode("utf-8"))
        click.echo(f"Created {script}: {encode_header(header).strip()}")

    except click.UsageError:
        raise
    except Exception as e:
        handle_error(e, debug)


def main() -> None:
    """Entry point."""
    cli()


if __name__ == '__main__':
    main()
