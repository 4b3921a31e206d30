"""Command-line interface: openapi-tsgen [input] [options]

Usage:
    openapi-tsgen schema.yaml -o schema.d.ts
    cat schema.yaml | openapi-tsgen > schema.d.ts
    openapi-tsgen --redoc ./redocly.yaml
"""

from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path
from typing import Any

import click

from . import __version__
from .errors import TsgenError
from .flags import InvocationOptions, check_legacy_flags
from .logging_config import setup_logging
from .orchestrator import run
from .router import banner
from .settings import Settings

# Elapsed times in completion lines are measured from here
TIME_START = time.perf_counter()


class CLIError(click.ClickException):
    """A fatal error shown as a red ✘ line on stderr."""

    def show(self, file: Any = None) -> None:
        click.echo(click.style(f"✘  {self.format_message()}", fg="red"), err=True, file=file)


class LegacyAwareCommand(click.Command):
    """Rejects retired flags before click parses (or helps with) anything."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            check_legacy_flags(args)
        except TsgenError as exc:
            raise CLIError(str(exc)) from exc
        return super().parse_args(ctx, args)


@click.command(
    cls=LegacyAwareCommand,
    context_settings={"help_option_names": ["--help"]},
)
@click.version_option(__version__, "--version", message="v%(version)s")
@click.argument("input_arg", metavar="[INPUT]", required=False)
@click.option("--redoc", "-c", metavar="PATH", help="Path to Redocly config (default: redocly.yaml).")
@click.option("--output", "-o", metavar="PATH", help="Output file (if not specified in redocly.yaml).")
@click.option("--enum", is_flag=True, help="Export true TS enums instead of unions.")
@click.option("--export-type", "-t", is_flag=True, help="Export top-level `type` instead of `interface`.")
@click.option("--immutable", is_flag=True, help="Generate readonly types.")
@click.option("--additional-properties", is_flag=True, help="Treat schema objects as if `additionalProperties: true` is set.")
@click.option("--empty-objects-unknown", is_flag=True, help="Generate `unknown` instead of `Record<string, never>` for empty objects.")
@click.option("--default-non-nullable", is_flag=True, help="Treat properties with a default value as non-optional.")
@click.option("--array-length", is_flag=True, help="Generate tuples using array minItems / maxItems.")
@click.option("--path-params-as-types", is_flag=True, help="Convert paths to template literal types.")
@click.option("--alphabetize", is_flag=True, help="Sort object keys alphabetically.")
@click.option("--exclude-deprecated", is_flag=True, help="Exclude deprecated types.")
@click.option("--content-never", is_flag=True, help="Emit `content?: never` for responses without content.")
def cli(input_arg: str | None, **params: Any) -> None:
    """Generate TypeScript types from an OpenAPI schema (path, URL or stdin)."""
    try:
        settings = Settings.from_env()
    except TsgenError as exc:
        raise CLIError(str(exc)) from exc
    setup_logging(settings.log_level)

    options = InvocationOptions.from_params(params)
    if options.output:
        banner()

    try:
        asyncio.run(run(
            options,
            input_arg,
            cwd=Path.cwd(),
            stdin=sys.stdin.buffer,
            started=TIME_START,
            policy=settings.failure_policy,
        ))
    except TsgenError as exc:
        raise CLIError(str(exc)) from exc
    except OSError as exc:
        raise CLIError(str(exc)) from exc


def main() -> None:
    """Console-script entry point."""
    cli(prog_name="openapi-tsgen")
