"""Write generated results to stdout or to a file.

stdout gets the result bytes and nothing else.  File writes create parent
directories first and report a completion line only after the write.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import time
from pathlib import Path

import click

from . import __version__
from .errors import OutputError
from .invoker import GenerationResult
from .resolver import GenerationTarget

logger = logging.getLogger(__name__)


def format_time(ms: float) -> str:
    """Format elapsed milliseconds as 12.3ms, 4.5s or 1.2m."""
    if ms < 1000:
        return f"{round(ms, 1):g}ms"
    if ms < 60000:
        return f"{round(ms / 1000, 1):g}s"
    return f"{round(ms / 60000, 1):g}m"


def banner() -> None:
    click.echo(f"✨ {click.style(f'openapi-tsgen {__version__}', bold=True)}")


def done(label: str, output: str, elapsed_ms: float) -> None:
    """Print the completion line for one written file."""
    arrow = click.style(f"{label} → {click.style(output, bold=True)}", fg="green")
    click.echo(f"🚀 {arrow} {click.style(f'[{format_time(elapsed_ms)}]', dim=True)}")


def _write_file(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


async def write_result(
    result: GenerationResult,
    target: GenerationTarget,
    *,
    started: float,
) -> None:
    """Perform exactly one write for a target and report it."""
    path = target.destination.path
    if path is None:
        stream = sys.stdout.buffer
        stream.write(result.text.encode("utf-8"))
        stream.flush()
        return

    try:
        await asyncio.to_thread(_write_file, path, result.text)
    except OSError as exc:
        raise OutputError(f"Could not write {path}: {exc.strerror or exc}") from exc

    logger.debug("Wrote %d bytes to %s", len(result.text), path)
    elapsed_ms = (time.perf_counter() - started) * 1000
    done(target.label, target.display_output or str(path), elapsed_ms)
