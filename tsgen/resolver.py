"""Decide which schemas to convert and where each result goes.

The operating mode is computed once as a Mode value and then dispatched
on.  Named APIs in the config always win over a positional argument.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

from .config import ExternalConfig, default_config, load_config, locate_config
from .errors import ConfigError, GlobError
from .flags import InvocationOptions

logger = logging.getLogger(__name__)

# A path on disk, a URL string, or a readable stream
SchemaSource = Union[Path, str, BinaryIO]

STDIN_LABEL = "stdin"
_URL_SCHEMES = ("http://", "https://")


class Mode(enum.Enum):
    MULTI_TARGET = "multi-target"
    STDIN = "stdin"
    SINGLE_FILE = "single-file"


@dataclass(frozen=True)
class Destination:
    """Where a result is written; ``path=None`` means stdout."""

    path: Path | None = None

    @property
    def is_stdout(self) -> bool:
        return self.path is None


@dataclass(frozen=True)
class GenerationTarget:
    label: str
    source: SchemaSource
    destination: Destination
    display_output: str | None = None
    overrides: dict[str, bool] = field(default_factory=dict)


@dataclass(frozen=True)
class SourcePlan:
    mode: Mode
    targets: tuple[GenerationTarget, ...]
    config: ExternalConfig


def is_url(locator: str) -> bool:
    return locator.startswith(_URL_SCHEMES)


def resolve_locator(locator: str, base: Path) -> Path | str:
    """Resolve a relative path against base; URLs pass through.

    ``file:`` URLs are converted to paths, relative ones against base.
    """
    if is_url(locator):
        return locator
    if locator.startswith("file:"):
        locator = url2pathname(urlparse(locator).path)
    path = Path(locator).expanduser()
    return path if path.is_absolute() else base / path


def decide_mode(config: ExternalConfig, input_arg: str | None) -> Mode:
    """First matching mode wins: config APIs, then stdin, then a file."""
    if config.apis:
        return Mode.MULTI_TARGET
    if not input_arg:
        return Mode.STDIN
    return Mode.SINGLE_FILE


def _output_destination(options: InvocationOptions, cwd: Path) -> Destination:
    if not options.output:
        return Destination()
    return Destination(path=cwd / Path(options.output).expanduser())


def _warn_shared_destinations(targets: list[GenerationTarget]) -> None:
    owners: dict[Path, str] = {}
    for target in targets:
        path = target.destination.path
        if path is None:
            continue
        key = path.resolve()
        if key in owners:
            logger.warning(
                "APIs %s and %s both write to %s; the last one to finish wins.",
                owners[key], target.label, target.display_output,
            )
        else:
            owners[key] = target.label


def _config_targets(config: ExternalConfig, cwd: Path) -> list[GenerationTarget]:
    base = config.root_dir or cwd
    targets = []
    for api in config.apis:
        output = resolve_locator(api.output, base)
        if isinstance(output, str):
            raise ConfigError(f"API {api.name}: output must be a file path, not a URL")
        targets.append(GenerationTarget(
            label=api.name,
            source=resolve_locator(api.root, base),
            destination=Destination(path=output),
            display_output=api.output,
            overrides=api.overrides,
        ))
    _warn_shared_destinations(targets)
    return targets


async def load_external_config(options: InvocationOptions, cwd: Path) -> ExternalConfig:
    """Find and load the config in a worker thread, or synthesize one."""

    def _load() -> ExternalConfig:
        path = locate_config(options.redoc, cwd)
        if path is None:
            logger.debug("No Redocly config found; using defaults")
            return default_config()
        return load_config(path)

    return await asyncio.to_thread(_load)


async def resolve_sources(
    options: InvocationOptions,
    input_arg: str | None,
    *,
    cwd: Path | None = None,
    stdin: BinaryIO | None = None,
) -> SourcePlan:
    """Produce the ordered targets for this run."""
    cwd = cwd or Path.cwd()

    if input_arg and "*" in input_arg:
        raise GlobError(input_arg)

    config = await load_external_config(options, cwd)
    mode = decide_mode(config, input_arg)
    logger.debug("Resolved mode %s", mode.value)

    if mode is Mode.MULTI_TARGET:
        if input_arg:
            logger.warning(
                "APIs are specified both in Redocly Config and CLI argument. "
                "Only using Redocly config."
            )
        return SourcePlan(mode, tuple(_config_targets(config, cwd)), config)

    destination = _output_destination(options, cwd)
    if mode is Mode.STDIN:
        target = GenerationTarget(
            label=STDIN_LABEL,
            source=stdin if stdin is not None else sys.stdin.buffer,
            destination=destination,
            display_output=options.output,
        )
    else:
        target = GenerationTarget(
            label=input_arg,
            source=resolve_locator(input_arg, cwd),
            destination=destination,
            display_output=options.output,
        )
    return SourcePlan(mode, (target,), config)
