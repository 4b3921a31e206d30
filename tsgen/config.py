"""Locate and load the Redocly declarative config (redocly.yaml).

Each API entry is validated once here, so the resolver only ever sees
entries that carry a root and an output path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import DOCS_MULTIPLE_SCHEMAS, ConfigError
from .flags import switch_name

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ("redocly.yaml", "redocly.yml", ".redocly.yaml", ".redocly.yml")

# Reserved extension key holding this tool's per-API settings
REDOC_CONFIG_KEY = "x-openapi-ts"
# Unprefixed form accepted by early releases
DEPRECATED_CONFIG_KEY = "openapi-ts"


@dataclass(frozen=True)
class ApiEntry:
    """One named API from the ``apis`` mapping."""

    name: str
    root: str
    output: str
    overrides: dict[str, bool] = field(default_factory=dict)


@dataclass(frozen=True)
class ExternalConfig:
    """A loaded (or synthesized) declarative config."""

    config_file: Path | None = None
    apis: tuple[ApiEntry, ...] = ()

    @property
    def root_dir(self) -> Path | None:
        """Directory relative locators resolve against, if any."""
        return self.config_file.parent if self.config_file else None


def default_config() -> ExternalConfig:
    """Minimal config used when no redocly.yaml exists."""
    return ExternalConfig()


def find_config(start_dir: Path | None = None) -> Path | None:
    """Return the config file in start_dir (default: cwd), or None."""
    directory = (start_dir or Path.cwd()).resolve()
    found = [directory / name for name in CONFIG_FILE_NAMES if (directory / name).is_file()]
    if len(found) > 1:
        names = ", ".join(p.name for p in found)
        raise ConfigError(f"Multiple configuration files are not allowed. Found: {names}")
    return found[0] if found else None


def locate_config(redoc: str | None, cwd: Path) -> Path | None:
    """Find the config for a run, honoring ``--redoc`` when given."""
    if not redoc:
        return find_config(cwd)
    candidate = Path(redoc)
    if not candidate.is_absolute():
        candidate = cwd / candidate
    if candidate.is_file():
        return candidate.resolve()
    return find_config(candidate.parent)


def _parse_overrides(name: str, settings: dict[str, Any]) -> dict[str, bool]:
    overrides: dict[str, bool] = {}
    for key, value in settings.items():
        if key == "output":
            continue
        option = switch_name(key)
        if option is None:
            logger.debug("API %s: ignoring unknown %s key %r", name, REDOC_CONFIG_KEY, key)
            continue
        if not isinstance(value, bool):
            raise ConfigError(f"API {name}: `{REDOC_CONFIG_KEY}.{key}` must be true or false")
        overrides[option] = value
    return overrides


def _parse_api(name: str, entry: Any) -> ApiEntry:
    """Validate a single ``apis`` entry."""
    if not isinstance(entry, dict):
        raise ConfigError(f"API {name} must be a mapping")

    settings = entry.get(REDOC_CONFIG_KEY)
    if not isinstance(settings, dict) or not settings.get("output"):
        if DEPRECATED_CONFIG_KEY in entry:
            raise ConfigError(
                f'Please rename "{DEPRECATED_CONFIG_KEY}" to "{REDOC_CONFIG_KEY}" '
                "in your Redoc config."
            )
        raise ConfigError(
            f"API {name} is missing an `{REDOC_CONFIG_KEY}.output` key. "
            f"See {DOCS_MULTIPLE_SCHEMAS}."
        )

    root = entry.get("root")
    if not root or not isinstance(root, str):
        raise ConfigError(f"API {name} is missing a `root` key.")

    return ApiEntry(
        name=name,
        root=root,
        output=str(settings["output"]),
        overrides=_parse_overrides(name, settings),
    )


def load_config(path: Path) -> ExternalConfig:
    """Load and validate a redocly.yaml file."""
    logger.debug("Loading Redocly config from %s", path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc.strerror or exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    apis = raw.get("apis") or {}
    if not isinstance(apis, dict):
        raise ConfigError(f"`apis` in {path} must map API names to entries")

    entries = tuple(_parse_api(str(name), entry) for name, entry in apis.items())
    return ExternalConfig(config_file=path, apis=entries)
