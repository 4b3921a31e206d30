"""Exception hierarchy shared by the CLI layers and the generation engine.

Library code raises these; only tsgen.cli turns them into a terminal
error message and exit code.
"""

from __future__ import annotations

DOCS_MULTIPLE_SCHEMAS = "https://openapi-ts.pages.dev/cli/#multiple-schemas"


class TsgenError(Exception):
    """Base class for every fatal condition of a run."""


class DeprecatedFlagError(TsgenError):
    """A retired or renamed command-line flag was used."""


class GlobError(TsgenError):
    """A positional input contained a wildcard."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(
            "Globbing has been deprecated in favor of redocly.yaml's `apis` keys. "
            f"See {DOCS_MULTIPLE_SCHEMAS}"
        )


class ConfigError(TsgenError):
    """The declarative config or an environment setting is invalid."""


class OutputError(TsgenError):
    """A generated result could not be written to its destination."""


class TargetsFailedError(TsgenError):
    """One or more targets failed while running with the isolate policy."""

    def __init__(self, failures: dict[str, BaseException]) -> None:
        self.failures = failures
        names = ", ".join(failures)
        super().__init__(f"{len(failures)} target(s) failed: {names}")


class GenerationError(TsgenError):
    """The generation engine could not convert a schema."""


class SchemaLoadError(GenerationError):
    """A schema source could not be read or parsed."""
