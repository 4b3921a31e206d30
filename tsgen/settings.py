"""Environment-driven settings.

    TSGEN_LOG_LEVEL        DEBUG | INFO | WARNING (default) | ERROR
    TSGEN_FAILURE_POLICY   fail-fast (default) | isolate
"""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from typing import Mapping

from .errors import ConfigError

ENV_LOG_LEVEL = "TSGEN_LOG_LEVEL"
ENV_FAILURE_POLICY = "TSGEN_FAILURE_POLICY"


class FailurePolicy(enum.Enum):
    """How a failing target affects its siblings in multi-target mode."""

    FAIL_FAST = "fail-fast"
    ISOLATE = "isolate"


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    failure_policy: FailurePolicy = FailurePolicy.FAIL_FAST

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Read settings from the environment, rejecting unknown values."""
        env = os.environ if environ is None else environ

        level = env.get(ENV_LOG_LEVEL, "WARNING").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigError(f"{ENV_LOG_LEVEL}={level!r} is not a log level")

        raw_policy = env.get(ENV_FAILURE_POLICY, FailurePolicy.FAIL_FAST.value)
        try:
            policy = FailurePolicy(raw_policy.strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in FailurePolicy)
            raise ConfigError(
                f"{ENV_FAILURE_POLICY}={raw_policy!r} must be one of: {choices}"
            ) from None

        return cls(log_level=level, failure_policy=policy)
