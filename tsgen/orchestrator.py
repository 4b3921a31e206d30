"""Run every resolved target: resolve -> generate -> write -> report.

Multi-target runs launch all targets before awaiting any of them.  Under
FailurePolicy.FAIL_FAST the join re-raises the first failure; siblings
already in flight are not cancelled by the join; they stop when the event
loop shuts down at process exit.  FailurePolicy.ISOLATE lets every target
finish and reports all failures together.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import BinaryIO

from .errors import TargetsFailedError
from .flags import InvocationOptions
from .invoker import generate_schema
from .resolver import GenerationTarget, Mode, SourcePlan, resolve_sources
from .router import write_result
from .settings import FailurePolicy

logger = logging.getLogger(__name__)


async def process_target(
    target: GenerationTarget,
    options: InvocationOptions,
    *,
    started: float,
) -> None:
    result = await generate_schema(
        target.source,
        options,
        silent=target.destination.is_stdout,
        overrides=target.overrides,
    )
    await write_result(result, target, started=started)


async def run_targets(
    targets: tuple[GenerationTarget, ...],
    options: InvocationOptions,
    *,
    started: float,
    policy: FailurePolicy = FailurePolicy.FAIL_FAST,
) -> None:
    """Run targets concurrently over shared read-only options."""
    tasks = [
        asyncio.create_task(process_target(t, options, started=started), name=t.label)
        for t in targets
    ]
    if policy is FailurePolicy.FAIL_FAST:
        await asyncio.gather(*tasks)
        return

    results = await asyncio.gather(*tasks, return_exceptions=True)
    failures: dict[str, BaseException] = {}
    for target, outcome in zip(targets, results):
        if isinstance(outcome, BaseException):
            logger.error("%s: %s", target.label, outcome)
            failures[target.label] = outcome
    if failures:
        raise TargetsFailedError(failures)


async def run(
    options: InvocationOptions,
    input_arg: str | None,
    *,
    cwd: Path | None = None,
    stdin: BinaryIO | None = None,
    started: float | None = None,
    policy: FailurePolicy = FailurePolicy.FAIL_FAST,
) -> SourcePlan:
    """Resolve sources and run them; returns the plan that was executed."""
    started = time.perf_counter() if started is None else started
    plan = await resolve_sources(options, input_arg, cwd=cwd, stdin=stdin)
    options = replace(options, config=plan.config)

    if plan.mode is Mode.MULTI_TARGET:
        await run_targets(plan.targets, options, started=started, policy=policy)
    else:
        await process_target(plan.targets[0], options, started=started)
    return plan
