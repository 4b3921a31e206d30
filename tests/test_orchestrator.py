"""Tests for concurrent multi-target execution and failure policies."""

import asyncio
import io
import json

import pytest

from tsgen import orchestrator
from tsgen.errors import SchemaLoadError, TargetsFailedError
from tsgen.flags import InvocationOptions
from tsgen.invoker import COMMENT_HEADER
from tsgen.orchestrator import run, run_targets
from tsgen.resolver import Destination, GenerationTarget, Mode
from tsgen.settings import FailurePolicy


def _target(tmp_path, name, source):
    return GenerationTarget(
        label=name,
        source=source,
        destination=Destination(path=tmp_path / "out" / f"{name}.ts"),
        display_output=f"out/{name}.ts",
    )


class TestRunTargets:
    async def test_all_launched_before_any_finishes(self, tmp_path, monkeypatch):
        events = []

        async def fake_process(target, options, *, started):
            events.append(f"start {target.label}")
            await asyncio.sleep(0)
            events.append(f"end {target.label}")

        monkeypatch.setattr(orchestrator, "process_target", fake_process)
        targets = (_target(tmp_path, "a", None), _target(tmp_path, "b", None))
        await run_targets(targets, InvocationOptions(), started=0.0)
        assert events == ["start a", "start b", "end a", "end b"]

    async def test_fail_fast_propagates_first_error(self, tmp_path, petstore, write_schema):
        good = write_schema(tmp_path / "good.yaml", petstore)
        targets = (
            _target(tmp_path, "good", good),
            _target(tmp_path, "bad", tmp_path / "missing.yaml"),
        )
        with pytest.raises(SchemaLoadError, match="missing.yaml"):
            await run_targets(targets, InvocationOptions(), started=0.0)

    async def test_isolate_reports_all_failures(self, tmp_path, petstore, write_schema):
        good = write_schema(tmp_path / "good.yaml", petstore)
        targets = (
            _target(tmp_path, "bad1", tmp_path / "missing1.yaml"),
            _target(tmp_path, "good", good),
            _target(tmp_path, "bad2", tmp_path / "missing2.yaml"),
        )
        with pytest.raises(TargetsFailedError) as excinfo:
            await run_targets(targets, InvocationOptions(), started=0.0, policy=FailurePolicy.ISOLATE)

        assert set(excinfo.value.failures) == {"bad1", "bad2"}
        assert (tmp_path / "out" / "good.ts").read_text().startswith(COMMENT_HEADER)
        assert not (tmp_path / "out" / "bad1.ts").exists()


class TestRun:
    async def test_stdin_to_stdout(self, tmp_path, petstore, capsys):
        stdin = io.BytesIO(json.dumps(petstore).encode())
        plan = await run(InvocationOptions(), None, cwd=tmp_path, stdin=stdin)
        assert plan.mode is Mode.STDIN
        out = capsys.readouterr().out
        assert out.startswith(COMMENT_HEADER)
        assert out.endswith("}\n")

    async def test_multi_target_writes_each_file(self, tmp_path, petstore, store, write_schema, write_config):
        write_schema(tmp_path / "specs" / "pet.yaml", petstore)
        write_schema(tmp_path / "specs" / "store.json", store)
        write_config(tmp_path, {
            "pet": {"root": "specs/pet.yaml", "x-openapi-ts": {"output": "out/pet.ts"}},
            "store": {"root": "specs/store.json", "x-openapi-ts": {"output": "out/store.ts"}},
        })
        plan = await run(InvocationOptions(), None, cwd=tmp_path)
        assert plan.mode is Mode.MULTI_TARGET
        assert "listPets" in (tmp_path / "out" / "pet.ts").read_text()
        assert "createOrder" in (tmp_path / "out" / "store.ts").read_text()
        assert "listPets" not in (tmp_path / "out" / "store.ts").read_text()

    async def test_config_attached_to_options(self, tmp_path, petstore, write_schema, write_config, monkeypatch):
        seen = []

        async def fake_process(target, options, *, started):
            seen.append(options.config)

        monkeypatch.setattr(orchestrator, "process_target", fake_process)
        write_config(tmp_path, {"pet": {"root": "pet.yaml", "x-openapi-ts": {"output": "pet.ts"}}})
        plan = await run(InvocationOptions(), None, cwd=tmp_path)
        assert seen == [plan.config]
