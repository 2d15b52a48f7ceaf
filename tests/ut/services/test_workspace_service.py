"""WorkspaceService 单元测试 — 各动作的步骤组合与失败即停"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mononpm.core.config import Config
from mononpm.core.exceptions import CycleError, ExecutionError
from mononpm.core.runner import CommandRunner
from mononpm.services.workspace_service import ACTION_STEPS, WorkspaceService


def _service(root: Path, executor, config: Config | None = None) -> WorkspaceService:
    cfg = config or Config()
    runner = CommandRunner(root, cfg, executor, echo=lambda _: None)
    return WorkspaceService(root, cfg, runner=runner)


class TestQueue:
    def test_queue_scenario(self, abc_repo: Path, executor) -> None:
        assert _service(abc_repo, executor).queue() == ["a", "b", "c"]

    def test_describe(self, abc_repo: Path, executor) -> None:
        info = _service(abc_repo, executor).describe("c")
        assert info["local_deps"] == ["a", "b"]
        assert info["optional_dependencies"] == {"lodash": "^4.17.0", "x": "1.0"}
        assert info["dependents"] == []
        assert _service(abc_repo, executor).describe("a")["dependents"] == ["b"]

    def test_cycle_fails_before_side_effects(
        self, write_root, write_package, executor,
    ) -> None:
        root = write_root("packages/*")
        write_package("packages/a", "a", mono=["b"])
        write_package("packages/b", "b", mono=["a"])
        before = (root / "packages" / "a" / "package.json").read_bytes()
        with pytest.raises(CycleError):
            _service(root, executor).link()
        assert executor.calls == []
        assert (root / "packages" / "a" / "package.json").read_bytes() == before


class TestActions:
    def test_build_runs_all_steps_in_queue_order(self, abc_repo: Path, executor) -> None:
        report = _service(abc_repo, executor).build()
        assert report.success
        assert report.processed == ["a", "b", "c"]
        assert executor.calls == [
            ("core", "npm install --no-audit"), ("core", "npm run build"),
            ("lib", "npm install --no-audit"), ("lib", "npm run build"),
            ("app", "npm install --no-audit"), ("app", "npm run build"),
        ]
        steps = [s.step for s in report.packages[2].steps]
        assert steps == list(ACTION_STEPS["build"])
        assert (abc_repo / "packages" / "app" / "node_modules" / "a" / "index.js").exists()
        manifest = json.loads(
            (abc_repo / "packages" / "app" / "package.json").read_text(encoding="utf-8"),
        )
        assert manifest["optionalDependencies"] == {"lodash": "^4.17.0", "x": "1.0"}

    def test_build_copies_fresh_output(self, abc_repo: Path, executor) -> None:
        _service(abc_repo, executor).build()
        copied = abc_repo / "packages" / "app" / "node_modules" / "b" / "index.js"
        assert copied.read_text(encoding="utf-8") == "// built lib\n"

    def test_install_skips_build(self, abc_repo: Path, executor) -> None:
        report = _service(abc_repo, executor).install()
        assert report.success
        assert all(cmd == "npm install --no-audit" for _, cmd in executor.calls)
        assert len(executor.calls) == 3
        assert (abc_repo / "packages" / "app" / "node_modules" / "b" / "package.json").exists()

    def test_link_runs_no_commands(self, abc_repo: Path, executor) -> None:
        report = _service(abc_repo, executor).link()
        assert report.success
        assert executor.calls == []
        assert [s.step for s in report.packages[0].steps] == ["sync", "link"]
        assert (abc_repo / "packages" / "lib" / "node_modules" / "a" / "index.js").exists()

    def test_run_invokes_only_script(self, abc_repo: Path, executor) -> None:
        before = (abc_repo / "packages" / "app" / "package.json").read_bytes()
        report = _service(abc_repo, executor).run("foo")
        assert report.success
        assert executor.calls == [
            ("core", "npm run foo"), ("lib", "npm run foo"), ("app", "npm run foo"),
        ]
        assert (abc_repo / "packages" / "app" / "package.json").read_bytes() == before
        assert not (abc_repo / "packages" / "app" / "node_modules").exists()


class TestFailFast:
    def test_failure_mid_queue_stops_run(self, abc_repo: Path, make_executor) -> None:
        executor = make_executor(fail_on={("lib", "npm run build")})
        svc = _service(abc_repo, executor)
        with pytest.raises(ExecutionError):
            svc.build()
        assert ("app", "npm install --no-audit") not in executor.calls
        assert executor.calls[-1] == ("lib", "npm run build")

        report = svc.last_report
        assert report is not None
        assert not report.success
        assert report.processed == ["a", "b"]
        assert report.packages[1].steps[-1].step == "build"
        assert report.packages[1].steps[-1].status == "failed"

    def test_missing_build_output_aborts_link(
        self, write_root, write_package, executor,
    ) -> None:
        root = write_root("packages/*")
        write_package("packages/a", "a")
        write_package("packages/b", "b", mono=["a"])
        with pytest.raises(FileNotFoundError):
            _service(root, executor).link()
