"""测试共享 fixture — 临时单仓 + 记录型命令执行器

  tmp_path/
  ├── package.json            {"packages": ["packages/*"]}
  └── packages/
      ├── app/package.json    name=c, monoDependencies={b}
      ├── core/package.json   name=a
      └── lib/package.json    name=b, monoDependencies={a}, dependencies={x: 1.0}

目录名与包名刻意不同，且字典序与依赖顺序相反，便于验证队列来自依赖图。
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from mononpm.core.config import Config
from mononpm.utils.shell import CommandResult

WritePackage = Callable[..., Path]


class RecordingExecutor:
    """记录每次调用 (包目录名, 命令)，可指定失败点

    执行构建命令时在 cwd 下生成 dist/index.js，模拟真实构建产物。
    """

    def __init__(
        self,
        fail_on: set[tuple[str, str]] | None = None,
        build_cmd: str = "npm run build",
    ) -> None:
        self.calls: list[tuple[str, str]] = []
        self.fail_on = fail_on or set()
        self.build_cmd = build_cmd

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        cmd_str = cmd if isinstance(cmd, str) else " ".join(cmd)
        key = (Path(cwd).name, cmd_str)
        self.calls.append(key)
        if key in self.fail_on:
            return CommandResult(returncode=1, stdout="boom stdout", stderr="boom stderr")
        if cmd_str == self.build_cmd:
            dist = Path(cwd) / "dist"
            dist.mkdir(parents=True, exist_ok=True)
            (dist / "index.js").write_text(f"// built {Path(cwd).name}\n", encoding="utf-8")
        return CommandResult(returncode=0, stdout=f"ok: {cmd_str}", stderr="")

    def commands_for(self, pkg_dir: str) -> list[str]:
        return [c for d, c in self.calls if d == pkg_dir]


def write_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


@pytest.fixture()
def config() -> Config:
    return Config()


@pytest.fixture()
def write_root(tmp_path: Path) -> Callable[..., Path]:
    def _write(*patterns: str, **extra: Any) -> Path:
        write_json(tmp_path / "package.json", {
            "name": "root", "private": True, "packages": list(patterns), **extra,
        })
        return tmp_path
    return _write


@pytest.fixture()
def write_package(tmp_path: Path) -> WritePackage:
    def _write(
        pkg_dir: str,
        name: str,
        mono: list[str] | None = None,
        deps: dict[str, str] | None = None,
        dist: bool = False,
        **extra: Any,
    ) -> Path:
        data: dict[str, Any] = {"name": name, "version": "1.0.0"}
        if mono is not None:
            data["monoDependencies"] = {m: "*" for m in mono}
        data["dependencies"] = deps or {}
        data.update(extra)
        write_json(tmp_path / pkg_dir / "package.json", data)
        if dist:
            out = tmp_path / pkg_dir / "dist"
            out.mkdir(parents=True, exist_ok=True)
            (out / "index.js").write_text(f"module.exports = '{name}';\n", encoding="utf-8")
        return tmp_path / pkg_dir
    return _write


@pytest.fixture()
def abc_repo(write_root: Callable[..., Path], write_package: WritePackage) -> Path:
    """a（无依赖） <- b（外部依赖 x@1.0） <- c"""
    root = write_root("packages/*")
    write_package("packages/app", "c", mono=["b"], deps={"react": "^18.0.0"})
    write_package("packages/core", "a", deps={"lodash": "^4.17.0"}, dist=True)
    write_package("packages/lib", "b", mono=["a"], deps={"x": "1.0"}, dist=True)
    return root


@pytest.fixture()
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture()
def make_executor() -> Callable[..., RecordingExecutor]:
    return RecordingExecutor
