"""单仓编排服务

一次调用持有一个注册表，按构建队列逐包执行动作对应的步骤：

  动作      步骤
  build     sync -> install -> link -> build
  install   sync -> install -> link
  link      sync -> link
  run       script

严格串行；任一步骤失败即停止，后续包不再处理。
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable

from mononpm.core.config import Config
from mononpm.core.graph import compute_queue, dependents_of, transitive_local_deps
from mononpm.core.manifest_sync import derive_optional_dependencies, sync_manifest
from mononpm.core.materializer import materialize
from mononpm.core.models import Package, PackageResult, RunReport, StepResult
from mononpm.core.registry import Registry, load_registry
from mononpm.core.runner import CommandRunner

logger = logging.getLogger(__name__)

ACTION_STEPS: dict[str, tuple[str, ...]] = {
    "build": ("sync", "install", "link", "build"),
    "install": ("sync", "install", "link"),
    "link": ("sync", "link"),
    "run": ("script",),
}


class WorkspaceService:
    """单仓编排服务

    Args:
        root: 仓库根目录（根清单所在目录）
        config: 工具配置
        runner: 生命周期命令执行器，默认按 root/config 构造
    """

    def __init__(
        self,
        root: str | Path,
        config: Config | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.root = Path(root)
        self.config = config or Config()
        self.runner = runner or CommandRunner(
            self.root, self.config, verbose=self.config.verbose,
        )
        self._registry: Registry | None = None
        self.last_report: RunReport | None = None

    @property
    def registry(self) -> Registry:
        if self._registry is None:
            self._registry = self.load()
        return self._registry

    def load(self) -> Registry:
        """构建注册表并校验本地依赖引用"""
        registry = load_registry(self.root, self.config)
        registry.validate()
        self._registry = registry
        return registry

    def queue(self) -> list[str]:
        return compute_queue(self.registry)

    def describe(self, name: str) -> dict[str, Any]:
        """查询单个包的依赖关系（不产生副作用）"""
        pkg = self.registry.get(name)
        return {
            "name": pkg.name,
            "dir": pkg.dir,
            "local_deps": transitive_local_deps(self.registry, name),
            "optional_dependencies": derive_optional_dependencies(self.registry, pkg),
            "dependents": dependents_of(self.registry, name),
        }

    # ---- 动作 ----

    def build(self) -> RunReport:
        return self._execute("build")

    def install(self) -> RunReport:
        return self._execute("install")

    def link(self) -> RunReport:
        return self._execute("link")

    def run(self, script: str) -> RunReport:
        return self._execute("run", script=script)

    # ---- 步骤 ----

    def _step_sync(self, pkg: Package, **_: Any) -> None:
        sync_manifest(self.registry, pkg, self.root, self.config)

    def _step_install(self, pkg: Package, **_: Any) -> None:
        self.runner.install(pkg)

    def _step_link(self, pkg: Package, **_: Any) -> None:
        logger.info(">> link")
        materialize(self.registry, pkg, self.root, self.config)

    def _step_build(self, pkg: Package, **_: Any) -> None:
        self.runner.build(pkg)

    def _step_script(self, pkg: Package, *, script: str = "", **_: Any) -> None:
        self.runner.run_script(pkg, script)

    def _execute(self, action: str, **kwargs: Any) -> RunReport:
        steps = ACTION_STEPS[action]
        queue = self.queue()
        report = RunReport(action=action, queue=queue)
        self.last_report = report
        logger.info("执行 %s: %d 个包 (%s)", action, len(queue), ", ".join(queue))
        for name in queue:
            pkg = self.registry.get(name)
            logger.info("Package: %s", name)
            result = PackageResult(name=name)
            report.packages.append(result)
            for step in steps:
                handler: Callable[..., None] = getattr(self, f"_step_{step}")
                start = time.monotonic()
                try:
                    handler(pkg, **kwargs)
                except Exception as e:
                    result.steps.append(StepResult(
                        step=step, status="failed",
                        duration=time.monotonic() - start, message=str(e),
                    ))
                    logger.error("包 %s 的 %s 步骤失败: %s", name, step, e)
                    raise
                result.steps.append(StepResult(
                    step=step, status="done", duration=time.monotonic() - start,
                ))
        logger.info("%s 完成: %d 个包", action, len(report.packages))
        return report
