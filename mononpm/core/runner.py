"""包级生命周期命令执行

在包目录下执行 install / build / 任意脚本。
失败时输出捕获内容并抛出 ExecutionError，不重试、不继续。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from mononpm.core.config import Config
from mononpm.core.exceptions import ExecutionError
from mononpm.core.models import Package
from mononpm.utils.shell import CommandExecutor, LocalExecutor, run_cmd

logger = logging.getLogger(__name__)

OutputSink = Callable[[str], None]


def _log_output(text: str) -> None:
    logger.info("%s", text)


class CommandRunner:
    """生命周期命令执行器

    Args:
        root: 仓库根目录
        config: 工具配置（命令模板）
        executor: 底层命令执行器，默认本地子进程
        verbose: 成功时是否也输出捕获的 stdout
        echo: 捕获输出的去向，默认写日志
    """

    def __init__(
        self,
        root: Path,
        config: Config,
        executor: CommandExecutor | None = None,
        verbose: bool = False,
        echo: OutputSink | None = None,
    ) -> None:
        self.root = root
        self.config = config
        self.executor = executor or LocalExecutor()
        self.verbose = verbose
        self.echo = echo or _log_output

    def _run(self, package: Package, cmd: str, label: str, show_output: bool) -> str:
        logger.info(">> %s", cmd)
        cwd = str(self.root / package.dir)
        try:
            r = run_cmd(self.executor, cmd, cwd=cwd, label=label)
        except ExecutionError as e:
            if e.output:
                self.echo(e.output)
            raise
        if show_output and r.stdout:
            self.echo(r.stdout)
        return r.stdout

    def install(self, package: Package) -> str:
        return self._run(package, self.config.install_cmd, "install", self.verbose)

    def build(self, package: Package) -> str:
        return self._run(package, self.config.build_cmd, "build", self.verbose)

    def run_script(self, package: Package, script: str) -> str:
        """执行任意脚本；与 install/build 不同，输出总是回显"""
        cmd = self.config.script_cmd.format(script=script)
        return self._run(package, cmd, f"run {script}", True)
