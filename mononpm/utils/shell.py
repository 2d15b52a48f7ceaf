"""Shell 命令执行工具 — 统一子进程调用

通过 CommandExecutor 协议抽象"执行命令并等待结束"这一动作，
测试时注入记录型实现即可，无需 patch subprocess；
将来换成按依赖图并行的调度器时也只需替换这一层。
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Protocol

from mononpm.core.exceptions import ExecutionError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CommandExecutor(Protocol):
    """命令执行器协议

    同步执行，调用方阻塞直到外部进程退出；没有超时与取消。
    """

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        """执行命令并返回结果"""
        ...


class LocalExecutor:
    """本地子进程执行器（默认实现）"""

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        args = shlex.split(cmd) if isinstance(cmd, str) else cmd
        r = subprocess.run(
            args, capture_output=True, text=True,
            cwd=cwd, env=env, check=False,
        )
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout,
            stderr=r.stderr,
        )


def run_cmd(
    executor: CommandExecutor,
    cmd: str,
    *,
    cwd: str = ".",
    env: dict[str, str] | None = None,
    label: str = "cmd",
) -> CommandResult:
    """执行命令，失败抛 ExecutionError（携带捕获的输出）

    Args:
        executor: 命令执行器
        cmd: 命令字符串
        cwd: 工作目录
        env: 环境变量（不传则继承当前进程）
        label: 日志标签
    """
    logger.debug("  %s: %s (cwd=%s)", label, cmd, cwd)
    try:
        r = executor.execute(cmd, cwd=cwd, env=env)
    except OSError as e:
        raise ExecutionError(f"{label}无法启动: {e}") from e
    if not r.success:
        raise ExecutionError(
            f"{label}失败 (rc={r.returncode}): {cmd}",
            returncode=r.returncode, stdout=r.stdout, stderr=r.stderr,
        )
    return r
