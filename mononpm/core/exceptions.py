"""统一异常体系

所有业务异常继承 MonoNpmError，CLI 层据此输出友好提示并设置退出码。
文件系统错误（产物目录缺失、权限不足）不包装，直接以 OSError 向上传播。
"""

from __future__ import annotations


class MonoNpmError(Exception):
    """工具基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(MonoNpmError):
    """根清单 / 包清单 / 工具配置缺失或内容无效"""

    code = "CONFIG_ERROR"


class DependencyError(MonoNpmError):
    """本地依赖在注册表中不存在"""

    code = "DEPENDENCY_ERROR"


class CycleError(DependencyError):
    """本地依赖之间存在环"""

    code = "DEPENDENCY_CYCLE"

    def __init__(self, path: list[str]) -> None:
        super().__init__(f"检测到循环依赖: {' -> '.join(path)}")
        self.path = path


class ExecutionError(MonoNpmError):
    """外部命令执行失败（非零退出码或无法启动）"""

    code = "EXECUTION_ERROR"

    def __init__(
        self, message: str, *,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    @property
    def output(self) -> str:
        """捕获的全部输出（stdout 在前）"""
        return "\n".join(s for s in (self.stdout, self.stderr) if s)
