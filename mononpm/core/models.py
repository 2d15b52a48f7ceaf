"""核心数据模型

数据类:
- Package: 单个本地包（清单的已知字段 + 原样保留的其余字段）
- StepResult / PackageResult / RunReport: 一次动作执行的记录
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mononpm.core.exceptions import ConfigError

MONO_DEPS_KEY = "monoDependencies"
DEPS_KEY = "dependencies"
OPTIONAL_DEPS_KEY = "optionalDependencies"


def _str_map(data: dict[str, Any], key: str, where: str) -> dict[str, str]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{where}: '{key}' 必须是对象")
    return dict(value)


@dataclass
class Package:
    """单仓中的一个本地包

    optional_dependencies 由本工具派生并拥有，每次同步都会整体覆盖。
    extra 保存清单中所有其他字段，回写时原样输出。
    """

    name: str
    dir: str
    mono_dependencies: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, str] = field(default_factory=dict)
    optional_dependencies: dict[str, str] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)
    key_order: list[str] = field(default_factory=list)

    @classmethod
    def from_manifest(cls, data: dict[str, Any], dir: str) -> Package:
        """从已解析的清单文档构造"""
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ConfigError(f"包清单缺少 name 字段: {dir}")
        known = {"name", MONO_DEPS_KEY, DEPS_KEY, OPTIONAL_DEPS_KEY}
        return cls(
            name=name,
            dir=dir,
            mono_dependencies=_str_map(data, MONO_DEPS_KEY, dir),
            dependencies=_str_map(data, DEPS_KEY, dir),
            optional_dependencies=_str_map(data, OPTIONAL_DEPS_KEY, dir),
            extra={k: v for k, v in data.items() if k not in known},
            key_order=list(data),
        )

    def to_manifest(self) -> dict[str, Any]:
        """还原为清单文档，保持原有键顺序；派生字段缺失时追加到末尾"""
        known: dict[str, Any] = {
            "name": self.name,
            MONO_DEPS_KEY: self.mono_dependencies,
            DEPS_KEY: self.dependencies,
            OPTIONAL_DEPS_KEY: self.optional_dependencies,
        }
        doc: dict[str, Any] = {}
        for key in self.key_order:
            if key in known:
                doc[key] = known[key]
            elif key in self.extra:
                doc[key] = self.extra[key]
        for key, value in self.extra.items():
            doc.setdefault(key, value)
        doc.setdefault("name", self.name)
        doc.setdefault(OPTIONAL_DEPS_KEY, self.optional_dependencies)
        return doc

    @property
    def local_dep_names(self) -> list[str]:
        """按声明顺序的本地依赖名"""
        return list(self.mono_dependencies)


@dataclass
class StepResult:
    """单个步骤的执行记录"""

    step: str
    status: str  # "done", "failed"
    duration: float = 0.0
    message: str = ""


@dataclass
class PackageResult:
    """单个包的执行记录"""

    name: str
    steps: list[StepResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(s.status == "done" for s in self.steps)


@dataclass
class RunReport:
    """一次动作（build / install / link / run）的执行报告"""

    action: str
    queue: list[str] = field(default_factory=list)
    packages: list[PackageResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return (
            len(self.packages) == len(self.queue)
            and all(p.success for p in self.packages)
        )

    @property
    def processed(self) -> list[str]:
        return [p.name for p in self.packages]
