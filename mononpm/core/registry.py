"""本地包注册表

职责:
- 从根清单读取包目录的 glob 列表
- 按声明顺序展开 glob，逐个加载包清单
- 提供 name -> Package 的有序查找，未知名称即配置错误
"""

from __future__ import annotations

import glob
import logging
from pathlib import Path
from typing import Iterator

from mononpm.core.config import Config
from mononpm.core.exceptions import ConfigError, DependencyError
from mononpm.core.models import Package
from mononpm.utils.json_io import load_json

logger = logging.getLogger(__name__)


class Registry:
    """包注册表 — 每次调用构建一次，由上层显式传递

    迭代顺序即插入顺序（glob 展开顺序）；同名包后加载者覆盖先加载者，
    但保留首次出现的位置。
    """

    def __init__(self, packages: dict[str, Package] | None = None) -> None:
        self._packages: dict[str, Package] = dict(packages or {})

    def add(self, package: Package) -> None:
        previous = self._packages.get(package.name)
        if previous is not None and previous.dir != package.dir:
            logger.warning(
                "包名重复: %s (%s 覆盖 %s)", package.name, package.dir, previous.dir,
            )
        self._packages[package.name] = package

    def get(self, name: str) -> Package:
        pkg = self._packages.get(name)
        if pkg is None:
            raise DependencyError(
                f"本地依赖 '{name}' 不在注册表中。"
                f"可用: {list(self._packages)}"
            )
        return pkg

    def names(self) -> list[str]:
        return list(self._packages)

    def validate(self) -> None:
        """检查所有声明的本地依赖都已注册"""
        for pkg in self._packages.values():
            for dep in pkg.local_dep_names:
                if dep not in self._packages:
                    raise DependencyError(
                        f"包 '{pkg.name}' 依赖的本地包 '{dep}' 不在注册表中"
                    )

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def __iter__(self) -> Iterator[Package]:
        return iter(self._packages.values())

    def __len__(self) -> int:
        return len(self._packages)


def read_package_globs(root: Path, config: Config) -> list[str]:
    """读取根清单中声明的包目录 glob 列表"""
    data = load_json(root / config.manifest_file)
    patterns = data.get(config.packages_key)
    if patterns is None:
        raise ConfigError(
            f"根清单缺少 '{config.packages_key}' 字段: {root / config.manifest_file}"
        )
    if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
        raise ConfigError(f"根清单 '{config.packages_key}' 必须是字符串列表")
    return patterns


def _glob_sort_key(path: str) -> tuple[str, str]:
    # 近似 node-glob 的 localeCompare(..., "en")：先忽略大小写，相同时小写在前
    return path.casefold(), path.swapcase()


def expand_globs(root: Path, patterns: list[str]) -> list[str]:
    """按声明顺序展开 glob，返回相对根目录的包目录列表

    单个模式内按不区分大小写的字典序排序；跨模式的重复匹配保留，由注册表去重。
    非目录的匹配项忽略。
    """
    dirs: list[str] = []
    for pattern in patterns:
        matches = sorted(glob.glob(pattern, root_dir=str(root)), key=_glob_sort_key)
        if not matches:
            logger.warning("glob 未匹配任何目录: %s", pattern)
        for match in matches:
            if not (root / match).is_dir():
                logger.debug("跳过非目录匹配: %s", match)
                continue
            dirs.append(match.rstrip("/"))
    return dirs


def load_registry(root: Path, config: Config) -> Registry:
    """从根清单构建注册表

    异常:
        ConfigError: 根清单或任一包清单缺失 / 格式错误
    """
    registry = Registry()
    for pkg_dir in expand_globs(root, read_package_globs(root, config)):
        data = load_json(root / pkg_dir / config.manifest_file)
        registry.add(Package.from_manifest(data, pkg_dir))
    logger.info("已加载 %d 个本地包", len(registry))
    return registry
