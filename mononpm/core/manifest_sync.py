"""包清单同步

把包的传递本地依赖所需的外部依赖展平成 optionalDependencies，
写回包清单，让包管理器在安装时一并拉取。
"""

from __future__ import annotations

import logging
from pathlib import Path

from mononpm.core.config import Config
from mononpm.core.graph import transitive_local_deps
from mononpm.core.models import Package
from mononpm.core.registry import Registry
from mononpm.utils.json_io import save_json

logger = logging.getLogger(__name__)


def derive_optional_dependencies(registry: Registry, package: Package) -> dict[str, str]:
    """合并所有传递本地依赖的直接外部依赖

    按遍历顺序合并，同名时后者覆盖前者；不包含包自身的直接外部依赖
    （成环时 transitive_local_deps 已抛出 CycleError，包自身不会出现在集合中）。
    """
    derived: dict[str, str] = {}
    for name in transitive_local_deps(registry, package.name):
        derived.update(registry.get(name).dependencies)
    return derived


def manifest_path(root: Path, package: Package, config: Config) -> Path:
    return root / package.dir / config.manifest_file


def sync_manifest(
    registry: Registry, package: Package, root: Path, config: Config,
) -> dict[str, str]:
    """重算派生字段并整体覆盖写回包清单，返回新的派生字段"""
    derived = derive_optional_dependencies(registry, package)
    package.optional_dependencies = derived
    path = manifest_path(root, package, config)
    save_json(path, package.to_manifest())
    logger.debug("清单已同步: %s (%d 个派生依赖)", path, len(derived))
    return derived
