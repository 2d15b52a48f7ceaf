"""本地依赖落地

把包的每个传递本地依赖的构建产物和清单复制到
<包目录>/node_modules/<依赖名>，使其看起来与外部安装的包无异。
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from mononpm.core.config import Config
from mononpm.core.graph import transitive_local_deps
from mononpm.core.models import Package
from mononpm.core.registry import Registry

logger = logging.getLogger(__name__)


def copy_tree(src: Path, dest: Path) -> None:
    """递归复制目录，保留时间戳与权限位，冲突时直接覆盖"""
    shutil.copytree(src, dest, dirs_exist_ok=True, copy_function=shutil.copy2)


def materialize_one(
    package: Package, dep: Package, root: Path, config: Config,
) -> Path:
    """落地单个依赖，返回目标目录

    异常:
        FileNotFoundError: 依赖的构建产物目录不存在（尚未构建）
    """
    src = root / dep.dir / config.output_dir
    dest = root / package.dir / config.modules_dir / dep.name
    if not src.is_dir():
        raise FileNotFoundError(
            f"本地依赖 '{dep.name}' 的构建产物不存在: {src}（是否尚未构建？）"
        )
    dest.mkdir(parents=True, exist_ok=True)
    copy_tree(src, dest)
    shutil.copyfile(root / dep.dir / config.manifest_file, dest / config.manifest_file)
    logger.debug("  已落地: %s -> %s", dep.name, dest)
    return dest


def materialize(
    registry: Registry, package: Package, root: Path, config: Config,
) -> list[Path]:
    """落地包的全部传递本地依赖（非仅直接依赖）"""
    return [
        materialize_one(package, registry.get(name), root, config)
        for name in transitive_local_deps(registry, package.name)
    ]
