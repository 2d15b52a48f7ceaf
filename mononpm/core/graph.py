"""本地依赖图解析

深度优先、依赖先于自身的后序遍历：
- compute_queue: 全局构建队列
- transitive_local_deps: 单个包的传递本地依赖（不含自身）

已完成的节点不再重复展开，结果与"完整重复遍历后按首次出现去重"一致。
遍历路径上再次遇到同一节点即为环，抛出 CycleError。
"""

from __future__ import annotations

from mononpm.core.exceptions import CycleError
from mononpm.core.registry import Registry


def _visit(
    registry: Registry,
    name: str,
    order: list[str],
    done: set[str],
    path: list[str],
) -> None:
    if name in done:
        return
    if name in path:
        raise CycleError(path[path.index(name):] + [name])
    pkg = registry.get(name)
    path.append(name)
    for dep in pkg.local_dep_names:
        _visit(registry, dep, order, done, path)
    path.pop()
    done.add(name)
    order.append(name)


def compute_queue(registry: Registry) -> list[str]:
    """按注册表顺序遍历全部包，返回构建队列（每个包恰好一次，依赖在前）"""
    order: list[str] = []
    done: set[str] = set()
    for name in registry.names():
        _visit(registry, name, order, done, [])
    return order


def transitive_local_deps(registry: Registry, name: str) -> list[str]:
    """返回包的全部传递本地依赖，依赖在前，去重，不含自身"""
    pkg = registry.get(name)
    order: list[str] = []
    done: set[str] = set()
    for dep in pkg.local_dep_names:
        _visit(registry, dep, order, done, [name])
    return order


def dependents_of(registry: Registry, name: str) -> list[str]:
    """直接依赖该包的其他包（按注册表顺序）"""
    registry.get(name)
    return [p.name for p in registry if name in p.mono_dependencies]
