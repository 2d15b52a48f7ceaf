"""CLI — 构建 / 安装 / 链接 / 执行脚本"""

from __future__ import annotations

from typing import Callable

import click

from mononpm.core.exceptions import ExecutionError, MonoNpmError
from mononpm.core.models import RunReport
from mononpm.services.workspace_service import WorkspaceService


def register(group: click.Group) -> None:
    group.add_command(build)
    group.add_command(install)
    group.add_command(link)
    group.add_command(run)


def _perform(ctx: click.Context, action: Callable[[WorkspaceService], RunReport]) -> None:
    """执行动作；任何失败都以退出码 1 结束整个进程"""
    svc = ctx.obj.service()
    try:
        report = action(svc)
    except ExecutionError as e:
        click.echo(f"命令失败: {e}", err=True)
        ctx.exit(1)
    except (MonoNpmError, OSError) as e:
        click.echo(f"错误: {e}", err=True)
        ctx.exit(1)
    click.echo(f"完成: {report.action} ({len(report.packages)} 个包)")


@click.command()
@click.pass_context
def build(ctx: click.Context) -> None:
    """按依赖顺序同步清单、安装、链接并构建所有包"""
    _perform(ctx, lambda svc: svc.build())


@click.command()
@click.pass_context
def install(ctx: click.Context) -> None:
    """按依赖顺序同步清单、安装并链接所有包（不构建）"""
    _perform(ctx, lambda svc: svc.install())


@click.command()
@click.pass_context
def link(ctx: click.Context) -> None:
    """只同步清单并复制本地依赖产物"""
    _perform(ctx, lambda svc: svc.link())


@click.command()
@click.argument("script")
@click.pass_context
def run(ctx: click.Context, script: str) -> None:
    """在每个包中按队列顺序执行指定脚本"""
    _perform(ctx, lambda svc: svc.run(script))
