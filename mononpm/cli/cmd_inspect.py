"""CLI — 依赖图查询（无副作用）"""

from __future__ import annotations

import click

from mononpm.core.exceptions import MonoNpmError


def register(group: click.Group) -> None:
    group.add_command(queue)
    group.add_command(deps)


@click.command()
@click.pass_context
def queue(ctx: click.Context) -> None:
    """打印构建队列"""
    try:
        names = ctx.obj.service().queue()
    except MonoNpmError as e:
        click.echo(f"错误: {e}", err=True)
        ctx.exit(1)
    for i, name in enumerate(names, 1):
        click.echo(f"  {i:3d}. {name}")


@click.command()
@click.argument("name")
@click.pass_context
def deps(ctx: click.Context, name: str) -> None:
    """显示包的传递本地依赖、派生外部依赖和直接依赖方"""
    try:
        info = ctx.obj.service().describe(name)
    except MonoNpmError as e:
        click.echo(f"错误: {e}", err=True)
        ctx.exit(1)
    click.echo(f"{info['name']} ({info['dir']})")
    click.echo("本地依赖:")
    for dep in info["local_deps"] or ["-"]:
        click.echo(f"  {dep}")
    click.echo("派生外部依赖:")
    optional = info["optional_dependencies"]
    if not optional:
        click.echo("  -")
    for dep, version in optional.items():
        click.echo(f"  {dep:30s} {version}")
    click.echo("被依赖:")
    for dep in info["dependents"] or ["-"]:
        click.echo(f"  {dep}")
