"""mononpm 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import click

from mononpm import __version__
from mononpm.core.config import DEFAULT_CONFIG_FILE, Config
from mononpm.core.exceptions import ConfigError
from mononpm.core.runner import CommandRunner
from mononpm.services.workspace_service import WorkspaceService
from mononpm.utils.logger import setup_logging
from mononpm.utils.shell import CommandExecutor


@dataclass
class CliContext:
    """在子命令间传递的调用参数"""

    root: Path
    config: Config
    executor: CommandExecutor | None = None

    def service(self) -> WorkspaceService:
        runner = CommandRunner(
            self.root, self.config, self.executor,
            verbose=self.config.verbose, echo=click.echo,
        )
        return WorkspaceService(self.root, self.config, runner=runner)


@click.group()
@click.version_option(version=__version__)
@click.option("--root", "-C", default=".", type=click.Path(file_okay=False), help="仓库根目录")
@click.option("--config", "-c", "config_path", default=None, help=f"配置文件路径（默认 <root>/{DEFAULT_CONFIG_FILE}）")
@click.option("--verbose", "-v", is_flag=True, help="回显 install/build 的命令输出")
@click.pass_context
def main(ctx: click.Context, root: str, config_path: str | None, verbose: bool) -> None:
    """mononpm - 单仓多包构建编排"""
    # 嵌入调用方可经 invoke(obj=...) 预先注入 CommandExecutor
    executor = ctx.obj
    setup_logging(
        level=os.getenv("MONONPM_LOG_LEVEL", "INFO"),
        json_output=os.getenv("MONONPM_LOG_JSON", "") == "1",
    )
    root_path = Path(root)
    try:
        config = Config.from_file(config_path or root_path / DEFAULT_CONFIG_FILE)
    except ConfigError as e:
        click.echo(f"错误: {e}", err=True)
        ctx.exit(1)
    if verbose:
        config.verbose = True
    ctx.obj = CliContext(root=root_path, config=config, executor=executor)


# 注册各领域子命令
from mononpm.cli.cmd_actions import register as _reg_actions  # noqa: E402
from mononpm.cli.cmd_inspect import register as _reg_inspect  # noqa: E402

_reg_actions(main)
_reg_inspect(main)
