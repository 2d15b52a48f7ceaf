"""集中配置管理

工具的可调项集中在 Config，默认值对应 npm 工作流。
可选从仓库根目录的 mononpm.yml 加载，CLI 参数再覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

import yaml

from mononpm.core.exceptions import ConfigError
from mononpm.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "mononpm.yml"


@dataclass
class Config:
    """工具全局配置"""

    # 清单
    manifest_file: str = "package.json"
    packages_key: str = "packages"

    # 目录
    modules_dir: str = "node_modules"
    output_dir: str = "dist"

    # 命令
    install_cmd: str = "npm install --no-audit"
    build_cmd: str = "npm run build"
    script_cmd: str = "npm run {script}"

    verbose: bool = False

    # 放不到字段里的配置项
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, ValueError) as e:
            raise ConfigError(f"配置文件无效: {path} ({e})") from e
        if not data:
            return cls()
        known = {f for f in cls.__dataclass_fields__ if f != "extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        if "{script}" not in cfg.script_cmd:
            raise ConfigError(f"script_cmd 必须包含 {{script}} 占位符: {cfg.script_cmd}")
        logger.debug("配置已加载: %s", path)
        return cfg

    def to_dict(self) -> dict:
        return asdict(self)
