"""JSON 清单统一读写工具

package.json 的读取与回写都经过这里：
- 读取保持键顺序，格式错误统一转为 ConfigError
- 写入为 2 空格缩进的完整文档，先写临时文件再 rename
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from mononpm.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


def atomic_write(path: Path, content: str) -> None:
    """原子写入文件：先写同目录临时文件再 os.replace

    失败时清理临时文件并重新抛出原异常。
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def dump_json(data: Any) -> str:
    """序列化为清单文本（与 npm 一致: 2 空格缩进 + 结尾换行）"""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def load_json(path: str | Path) -> dict[str, Any]:
    """读取 JSON 对象文档

    异常:
        ConfigError: 文件不存在、JSON 格式错误或顶层不是对象
    """
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f"清单文件不存在: {p}")
    try:
        with open(p, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"清单文件格式错误: {p} ({e})") from e
    if not isinstance(data, dict):
        raise ConfigError(
            f"清单文件顶层必须是对象: {p} (实际类型: {type(data).__name__})"
        )
    return data


def save_json(path: str | Path, data: dict[str, Any]) -> None:
    """整体覆盖写入 JSON 文档"""
    p = Path(path)
    try:
        atomic_write(p, dump_json(data))
    except OSError as e:
        logger.error("写入文件失败: %s, 错误: %s", p, e)
        raise
