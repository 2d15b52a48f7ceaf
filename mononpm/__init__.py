"""mononpm - 单仓多包构建编排工具"""

__version__ = "0.1.0"
