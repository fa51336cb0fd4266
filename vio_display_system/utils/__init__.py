"""
通用工具：日志初始化、配置文件读写、数据结构
"""

from .config_loader import ConfigLoadError, load_config, save_config
from .logging_utils import configure_logging

__all__ = [
    "configure_logging",
    "load_config",
    "save_config",
    "ConfigLoadError",
]
