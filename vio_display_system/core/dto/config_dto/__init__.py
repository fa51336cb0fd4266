"""
配置DTO模块

- BaseConfigDTO: 配置持久化基类
- DisplayConfigDTO: 显示后端与窗口配置
- SystemConfigDTO: 日志等系统配置
- VioDisplayConfigDTO: 配置文件根对象
- DisplayType: 显示后端类型枚举
"""

from .base_config_dto import BaseConfigDTO
from .display_config_dto import DisplayConfigDTO
from .enums import DisplayType, describe_display_types
from .system_config_dto import LOG_LEVELS, SystemConfigDTO
from .vio_display_config_dto import VioDisplayConfigDTO

__all__ = [
    "BaseConfigDTO",
    "DisplayConfigDTO",
    "SystemConfigDTO",
    "VioDisplayConfigDTO",
    "DisplayType",
    "describe_display_types",
    "LOG_LEVELS",
]
