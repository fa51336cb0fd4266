"""
日志初始化工具

configure_logging(system_config) 在程序入口调用一次，
按 SystemConfigDTO 配置 root logger：
- 控制台 StreamHandler
- 可选的文件日志（按时间或按大小滚动）

各模块只使用 logging.getLogger(__name__)，不自行配置 handler。
"""

import logging
import os
import threading
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler

from vio_display_system.core.dto.config_dto import SystemConfigDTO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LOGGING_CONFIGURED = False
_LOGGING_CONFIG_LOCK = threading.Lock()

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(system_config: SystemConfigDTO) -> bool:
    """
    使用系统配置全局初始化日志模块

    - 只生效一次，后续调用被忽略
    - 无效日志级别回退为 INFO，并在 handler 就绪后警告一次
    - 同一路径的文件 handler 不会重复添加

    Args:
        system_config: 系统配置对象

    Returns:
        bool: 本次调用是否执行了配置
    """
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return False

    with _LOGGING_CONFIG_LOCK:
        if _LOGGING_CONFIGURED:
            return False

        raw_level = system_config.log_level
        level_name = str(raw_level).strip().upper() if raw_level is not None else "INFO"
        level = _LEVEL_MAP.get(level_name)
        invalid_level = level is None
        if invalid_level:
            level = logging.INFO

        root = logging.getLogger()
        root.setLevel(level)
        formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

        # 只识别 StreamHandler 本身，不包括 FileHandler 等子类
        if not any(type(h) is logging.StreamHandler for h in root.handlers):
            console = logging.StreamHandler()
            console.setFormatter(formatter)
            root.addHandler(console)

        if invalid_level:
            root.warning("无效的日志级别: %r，已回退为 INFO", raw_level)

        if system_config.log_to_file and system_config.log_file_path:
            _add_file_handler(root, system_config, formatter)

        _LOGGING_CONFIGURED = True
        root.debug("日志级别设置为 %s", logging.getLevelName(level))
        return True


def _add_file_handler(
    root: logging.Logger,
    system_config: SystemConfigDTO,
    formatter: logging.Formatter,
) -> None:
    path = os.path.abspath(system_config.log_file_path)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    rotate_mode = (system_config.log_rotate_mode or "time").strip().lower()
    handler_type = RotatingFileHandler if rotate_mode == "size" else TimedRotatingFileHandler

    path_cmp = os.path.normcase(path)
    for existing in root.handlers:
        base = getattr(existing, "baseFilename", None)
        if type(existing) is handler_type and base and os.path.normcase(base) == path_cmp:
            return

    backup_count = max(1, int(system_config.log_backup_count))
    if rotate_mode == "size":
        handler = RotatingFileHandler(
            path,
            maxBytes=max(1, int(system_config.log_max_size_mb)) * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
    else:
        handler = TimedRotatingFileHandler(
            filename=path,
            when=str(system_config.log_rotate_when or "MIDNIGHT").strip().upper(),
            interval=max(1, int(system_config.log_rotate_interval)),
            backupCount=backup_count,
            encoding="utf-8",
        )
    handler.setFormatter(formatter)
    root.addHandler(handler)


def reset_logging_state() -> None:
    """清除“已配置”标志（供测试使用，不移除已添加的 handler）"""
    global _LOGGING_CONFIGURED
    with _LOGGING_CONFIG_LOCK:
        _LOGGING_CONFIGURED = False
