"""
系统配置DTO

管理系统级通用配置：日志输出与滚动策略。
"""

from dataclasses import dataclass
from typing import List, Optional

from ..base_dto import validate_numeric_range, validate_string_length
from .base_config_dto import BaseConfigDTO


LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_ROTATE_WHEN: frozenset[str] = frozenset(
    {"S", "M", "H", "D", "MIDNIGHT", "W0", "W1", "W2", "W3", "W4", "W5", "W6"}
)


@dataclass(frozen=True)
class SystemConfigDTO(BaseConfigDTO):
    """系统级配置（日志）"""

    log_level: str = "INFO"  # DEBUG/INFO/WARNING/ERROR/CRITICAL
    log_to_file: bool = False  # 是否写入日志文件
    log_file_path: Optional[str] = None  # 日志文件路径
    log_rotate_mode: str = "time"  # time/size
    log_max_size_mb: int = 100  # 按大小滚动时单个文件上限(MB)
    log_backup_count: int = 7  # 日志文件备份数量
    log_rotate_when: str = "MIDNIGHT"
    log_rotate_interval: int = 1

    def _validate_data(self) -> List[str]:
        errors = []

        if str(self.log_level).upper() not in LOG_LEVELS:
            errors.append(f"log_level必须为: {'/'.join(LOG_LEVELS)}")

        if self.log_file_path is not None:
            errors.extend(validate_string_length(
                self.log_file_path, 'log_file_path', min_length=1, max_length=500
            ))
        elif self.log_to_file:
            errors.append("启用log_to_file时必须提供log_file_path")

        if self.log_rotate_mode not in ("time", "size"):
            errors.append("log_rotate_mode必须为: time/size")
        if self.log_rotate_mode == "time":
            if str(self.log_rotate_when).upper() not in LOG_ROTATE_WHEN:
                errors.append("log_rotate_when必须为: S/M/H/D/MIDNIGHT/W0-W6")
            errors.extend(validate_numeric_range(
                self.log_rotate_interval, 'log_rotate_interval', min_value=1, max_value=10000
            ))

        errors.extend(validate_numeric_range(
            self.log_max_size_mb, 'log_max_size_mb', min_value=1, max_value=1000
        ))
        errors.extend(validate_numeric_range(
            self.log_backup_count, 'log_backup_count', min_value=1, max_value=100
        ))

        return errors
