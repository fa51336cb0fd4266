"""
事件类型定义
"""

from dataclasses import dataclass
from enum import IntEnum


class EventType:
    """事件类型常量定义"""

    # 系统事件
    SYSTEM_SHUTDOWN = "SYSTEM_SHUTDOWN"


class Priority(IntEnum):
    """事件优先级"""
    LOW = 1
    NORMAL = 2
    HIGH = 3


@dataclass
class ShutdownEvent:
    """
    系统停止事件

    Attributes:
        reason: 停止原因字符串，常见值: "key_q", "window_closed", "display_closed"
    """
    reason: str
