"""
事件总线系统模块

提供同步的发布-订阅（Pub-Sub）事件总线，用于模块间解耦通信。

使用示例：
    >>> from vio_display_system.core.event_bus import EventBus, EventType, ShutdownEvent
    >>>
    >>> event_bus = EventBus()
    >>> sub_id = event_bus.subscribe(EventType.SYSTEM_SHUTDOWN, on_shutdown)
    >>> event_bus.publish(EventType.SYSTEM_SHUTDOWN, ShutdownEvent(reason="key_q"))
    >>> event_bus.unsubscribe(sub_id)
"""

from .event_bus import EventBus
from .event_types import EventType, Priority, ShutdownEvent

__all__ = [
    'EventBus',
    'EventType',
    'Priority',
    'ShutdownEvent',
]
