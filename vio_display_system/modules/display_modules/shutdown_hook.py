"""
管线关闭回调的事件总线接线

显示后端只认识一个无参回调；管线侧通常通过事件总线上的
SYSTEM_SHUTDOWN 事件来统一收敛退出流程。本模块把两者连接起来。
"""

import logging

from vio_display_system.core.event_bus import EventBus, EventType, ShutdownEvent
from .display_base import ShutdownPipelineCallback

logger = logging.getLogger(__name__)


def make_shutdown_callback(
    event_bus: EventBus,
    reason: str = "display_closed",
) -> ShutdownPipelineCallback:
    """
    创建发布 SYSTEM_SHUTDOWN 事件的关闭回调

    Args:
        event_bus: 管线使用的事件总线
        reason: 写入 ShutdownEvent 的关闭原因

    Returns:
        ShutdownPipelineCallback: 可直接交给 make_display 的回调
    """

    def _shutdown_pipeline() -> None:
        delivered = event_bus.publish(EventType.SYSTEM_SHUTDOWN, ShutdownEvent(reason=reason))
        if delivered == 0:
            logger.warning("SYSTEM_SHUTDOWN 事件没有订阅者，原因: %s", reason)
        else:
            logger.info("已发布 SYSTEM_SHUTDOWN 事件，原因: %s", reason)

    return _shutdown_pipeline
