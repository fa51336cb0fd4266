import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .event_types import Priority


logger = logging.getLogger(__name__)


# =========================
# 订阅对象
# =========================
@dataclass
class Subscription:
    """
    单个订阅关系
    """
    subscription_id: str
    event_type: str
    callback: Callable[[Any], None]
    priority: Priority = Priority.NORMAL
    subscriber_name: Optional[str] = None

    total_calls: int = 0
    error_count: int = 0


# =========================
# 事件总线实现
# =========================
class EventBus:
    """
    同步事件总线，支持：
    - 订阅/取消订阅
    - 同步发布（在发布者线程中依次回调）
    - 简单优先级（高优先级订阅者先执行）

    订阅者回调抛出的异常只记录日志，不影响其他订阅者。
    """

    def __init__(self) -> None:
        # event_type -> List[Subscription]
        self._subscriptions: Dict[str, List[Subscription]] = {}
        self._lock = threading.RLock()
        self._closed = False

    def subscribe(
        self,
        event_type: str,
        callback: Callable[[Any], None],
        priority: Priority = Priority.NORMAL,
        subscriber_name: Optional[str] = None,
    ) -> str:
        """
        订阅某个事件类型，返回 subscription_id。

        :param event_type: 事件类型字符串
        :param callback:   回调函数，形如 fn(data) -> None
        :param priority:   优先级，高优先级先执行
        """
        if subscriber_name is None:
            owner = getattr(callback, "__self__", None)
            name = getattr(callback, "__name__", repr(callback))
            subscriber_name = f"{type(owner).__name__}.{name}" if owner is not None else name

        subscription_id = f"{event_type}:{id(callback)}:{time.time_ns()}"
        sub = Subscription(
            subscription_id=subscription_id,
            event_type=event_type,
            callback=callback,
            priority=priority,
            subscriber_name=subscriber_name,
        )

        with self._lock:
            subs = self._subscriptions.setdefault(event_type, [])
            subs.append(sub)
            subs.sort(key=lambda s: s.priority, reverse=True)

        logger.info(
            "订阅事件: event_type=%s, subscription_id=%s, priority=%s, subscriber_name=%s",
            event_type,
            subscription_id,
            priority.name,
            subscriber_name,
        )
        return subscription_id

    def unsubscribe(self, subscription_id: str) -> bool:
        """
        根据 subscription_id 取消订阅。

        :return: 是否成功取消
        """
        with self._lock:
            for event_type, subs in self._subscriptions.items():
                remaining = [s for s in subs if s.subscription_id != subscription_id]
                if len(remaining) != len(subs):
                    self._subscriptions[event_type] = remaining
                    logger.info(
                        "取消订阅: event_type=%s, subscription_id=%s",
                        event_type,
                        subscription_id,
                    )
                    return True
        return False

    def publish(self, event_type: str, data: Any = None) -> int:
        """
        同步发布事件

        :return: 成功投递的订阅者数量
        """
        with self._lock:
            if self._closed:
                logger.warning("事件总线已关闭，丢弃事件: %s", event_type)
                return 0
            subs = list(self._subscriptions.get(event_type, ()))

        delivered = 0
        for sub in subs:
            sub.total_calls += 1
            try:
                sub.callback(data)
                delivered += 1
            except Exception:
                sub.error_count += 1
                logger.exception(
                    "事件回调执行异常: event_type=%s, subscriber=%s",
                    event_type,
                    sub.subscriber_name,
                )
        return delivered

    def get_subscriber_count(self, event_type: str) -> int:
        """获取某事件类型当前的订阅者数量"""
        with self._lock:
            return len(self._subscriptions.get(event_type, ()))

    def close(self) -> None:
        """关闭事件总线：清空订阅，之后的发布被丢弃"""
        with self._lock:
            self._closed = True
            self._subscriptions.clear()
        logger.info("事件总线已关闭")
