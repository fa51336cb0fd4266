"""
显示后端抽象基类

所有可视化后端（OpenCV、以及预留的 Pangolin 等）都实现 DisplayBase：
- 由管线在外部驱动（spin_once）
- 在自身判断需要结束时（用户关闭窗口、按下退出键）调用构造时传入的关闭回调
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Optional

from vio_display_system.core.dto import DisplayInputDTO
from vio_display_system.core.dto.config_dto import DisplayType

# 管线关闭回调：由调用方持有，后端只负责在合适的时机调用
ShutdownPipelineCallback = Callable[[], None]


class DisplayBase(ABC):
    """显示后端基类

    职责：
    - 保存调用方传入的关闭回调（按引用保存，不做包装或替换）
    - 提供线程安全的一次性关闭触发（request_shutdown）
    - 定义由管线驱动的渲染接口（spin_once）
    - 释放后端资源（close / 上下文管理器）
    """

    display_type: ClassVar[DisplayType]

    def __init__(self, shutdown_pipeline_cb: ShutdownPipelineCallback) -> None:
        """
        Args:
            shutdown_pipeline_cb: 管线关闭回调，后端生命周期内必须保持可调用

        Raises:
            TypeError: 回调不可调用
        """
        if not callable(shutdown_pipeline_cb):
            raise TypeError(
                f"shutdown_pipeline_cb 必须可调用，当前类型: {type(shutdown_pipeline_cb).__name__}"
            )
        self._shutdown_pipeline_cb = shutdown_pipeline_cb
        self._shutdown_lock = threading.Lock()
        self._shutdown_reason: Optional[str] = None
        self.logger = logging.getLogger(__name__)

    @property
    def shutdown_pipeline_cb(self) -> ShutdownPipelineCallback:
        """构造时传入的关闭回调（同一对象）"""
        return self._shutdown_pipeline_cb

    @property
    def is_shutdown_requested(self) -> bool:
        with self._shutdown_lock:
            return self._shutdown_reason is not None

    @property
    def shutdown_reason(self) -> Optional[str]:
        with self._shutdown_lock:
            return self._shutdown_reason

    @abstractmethod
    def spin_once(self, display_input: DisplayInputDTO) -> None:
        """渲染一次输入，并处理本后端的窗口/键盘事件"""
        pass

    def request_shutdown(self, reason: str) -> bool:
        """
        后端的终止触发：调用管线关闭回调

        同一后端实例内回调最多被调用一次，重复触发只记录日志。

        Args:
            reason: 关闭原因，例如 "key_q"、"window_closed"

        Returns:
            bool: 本次调用是否实际触发了回调
        """
        with self._shutdown_lock:
            if self._shutdown_reason is not None:
                self.logger.debug(
                    "关闭已触发过（原因: %s），忽略重复请求: %s",
                    self._shutdown_reason, reason
                )
                return False
            self._shutdown_reason = reason

        self.logger.info("%s 请求关闭管线，原因: %s", type(self).__name__, reason)
        self._shutdown_pipeline_cb()
        return True

    def close(self) -> None:
        """释放后端资源；默认无资源需要释放"""
        pass

    def __enter__(self) -> "DisplayBase":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
