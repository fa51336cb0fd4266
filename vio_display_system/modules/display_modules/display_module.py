"""
显示模块主控制器

持有由工厂创建的显示后端（独占所有权），
为管线提供输入队列、单步驱动和统一的启动/停止接口。
渲染循环由调用方驱动，本模块不创建线程。
"""

import logging
import threading
from queue import Empty
from typing import Optional

from vio_display_system.core.dto import DisplayInputDTO
from vio_display_system.utils.data_structures import OverflowQueue
from .display_base import DisplayBase


class DisplayModule:
    """显示模块主控制器

    职责：
    - 接收管线产出的显示输入（push，可跨线程）
    - 单步驱动显示后端（spin_once）
    - 提供幂等的 start/stop 接口，stop 时释放后端
    - 聚合统计信息
    """

    def __init__(self, *, display: DisplayBase, queue_maxsize: int = 4) -> None:
        """
        Args:
            display: 显示后端，所有权转移给本模块
            queue_maxsize: 输入队列容量，满时丢弃最旧的输入

        Raises:
            ValueError: queue_maxsize <= 0
        """
        self._display = display
        self._queue: OverflowQueue = OverflowQueue(maxsize=queue_maxsize)

        self._is_running = False
        self._display_closed = False
        self._running_lock = threading.RLock()
        self._spins = 0

        self.logger = logging.getLogger(__name__)
        self.logger.info(
            "DisplayModule 已初始化，后端: %s, 队列容量: %d",
            type(display).__name__, queue_maxsize
        )

    @property
    def display(self) -> DisplayBase:
        return self._display

    @property
    def is_running(self) -> bool:
        with self._running_lock:
            return self._is_running

    def start(self) -> bool:
        """
        启动显示模块

        Returns:
            bool: 是否由本次调用启动（已在运行或后端已关闭时返回 False）
        """
        with self._running_lock:
            if self._is_running:
                self.logger.info("DisplayModule 已在运行")
                return False
            if self._display_closed:
                self.logger.warning("显示后端已关闭，DisplayModule 无法再次启动")
                return False
            self._is_running = True
            self.logger.info("DisplayModule 已启动")
            return True

    def stop(self) -> bool:
        """
        停止显示模块：清空输入队列并关闭显示后端

        无论是否启动过，后端都恰好关闭一次；重复调用直接返回 True。

        Returns:
            bool: 是否成功停止
        """
        with self._running_lock:
            if self._display_closed:
                self.logger.debug("DisplayModule 已停止")
                return True
            if not self._is_running:
                self.logger.info("DisplayModule 未启动，仅释放显示后端")
            self._is_running = False
            self._display_closed = True

        dropped = self._queue.clear()
        try:
            self._display.close()
        except Exception as e:
            self.logger.error("关闭显示后端时发生异常: %s", e, exc_info=True)
            return False

        self.logger.info(
            "DisplayModule 已停止，丢弃未渲染输入: %d, 统计数据: %s",
            dropped, self.get_stats()
        )
        return True

    def push(self, display_input: DisplayInputDTO) -> bool:
        """
        放入一帧显示输入

        Returns:
            bool: 是否因队列已满丢弃了最旧的输入
        """
        dropped = self._queue.put_with_overflow(display_input)
        if dropped:
            self.logger.debug("显示输入队列已满，丢弃最旧输入")
        return dropped

    def spin_once(self, timeout: Optional[float] = 0.0) -> bool:
        """
        取出一帧输入并交给显示后端渲染

        Args:
            timeout: 等待输入的秒数；0 表示不等待，None 表示一直等待

        Returns:
            bool: 是否渲染了一帧（未运行、无输入或已请求关闭时为 False）
        """
        if not self.is_running or self._display.is_shutdown_requested:
            return False

        try:
            if timeout == 0.0:
                display_input = self._queue.get_nowait()
            else:
                display_input = self._queue.get(timeout=timeout)
        except Empty:
            return False

        try:
            self._display.spin_once(display_input)
        finally:
            self._queue.task_done()

        self._spins += 1
        return True

    def get_stats(self) -> dict:
        """获取统计信息"""
        stats = {
            "spins": self._spins,
            "queue_size": self._queue.qsize(),
            "queue_drops": self._queue.get_drop_count(),
            "shutdown_requested": self._display.is_shutdown_requested,
        }
        get_display_stats = getattr(self._display, "get_stats", None)
        if callable(get_display_stats):
            stats["display"] = get_display_stats()
        return stats
