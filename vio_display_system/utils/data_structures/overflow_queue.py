from queue import Queue
from typing import TypeVar

T = TypeVar("T")


class OverflowQueue(Queue):
    """
    只保留最新输入的有界队列

    渲染比管线慢时，新的显示输入挤掉最旧的一帧，而不是让生产者阻塞；
    渲染侧因此最多落后 maxsize 帧。所有状态都由 Queue 自带的 mutex 保护。
    """

    def __init__(self, maxsize: int):
        """
        Args:
            maxsize: 最多保留的输入数，必须 > 0

        Raises:
            ValueError: maxsize <= 0（无界队列不会溢出）
        """
        if maxsize <= 0:
            raise ValueError("OverflowQueue 必须指定 maxsize > 0")

        super().__init__(maxsize=maxsize)
        self._drop_count = 0

    def put_with_overflow(self, item: T) -> bool:
        """
        放入一个输入，已满时先挤掉最旧的；永不阻塞

        Returns:
            bool: 是否挤掉了旧输入
        """
        with self.not_empty:
            evicted = self._qsize() >= self.maxsize
            if evicted:
                self._get()
                self._drop_count += 1
                self._forget_task()

            self._put(item)
            self.unfinished_tasks += 1
            self.not_empty.notify()
        return evicted

    def _forget_task(self) -> None:
        # 被挤掉的输入不会再有消费者调用 task_done()，调用方已持有 mutex
        self.unfinished_tasks = max(0, self.unfinished_tasks - 1)
        if self.unfinished_tasks == 0:
            self.all_tasks_done.notify_all()

    def get_drop_count(self) -> int:
        """自创建以来被挤掉的输入总数"""
        with self.mutex:
            return self._drop_count

    def clear(self) -> int:
        """
        丢弃所有未取出的输入（不计入 drop 统计）

        Returns:
            int: 被丢弃的输入数
        """
        with self.mutex:
            removed = self._qsize()
            self.queue.clear()
            self.unfinished_tasks = 0
            self.all_tasks_done.notify_all()
            self.not_full.notify_all()
            return removed
