"""
关闭回调接线测试

验证 make_shutdown_callback 与显示后端组合后，
用户关闭显示会在事件总线上发布且只发布一次 SYSTEM_SHUTDOWN。
"""

import logging
from unittest.mock import patch

import numpy as np
import pytest

from vio_display_system.core.dto import DisplayInputDTO, ImageToDisplay
from vio_display_system.core.dto.config_dto import DisplayType
from vio_display_system.core.event_bus import EventBus, EventType, ShutdownEvent
from vio_display_system.modules.display_modules import make_display, make_shutdown_callback
from vio_display_system.modules.display_modules import opencv_3d_display


@pytest.fixture
def event_bus():
    bus = EventBus()
    yield bus
    bus.close()


@pytest.fixture
def received(event_bus):
    events = []
    event_bus.subscribe(EventType.SYSTEM_SHUTDOWN, events.append, subscriber_name="test")
    return events


class TestShutdownCallback:

    def test_callback_publishes_shutdown_event(self, event_bus, received):
        """测试：回调发布带原因的 SYSTEM_SHUTDOWN"""
        callback = make_shutdown_callback(event_bus, reason="window_closed")
        callback()

        assert len(received) == 1
        assert isinstance(received[0], ShutdownEvent)
        assert received[0].reason == "window_closed"

    def test_default_reason(self, event_bus, received):
        make_shutdown_callback(event_bus)()
        assert received[0].reason == "display_closed"

    def test_warns_without_subscribers(self, event_bus, caplog):
        """测试：没有订阅者时记录警告"""
        with caplog.at_level(logging.WARNING):
            make_shutdown_callback(event_bus)()
        assert any("没有订阅者" in r.getMessage() for r in caplog.records)

    def test_display_closing_publishes_once(self, event_bus, received):
        """
        测试：工厂创建的后端被用户关闭时，事件恰好发布一次

        流程：make_display → 用户按 'q' → 继续送入输入
        """
        callback = make_shutdown_callback(event_bus)
        display = make_display(DisplayType.OPENCV, callback)
        assert display.shutdown_pipeline_cb is callback

        frame = DisplayInputDTO(
            timestamp=0,
            images_to_display=[ImageToDisplay(name="Frame", image=np.zeros((8, 8), np.uint8))],
        )
        cv2 = opencv_3d_display.cv2
        with patch.object(cv2, "namedWindow"), patch.object(cv2, "imshow"), \
                patch.object(cv2, "destroyWindow"), \
                patch.object(cv2, "waitKey", return_value=ord('q')):
            for _ in range(3):
                display.spin_once(frame)
            display.close()

        assert [event.reason for event in received] == ["display_closed"]
