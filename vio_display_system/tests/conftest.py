"""
测试公共夹具
"""

import logging

import pytest

from vio_display_system.utils.logging_utils import reset_logging_state


@pytest.fixture
def restore_root_logging():
    """
    保存并恢复 root logger 的级别与 handler

    configure_logging 会修改全局 root logger，测试结束后需要还原，
    避免影响其他测试（例如 caplog）。
    """
    root = logging.getLogger()
    saved_level = root.level
    saved_handlers = list(root.handlers)
    reset_logging_state()
    yield root
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
    reset_logging_state()
