"""
显示模块

负责在估计管线与可插拔的可视化后端之间完成后端选择与关闭回调绑定。

模块架构：
- DisplayBase: 显示后端抽象基类
- OpenCv3dDisplay: 基于 OpenCV 的显示后端
- make_display / create_display: 显示后端工厂
- DisplayModule: 管线侧驱动器（输入队列 + 单步渲染）
- make_shutdown_callback: 将关闭回调接到事件总线的 SYSTEM_SHUTDOWN 事件

数据流：
    管线输出（DisplayInputDTO）
        ↓
    DisplayModule（输入队列）
        ↓
    DisplayBase.spin_once（渲染 + 事件处理）
        ↓
    关闭回调 → SYSTEM_SHUTDOWN
"""

from .display_base import DisplayBase, ShutdownPipelineCallback
from .display_factory import (
    FATAL_EXIT_CODE,
    UnsupportedDisplayTypeError,
    create_display,
    make_display,
)
from .display_module import DisplayModule
from .opencv_3d_display import OpenCv3dDisplay
from .shutdown_hook import make_shutdown_callback

__all__ = [
    # 后端
    "DisplayBase",
    "ShutdownPipelineCallback",
    "OpenCv3dDisplay",

    # 工厂
    "make_display",
    "create_display",
    "UnsupportedDisplayTypeError",
    "FATAL_EXIT_CODE",

    # 管线侧
    "DisplayModule",
    "make_shutdown_callback",
]
