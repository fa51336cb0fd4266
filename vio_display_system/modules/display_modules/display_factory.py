"""
显示后端工厂模块

根据显示类型构造唯一的显示后端实例，并把管线关闭回调交给它。

设计要点：
- 闭合枚举：DisplayType 列出所有已知后端，支持状态由枚举维护
- 穷尽分派：create_display 对每个已实现的类型给出构造分支
- 快速失败：make_display 遇到不支持的类型直接记录诊断并终止进程，
  不把错误值返回给调用方
- 无状态：不缓存、不复用实例，每次调用返回新的后端，所有权交给调用方
"""

import logging
import os
from typing import Any, Optional, Union

from vio_display_system.core.dto.config_dto import (
    DisplayConfigDTO,
    DisplayType,
    describe_display_types,
)
from .display_base import DisplayBase, ShutdownPipelineCallback

logger = logging.getLogger(__name__)

# 不支持的显示类型导致进程终止时的退出码
FATAL_EXIT_CODE = 1


class UnsupportedDisplayTypeError(ValueError):
    """请求的显示类型未实现（预留枚举值、超出范围的整数，或根本不是整数编号的输入）"""

    def __init__(self, requested_value: Any):
        self.requested_value = requested_value
        self.supported_types = describe_display_types()
        # 整数编号按数字显示，其他类型的输入按 repr 显示
        shown = requested_value if _is_type_number(requested_value) else repr(requested_value)
        super().__init__(
            "Requested display type is not supported. "
            f"Currently supported display types: {self.supported_types}; "
            f"but requested display: {shown}"
        )


def _is_type_number(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _normalize_display_type(display_type: Any) -> Any:
    """整数编号若对应枚举成员则转为成员；其他输入（未知编号、bool、浮点数、字符串等）原样返回"""
    if isinstance(display_type, DisplayType) or not _is_type_number(display_type):
        return display_type
    try:
        return DisplayType(display_type)
    except ValueError:
        return display_type


def create_display(
    display_type: Union[DisplayType, int],
    shutdown_pipeline_cb: ShutdownPipelineCallback,
    config: Optional[DisplayConfigDTO] = None,
) -> DisplayBase:
    """
    创建显示后端实例（类型化错误版本）

    Args:
        display_type: 显示类型，DisplayType 成员或其整数编号
        shutdown_pipeline_cb: 管线关闭回调，原样交给后端
        config: 显示配置（可选），只传给需要它的后端

    Returns:
        DisplayBase: 新构造的显示后端，由调用方独占

    Raises:
        UnsupportedDisplayTypeError: 显示类型未实现
        TypeError: shutdown_pipeline_cb 不可调用
    """
    display_type = _normalize_display_type(display_type)

    if display_type is DisplayType.OPENCV:
        from .opencv_3d_display import OpenCv3dDisplay

        display = OpenCv3dDisplay(shutdown_pipeline_cb, config=config)
    else:
        requested_value = int(display_type) if isinstance(display_type, DisplayType) else display_type
        raise UnsupportedDisplayTypeError(requested_value)

    logger.info("显示后端创建完成: %s (%s)", type(display).__name__, display_type.display_name)
    return display


def make_display(
    display_type: Union[DisplayType, int],
    shutdown_pipeline_cb: ShutdownPipelineCallback,
    config: Optional[DisplayConfigDTO] = None,
) -> DisplayBase:
    """
    创建显示后端实例（快速失败版本）

    与 create_display 相同，但不支持的显示类型被视为配置缺陷：
    记录一条 CRITICAL 诊断（请求的编号 + 全部类型的支持状态），
    刷新日志后以 FATAL_EXIT_CODE 终止进程，调用方无法恢复。

    使用示例:
        display = make_display(DisplayType.OPENCV, pipeline.shutdown)
        display.spin_once(display_input)
        display.close()
    """
    try:
        return create_display(display_type, shutdown_pipeline_cb, config=config)
    except UnsupportedDisplayTypeError as e:
        _abort(str(e))


def _abort(message: str) -> None:
    """记录致命诊断并立即终止进程"""
    logger.critical(message)
    logging.shutdown()
    os._exit(FATAL_EXIT_CODE)
