"""
配置相关的枚举类型定义
"""

from enum import IntEnum
from typing import Union


class DisplayType(IntEnum):
    """
    可视化显示后端类型枚举

    数值即配置文件与诊断信息中使用的编号，不可随意调整。
    """
    OPENCV = 0
    PANGOLIN = 1

    @property
    def display_name(self) -> str:
        """获取显示名称"""
        names = {
            DisplayType.OPENCV: "OpenCV 3D viz",
            DisplayType.PANGOLIN: "Pangolin",
        }
        return names.get(self, self.name)

    @property
    def is_supported(self) -> bool:
        """该后端当前是否已实现"""
        return self in _SUPPORTED_DISPLAY_TYPES

    @classmethod
    def supported(cls) -> list['DisplayType']:
        """
        获取已实现的显示后端（稳定顺序）

        Returns:
            list['DisplayType']: 按编号升序排列
        """
        return [member for member in cls if member.is_supported]

    @classmethod
    def parse(cls, value: Union['DisplayType', int, str]) -> 'DisplayType':
        """
        将枚举成员、整数编号或名称（大小写不敏感）解析为 DisplayType

        Raises:
            ValueError: 无法识别的取值
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"无效的显示类型: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            text = value.strip()
            if text.lstrip('-').isdigit():
                return cls(int(text))
            try:
                return cls[text.upper()]
            except KeyError:
                pass
        raise ValueError(f"无效的显示类型: {value!r}")


_SUPPORTED_DISPLAY_TYPES = frozenset({DisplayType.OPENCV})


def describe_display_types() -> str:
    """
    生成 {编号 → 支持状态} 的静态说明

    Returns:
        str: 例如 "0: OpenCV 3D viz, 1: Pangolin (not supported yet)"
    """
    entries = []
    for member in DisplayType:
        entry = f"{member.value}: {member.display_name}"
        if not member.is_supported:
            entry += " (not supported yet)"
        entries.append(entry)
    return ", ".join(entries)
