"""
DTO基类模块

所有数据传输对象（显示输入、配置）共用：
- frozen dataclass，构造后不可修改
- validate() 手动触发验证，构造时不做检查，便于先加载再统一报告错误
- to_dict() 递归转换为基础类型
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union


@dataclass(frozen=True)
class BaseDTO(ABC):
    """DTO抽象基类

    子类实现 _validate_data()，返回错误信息列表（空列表表示有效）。
    验证结果保存在 is_valid / validation_errors 中，不参与构造与序列化。
    """

    is_valid: bool = field(default=True, init=False, repr=False, compare=False)
    validation_errors: List[str] = field(
        default_factory=list, init=False, repr=False, compare=False
    )

    @abstractmethod
    def _validate_data(self) -> List[str]:
        pass

    def validate(self) -> bool:
        """执行验证并记录结果

        Returns:
            bool: 是否通过验证
        """
        errors = list(self._validate_data())
        # frozen 实例只能绕过 __setattr__ 更新验证状态
        object.__setattr__(self, 'is_valid', not errors)
        object.__setattr__(self, 'validation_errors', errors)
        return not errors

    def get_validation_errors(self) -> List[str]:
        """最近一次 validate() 的错误信息（副本）"""
        return list(self.validation_errors)

    def to_dict(self) -> Dict[str, Any]:
        """转换为只包含基础类型的字典（枚举取值、嵌套 DTO 递归展开）"""
        return {
            f.name: self._serialize_value(getattr(self, f.name))
            for f in fields(self)
            if f.init
        }

    def _serialize_value(self, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, BaseDTO):
            return value.to_dict()
        if isinstance(value, dict):
            return {
                (k.value if isinstance(k, Enum) else k): self._serialize_value(v)
                for k, v in value.items()
            }
        if isinstance(value, (list, tuple)):
            return type(value)(self._serialize_value(item) for item in value)
        return value

    @classmethod
    def _get_init_fields(cls) -> set:
        """构造函数接受的字段名"""
        return {f.name for f in fields(cls) if f.init}

    @classmethod
    def _get_field_types(cls) -> Dict[str, Type]:
        """字段名 → 类型注解"""
        return {f.name: f.type for f in fields(cls)}


class DTOValidationError(Exception):
    """DTO验证失败（通常由加载入口在 validate() 返回 False 后抛出）"""

    def __init__(self, dto_class: str, errors: List[str]):
        self.dto_class = dto_class
        self.errors = list(errors)
        super().__init__(f"{dto_class}验证失败: {'; '.join(self.errors)}")


def validate_numeric_range(
    value: Union[int, float],
    field_name: str,
    min_value: Optional[Union[int, float]] = None,
    max_value: Optional[Union[int, float]] = None,
    allow_none: bool = False
) -> List[str]:
    """
    检查数值是否落在 [min_value, max_value] 内

    bool 不被视为数值。

    Returns:
        List[str]: 错误信息，空列表表示通过
    """
    if value is None:
        return [] if allow_none else [f"{field_name}不能为None"]

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return [f"{field_name}必须为数值类型，当前类型: {type(value).__name__}"]

    errors = []
    if min_value is not None and value < min_value:
        errors.append(f"{field_name}值{value}小于最小值{min_value}")
    if max_value is not None and value > max_value:
        errors.append(f"{field_name}值{value}大于最大值{max_value}")
    return errors


def validate_string_length(
    value: str,
    field_name: str,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
    allow_none: bool = False
) -> List[str]:
    """检查字符串长度"""
    if value is None:
        return [] if allow_none else [f"{field_name}不能为None"]

    if not isinstance(value, str):
        return [f"{field_name}必须为字符串类型，当前类型: {type(value).__name__}"]

    errors = []
    length = len(value)
    if min_length is not None and length < min_length:
        errors.append(f"{field_name}长度{length}小于最小长度{min_length}")
    if max_length is not None and length > max_length:
        errors.append(f"{field_name}长度{length}大于最大长度{max_length}")
    return errors
