"""
配置DTO基类模块

聚焦“配置加载/保存”的序列化与反序列化能力：
- JSON/Dict 类型感知转换
- 枚举值与枚举名的兼容处理
- Optional/嵌套 DTO 的递归恢复
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar, Union, get_args, get_origin

from ..base_dto import BaseDTO

T = TypeVar('T', bound='BaseConfigDTO')


@dataclass(frozen=True)
class BaseConfigDTO(BaseDTO):
    """配置DTO基类：仅保留配置持久化相关能力。"""

    def to_json(self, indent: Optional[int] = None) -> str:
        """
        将DTO转换为JSON字符串

        Args:
            indent: JSON缩进级别，None表示紧凑格式
        """
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """
        从字典创建DTO实例

        - 未知字段忽略
        - 字符串/整数 → 枚举（无法识别的值原样保留，交由 validate() 或使用方处理）
        - 字典 → 嵌套 DTO

        Raises:
            ValueError: 当数据格式不正确时
        """
        if not isinstance(data, dict):
            raise ValueError(f"{cls.__name__}需要字典数据，当前类型: {type(data).__name__}")
        try:
            field_types = cls._get_field_types()
            init_fields = cls._get_init_fields()

            converted_data = {}
            for field_name, field_value in data.items():
                if field_name not in field_types or field_name not in init_fields:
                    continue
                converted_data[field_name] = cls._deserialize_value(
                    field_value, field_types[field_name]
                )

            return cls(**converted_data)
        except Exception as e:
            raise ValueError(f"无法从字典创建{cls.__name__}实例: {str(e)}") from e

    @classmethod
    def from_json(cls: Type[T], json_str: str) -> T:
        """从JSON字符串创建DTO实例"""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ValueError(f"无效的JSON格式: {str(e)}") from e
        return cls.from_dict(data)

    @classmethod
    def _deserialize_value(cls, value: Any, field_type: Type) -> Any:
        """根据类型注解反序列化值"""
        if value is None:
            return None

        origin = get_origin(field_type)
        args = get_args(field_type)

        # Optional[X] / Union[X, ...]：取第一个非 None 类型
        if origin is Union:
            non_none_types = [arg for arg in args if arg is not type(None)]
            if non_none_types:
                return cls._deserialize_value(value, non_none_types[0])
            return value

        if origin is tuple and isinstance(value, (list, tuple)):
            return tuple(value)

        if origin is list and isinstance(value, (list, tuple)):
            item_type = args[0] if args else Any
            return [cls._deserialize_value(item, item_type) for item in value]

        if isinstance(field_type, type) and issubclass(field_type, Enum):
            return cls._deserialize_enum(value, field_type)

        if isinstance(field_type, type) and issubclass(field_type, BaseConfigDTO):
            if isinstance(value, dict):
                return field_type.from_dict(value)
            return value

        return value

    @staticmethod
    def _deserialize_enum(value: Any, enum_type: Type[Enum]) -> Any:
        """按值、再按名称（大小写不敏感）恢复枚举；都失败时保留原值"""
        if isinstance(value, enum_type):
            return value
        try:
            return enum_type(value)
        except ValueError:
            pass
        if isinstance(value, str):
            text = value.strip()
            if text.lstrip('-').isdigit():
                number = int(text)
                try:
                    return enum_type(number)
                except ValueError:
                    return number
            try:
                return enum_type[text.upper()]
            except KeyError:
                pass
        return value
