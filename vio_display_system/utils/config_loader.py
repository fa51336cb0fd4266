"""
配置文件加载/保存

支持的格式：
- JSON (.json)
- YAML (.yaml, .yml)，使用 PyYAML safe_load / safe_dump

加载流程：读取 → 构建 VioDisplayConfigDTO → validate()，
任一步失败都抛出明确的异常，由入口负责报告并退出。
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from vio_display_system.core.dto import DTOValidationError
from vio_display_system.core.dto.config_dto import VioDisplayConfigDTO

logger = logging.getLogger(__name__)

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")


class ConfigLoadError(Exception):
    """配置文件不存在、格式不支持或内容无法解析"""


def detect_format(path: Path) -> str:
    """
    根据扩展名检测配置格式

    Returns:
        str: "json" 或 "yaml"

    Raises:
        ConfigLoadError: 不支持的扩展名
    """
    suffix = path.suffix.lower()
    if suffix in JSON_SUFFIXES:
        return "json"
    if suffix in YAML_SUFFIXES:
        return "yaml"
    raise ConfigLoadError(f"不支持的配置文件格式: {path.suffix}（支持 .json/.yaml/.yml）")


def _read_raw(path: Path) -> Dict[str, Any]:
    config_format = detect_format(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            if config_format == "json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigLoadError(f"配置文件解析失败: {path}: {e}") from e

    if data is None:
        # 空文件视为全部使用默认值
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"配置文件顶层必须为映射: {path}")
    return data


def load_config(path: Union[str, Path], validate: bool = True) -> VioDisplayConfigDTO:
    """
    加载配置文件

    Args:
        path: 配置文件路径
        validate: 是否执行验证

    Returns:
        VioDisplayConfigDTO: 配置对象

    Raises:
        ConfigLoadError: 文件不存在或无法解析
        DTOValidationError: 验证失败
    """
    path = Path(path)
    if not path.exists():
        raise ConfigLoadError(f"配置文件不存在: {path}")

    logger.info("加载配置文件: %s", path)
    data = _read_raw(path)

    try:
        config = VioDisplayConfigDTO.from_dict(data)
    except ValueError as e:
        raise ConfigLoadError(str(e)) from e

    if validate and not config.validate():
        errors = config.get_validation_errors()
        logger.error("配置验证失败: %s", errors)
        raise DTOValidationError(VioDisplayConfigDTO.__name__, errors)

    logger.debug("配置加载完成: %s", config.to_dict())
    return config


def save_config(config: VioDisplayConfigDTO, path: Union[str, Path]) -> Path:
    """
    保存配置文件，格式由扩展名决定

    Returns:
        Path: 写入的路径
    """
    path = Path(path)
    config_format = detect_format(path)
    # 经 JSON 往返一次，把元组等类型规整为 YAML 可直接表示的结构
    data = json.loads(config.to_json())

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        if config_format == "json":
            json.dump(data, f, indent=2, ensure_ascii=False)
        else:
            yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False, default_flow_style=False)

    logger.info("配置已保存: %s", path)
    return path
