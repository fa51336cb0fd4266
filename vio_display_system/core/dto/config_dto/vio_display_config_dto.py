"""
根配置DTO

聚合系统配置与显示配置，对应一个完整的配置文件。
"""

from dataclasses import dataclass, field
from typing import List

from .base_config_dto import BaseConfigDTO
from .display_config_dto import DisplayConfigDTO
from .system_config_dto import SystemConfigDTO


@dataclass(frozen=True)
class VioDisplayConfigDTO(BaseConfigDTO):
    """配置文件根对象"""

    system: SystemConfigDTO = field(default_factory=SystemConfigDTO)
    display: DisplayConfigDTO = field(default_factory=DisplayConfigDTO)

    def _validate_data(self) -> List[str]:
        errors = []
        for name, sub_config in (("system", self.system), ("display", self.display)):
            if not sub_config.validate():
                errors.extend(f"{name}.{error}" for error in sub_config.get_validation_errors())
        return errors
