"""
数据传输对象（DTO）模块
"""

from .base_dto import (
    BaseDTO,
    DTOValidationError,
    validate_numeric_range,
    validate_string_length,
)
from .display_input_dto import (
    DisplayInputDTO,
    ImageToDisplay,
    OpenCv3dDisplayInputDTO,
)

__all__ = [
    "BaseDTO",
    "DTOValidationError",
    "validate_numeric_range",
    "validate_string_length",
    "DisplayInputDTO",
    "ImageToDisplay",
    "OpenCv3dDisplayInputDTO",
]
