"""
显示输入数据传输对象

由估计管线产出、交给显示后端渲染的数据：
- ImageToDisplay: 单张带窗口名的 2D 图像
- DisplayInputDTO: 所有后端都能理解的通用输入
- OpenCv3dDisplayInputDTO: 额外携带 3D 场景（点云、轨迹、当前位姿）
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .base_dto import BaseDTO, validate_numeric_range, validate_string_length


def _validate_points(value: Optional[np.ndarray], field_name: str) -> List[str]:
    """校验 Nx3 点数组（None 视为合法）"""
    if value is None:
        return []
    if not isinstance(value, np.ndarray):
        return [f"{field_name}必须为numpy数组，当前类型: {type(value).__name__}"]
    if value.ndim != 2 or value.shape[1] != 3:
        return [f"{field_name}形状必须为(N, 3)，当前形状: {value.shape}"]
    return []


@dataclass(frozen=True)
class ImageToDisplay(BaseDTO):
    """待显示的 2D 图像，name 同时作为窗口名"""

    name: str
    image: np.ndarray  # 灰度 HxW 或 BGR HxWx3

    def _validate_data(self) -> List[str]:
        errors = []
        errors.extend(validate_string_length(
            self.name, 'name', min_length=1, max_length=200
        ))

        if not isinstance(self.image, np.ndarray):
            errors.append(f"image必须为numpy数组，当前类型: {type(self.image).__name__}")
        elif self.image.ndim not in (2, 3) or self.image.size == 0:
            errors.append(f"image必须为非空的2D或3D数组，当前形状: {self.image.shape}")
        elif self.image.ndim == 3 and self.image.shape[2] not in (1, 3, 4):
            errors.append(f"image通道数必须为1/3/4，当前: {self.image.shape[2]}")

        return errors


@dataclass(frozen=True)
class DisplayInputDTO(BaseDTO):
    """通用显示输入"""

    timestamp: int  # 管线时间戳（纳秒）
    images_to_display: List[ImageToDisplay] = field(default_factory=list)

    def _validate_data(self) -> List[str]:
        errors = []
        errors.extend(validate_numeric_range(
            self.timestamp, 'timestamp', min_value=0
        ))
        for index, image in enumerate(self.images_to_display):
            if not isinstance(image, ImageToDisplay):
                errors.append(f"images_to_display[{index}]必须为ImageToDisplay")
                continue
            if not image.validate():
                errors.extend(
                    f"images_to_display[{index}].{error}" for error in image.get_validation_errors()
                )
        return errors

    @property
    def has_scene(self) -> bool:
        """是否包含 3D 场景内容"""
        return False


@dataclass(frozen=True)
class OpenCv3dDisplayInputDTO(DisplayInputDTO):
    """OpenCV 3D 显示输入：在 2D 图像之外携带世界坐标系下的 3D 场景"""

    point_cloud: Optional[np.ndarray] = None  # Nx3 地图点
    point_colors: Optional[np.ndarray] = None  # Nx3 BGR uint8，与 point_cloud 一一对应
    trajectory: Optional[np.ndarray] = None  # Mx3 相机历史位置
    camera_pose: Optional[np.ndarray] = None  # 4x4 当前相机位姿（world_T_camera）

    def _validate_data(self) -> List[str]:
        errors = super()._validate_data()
        errors.extend(_validate_points(self.point_cloud, 'point_cloud'))
        errors.extend(_validate_points(self.trajectory, 'trajectory'))

        if self.point_colors is not None:
            errors.extend(_validate_points(self.point_colors, 'point_colors'))
            if self.point_cloud is None:
                errors.append("point_colors需要与point_cloud同时提供")
            elif len(self.point_colors) != len(self.point_cloud):
                errors.append(
                    f"point_colors数量{len(self.point_colors)}与point_cloud数量{len(self.point_cloud)}不一致"
                )

        if self.camera_pose is not None:
            if not isinstance(self.camera_pose, np.ndarray) or self.camera_pose.shape != (4, 4):
                errors.append("camera_pose必须为4x4的numpy数组")

        return errors

    @property
    def has_scene(self) -> bool:
        return (
            (self.point_cloud is not None and len(self.point_cloud) > 0)
            or (self.trajectory is not None and len(self.trajectory) > 0)
            or self.camera_pose is not None
        )
