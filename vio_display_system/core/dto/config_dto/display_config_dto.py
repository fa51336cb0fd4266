"""
显示模块配置DTO

管理显示后端选择与窗口渲染相关的配置。
"""

from dataclasses import dataclass
from typing import List, Tuple, Union

from ..base_dto import validate_numeric_range, validate_string_length
from .base_config_dto import BaseConfigDTO
from .enums import DisplayType


@dataclass(frozen=True)
class DisplayConfigDTO(BaseConfigDTO):
    """
    显示模块配置

    职责：
    - 显示后端类型
    - 窗口参数
    - 3D 场景绘制样式
    - 输入队列容量

    注意：display_type 允许保留无法识别的整数，
    由显示后端工厂统一给出诊断并终止进程。
    """

    # ========== 后端选择 ==========
    display_type: Union[DisplayType, int] = DisplayType.OPENCV
    enable_display: bool = True  # 是否启用图像显示

    # ========== 窗口配置 ==========
    window_name_3d: str = "3D Visualizer"
    window_width: int = 1024
    window_height: int = 768
    wait_key_ms: int = 1  # cv2.waitKey 轮询时长（毫秒）

    # ========== 3D 场景样式 ==========
    point_size: int = 2
    trajectory_thickness: int = 2
    background_color: Tuple[int, int, int] = (32, 32, 32)  # BGR

    # ========== 输入队列 ==========
    queue_maxsize: int = 4

    def _validate_data(self) -> List[str]:
        errors = []

        if isinstance(self.display_type, bool) or not isinstance(self.display_type, int):
            errors.append(
                f"display_type必须为DisplayType或整数编号，当前类型: {type(self.display_type).__name__}"
            )

        errors.extend(validate_string_length(
            self.window_name_3d, 'window_name_3d', min_length=1, max_length=200
        ))
        errors.extend(validate_numeric_range(
            self.window_width, 'window_width', min_value=320, max_value=3840
        ))
        errors.extend(validate_numeric_range(
            self.window_height, 'window_height', min_value=240, max_value=2160
        ))
        errors.extend(validate_numeric_range(
            self.wait_key_ms, 'wait_key_ms', min_value=1, max_value=1000
        ))
        errors.extend(validate_numeric_range(
            self.point_size, 'point_size', min_value=1, max_value=20
        ))
        errors.extend(validate_numeric_range(
            self.trajectory_thickness, 'trajectory_thickness', min_value=1, max_value=10
        ))
        errors.extend(validate_numeric_range(
            self.queue_maxsize, 'queue_maxsize', min_value=1, max_value=1000
        ))

        if (
            not isinstance(self.background_color, tuple)
            or len(self.background_color) != 3
            or not all(isinstance(c, int) and 0 <= c <= 255 for c in self.background_color)
        ):
            errors.append("background_color必须为3个0-255整数组成的BGR元组")

        return errors
