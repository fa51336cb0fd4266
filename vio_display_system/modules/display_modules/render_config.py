"""
显示渲染相关的固有配置

本模块定义了 OpenCV 显示后端使用的固有配置，包括：
- 退出按键
- 3D 场景虚拟观察相机参数
- 场景绘制颜色与字体

这些配置独立于运行时配置（DisplayConfigDTO），属于系统的固有设计。
"""

import cv2
import numpy as np

# ============================================================================
# 交互
# ============================================================================

# 触发管线关闭的按键（'q'、'Q'、ESC）
QUIT_KEYS = frozenset({ord('q'), ord('Q'), 27})

# cv2.waitKey 无按键时的返回值（& 0xFF 之后）
NO_KEY = 0xFF

# ============================================================================
# 3D 场景虚拟观察相机
# ============================================================================

# 观察相机位于场景后上方，俯视约 30 度（Rodrigues 旋转向量）
VIEWER_RVEC = np.array([[-np.pi / 6.0], [0.0], [0.0]], dtype=np.float64)

# 观察相机平移（相机坐标系下，米）
VIEWER_TVEC = np.array([[0.0], [1.0], [12.0]], dtype=np.float64)

# 观察相机焦距与画布宽度之比
VIEWER_FOCAL_SCALE = 0.8

# 观察相机前方的最近可见深度（米），之后的点才会被投影
VIEWER_NEAR_PLANE = 0.1

# ============================================================================
# 绘制样式（BGR）
# ============================================================================

DEFAULT_POINT_COLOR = (255, 255, 255)  # 白色 - 无颜色信息的地图点
TRAJECTORY_COLOR = (0, 200, 255)  # 橙色 - 相机轨迹
CAMERA_COLOR = (0, 255, 0)  # 绿色 - 当前相机位置
CAMERA_MARKER_RADIUS = 6

# 相机坐标轴长度（米）
CAMERA_AXIS_LENGTH = 0.5
AXIS_COLORS = ((0, 0, 255), (0, 255, 0), (255, 0, 0))  # x 红, y 绿, z 蓝

INFO_FONT = cv2.FONT_HERSHEY_SIMPLEX
INFO_FONT_SCALE = 0.5
INFO_TEXT_COLOR = (200, 200, 200)
INFO_THICKNESS = 1
