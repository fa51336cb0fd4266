"""OpenCV 显示后端

使用 OpenCV HighGUI 窗口显示管线输出：
- 每张 ImageToDisplay 显示在以其 name 命名的窗口中
- 输入携带 3D 场景时，用虚拟观察相机把点云、轨迹和当前相机投影到画布上
- 用户按下 'q'/ESC 或关闭任一窗口时，触发管线关闭回调
"""

import threading
from typing import Dict, List, Optional

import cv2
import numpy as np

from vio_display_system.core.dto import DisplayInputDTO
from vio_display_system.core.dto.config_dto import DisplayConfigDTO, DisplayType
from vio_display_system.modules.display_modules import render_config as rc
from vio_display_system.modules.display_modules.display_base import (
    DisplayBase,
    ShutdownPipelineCallback,
)


class OpenCv3dDisplay(DisplayBase):
    """OpenCV 3D 显示后端

    主要功能：
    - 多窗口 2D 图像显示
    - 3D 场景投影渲染（点云 / 轨迹 / 相机位姿）
    - 键盘与窗口关闭事件 → 管线关闭回调
    """

    display_type = DisplayType.OPENCV

    def __init__(
        self,
        shutdown_pipeline_cb: ShutdownPipelineCallback,
        config: Optional[DisplayConfigDTO] = None,
    ) -> None:
        """
        Args:
            shutdown_pipeline_cb: 管线关闭回调
            config: 显示配置，缺省使用 DisplayConfigDTO()
        """
        super().__init__(shutdown_pipeline_cb)
        self._config = config if config is not None else DisplayConfigDTO()

        # 已创建的窗口（按创建顺序）
        self._windows: List[str] = []
        self._closed = False

        self._stats = {
            "frames_rendered": 0,
            "inputs_ignored": 0,
        }
        self._stats_lock = threading.Lock()

        # 虚拟观察相机内参，按画布尺寸计算一次
        width, height = self._config.window_width, self._config.window_height
        focal = rc.VIEWER_FOCAL_SCALE * width
        self._viewer_camera_matrix = np.array(
            [[focal, 0.0, width / 2.0], [0.0, focal, height / 2.0], [0.0, 0.0, 1.0]],
            dtype=np.float64,
        )
        self._viewer_rotation, _ = cv2.Rodrigues(rc.VIEWER_RVEC)

        self.logger.info(
            "OpenCv3dDisplay 初始化完成 - 画布: %dx%d, enable_display: %s",
            width, height, self._config.enable_display
        )

    # ==================== 渲染入口 ====================

    def spin_once(self, display_input: DisplayInputDTO) -> None:
        """渲染一次输入并处理窗口事件

        关闭已触发或后端已关闭时，输入被忽略。
        """
        if self._closed or self.is_shutdown_requested:
            with self._stats_lock:
                self._stats["inputs_ignored"] += 1
            self.logger.debug("显示已关闭，忽略输入 timestamp=%s", display_input.timestamp)
            return

        if not self._config.enable_display:
            with self._stats_lock:
                self._stats["frames_rendered"] += 1
            return

        for image_to_display in display_input.images_to_display:
            self._show(image_to_display.name, image_to_display.image)

        if display_input.has_scene:
            self._show(self._config.window_name_3d, self._render_scene(display_input))

        with self._stats_lock:
            self._stats["frames_rendered"] += 1

        self._handle_events()

    def get_stats(self) -> dict:
        """获取渲染统计信息"""
        with self._stats_lock:
            stats = dict(self._stats)
        stats["windows"] = list(self._windows)
        stats["shutdown_reason"] = self.shutdown_reason
        return stats

    def close(self) -> None:
        """销毁本后端创建的所有窗口（幂等）"""
        if self._closed:
            return
        self._closed = True

        for window_name in self._windows:
            try:
                cv2.destroyWindow(window_name)
            except cv2.error as e:
                self.logger.warning("销毁窗口失败: %s, 错误: %s", window_name, e)
        if self._windows:
            # 让 HighGUI 处理销毁事件
            cv2.waitKey(1)

        self.logger.info(
            "OpenCv3dDisplay 已关闭 - 渲染帧数: %d, 窗口数: %d",
            self._stats["frames_rendered"], len(self._windows)
        )
        self._windows.clear()

    # ==================== 窗口与事件 ====================

    def _show(self, window_name: str, image: np.ndarray) -> None:
        if window_name not in self._windows:
            self._create_window(window_name)
        cv2.imshow(window_name, image)

    def _create_window(self, window_name: str) -> None:
        cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)
        if window_name == self._config.window_name_3d:
            cv2.resizeWindow(window_name, self._config.window_width, self._config.window_height)
        self._windows.append(window_name)
        self.logger.debug("创建窗口: %s", window_name)

    def _handle_events(self) -> None:
        """轮询键盘并检查窗口是否被用户关闭"""
        key = cv2.waitKey(self._config.wait_key_ms) & 0xFF
        if key in rc.QUIT_KEYS:
            self.request_shutdown("key_q")
            return
        if key != rc.NO_KEY:
            self.logger.debug("忽略按键: %d", key)

        closed_window = self._find_closed_window()
        if closed_window is not None:
            self.logger.info("窗口被关闭: %s", closed_window)
            self.request_shutdown("window_closed")

    def _find_closed_window(self) -> Optional[str]:
        for window_name in self._windows:
            try:
                visible = cv2.getWindowProperty(window_name, cv2.WND_PROP_VISIBLE)
            except cv2.error:
                # 窗口已不存在
                return window_name
            if visible < 1:
                return window_name
        return None

    # ==================== 3D 场景 ====================

    def _render_scene(self, display_input: DisplayInputDTO) -> np.ndarray:
        """把 3D 场景投影到画布"""
        canvas = np.empty(
            (self._config.window_height, self._config.window_width, 3), dtype=np.uint8
        )
        canvas[:] = self._config.background_color

        point_cloud = getattr(display_input, "point_cloud", None)
        trajectory = getattr(display_input, "trajectory", None)
        camera_pose = getattr(display_input, "camera_pose", None)

        num_points = 0
        if point_cloud is not None and len(point_cloud) > 0:
            num_points = self._draw_point_cloud(
                canvas, point_cloud, getattr(display_input, "point_colors", None)
            )

        if trajectory is not None and len(trajectory) > 1:
            self._draw_trajectory(canvas, trajectory)

        if camera_pose is not None:
            self._draw_camera(canvas, camera_pose)

        cv2.putText(
            canvas,
            f"t={display_input.timestamp}  points={num_points}",
            (10, 20),
            rc.INFO_FONT,
            rc.INFO_FONT_SCALE,
            rc.INFO_TEXT_COLOR,
            rc.INFO_THICKNESS,
            cv2.LINE_AA,
        )
        return canvas

    def _project(self, points: np.ndarray) -> Dict[str, np.ndarray]:
        """投影世界坐标点

        Returns:
            dict: pixels 为可见点的整数像素坐标 (K, 2)，mask 为输入点的可见性 (N,)
        """
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        depth = points @ self._viewer_rotation[2] + rc.VIEWER_TVEC[2, 0]
        mask = depth > rc.VIEWER_NEAR_PLANE
        if not np.any(mask):
            return {"pixels": np.empty((0, 2), dtype=np.int32), "mask": mask}

        projected, _ = cv2.projectPoints(
            points[mask], rc.VIEWER_RVEC, rc.VIEWER_TVEC, self._viewer_camera_matrix, None
        )
        pixels = np.round(projected.reshape(-1, 2)).astype(np.int32)
        return {"pixels": pixels, "mask": mask}

    def _draw_point_cloud(
        self,
        canvas: np.ndarray,
        point_cloud: np.ndarray,
        point_colors: Optional[np.ndarray],
    ) -> int:
        if point_colors is not None and len(point_colors) != len(point_cloud):
            # 未经 validate() 的输入可能颜色数量不符，退回默认颜色
            self.logger.warning(
                "point_colors 数量 %d 与 point_cloud 数量 %d 不一致，使用默认颜色",
                len(point_colors), len(point_cloud)
            )
            point_colors = None

        projection = self._project(point_cloud)
        pixels = projection["pixels"]
        colors = point_colors[projection["mask"]] if point_colors is not None else None

        height, width = canvas.shape[:2]
        drawn = 0
        for index, (u, v) in enumerate(pixels):
            if not (0 <= u < width and 0 <= v < height):
                continue
            color = (
                tuple(int(c) for c in colors[index]) if colors is not None else rc.DEFAULT_POINT_COLOR
            )
            cv2.circle(canvas, (int(u), int(v)), self._config.point_size, color, -1)
            drawn += 1
        return drawn

    def _draw_trajectory(self, canvas: np.ndarray, trajectory: np.ndarray) -> None:
        pixels = self._project(trajectory)["pixels"]
        if len(pixels) < 2:
            return
        cv2.polylines(
            canvas,
            [pixels.reshape(-1, 1, 2)],
            False,
            rc.TRAJECTORY_COLOR,
            self._config.trajectory_thickness,
            cv2.LINE_AA,
        )

    def _draw_camera(self, canvas: np.ndarray, camera_pose: np.ndarray) -> None:
        position = camera_pose[:3, 3]
        rotation = camera_pose[:3, :3]
        # 相机中心 + 三个坐标轴端点
        anchors = np.vstack([position, position + rc.CAMERA_AXIS_LENGTH * rotation.T])
        projection = self._project(anchors)
        if not projection["mask"][0]:
            return

        pixels = projection["pixels"]
        center = tuple(int(c) for c in pixels[0])
        visible_axes = np.flatnonzero(projection["mask"][1:])
        for pixel, axis in zip(pixels[1:], visible_axes):
            cv2.arrowedLine(
                canvas, center, tuple(int(c) for c in pixel), rc.AXIS_COLORS[axis], 2, cv2.LINE_AA
            )
        cv2.circle(canvas, center, rc.CAMERA_MARKER_RADIUS, rc.CAMERA_COLOR, 2, cv2.LINE_AA)
