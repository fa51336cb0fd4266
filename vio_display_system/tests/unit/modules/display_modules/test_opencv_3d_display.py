"""
OpenCV 显示后端测试

窗口相关的 cv2 函数全部 mock，3D 场景绘制使用真实的 cv2 绘图函数：
1. 2D 图像显示与窗口创建
2. 'q'/ESC 与窗口关闭触发管线关闭回调（只触发一次）
3. 关闭后忽略输入
4. 3D 场景投影与绘制
5. close 的幂等性
"""

import logging
from unittest.mock import DEFAULT, Mock, patch

import cv2
import numpy as np
import pytest

from vio_display_system.core.dto import (
    DisplayInputDTO,
    ImageToDisplay,
    OpenCv3dDisplayInputDTO,
)
from vio_display_system.core.dto.config_dto import DisplayConfigDTO
from vio_display_system.modules.display_modules import opencv_3d_display
from vio_display_system.modules.display_modules import render_config as rc
from vio_display_system.modules.display_modules.opencv_3d_display import OpenCv3dDisplay


@pytest.fixture
def cv2_windows():
    """mock 掉所有 HighGUI 窗口函数"""
    with patch.multiple(
        opencv_3d_display.cv2,
        imshow=DEFAULT,
        namedWindow=DEFAULT,
        resizeWindow=DEFAULT,
        waitKey=DEFAULT,
        getWindowProperty=DEFAULT,
        destroyWindow=DEFAULT,
    ) as mocks:
        mocks["waitKey"].return_value = rc.NO_KEY
        mocks["getWindowProperty"].return_value = 1.0
        yield mocks


@pytest.fixture
def shutdown_cb():
    return Mock()


@pytest.fixture
def display(shutdown_cb):
    return OpenCv3dDisplay(shutdown_cb)


def _image_input(timestamp=0, names=("Left Image",)):
    image = np.zeros((48, 64, 3), dtype=np.uint8)
    return DisplayInputDTO(
        timestamp=timestamp,
        images_to_display=[ImageToDisplay(name=name, image=image) for name in names],
    )


def _scene_input(timestamp=0, **scene):
    return OpenCv3dDisplayInputDTO(timestamp=timestamp, **scene)


class TestImageDisplay:
    """2D 图像显示"""

    def test_each_image_shown_in_own_window(self, display, cv2_windows, shutdown_cb):
        """测试：每张图像显示在以其名称命名的窗口中"""
        display.spin_once(_image_input(names=("Left Image", "Feature Tracks")))

        shown = [c.args[0] for c in cv2_windows["imshow"].call_args_list]
        assert shown == ["Left Image", "Feature Tracks"]
        assert cv2_windows["namedWindow"].call_count == 2
        assert display.get_stats()["windows"] == ["Left Image", "Feature Tracks"]
        assert display.get_stats()["frames_rendered"] == 1
        shutdown_cb.assert_not_called()

    def test_window_created_once(self, display, cv2_windows):
        """测试：同名窗口只创建一次"""
        display.spin_once(_image_input(timestamp=0))
        display.spin_once(_image_input(timestamp=1))

        cv2_windows["namedWindow"].assert_called_once_with("Left Image", cv2.WINDOW_NORMAL)
        assert cv2_windows["imshow"].call_count == 2

    def test_wait_key_uses_configured_delay(self, shutdown_cb, cv2_windows):
        """测试：waitKey 使用配置的轮询时长"""
        display = OpenCv3dDisplay(shutdown_cb, config=DisplayConfigDTO(wait_key_ms=15))
        display.spin_once(_image_input())
        cv2_windows["waitKey"].assert_called_once_with(15)

    def test_disabled_display_skips_windows(self, shutdown_cb, cv2_windows):
        """测试：enable_display=False 时不创建窗口，但计入渲染帧数"""
        display = OpenCv3dDisplay(shutdown_cb, config=DisplayConfigDTO(enable_display=False))
        display.spin_once(_image_input())

        cv2_windows["imshow"].assert_not_called()
        cv2_windows["waitKey"].assert_not_called()
        assert display.get_stats()["frames_rendered"] == 1


class TestShutdownTriggers:
    """终止触发"""

    @pytest.mark.parametrize("key", [ord('q'), ord('Q'), 27])
    def test_quit_key_invokes_callback(self, display, cv2_windows, shutdown_cb, key):
        """测试：按下退出键调用一次回调"""
        cv2_windows["waitKey"].return_value = key

        display.spin_once(_image_input())

        shutdown_cb.assert_called_once_with()
        assert display.shutdown_reason == "key_q"

    def test_high_bits_of_key_code_ignored(self, display, cv2_windows, shutdown_cb):
        """测试：waitKey 返回值只看低 8 位"""
        cv2_windows["waitKey"].return_value = 0x100000 | ord('q')
        display.spin_once(_image_input())
        shutdown_cb.assert_called_once_with()

    def test_other_key_does_nothing(self, display, cv2_windows, shutdown_cb):
        """测试：其他按键不触发关闭"""
        cv2_windows["waitKey"].return_value = ord('a')
        display.spin_once(_image_input())
        shutdown_cb.assert_not_called()
        assert not display.is_shutdown_requested

    def test_only_real_key_presses_are_logged(self, display, cv2_windows, caplog):
        """测试：无按键（NO_KEY）不记录，其他按键记录为忽略"""
        caplog.set_level(logging.DEBUG, logger=display.logger.name)

        display.spin_once(_image_input(timestamp=0))
        cv2_windows["waitKey"].return_value = ord('a')
        display.spin_once(_image_input(timestamp=1))

        ignored = [r for r in caplog.records if "忽略按键" in r.getMessage()]
        assert len(ignored) == 1
        assert str(ord('a')) in ignored[0].getMessage()

    def test_closed_window_invokes_callback(self, display, cv2_windows, shutdown_cb):
        """测试：窗口被用户关闭时调用回调"""
        cv2_windows["getWindowProperty"].return_value = 0.0

        display.spin_once(_image_input())

        shutdown_cb.assert_called_once_with()
        assert display.shutdown_reason == "window_closed"

    def test_destroyed_window_invokes_callback(self, display, cv2_windows, shutdown_cb):
        """测试：窗口已不存在（cv2.error）视为被关闭"""
        cv2_windows["getWindowProperty"].side_effect = cv2.error("window not found")

        display.spin_once(_image_input())

        shutdown_cb.assert_called_once_with()
        assert display.shutdown_reason == "window_closed"

    def test_input_ignored_after_shutdown(self, display, cv2_windows, shutdown_cb):
        """测试：关闭触发后，后续输入被忽略，回调不再被调用"""
        cv2_windows["waitKey"].return_value = ord('q')
        display.spin_once(_image_input(timestamp=0))
        display.spin_once(_image_input(timestamp=1))
        display.spin_once(_image_input(timestamp=2))

        shutdown_cb.assert_called_once_with()
        assert cv2_windows["imshow"].call_count == 1
        stats = display.get_stats()
        assert stats["frames_rendered"] == 1
        assert stats["inputs_ignored"] == 2


class TestSceneRendering:
    """3D 场景投影与绘制（使用真实的 cv2 绘图函数）"""

    def test_canvas_shape_and_background(self, display):
        """测试：画布尺寸来自配置，空场景只有背景和信息文字"""
        config = DisplayConfigDTO()
        canvas = display._render_scene(_scene_input(trajectory=np.zeros((1, 3))))

        assert canvas.shape == (config.window_height, config.window_width, 3)
        assert canvas.dtype == np.uint8
        assert tuple(canvas[-1, -1]) == config.background_color

    def test_point_in_front_of_viewer_is_projected(self, display):
        """测试：观察相机前方的点被投影到画布内"""
        projection = display._project(np.array([[0.0, 0.0, 0.0]]))

        assert projection["mask"].tolist() == [True]
        u, v = projection["pixels"][0]
        assert 0 <= u < display._config.window_width
        assert 0 <= v < display._config.window_height

    def test_point_behind_viewer_is_culled(self, display):
        """测试：观察相机后方的点不参与投影"""
        projection = display._project(np.array([[0.0, 0.0, -100.0]]))

        assert projection["mask"].tolist() == [False]
        assert projection["pixels"].shape == (0, 2)

    def test_only_points_inside_canvas_are_drawn(self, display):
        """测试：只绘制落在画布内的点"""
        config = display._config
        canvas = np.zeros((config.window_height, config.window_width, 3), dtype=np.uint8)
        points = np.array([
            [0.0, 0.0, 0.0],      # 可见
            [1000.0, 0.0, 0.0],   # 在前方但超出画布
            [0.0, 0.0, -100.0],   # 在观察相机后方
        ])

        assert display._draw_point_cloud(canvas, points, None) == 1

    def test_point_color_is_used(self, display):
        """测试：提供 point_colors 时按颜色绘制"""
        point = np.array([[0.0, 0.0, 0.0]])
        color = np.array([[0, 0, 255]], dtype=np.uint8)
        canvas = display._render_scene(_scene_input(point_cloud=point, point_colors=color))

        u, v = display._project(point)["pixels"][0]
        assert tuple(canvas[v, u]) == (0, 0, 255)

    def test_mismatched_colors_fall_back_to_default(self, display, cv2_windows, shutdown_cb, caplog):
        """测试：未验证的输入颜色数量不符时不抛异常，改用默认颜色"""
        point = np.array([[0.0, 0.0, 0.0]])
        dto = _scene_input(point_cloud=point, point_colors=np.zeros((3, 3), dtype=np.uint8))

        display.spin_once(dto)
        canvas = cv2_windows["imshow"].call_args.args[1]

        u, v = display._project(point)["pixels"][0]
        assert tuple(canvas[v, u]) == rc.DEFAULT_POINT_COLOR
        assert display.get_stats()["frames_rendered"] == 1
        assert any("point_colors" in r.getMessage() for r in caplog.records)

    def test_trajectory_and_camera_drawn(self, display):
        """测试：轨迹与相机位姿会改变画布内容"""
        background = display._render_scene(_scene_input(trajectory=np.zeros((1, 3))))
        trajectory = np.array([[-2.0, 0.0, 0.0], [0.0, 0.0, 2.0], [2.0, 0.0, 0.0]])
        with_trajectory = display._render_scene(_scene_input(trajectory=trajectory))
        with_camera = display._render_scene(
            _scene_input(trajectory=trajectory, camera_pose=np.eye(4))
        )

        assert np.any(with_trajectory != background)
        assert np.any(with_camera != with_trajectory)

    def test_scene_shown_in_3d_window(self, shutdown_cb, cv2_windows):
        """测试：带场景的输入显示在 3D 窗口，并按配置调整窗口尺寸"""
        config = DisplayConfigDTO(window_name_3d="Scene", window_width=640, window_height=480)
        display = OpenCv3dDisplay(shutdown_cb, config=config)

        display.spin_once(_scene_input(point_cloud=np.zeros((5, 3))))

        cv2_windows["resizeWindow"].assert_called_once_with("Scene", 640, 480)
        window_name, canvas = cv2_windows["imshow"].call_args.args
        assert window_name == "Scene"
        assert canvas.shape == (480, 640, 3)


class TestClose:
    """资源释放"""

    def test_close_destroys_created_windows(self, display, cv2_windows):
        """测试：close 销毁所有已创建的窗口，且只执行一次"""
        display.spin_once(_image_input(names=("A", "B")))

        display.close()
        display.close()

        destroyed = [c.args[0] for c in cv2_windows["destroyWindow"].call_args_list]
        assert destroyed == ["A", "B"]
        assert display.get_stats()["windows"] == []

    def test_close_without_windows(self, display, cv2_windows):
        """测试：没有窗口时 close 不调用 HighGUI"""
        display.close()
        cv2_windows["destroyWindow"].assert_not_called()
        cv2_windows["waitKey"].assert_not_called()

    def test_destroy_failure_is_logged(self, display, cv2_windows, caplog):
        """测试：销毁窗口失败只记录警告，其余窗口照常销毁"""
        display.spin_once(_image_input(names=("A", "B")))
        cv2_windows["destroyWindow"].side_effect = [cv2.error("gone"), None]

        display.close()

        assert cv2_windows["destroyWindow"].call_count == 2
        assert any("销毁窗口失败" in r.getMessage() for r in caplog.records)

    def test_input_ignored_after_close(self, display, cv2_windows, shutdown_cb):
        """测试：close 之后的输入被忽略，不会重新创建窗口"""
        display.close()
        display.spin_once(_image_input())

        cv2_windows["namedWindow"].assert_not_called()
        assert display.get_stats()["inputs_ignored"] == 1
        shutdown_cb.assert_not_called()
