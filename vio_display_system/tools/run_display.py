#!/usr/bin/env python3
"""
显示后端运行工具

按配置选择显示后端，把关闭回调接到事件总线，然后逐帧驱动：
- 指定 --image-dir 时按文件名顺序播放目录中的图像
- 否则生成合成图像和合成 3D 场景（点云 + 圆形轨迹）

使用方式：
    vio-display --config config.yaml
    vio-display --display-type opencv --max-frames 500
    vio-display --image-dir ./frames --log-level DEBUG
"""

import logging
import sys
import threading
from dataclasses import replace
from pathlib import Path
from typing import Iterator, Optional, Union

import click
import cv2
import numpy as np

from vio_display_system.core.dto import (
    DTOValidationError,
    DisplayInputDTO,
    ImageToDisplay,
    OpenCv3dDisplayInputDTO,
)
from vio_display_system.core.dto.config_dto import (
    LOG_LEVELS,
    DisplayType,
    VioDisplayConfigDTO,
)
from vio_display_system.core.event_bus import EventBus, EventType
from vio_display_system.modules.display_modules import (
    DisplayModule,
    make_display,
    make_shutdown_callback,
)
from vio_display_system.utils import ConfigLoadError, configure_logging, load_config

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff")
FRAME_PERIOD_NS = 50_000_000  # 合成帧间隔 50ms


def parse_display_type(value: str) -> Union[DisplayType, int]:
    """
    解析命令行给出的显示类型

    已知名称/编号 → DisplayType；未知整数原样保留，交给工厂给出诊断。

    Raises:
        click.BadParameter: 既不是已知名称也不是整数
    """
    try:
        return DisplayType.parse(value)
    except ValueError:
        text = value.strip()
        if text.lstrip('-').isdigit():
            return int(text)
        names = ", ".join(member.name.lower() for member in DisplayType)
        raise click.BadParameter(f"未知的显示类型 {value!r}，可选: {names} 或整数编号")


def _display_type_option(ctx, param, value):
    if value is None:
        return None
    return parse_display_type(value)


def iter_image_dir(image_dir: Path) -> Iterator[DisplayInputDTO]:
    """按文件名顺序读取目录中的图像"""
    paths = sorted(p for p in image_dir.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES)
    if not paths:
        logger.warning("目录中没有可用的图像: %s", image_dir)

    for index, path in enumerate(paths):
        image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if image is None:
            logger.warning("无法读取图像，跳过: %s", path)
            continue
        yield DisplayInputDTO(
            timestamp=index * FRAME_PERIOD_NS,
            images_to_display=[ImageToDisplay(name="Frame", image=image)],
        )


def iter_synthetic_frames(
    width: int = 640,
    height: int = 480,
    num_points: int = 400,
    seed: int = 0,
) -> Iterator[OpenCv3dDisplayInputDTO]:
    """生成合成帧：渐变图像 + 固定点云 + 沿圆周前进的相机"""
    rng = np.random.default_rng(seed)
    point_cloud = rng.uniform(low=(-6.0, -1.0, -6.0), high=(6.0, 1.0, 6.0), size=(num_points, 3))
    point_colors = rng.integers(64, 256, size=(num_points, 3), dtype=np.uint8)
    gradient = np.tile(np.linspace(0, 255, width, dtype=np.uint8), (height, 1))

    positions = []
    index = 0
    while True:
        angle = 0.05 * index
        position = np.array([4.0 * np.cos(angle), 0.0, 4.0 * np.sin(angle)])
        positions.append(position)

        # 相机 z 轴沿切线方向
        forward = np.array([-np.sin(angle), 0.0, np.cos(angle)])
        up = np.array([0.0, 1.0, 0.0])
        right = np.cross(up, forward)
        pose = np.eye(4)
        pose[:3, :3] = np.column_stack([right, up, forward])
        pose[:3, 3] = position

        frame = np.roll(gradient, shift=index * 4, axis=1)
        yield OpenCv3dDisplayInputDTO(
            timestamp=index * FRAME_PERIOD_NS,
            images_to_display=[ImageToDisplay(name="Left Image", image=frame)],
            point_cloud=point_cloud,
            point_colors=point_colors,
            trajectory=np.array(positions),
            camera_pose=pose,
        )
        index += 1


def run(
    config: VioDisplayConfigDTO,
    display_type: Union[DisplayType, int],
    frames: Iterator[DisplayInputDTO],
    max_frames: Optional[int] = None,
) -> int:
    """
    构造显示后端并逐帧驱动，直到收到 SYSTEM_SHUTDOWN、帧源耗尽或达到帧数上限

    Returns:
        int: 实际渲染的帧数
    """
    event_bus = EventBus()
    shutdown_event = threading.Event()
    event_bus.subscribe(
        EventType.SYSTEM_SHUTDOWN,
        lambda event: shutdown_event.set(),
        subscriber_name="run_display",
    )

    display = make_display(
        display_type,
        make_shutdown_callback(event_bus, reason="display_closed"),
        config=config.display,
    )
    module = DisplayModule(display=display, queue_maxsize=config.display.queue_maxsize)
    module.start()

    rendered = 0
    try:
        for display_input in frames:
            if shutdown_event.is_set():
                logger.info("接收到退出信号，停止播放")
                break
            if max_frames is not None and rendered >= max_frames:
                logger.info("已达到帧数上限: %d", max_frames)
                break
            module.push(display_input)
            if module.spin_once():
                rendered += 1
    except KeyboardInterrupt:
        logger.info("捕获到 KeyboardInterrupt (Ctrl+C)，准备退出...")
    finally:
        module.stop()
        event_bus.close()

    logger.info("运行结束，共渲染 %d 帧", rendered)
    return rendered


@click.command()
@click.option(
    '--config', '-c', 'config_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='配置文件路径（.json/.yaml/.yml），缺省使用默认配置'
)
@click.option(
    '--display-type', '-d',
    callback=_display_type_option,
    help='显示类型（名称或整数编号），覆盖配置文件中的 display.display_type'
)
@click.option(
    '--image-dir',
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='按文件名顺序播放该目录中的图像'
)
@click.option(
    '--max-frames', type=click.IntRange(min=1),
    help='最多渲染的帧数（缺省不限制）'
)
@click.option(
    '--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help='覆盖配置文件中的日志级别'
)
def main(config_path, display_type, image_dir, max_frames, log_level):
    """选择显示后端并驱动渲染，按 'q'/ESC 或关闭窗口退出"""
    try:
        config = load_config(config_path) if config_path else VioDisplayConfigDTO()
    except (ConfigLoadError, DTOValidationError) as e:
        click.echo(f"[错误] 配置加载失败: {e}", err=True)
        sys.exit(1)

    system_config = config.system
    if log_level:
        system_config = replace(system_config, log_level=log_level.upper())
    configure_logging(system_config)

    selected_type = display_type if display_type is not None else config.display.display_type
    frames = iter_image_dir(image_dir) if image_dir else iter_synthetic_frames()

    run(config, selected_type, frames, max_frames=max_frames)


if __name__ == '__main__':
    main()
