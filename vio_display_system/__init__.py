"""
VIO 显示系统

在视觉惯性里程计（VIO）管线与可插拔的可视化后端之间提供选择与生命周期绑定：
根据配置的显示类型构造唯一的显示后端，并把管线关闭回调交给它。
"""

__version__ = "0.1.0"
