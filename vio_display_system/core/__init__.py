"""
核心基础设施：DTO、配置与事件总线
"""
