"""
工具模块
提供日志等通用工具功能
"""

from .logger import (
    LoggerManager,
    setup_logging,
    get_logger,
    ProgressLogger,
    TimingLogger
)

__all__ = [
    'LoggerManager',
    'setup_logging',
    'get_logger',
    'ProgressLogger',
    'TimingLogger'
]
