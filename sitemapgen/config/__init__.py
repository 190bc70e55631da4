"""
配置管理模块
提供系统配置的加载、验证功能
"""

from .config import ConfigLoader, create_default_config, write_default_config
from .schemas import (
    AppConfig,
    WriterConfig,
    LoggingConfig
)

__all__ = [
    'ConfigLoader',
    'create_default_config',
    'write_default_config',
    'AppConfig',
    'WriterConfig',
    'LoggingConfig'
]
