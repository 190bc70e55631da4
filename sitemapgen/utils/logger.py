"""
日志工具模块
提供统一的日志配置和管理功能
"""

import logging
import logging.config
import logging.handlers
from pathlib import Path
from typing import Optional
import sys
import time


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'


class LoggerManager:
    """日志管理器"""

    def __init__(self):
        """初始化日志管理器"""
        self._configured = False
        self._loggers = {}

    def setup_logging(self, config_file: Optional[str] = None,
                      log_level: str = "INFO",
                      log_file: Optional[str] = None,
                      log_format: str = DEFAULT_FORMAT,
                      max_bytes: int = 10 * 1024 * 1024,
                      backup_count: int = 5) -> None:
        """
        设置日志配置

        Args:
            config_file: 日志配置文件路径
            log_level: 日志级别
            log_file: 日志文件路径
            log_format: 日志格式
            max_bytes: 单个日志文件最大字节数
            backup_count: 备份文件数量
        """
        if self._configured:
            return

        if config_file and Path(config_file).exists():
            try:
                logging.config.fileConfig(config_file)
                self._configured = True
                return
            except Exception as e:
                print(f"加载日志配置文件失败: {e}")

        self._setup_default_logging(log_level, log_file, log_format, max_bytes, backup_count)
        self._configured = True

    def _setup_default_logging(self, log_level: str, log_file: Optional[str],
                               log_format: str, max_bytes: int, backup_count: int) -> None:
        """设置默认日志配置：控制台 + 可选的滚动文件"""
        level = getattr(logging, log_level.upper())

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        formatter = logging.Formatter(log_format, datefmt='%Y-%m-%d %H:%M:%S')

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if log_file:
            try:
                log_path = Path(log_file)
                log_path.parent.mkdir(parents=True, exist_ok=True)

                file_handler = logging.handlers.RotatingFileHandler(
                    log_file,
                    maxBytes=max_bytes,
                    backupCount=backup_count,
                    encoding='utf-8'
                )
                file_handler.setLevel(level)
                file_handler.setFormatter(formatter)
                root_logger.addHandler(file_handler)

            except OSError as e:
                print(f"创建文件日志处理器失败: {e}")

    def get_logger(self, name: str) -> logging.Logger:
        """
        获取日志器

        Args:
            name: 日志器名称

        Returns:
            logging.Logger: 日志器实例
        """
        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)

        return self._loggers[name]

    def set_level(self, level: str) -> None:
        """设置全局日志级别"""
        logging.getLogger().setLevel(getattr(logging, level.upper()))

        for handler in logging.getLogger().handlers:
            handler.setLevel(getattr(logging, level.upper()))


# 全局日志管理器实例
logger_manager = LoggerManager()


def setup_logging(config_file: Optional[str] = None,
                  log_level: str = "INFO",
                  log_file: Optional[str] = None,
                  log_format: str = DEFAULT_FORMAT,
                  max_bytes: int = 10 * 1024 * 1024,
                  backup_count: int = 5) -> None:
    """设置日志配置（便捷函数）"""
    logger_manager.setup_logging(config_file, log_level, log_file,
                                 log_format, max_bytes, backup_count)


def get_logger(name: str) -> logging.Logger:
    """获取日志器（便捷函数）"""
    return logger_manager.get_logger(name)


class ProgressLogger:
    """进度日志器"""

    def __init__(self, logger: logging.Logger, total: int,
                 log_interval: int = 1000):
        """
        初始化进度日志器

        Args:
            logger: 日志器
            total: 总数量
            log_interval: 日志间隔
        """
        self.logger = logger
        self.total = total
        self.log_interval = log_interval
        self.current = 0

    def update(self, count: int = 1) -> None:
        """更新进度"""
        self.current += count

        if self.total and (self.current % self.log_interval == 0 or self.current == self.total):
            percentage = (self.current / self.total) * 100
            self.logger.info(f"进度: {percentage:.0f}% ({self.current:,}/{self.total:,})")

    def finish(self) -> None:
        """完成进度记录"""
        if self.current < self.total:
            self.current = self.total
            self.logger.info(f"进度: {self.current}/{self.total} (100.0%)")


class TimingLogger:
    """计时日志器"""

    def __init__(self, logger: logging.Logger, operation: str):
        self.logger = logger
        self.operation = operation
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        self.logger.info(f"开始 {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time:
            duration = time.time() - self.start_time
            if exc_type:
                self.logger.error(f"{self.operation} 失败，耗时: {duration:.2f}秒")
            else:
                self.logger.info(f"{self.operation} 完成，耗时: {duration:.2f}秒")
