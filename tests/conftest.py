"""
测试公共夹具
"""

import logging

import pytest

from sitemapgen.utils.logger import logger_manager
from sitemapgen.writers import SitemapWriter


@pytest.fixture
def writer(tmp_path):
    """不压缩的写入器"""
    return SitemapWriter(str(tmp_path), 'https://example.com', compress=False)


@pytest.fixture
def gzip_writer(tmp_path):
    """默认gzip压缩的写入器"""
    return SitemapWriter(str(tmp_path), 'https://example.com')


@pytest.fixture(autouse=True)
def restore_logging():
    """命令行入口会重置根日志器，测试结束后恢复"""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level

    yield

    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    logger_manager._configured = False
