"""
写入器模块
提供sitemap文件写入、压缩和index生成功能
"""

from .sitemap_writer import (
    SitemapWriter,
    WrittenSitemap,
    MAX_ENTRIES,
    MAX_SIZE_BYTES,
    EMPTY_SITEMAP_SIZE_BYTES,
    EMPTY_ENTRY_SIZE_BYTES,
    DEFAULT_FILENAME_TEMPLATE,
    INDEX_FILENAME
)
from .compressor import Compressor, GzipCompressor
from .exceptions import SitemapError, IntegrityError, StateError

__all__ = [
    'SitemapWriter',
    'WrittenSitemap',
    'MAX_ENTRIES',
    'MAX_SIZE_BYTES',
    'EMPTY_SITEMAP_SIZE_BYTES',
    'EMPTY_ENTRY_SIZE_BYTES',
    'DEFAULT_FILENAME_TEMPLATE',
    'INDEX_FILENAME',
    'Compressor',
    'GzipCompressor',
    'SitemapError',
    'IntegrityError',
    'StateError'
]
