"""
Sitemap生成工具
按sitemaps.org协议生成分片sitemap文件及sitemap index
"""

from .writers import SitemapWriter, GzipCompressor, IntegrityError, StateError

__version__ = '1.0.0'

__all__ = ['SitemapWriter', 'GzipCompressor', 'IntegrityError', 'StateError']
