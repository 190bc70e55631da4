"""
Sitemap写入器
将URL条目累积为XML文档，达到数量或大小上限时自动保存，并生成sitemap index
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional
import logging

from .compressor import Compressor, GzipCompressor
from .exceptions import IntegrityError, StateError


SITEMAP_NAMESPACE = 'http://www.sitemaps.org/schemas/sitemap/0.9'

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

MAX_ENTRIES = 50000

MAX_SIZE_BYTES = 10485760  # 10MB，未压缩

# 不含任何url条目的文件大小
EMPTY_SITEMAP_SIZE_BYTES = 110

# 单个url条目在url和changefreq之外的固定大小
EMPTY_ENTRY_SIZE_BYTES = 141

DEFAULT_FILENAME_TEMPLATE = 'robot-sitemap-%d.xml'

INDEX_FILENAME = 'robot-sitemap-index.xml'


def w3c_datetime(value: datetime) -> str:
    """
    格式化为W3C日期时间，例如 2024-01-01T12:00:00+00:00

    Args:
        value: 时间，无时区信息时按本地时区处理

    Returns:
        str: W3C格式字符串
    """
    return value.astimezone().isoformat(timespec='seconds')


def format_priority(priority: float) -> str:
    """优先级转为最短十进制表示，0.5 -> '0.5'，1.0 -> '1'"""
    return format(priority, 'g')


@dataclass
class WrittenSitemap:
    """已写入的sitemap文件记录"""
    filename: str
    datetime: datetime


class SitemapWriter:
    """Sitemap写入器"""

    def __init__(self, directory: str, domain: str,
                 compressor: Optional[Compressor] = None,
                 filename_template: str = DEFAULT_FILENAME_TEMPLATE,
                 compress: bool = True):
        """
        初始化Sitemap写入器

        Args:
            directory: 输出目录
            domain: 生成index条目时使用的域名前缀，例如 https://example.com
            compressor: 文件压缩器，为None时使用gzip最高压缩级别
            filename_template: 默认文件名模板，自动保存时也使用此模板
            compress: 是否压缩，为False时忽略compressor
        """
        self.directory = Path(directory)
        self.domain = domain
        if not compress:
            compressor = None
        elif compressor is None:
            compressor = GzipCompressor(9)
        self.compressor = compressor
        self.filename_template = filename_template
        self.logger = logging.getLogger(__name__)

        self._root: Optional[ET.Element] = None
        self._entry_count = 0
        self._size_in_bytes = 0
        self._sitemap_count = 0
        self._sitemaps_written: List[WrittenSitemap] = []

    @property
    def sitemap_count(self) -> int:
        """当前批次已保存的sitemap数量，即下一个文件名使用的序号"""
        return self._sitemap_count

    @property
    def sitemaps(self) -> List[WrittenSitemap]:
        """已写入的sitemap记录（按写入顺序）"""
        return list(self._sitemaps_written)

    @property
    def entry_count(self) -> int:
        return self._entry_count

    @property
    def size_in_bytes(self) -> int:
        return self._size_in_bytes

    @property
    def has_open_document(self) -> bool:
        return self._root is not None

    def append(self, url: str, changefreq: str = 'weekly', priority: float = 0.5) -> None:
        """
        添加URL条目，文档已满时立即保存

        Args:
            url: 页面URL
            changefreq: 更新频率
            priority: 优先级
        """
        if self._root is None:
            self._setup_document()

        url_node = ET.SubElement(self._root, 'url')
        ET.SubElement(url_node, 'loc').text = url
        ET.SubElement(url_node, 'lastmod').text = w3c_datetime(datetime.now())
        ET.SubElement(url_node, 'changefreq').text = changefreq
        ET.SubElement(url_node, 'priority').text = format_priority(priority)

        self._entry_count += 1
        self._size_in_bytes += (EMPTY_ENTRY_SIZE_BYTES
                                + len(url.encode('utf-8'))
                                + len(changefreq.encode('utf-8')))

        if self._is_full():
            self.logger.debug(f"sitemap已满: {self._entry_count} 条, 预估 {self._size_in_bytes} 字节")
            self.save()

    def save(self, filename: Optional[str] = None) -> int:
        """
        保存当前sitemap文档

        Args:
            filename: 文件名模板，包含一个整数占位符，默认使用构造时的模板

        Returns:
            int: 写入的字节数（压缩前），没有待保存条目时为0

        Raises:
            IntegrityError: 写入字节数与预估大小不一致
        """
        if self._entry_count == 0:
            return 0

        filename = (filename or self.filename_template) % self._sitemap_count
        pathname = self.directory / filename

        written = self._write(pathname)
        if written != self._size_in_bytes:
            self.logger.error(f"sitemap大小校验失败: {pathname} 写入 {written} 字节, 预估 {self._size_in_bytes} 字节")
            raise IntegrityError(written, self._size_in_bytes)

        if self.compressor is not None:
            self.compressor.compress(str(pathname))
            filename += self.compressor.suffix

        self._sitemaps_written.append(WrittenSitemap(filename=filename, datetime=datetime.now()))
        self.logger.info(f"已保存sitemap: {filename} ({self._entry_count} 条URL, {written} 字节)")

        self._root = None
        self._entry_count = 0
        self._sitemap_count += 1

        return written

    def write_index(self) -> None:
        """
        写入sitemap index并开始新的批次

        Raises:
            StateError: 当前sitemap尚未保存
        """
        if self._root is not None:
            raise StateError('current sitemap not saved.')

        self._setup_document('sitemapindex')

        for sitemap in self._sitemaps_written:
            sitemap_node = ET.SubElement(self._root, 'sitemap')
            ET.SubElement(sitemap_node, 'loc').text = f"{self.domain}/{sitemap.filename}"
            ET.SubElement(sitemap_node, 'lastmod').text = w3c_datetime(sitemap.datetime)

        self._write(self.directory / INDEX_FILENAME)
        self.logger.info(f"已写入sitemap index: {INDEX_FILENAME} ({len(self._sitemaps_written)} 个sitemap)")

        self._root = None
        self._entry_count = 0
        self._sitemap_count = 0
        self._sitemaps_written = []

    def _setup_document(self, root: str = 'urlset') -> None:
        self._root = ET.Element(root, {'xmlns': SITEMAP_NAMESPACE})

        self._entry_count = 0
        self._size_in_bytes = EMPTY_SITEMAP_SIZE_BYTES

        self.logger.debug(f"新建文档 <{root}>")

    def _is_full(self) -> bool:
        if self._entry_count >= MAX_ENTRIES:
            return True

        if self._size_in_bytes + (2 * EMPTY_ENTRY_SIZE_BYTES) > MAX_SIZE_BYTES:
            return True

        return False

    def _serialize(self) -> bytes:
        """序列化当前文档为带缩进的UTF-8字节"""
        ET.indent(self._root, space='  ')
        body = ET.tostring(self._root, encoding='unicode')
        return f"{XML_DECLARATION}\n{body}\n".encode('utf-8')

    def _write(self, pathname: Path) -> int:
        data = self._serialize()
        with open(pathname, 'wb') as f:
            return f.write(data)
