"""
Sitemap构建器
按配置创建写入器，批量写入URL条目并生成sitemap index
"""

from pathlib import Path
from typing import Iterable, List, Dict, Any, Optional, Tuple

from .config import AppConfig
from .writers import SitemapWriter, GzipCompressor, INDEX_FILENAME
from .utils import get_logger, ProgressLogger, TimingLogger


UrlEntry = Tuple[str, str, float]


def parse_entry_line(line: str) -> Optional[UrlEntry]:
    """
    解析URL列表中的一行，格式: url [changefreq [priority]]

    Args:
        line: 原始行

    Returns:
        Optional[UrlEntry]: 空行或注释返回None

    Raises:
        ValueError: 字段过多或priority不是数字
    """
    line = line.strip()
    if not line or line.startswith('#'):
        return None

    parts = line.split()
    if len(parts) > 3:
        raise ValueError(f"无效的URL条目: {line}")

    url = parts[0]
    changefreq = parts[1] if len(parts) > 1 else 'weekly'
    try:
        priority = float(parts[2]) if len(parts) > 2 else 0.5
    except ValueError:
        raise ValueError(f"无效的priority: {parts[2]}")

    return url, changefreq, priority


def parse_entries(lines: Iterable[str]) -> List[UrlEntry]:
    """解析多行URL列表，跳过空行和注释"""
    entries = []
    for line in lines:
        entry = parse_entry_line(line)
        if entry is not None:
            entries.append(entry)
    return entries


class SitemapBuilder:
    """Sitemap构建器"""

    def __init__(self, config: AppConfig):
        """
        初始化构建器

        Args:
            config: 应用配置
        """
        self.config = config
        self.logger = get_logger(__name__)

        writer_config = config.writer
        Path(writer_config.directory).mkdir(parents=True, exist_ok=True)

        self.writer = SitemapWriter(writer_config.directory, writer_config.domain,
                                    GzipCompressor(writer_config.compress_level),
                                    writer_config.filename_template,
                                    compress=writer_config.compress)

        self.logger.info(f"Sitemap构建器初始化完成: {writer_config.directory}")

    def build(self, entries: List[UrlEntry]) -> Dict[str, Any]:
        """
        写入全部URL条目，保存最后一个文档并生成index

        Args:
            entries: URL条目列表

        Returns:
            Dict[str, Any]: 处理结果摘要
        """
        progress = ProgressLogger(self.logger, len(entries))

        with TimingLogger(self.logger, "生成sitemap"):
            for url, changefreq, priority in entries:
                self.writer.append(url, changefreq, priority)
                progress.update()

            self.writer.save()
            progress.finish()

            sitemaps = [sitemap.filename for sitemap in self.writer.sitemaps]
            self.writer.write_index()

        return {
            'entries_written': len(entries),
            'sitemaps': sitemaps,
            'index_file': str(Path(self.config.writer.directory) / INDEX_FILENAME)
        }
