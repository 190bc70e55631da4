"""
Sitemap文件压缩器
在构造写入器时注入，默认使用gzip最高压缩级别
"""

import gzip
import os
import shutil
from abc import ABC, abstractmethod
import logging


class Compressor(ABC):
    """压缩器抽象基类"""

    suffix = ''

    @abstractmethod
    def compress(self, pathname: str) -> str:
        """
        压缩文件并删除原文件

        Args:
            pathname: 待压缩文件路径

        Returns:
            str: 压缩后文件路径
        """
        pass


class GzipCompressor(Compressor):
    """gzip压缩器"""

    suffix = '.gz'

    def __init__(self, level: int = 9):
        if level < 1 or level > 9:
            raise ValueError('压缩级别必须在1-9之间')
        self.level = level
        self.logger = logging.getLogger(__name__)

    def compress(self, pathname: str) -> str:
        target = pathname + self.suffix

        with open(pathname, 'rb') as src, gzip.open(target, 'wb', compresslevel=self.level) as dst:
            shutil.copyfileobj(src, dst)

        # 压缩成功后才删除原文件
        os.remove(pathname)

        self.logger.debug(f"已压缩: {target}")
        return target
