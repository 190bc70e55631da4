"""
写入器异常定义
"""


class SitemapError(Exception):
    """Sitemap写入器基础异常"""


class IntegrityError(SitemapError):
    """实际写入字节数与预估大小不一致"""

    def __init__(self, written: int, expected: int):
        self.written = written
        self.expected = expected
        super().__init__(f"{written} bytes written. expected {expected}")


class StateError(SitemapError):
    """写入器状态不允许当前操作"""
