"""
配置数据模型定义
使用Pydantic进行数据验证和类型检查
"""

from pydantic import BaseModel, Field, field_validator


class WriterConfig(BaseModel):
    """Sitemap写入配置"""
    directory: str = Field(..., description="sitemap输出目录")
    domain: str = Field(..., description="index条目使用的域名前缀")
    filename_template: str = Field("robot-sitemap-%d.xml", description="sitemap文件名模板")
    compress: bool = Field(True, description="是否使用gzip压缩")
    compress_level: int = Field(9, description="gzip压缩级别")

    @field_validator('directory')
    @classmethod
    def validate_directory(cls, v):
        if not v or not v.strip():
            raise ValueError('输出目录不能为空')
        return v.strip()

    @field_validator('domain')
    @classmethod
    def validate_domain(cls, v):
        if not v.startswith(('http://', 'https://')):
            raise ValueError(f'无效的域名: {v}')
        return v.rstrip('/')

    @field_validator('filename_template')
    @classmethod
    def validate_filename_template(cls, v):
        if v.count('%d') != 1:
            raise ValueError('文件名模板必须包含且仅包含一个%d占位符')
        return v

    @field_validator('compress_level')
    @classmethod
    def validate_compress_level(cls, v):
        if v < 1 or v > 9:
            raise ValueError('压缩级别必须在1-9之间')
        return v


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = Field("INFO", description="日志级别")
    format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="日志格式"
    )
    file: str = Field("logs/sitemapgen.log", description="日志文件路径")
    max_size: str = Field("10MB", description="日志文件最大大小")
    backup_count: int = Field(5, description="备份文件数量")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        allowed_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in allowed_levels:
            raise ValueError(f'日志级别必须是: {", ".join(allowed_levels)}')
        return v.upper()

    @field_validator('max_size')
    @classmethod
    def validate_max_size(cls, v):
        v = v.strip().upper()
        if not v.endswith(('KB', 'MB', 'GB')) or not v[:-2].isdigit():
            raise ValueError('日志文件大小格式必须为数字加KB/MB/GB，例如10MB')
        return v

    def max_size_bytes(self) -> int:
        """日志文件最大字节数"""
        units = {'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}
        return int(self.max_size[:-2]) * units[self.max_size[-2:]]


class AppConfig(BaseModel):
    """应用程序总配置"""
    writer: WriterConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        """Pydantic配置"""
        validate_assignment = True
        extra = "forbid"  # 禁止额外字段
