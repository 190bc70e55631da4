"""
配置加载器
负责加载和验证系统配置
"""

import yaml
import os
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv
import logging

from .schemas import AppConfig


class ConfigLoader:
    """配置加载器"""

    def __init__(self, config_path: str):
        """
        初始化配置加载器

        Args:
            config_path: 系统配置文件路径
        """
        self.config_path = Path(config_path)
        self.logger = logging.getLogger(__name__)

        # 加载环境变量
        load_dotenv()

    def load_system_config(self, overrides: Optional[Dict[str, Dict[str, Any]]] = None) -> AppConfig:
        """
        加载系统配置

        Args:
            overrides: 按配置段覆盖的值，在验证前合并

        Returns:
            AppConfig: 验证后的系统配置

        Raises:
            FileNotFoundError: 配置文件不存在
            ValueError: 配置验证失败
        """
        try:
            if not self.config_path.exists():
                raise FileNotFoundError(f"配置文件不存在: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)

            if not config_data:
                raise ValueError("配置文件为空")

            # 处理环境变量替换
            config_data = self._substitute_env_vars(config_data)

            if overrides:
                config_data = self._merge_overrides(config_data, overrides)

            app_config = AppConfig(**config_data)

            self.logger.info(f"成功加载系统配置: {self.config_path}")
            return app_config

        except yaml.YAMLError as e:
            raise ValueError(f"YAML配置文件格式错误: {e}")
        except Exception as e:
            self.logger.error(f"加载系统配置失败: {e}")
            raise

    def _substitute_env_vars(self, data: Any) -> Any:
        """
        递归替换配置中的环境变量

        Args:
            data: 配置数据

        Returns:
            Any: 替换环境变量后的数据
        """
        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]
        elif isinstance(data, str) and data.startswith('${') and data.endswith('}'):
            env_var = data[2:-1]
            env_value = os.getenv(env_var)

            if env_value is None:
                self.logger.warning(f"环境变量未设置: {env_var}")
                return data  # 保持原值

            return self._sanitize_env_value(env_value)
        else:
            return data

    def _merge_overrides(self, data: Dict[str, Any],
                         overrides: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        """将覆盖值合并到对应配置段"""
        merged = dict(data)
        for section, values in overrides.items():
            if not values:
                continue
            current = merged.get(section)
            merged[section] = {**(current if isinstance(current, dict) else {}), **values}
            self.logger.debug(f"配置段 {section} 覆盖字段: {', '.join(values)}")
        return merged

    def _sanitize_env_value(self, value: str) -> str:
        """清理环境变量值中的换行符和回车符"""
        if not value:
            return ""

        cleaned = value.strip().replace('\n', '').replace('\r', '').replace('\t', '')

        if cleaned != value.strip():
            self.logger.debug("环境变量值包含控制字符，已自动清理")

        return cleaned


def create_default_config() -> Dict[str, Any]:
    """
    创建默认配置字典

    Returns:
        Dict[str, Any]: 默认配置
    """
    return {
        'writer': {
            'directory': '${SITEMAP_OUTPUT_DIR}',
            'domain': '${SITEMAP_DOMAIN}',
            'filename_template': 'robot-sitemap-%d.xml',
            'compress': True,
            'compress_level': 9
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'file': 'logs/sitemapgen.log',
            'max_size': '10MB',
            'backup_count': 5
        }
    }


def write_default_config(path: str) -> Path:
    """
    将默认配置写入YAML文件

    Args:
        path: 目标文件路径

    Returns:
        Path: 写入的文件路径
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, 'w', encoding='utf-8') as f:
        yaml.safe_dump(create_default_config(), f, allow_unicode=True, sort_keys=False)
    return target
