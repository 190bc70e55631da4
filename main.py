#!/usr/bin/env python3
"""
Sitemap生成工具 - 主程序入口
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

from sitemapgen.config import ConfigLoader, AppConfig, write_default_config
from sitemapgen.sitemap_builder import SitemapBuilder, UrlEntry, parse_entries
from sitemapgen.utils import setup_logging, get_logger


def parse_arguments(argv: List[str] = None) -> argparse.Namespace:
    """
    解析命令行参数

    Returns:
        argparse.Namespace: 解析后的参数
    """
    parser = argparse.ArgumentParser(
        description='Sitemap生成工具',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例用法:
  python main.py --config config/config.yaml --urls config/urls.txt
  python main.py --urls urls.txt --output-dir public --domain https://example.com
  python main.py --create-config
        """
    )

    parser.add_argument(
        '--config',
        default='config/config.yaml',
        help='系统配置文件路径 (默认: config/config.yaml)'
    )

    parser.add_argument(
        '--urls',
        help='URL列表文件路径，每行: url [changefreq [priority]] (默认: config/urls.txt)'
    )

    parser.add_argument(
        '--output-dir',
        help='sitemap输出目录，覆盖配置文件'
    )

    parser.add_argument(
        '--domain',
        help='index条目使用的域名前缀，覆盖配置文件'
    )

    parser.add_argument(
        '--no-gzip',
        action='store_true',
        help='不压缩sitemap文件'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='日志级别，覆盖配置文件'
    )

    parser.add_argument(
        '--log-file',
        help='日志文件路径，覆盖配置文件'
    )

    parser.add_argument(
        '--create-config',
        action='store_true',
        help='创建默认配置文件'
    )

    return parser.parse_args(argv)


def load_url_entries(urls_file: str = None) -> List[UrlEntry]:
    """
    从环境变量或文件加载URL条目

    Args:
        urls_file: URL列表文件路径（可选，优先使用环境变量）

    Returns:
        List[UrlEntry]: URL条目列表
    """
    # 优先从环境变量读取
    urls_env = os.getenv('SITEMAP_SOURCE_URLS', '')
    if urls_env:
        entries = parse_entries(urls_env.split(','))
        print(f"从环境变量 SITEMAP_SOURCE_URLS 加载了 {len(entries)} 个URL")
        return entries

    if urls_file:
        try:
            with open(urls_file, 'r', encoding='utf-8') as f:
                entries = parse_entries(f)
            print(f"从文件 {urls_file} 加载了 {len(entries)} 个URL")
            return entries
        except FileNotFoundError:
            print(f"警告: URL列表文件不存在: {urls_file}")

    print("错误: 未配置URL列表")
    print("请设置 SITEMAP_SOURCE_URLS 环境变量或提供 --urls 文件路径")
    sys.exit(1)


def build_overrides(args: argparse.Namespace) -> Dict[str, Dict[str, Any]]:
    """收集命令行中覆盖配置文件的值"""
    writer = {}
    if args.output_dir:
        writer['directory'] = args.output_dir
    if args.domain:
        writer['domain'] = args.domain
    if args.no_gzip:
        writer['compress'] = False

    logging_config = {}
    if args.log_level:
        logging_config['level'] = args.log_level
    if args.log_file:
        logging_config['file'] = args.log_file

    return {'writer': writer, 'logging': logging_config}


def load_config(args: argparse.Namespace) -> AppConfig:
    """
    加载配置文件并合并命令行覆盖值；配置文件不存在时仅使用命令行参数

    Args:
        args: 命令行参数

    Returns:
        AppConfig: 合并后的配置
    """
    overrides = build_overrides(args)

    if Path(args.config).exists():
        return ConfigLoader(args.config).load_system_config(overrides)

    if not (args.output_dir and args.domain):
        print(f"错误: 配置文件不存在: {args.config}")
        print("请提供 --output-dir 和 --domain，或使用 --create-config 创建配置文件")
        sys.exit(1)

    return AppConfig(**overrides)


def main(argv: List[str] = None) -> None:
    """主函数"""
    args = parse_arguments(argv)

    if args.create_config:
        target = write_default_config(args.config)
        print(f"默认配置文件已创建: {target}")
        return

    logger = get_logger(__name__)

    try:
        config = load_config(args)
    except Exception as e:
        logger.error(f"配置加载失败: {e}")
        sys.exit(1)

    setup_logging(
        config_file='config/logging.conf',
        log_level=config.logging.level,
        log_file=config.logging.file,
        log_format=config.logging.format,
        max_bytes=config.logging.max_size_bytes(),
        backup_count=config.logging.backup_count
    )

    logger.info("程序启动")

    try:
        entries = load_url_entries(args.urls or 'config/urls.txt')

        builder = SitemapBuilder(config)
        result = builder.build(entries)

        print("\n处理结果摘要:")
        print("-" * 50)
        print(f"写入URL数量:     {result['entries_written']}")
        print(f"sitemap文件数:   {len(result['sitemaps'])}")
        for filename in result['sitemaps']:
            print(f"  - {filename}")
        print(f"index文件:       {result['index_file']}")
        print("-" * 50)

    except KeyboardInterrupt:
        logger.info("程序被用户中断")
    except Exception as e:
        logger.error(f"程序执行失败: {e}")
        sys.exit(1)
    finally:
        logger.info("程序结束")


if __name__ == '__main__':
    main()
