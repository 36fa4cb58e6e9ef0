"""
URL处理工具模块

负责构建OGC能力文档请求URL
"""

import logging
from typing import Optional
from urllib.parse import parse_qs, urljoin, urlparse, urlunparse

logger = logging.getLogger(__name__)

SUPPORTED_SERVICE_TYPES = ('WMS', 'WMTS')


def clean_base_url(url: str) -> str:
    """清理基础URL，移除查询参数

    Args:
        url: 原始URL

    Returns:
        清理后的基础URL
    """
    parsed = urlparse(url)
    # 只保留scheme, netloc, path，移除query和fragment
    clean_url = urlunparse((parsed.scheme, parsed.netloc, parsed.path, '', '', ''))
    return clean_url.rstrip('/')


def build_capabilities_url(url: str, service_type: str) -> str:
    """根据服务地址构建能力文档请求URL

    已有的查询参数保持不变，只补充缺失的 service 和 request 参数
    （参数名不区分大小写）

    Args:
        url: 服务地址
        service_type: 服务类型（WMS/WMTS）

    Returns:
        完整的能力文档请求URL

    Raises:
        ValueError: 不支持的服务类型
    """
    service_type = service_type.upper()
    if service_type not in SUPPORTED_SERVICE_TYPES:
        raise ValueError(f"不支持的服务类型: {service_type}")

    parsed = urlparse(url)
    query_keys = {key.lower() for key in parse_qs(parsed.query, keep_blank_values=True)}

    missing = []
    if 'service' not in query_keys:
        missing.append(f"service={service_type}")
    if 'request' not in query_keys:
        missing.append("request=GetCapabilities")

    if not missing:
        return url

    # 去掉fragment后再拼接参数
    base = urlunparse((parsed.scheme, parsed.netloc, parsed.path, parsed.params, parsed.query, ''))
    if not parsed.query:
        separator = '' if base.endswith('?') else '?'
    else:
        separator = '' if base.endswith('&') else '&'
    capabilities_url = f"{base}{separator}{'&'.join(missing)}"
    logger.debug(f"构建能力文档URL: {capabilities_url}")
    return capabilities_url


def resolve_service_url(href: Optional[str], service_address: Optional[str] = None) -> Optional[str]:
    """将能力文档中声明的请求地址解析为绝对地址

    相对地址基于服务地址解析，协议名不区分大小写

    Args:
        href: 能力文档中的地址
        service_address: 获取能力文档时使用的服务地址

    Returns:
        http(s)绝对地址，无法解析时返回None
    """
    if not href:
        return None
    url = href.strip()
    if not urlparse(url).scheme and service_address:
        url = urljoin(service_address, url)
    if urlparse(url).scheme.lower() not in ('http', 'https'):
        logger.warning(f"忽略无法解析为http(s)地址的服务地址: {href}")
        return None
    return url
