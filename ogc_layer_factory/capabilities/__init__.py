"""
OGC能力文档模块

负责获取WMS、WMTS服务的Capabilities文档，并通过OWSLib解析
"""

import logging
from typing import Optional

from .client import CapabilitiesClient
from .url_utils import build_capabilities_url, clean_base_url, resolve_service_url
from .wms_capabilities import WmsCapabilities, WmsLayerCapabilities, WmsService
from .wmts_capabilities import WmtsCapabilities, WmtsLayerCapabilities

logger = logging.getLogger(__name__)


class CapabilitiesParser:
    """能力文档解析器

    将原始响应内容交给OWSLib解析为能力文档对象
    """

    def parse_wms(self, content, service_address: Optional[str] = None) -> WmsCapabilities:
        """解析WMS能力文档

        Args:
            content: 响应内容
            service_address: 服务地址，用于解析文档中的相对地址

        Raises:
            CapabilitiesParseError: 当文档无法解析时
        """
        capabilities = WmsCapabilities.from_xml(content, service_address)
        logger.info(
            f"成功解析WMS能力文档（版本 {capabilities.version}），"
            f"共找到 {len(capabilities.get_named_layers())} 个命名图层"
        )
        return capabilities

    def parse_wmts(self, content, service_address: Optional[str] = None) -> WmtsCapabilities:
        """解析WMTS能力文档

        Args:
            content: 响应内容
            service_address: 服务地址，用于解析文档中的相对地址

        Raises:
            CapabilitiesParseError: 当文档无法解析时
        """
        capabilities = WmtsCapabilities.from_xml(content, service_address)
        logger.info(
            f"成功解析WMTS能力文档（版本 {capabilities.version}），"
            f"共找到 {len(capabilities.layers)} 个图层"
        )
        return capabilities


__all__ = [
    'CapabilitiesClient',
    'CapabilitiesParser',
    'WmsCapabilities',
    'WmsLayerCapabilities',
    'WmsService',
    'WmtsCapabilities',
    'WmtsLayerCapabilities',
    'build_capabilities_url',
    'clean_base_url',
    'resolve_service_url',
]
