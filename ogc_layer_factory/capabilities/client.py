"""
能力文档获取模块

通过HTTP GET请求获取OGC服务的GetCapabilities文档
每次调用只发起一次请求，不做重试
"""

import logging
from typing import Optional

import httpx

from ..errors import CapabilitiesRetrievalError
from .url_utils import build_capabilities_url

logger = logging.getLogger(__name__)


class CapabilitiesClient:
    """能力文档HTTP客户端"""

    def __init__(self, timeout: float = 30, http_client: Optional[httpx.AsyncClient] = None):
        """初始化能力文档客户端

        Args:
            timeout: HTTP请求超时时间（秒）
            http_client: 外部提供的httpx异步客户端，不提供时自行创建
        """
        self.timeout = timeout
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def close(self):
        """关闭HTTP客户端"""
        await self.http_client.aclose()

    async def fetch_capabilities(self, service_address: str, service_type: str) -> bytes:
        """获取能力文档原始内容

        Args:
            service_address: 服务地址
            service_type: 服务类型（WMS/WMTS）

        Returns:
            响应体原始字节

        Raises:
            CapabilitiesRetrievalError: 网络传输错误或响应状态码不是2xx时
        """
        capabilities_url = build_capabilities_url(service_address, service_type)
        logger.info(f"获取{service_type}能力文档: {capabilities_url}")

        try:
            response = await self.http_client.get(capabilities_url)
        except httpx.HTTPError as e:
            logger.error(f"{service_type}能力文档请求失败: {e}")
            raise CapabilitiesRetrievalError(capabilities_url, str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.error(f"{service_type}服务返回错误状态码: {response.status_code}")
            raise CapabilitiesRetrievalError(
                capabilities_url,
                f"服务返回错误状态码: {response.status_code}",
                status_code=response.status_code,
            )

        logger.debug(f"{service_type}能力文档长度: {len(response.content)} 字节")
        return response.content
