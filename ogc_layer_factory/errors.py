"""
图层工厂异常模块

定义图层工厂在参数校验、能力文档获取、解析和图层匹配各阶段使用的异常类型
"""

import logging
from typing import List, Optional

logger = logging.getLogger(__name__)


class LayerFactoryError(Exception):
    """图层工厂异常基类"""


class ArgumentError(LayerFactoryError, ValueError):
    """参数错误

    在任何异步操作开始之前同步抛出，调用方需要直接捕获
    """

    def __init__(self, class_name: str, method_name: str, reason: str):
        """初始化参数错误

        Args:
            class_name: 抛出错误的类名
            method_name: 抛出错误的方法名
            reason: 错误原因
        """
        self.class_name = class_name
        self.method_name = method_name
        self.reason = reason
        message = f"{class_name}.{method_name}: {reason}"
        logger.error(message)
        super().__init__(message)


class CapabilitiesRetrievalError(LayerFactoryError):
    """能力文档获取失败（网络传输错误或非2xx状态码）"""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"获取能力文档失败 {url}: {message}")


class CapabilitiesParseError(LayerFactoryError):
    """能力文档解析失败"""

    def __init__(self, service_type: str, message: str):
        self.service_type = service_type
        super().__init__(f"{service_type}能力文档解析失败: {message}")


class LayerResolutionError(LayerFactoryError):
    """严格模式下请求的图层在能力文档中不存在"""

    def __init__(self, service_type: str, missing: List[str]):
        self.service_type = service_type
        self.missing = list(missing)
        super().__init__(f"{service_type}能力文档中不存在以下图层: {', '.join(self.missing)}")
