"""工具模块

提供图层工厂服务的MCP工具
"""

from .management_tools import management_server
from .wms_layer_tool import wms_layer_server
from .wmts_layer_tool import wmts_layer_server

__all__ = [
    "management_server",
    "wms_layer_server",
    "wmts_layer_server"
]
