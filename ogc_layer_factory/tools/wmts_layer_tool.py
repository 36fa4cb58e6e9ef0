"""WMTS图层添加工具

通过图层工厂从WMTS服务的能力文档创建瓦片图层，并添加到当前图层列表

工具功能：
- 获取并解析WMTS能力文档
- 按图层标识符匹配图层
- 自动选择瓦片矩阵集、格式和默认样式
- 添加到全局图层管理器
"""

import logging
from typing import Any, Dict, Optional

from fastmcp import Context, FastMCP
from pydantic import Field
from typing_extensions import Annotated

from ..layers import get_layer_manager
from ..services import get_layer_factory

logger = logging.getLogger(__name__)

# 创建WMTS图层工具服务器
wmts_layer_server = FastMCP(name="WMTS图层添加工具")


def _log_completion(error, layer):
    if error is not None:
        logger.debug(f"WMTS图层创建回调: 失败 {error}")
    else:
        logger.debug(f"WMTS图层创建回调: 成功 {layer.display_name}")


async def add_wmts_layer(
    service_url: Annotated[str, Field(description="WMTS服务地址")],
    layer_identifier: Annotated[str, Field(description="WMTS图层标识符")],
    layer_title: Annotated[Optional[str], Field(description="图层显示标题，可选，默认使用能力文档中的标题")] = None,
    ctx: Context = None
) -> Dict[str, Any]:
    """添加WMTS图层到图层列表

    专门用于添加WMTS（瓦片地图）图层，适合：
    - 高性能底图显示
    - 预渲染的瓦片数据

    瓦片矩阵集按 GoogleMapsCompatible、EPSG:3857、EPSG:4326 等顺序自动选择，
    优先使用RESTful瓦片URL模板，否则使用GetTile KVP地址。

    Args:
        service_url: WMTS服务地址
        layer_identifier: WMTS图层标识符
        layer_title: 图层显示标题，可选
        ctx: FastMCP上下文对象，用于日志记录

    Returns:
        添加结果和当前图层数量的字典
    """
    layer_manager = get_layer_manager()
    try:
        if ctx:
            await ctx.info(f"正在添加WMTS图层: {layer_identifier}")

        factory = get_layer_factory()
        result = await factory.create_from_service_by_identifier(
            service_url, layer_identifier, _log_completion
        )

        if not result.success:
            raise result.error

        layer = result.layer
        if layer_title:
            layer.display_name = layer_title

        layer_count = layer_manager.add_layer(layer)

        if ctx:
            await ctx.info(f"✅ WMTS图层 {layer_identifier} 添加成功，当前共 {layer_count} 个图层")

        return {
            "success": True,
            "message": f"✅ WMTS图层 '{layer.display_name}' 添加成功",
            "layer_info": layer.to_summary(),
            "current_layer_count": layer_count
        }

    except Exception as e:
        error_msg = f"添加WMTS图层失败: {str(e)}"
        logger.error(error_msg)
        if ctx:
            await ctx.error(error_msg)
        return {
            "success": False,
            "error": error_msg,
            "layer_identifier": layer_identifier,
            "current_layer_count": len(layer_manager)
        }


wmts_layer_server.tool(add_wmts_layer)
