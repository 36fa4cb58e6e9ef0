"""WMS图层添加工具

通过图层工厂从WMS服务的能力文档创建图层，并添加到当前图层列表

工具功能：
- 获取并解析WMS能力文档
- 按请求顺序匹配一个或多个图层并合并为一个组合图层
- 添加到全局图层管理器
"""

import logging
from typing import Any, Dict, List, Optional

from fastmcp import Context, FastMCP
from pydantic import Field
from typing_extensions import Annotated

from ..layers import get_layer_manager
from ..services import get_layer_factory

logger = logging.getLogger(__name__)

# 创建WMS图层工具服务器
wms_layer_server = FastMCP(name="WMS图层添加工具")


def _log_completion(error, layer):
    if error is not None:
        logger.debug(f"WMS图层创建回调: 失败 {error}")
    else:
        logger.debug(f"WMS图层创建回调: 成功 {layer.display_name}")


async def add_wms_layer(
    service_url: Annotated[str, Field(description="WMS服务地址")],
    layer_names: Annotated[List[str], Field(description="WMS图层名称列表，按顺序合并为一个图层")],
    layer_title: Annotated[Optional[str], Field(description="图层显示标题，可选")] = None,
    ctx: Context = None
) -> Dict[str, Any]:
    """添加WMS图层到图层列表

    获取WMS服务的能力文档，按请求顺序匹配图层，
    多个图层会合并为一个组合图层（图层名称以逗号连接）。
    能力文档中不存在的图层会被跳过。

    Args:
        service_url: WMS服务地址
        layer_names: WMS图层名称列表
        layer_title: 图层显示标题，可选
        ctx: FastMCP上下文对象，用于日志记录

    Returns:
        添加结果和当前图层数量的字典
    """
    layer_manager = get_layer_manager()
    try:
        if ctx:
            await ctx.info(f"正在添加WMS图层: {', '.join(layer_names or [])}")

        factory = get_layer_factory()
        result = await factory.create_from_service_by_names(service_url, layer_names, _log_completion)

        if not result.success:
            raise result.error

        layer = result.layer
        if layer_title:
            layer.display_name = layer_title

        layer_count = layer_manager.add_layer(layer)
        resolved = layer.layer_names

        if ctx:
            await ctx.info(f"✅ WMS图层添加成功，当前共 {layer_count} 个图层")

        return {
            "success": True,
            "message": f"✅ WMS图层 '{layer.display_name}' 添加成功",
            "layer_info": layer.to_summary(),
            "resolved_layer_names": resolved,
            "missing_layer_names": [name for name in layer_names if name not in resolved],
            "current_layer_count": layer_count
        }

    except Exception as e:
        error_msg = f"添加WMS图层失败: {str(e)}"
        logger.error(error_msg)
        if ctx:
            await ctx.error(error_msg)
        return {
            "success": False,
            "error": error_msg,
            "layer_names": layer_names,
            "current_layer_count": len(layer_manager)
        }


wms_layer_server.tool(add_wms_layer)
