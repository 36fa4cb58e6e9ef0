"""图层管理工具模块

提供当前图层列表的查看、移除和清空功能
图层的添加由独立的WMS/WMTS图层工具完成

核心工具：
- list_current_layers: 列出当前图层
- remove_layer: 按显示名称移除图层
- clear_layers: 清空当前图层列表
"""

import logging
from typing import Any, Dict

from fastmcp import Context, FastMCP
from pydantic import Field
from typing_extensions import Annotated

from ..layers import get_layer_manager

logger = logging.getLogger(__name__)

# 创建图层管理工具服务器
management_server = FastMCP(name="图层管理工具")


async def list_current_layers(
    ctx: Context = None
) -> Dict[str, Any]:
    """列出当前已添加的图层

    Args:
        ctx: MCP上下文对象

    Returns:
        当前图层列表信息
    """
    layer_manager = get_layer_manager()

    if not len(layer_manager):
        return {
            "success": True,
            "layer_count": 0,
            "layers": [],
            "message": "当前没有图层，请使用WMS/WMTS图层添加工具添加图层"
        }

    summaries = layer_manager.layer_summaries()

    if ctx:
        await ctx.info(f"当前有 {len(summaries)} 个图层")

    return {
        "success": True,
        "layer_count": len(summaries),
        "layers": summaries,
        "message": f"当前有 {len(summaries)} 个图层"
    }


async def remove_layer(
    display_name: Annotated[str, Field(description="要移除的图层显示名称")],
    ctx: Context = None
) -> Dict[str, Any]:
    """按显示名称移除图层

    存在多个同名图层时只移除第一个

    Args:
        display_name: 图层显示名称
        ctx: MCP上下文对象

    Returns:
        移除操作结果
    """
    layer_manager = get_layer_manager()
    removed = layer_manager.remove_layer(display_name)

    if not removed:
        return {
            "success": False,
            "error": f"未找到图层: {display_name}",
            "current_layer_count": len(layer_manager)
        }

    if ctx:
        await ctx.info(f"已移除图层 {display_name}")

    return {
        "success": True,
        "message": f"已移除图层 '{display_name}'",
        "current_layer_count": len(layer_manager)
    }


async def clear_layers(
    ctx: Context = None
) -> Dict[str, Any]:
    """清空当前图层列表

    Args:
        ctx: MCP上下文对象

    Returns:
        清空操作结果
    """
    layer_count = get_layer_manager().clear()

    if ctx:
        await ctx.info(f"已清空 {layer_count} 个图层")

    return {
        "success": True,
        "cleared_layer_count": layer_count,
        "current_layer_count": 0,
        "message": f"已清空 {layer_count} 个图层，图层列表已重置"
    }


management_server.tool(list_current_layers)
management_server.tool(remove_layer)
management_server.tool(clear_layers)
