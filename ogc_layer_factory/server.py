"""
图层工厂MCP服务器主模块

使用FastMCP框架构建，将WMS/WMTS能力文档转换为可渲染图层，
并提供图层列表的管理功能。子服务器按前缀组合为一个完整的服务。
"""

import logging
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from .services import close_layer_factory, get_layer_factory
from .tools.management_tools import management_server
from .tools.wms_layer_tool import wms_layer_server
from .tools.wmts_layer_tool import wmts_layer_server

# 配置日志
logger = logging.getLogger(__name__)

# 全局标志，防止重复清理
_cleanup_done = False


async def cleanup_resources():
    """清理资源"""
    global _cleanup_done

    if _cleanup_done:
        logger.info("资源已清理，跳过重复清理")
        return

    logger.info("正在清理资源...")

    try:
        await close_layer_factory()
        _cleanup_done = True
        logger.info("资源清理完成")

    except Exception as e:
        logger.error(f"资源清理过程中出现错误: {e}")


@asynccontextmanager
async def lifespan(app):
    """服务器生命周期管理"""
    global _cleanup_done

    logger.info("正在初始化图层工厂MCP服务器...")
    _cleanup_done = False

    try:
        get_layer_factory()
        logger.info("图层工厂MCP服务器启动完成")
        logger.info("使用 Ctrl+C 可以优雅关闭服务器")

        yield

    except Exception as e:
        logger.error(f"服务器启动失败: {e}")
        raise
    finally:
        logger.info("正在关闭图层工厂MCP服务器...")
        await cleanup_resources()


# 创建单一的MCP服务器实例
mcp = FastMCP(name="OGC图层工厂", lifespan=lifespan)

# 组合子服务器
mcp.mount(wms_layer_server, "wms")          # WMS图层工具
mcp.mount(wmts_layer_server, "wmts")        # WMTS图层工具
mcp.mount(management_server, "layers")      # 图层管理工具

logger.info("图层工厂MCP服务器实例创建完成")


def get_layer_factory_server() -> FastMCP:
    """获取MCP服务器实例

    Returns:
        FastMCP: MCP服务器实例
    """
    return mcp
