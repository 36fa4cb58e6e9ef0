"""图层工厂MCP服务器启动脚本

以HTTP Streamable方式运行图层工厂，监听地址、跨域来源和日志输出均来自配置
"""

import logging
import sys

import uvicorn
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware

from ogc_layer_factory.config import Settings, get_settings
from ogc_layer_factory.server import mcp

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    """日志同时输出到控制台和日志文件"""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.log_file, encoding='utf-8'),
        ],
    )


def create_app(settings: Settings):
    """创建挂载了跨域中间件的ASGI应用"""
    return mcp.http_app(middleware=[
        Middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        ),
    ])


def main():
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        f"图层工厂监听 http://{settings.host}:{settings.port}/mcp "
        f"（严格匹配: {settings.strict_resolution}，请求超时: {settings.http_timeout}秒）"
    )
    try:
        uvicorn.run(
            create_app(settings),
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
    finally:
        logger.info("图层工厂已停止")


if __name__ == "__main__":
    main()
