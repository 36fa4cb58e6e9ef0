"""
配置管理模块

使用pydantic-settings从环境变量（前缀 OGC_LAYER_FACTORY_）和 .env 文件加载配置
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """图层工厂服务配置"""

    model_config = SettingsConfigDict(
        env_prefix="OGC_LAYER_FACTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # 服务器
    host: str = Field("127.0.0.1", description="MCP服务器监听地址")
    port: int = Field(3030, description="MCP服务器监听端口")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="允许跨域访问的来源")

    # 能力文档获取
    http_timeout: float = Field(30.0, description="HTTP请求超时时间（秒）")

    # 图层工厂
    strict_resolution: bool = Field(False, description="请求的图层不存在时是否直接失败")
    composite_title: str = Field("WMS组合图层", description="WMS组合图层的显示标题")

    # 日志
    log_level: str = Field("INFO", description="日志级别")
    log_file: str = Field("ogc_layer_factory.log", description="日志文件路径")


@lru_cache
def get_settings() -> Settings:
    """获取配置实例

    Returns:
        Settings: 缓存的配置实例
    """
    return Settings()
