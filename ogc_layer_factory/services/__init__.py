"""
服务模块

提供图层工厂相关的业务逻辑
"""

from .layer_factory import LayerFactory, close_layer_factory, get_layer_factory

__all__ = [
    'LayerFactory',
    'close_layer_factory',
    'get_layer_factory',
]
