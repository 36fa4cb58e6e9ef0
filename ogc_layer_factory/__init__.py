"""
OGC图层工厂

将WMS/WMTS服务的GetCapabilities文档转换为可渲染的图层
"""

from .errors import (
    ArgumentError,
    CapabilitiesParseError,
    CapabilitiesRetrievalError,
    LayerFactoryError,
    LayerResolutionError,
)
from .models import LayerResult, WmsLayerConfiguration, WmtsLayerConfiguration
from .services import LayerFactory, get_layer_factory

__version__ = "0.1.0"

__all__ = [
    'ArgumentError',
    'CapabilitiesParseError',
    'CapabilitiesRetrievalError',
    'LayerFactory',
    'LayerFactoryError',
    'LayerResolutionError',
    'LayerResult',
    'WmsLayerConfiguration',
    'WmtsLayerConfiguration',
    'get_layer_factory',
]
