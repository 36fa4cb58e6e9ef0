"""
图层模块

提供可渲染的WMS/WMTS图层类型和图层管理器
"""

from .layer import Layer
from .layer_manager import LayerManager, get_layer_manager, layer_manager
from .wms_layer import WmsLayer
from .wmts_layer import WmtsLayer

__all__ = [
    'Layer',
    'LayerManager',
    'WmsLayer',
    'WmtsLayer',
    'get_layer_manager',
    'layer_manager',
]
