"""
WMTS图层模块

提供WMTS图层类型以及从WMTS图层能力生成图层配置的方法
"""

import logging
from typing import Any, Dict, Optional, Sequence

from ..models import Sector, WmtsLayerConfiguration
from ..capabilities import WmtsLayerCapabilities, resolve_service_url
from .layer import Layer

logger = logging.getLogger(__name__)

# 瓦片矩阵集优先级
PREFERRED_TILE_MATRIX_SETS = [
    "GoogleMapsCompatible",
    "EPSG:3857",
    "EPSG:4326",
    "WebMercatorQuad",
    "WGS84",
]

# 瓦片格式优先级
PREFERRED_FORMATS = ["image/png", "image/jpeg"]


class WmtsLayer(Layer):
    """WMTS图层"""

    layer_type = "wmts"

    def __init__(self, configuration: WmtsLayerConfiguration):
        if isinstance(configuration, dict):
            configuration = WmtsLayerConfiguration.model_validate(configuration)
        super().__init__(configuration)

    def to_summary(self) -> Dict[str, Any]:
        summary = super().to_summary()
        summary.update({
            "identifier": self.configuration.identifier,
            "tile_matrix_set": self.configuration.tile_matrix_set,
            "format": self.configuration.format,
            "resource_url": self.configuration.resource_url,
        })
        return summary

    @staticmethod
    def form_layer_configuration(layer_capabilities: WmtsLayerCapabilities) -> WmtsLayerConfiguration:
        """根据WMTS图层能力生成图层配置

        Args:
            layer_capabilities: WMTS图层能力

        Returns:
            WMTS图层配置

        Raises:
            ValueError: 未提供图层能力时
        """
        if layer_capabilities is None:
            raise ValueError("缺少WMTS图层能力")

        capabilities = layer_capabilities.capabilities
        image_format = _select_format(layer_capabilities.formats)

        resource_url = None
        tile_resources = [
            r for r in layer_capabilities.resource_urls
            if r.get("resourceType") == "tile" and r.get("template")
        ]
        if tile_resources:
            matching = [r for r in tile_resources if r.get("format") == image_format]
            chosen = (matching or tile_resources)[0]
            resource_url = chosen["template"]
            image_format = chosen.get("format") or image_format

        get_tile_url = resolve_service_url(capabilities.get_tile_url, capabilities.service_address)
        if not resource_url and not get_tile_url:
            logger.warning(f"WMTS图层 {layer_capabilities.identifier} 没有可用的瓦片地址")

        bbox = layer_capabilities.wgs84_bounding_box
        if bbox:
            sector = Sector.from_bounds(bbox["west"], bbox["south"], bbox["east"], bbox["north"])
        else:
            sector = Sector.full_sphere()

        return WmtsLayerConfiguration(
            title=layer_capabilities.title or layer_capabilities.identifier,
            service=get_tile_url,
            identifier=layer_capabilities.identifier,
            resource_url=resource_url,
            style=layer_capabilities.default_style,
            format=image_format,
            tile_matrix_set=select_best_tile_matrix_set(layer_capabilities.tile_matrix_set_links),
            sector=sector,
        )


def select_best_tile_matrix_set(available_matrix_sets: Sequence[str]) -> Optional[str]:
    """自动选择最佳的瓦片矩阵集

    Args:
        available_matrix_sets: 图层关联的瓦片矩阵集列表

    Returns:
        选择的瓦片矩阵集名称，图层没有关联任何矩阵集时返回None
    """
    if not available_matrix_sets:
        return None

    for preferred in PREFERRED_TILE_MATRIX_SETS:
        if preferred in available_matrix_sets:
            return preferred

    # 如果没有匹配的，返回第一个可用的
    return available_matrix_sets[0]


def _select_format(formats) -> str:
    for preferred in PREFERRED_FORMATS:
        if preferred in formats:
            return preferred
    return formats[0] if formats else PREFERRED_FORMATS[0]
