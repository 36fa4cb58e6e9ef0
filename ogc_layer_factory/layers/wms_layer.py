"""
WMS图层模块

提供WMS图层类型以及从WMS图层能力生成图层配置的方法
"""

import logging
from typing import Any, Dict

from ..models import Sector, WmsLayerConfiguration
from ..capabilities import WmsLayerCapabilities, resolve_service_url
from .layer import Layer

logger = logging.getLogger(__name__)

# GetMap格式优先级
PREFERRED_FORMATS = ["image/png", "image/jpeg", "image/tiff", "image/gif"]

# 坐标系优先级
PREFERRED_COORDINATE_SYSTEMS = ["CRS:84", "EPSG:4326", "EPSG:3857"]


class WmsLayer(Layer):
    """WMS图层"""

    layer_type = "wms"

    def __init__(self, configuration: WmsLayerConfiguration):
        if isinstance(configuration, dict):
            configuration = WmsLayerConfiguration.model_validate(configuration)
        super().__init__(configuration)

    @property
    def layer_names(self):
        return self.configuration.layer_name_list

    def to_summary(self) -> Dict[str, Any]:
        summary = super().to_summary()
        summary.update({
            "layer_names": self.configuration.layer_names,
            "format": self.configuration.format,
            "coordinate_system": self.configuration.coordinate_system,
        })
        return summary

    @staticmethod
    def form_layer_configuration(layer_capabilities: WmsLayerCapabilities) -> WmsLayerConfiguration:
        """根据WMS图层能力生成图层配置

        Args:
            layer_capabilities: WMS图层能力

        Returns:
            WMS图层配置
        """
        capabilities = layer_capabilities.capabilities

        bbox = layer_capabilities.geographic_bounding_box
        if bbox:
            sector = Sector.from_bounds(bbox["west"], bbox["south"], bbox["east"], bbox["north"])
        else:
            sector = Sector.full_sphere()

        return WmsLayerConfiguration(
            title=layer_capabilities.title or layer_capabilities.name,
            service=resolve_service_url(
                capabilities.get_map_url or capabilities.service.online_resource,
                capabilities.service_address,
            ),
            layer_names=layer_capabilities.name or "",
            version=capabilities.version,
            format=_select_format(capabilities.get_map_formats),
            coordinate_system=_select_coordinate_system(layer_capabilities.crses),
            sector=sector,
            time_sequences=layer_capabilities.time_positions,
        )


def _select_format(formats) -> str:
    for preferred in PREFERRED_FORMATS:
        if preferred in formats:
            return preferred
    if formats:
        logger.debug(f"GetMap不支持常用图像格式，使用 {formats[0]}")
        return formats[0]
    return PREFERRED_FORMATS[0]


def _select_coordinate_system(crses) -> str:
    for preferred in PREFERRED_COORDINATE_SYSTEMS:
        if preferred in crses:
            return preferred
    # OWSLib不保留坐标系的文档顺序，排序后取第一个
    return sorted(crses)[0] if crses else "EPSG:4326"
