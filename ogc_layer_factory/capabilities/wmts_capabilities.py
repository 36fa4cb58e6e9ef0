"""
WMTS能力文档模块

使用OWSLib解析WMTS 1.0.0 GetCapabilities文档，
提供按标识符查找图层、瓦片矩阵集和GetTile地址的功能
"""

import logging
from typing import Dict, List, Optional, Union

from owslib.util import ServiceException
from owslib.wmts import WebMapTileService

from ..errors import CapabilitiesParseError
from .document import read_root, to_bytes

logger = logging.getLogger(__name__)


def _get_tile_kvp_url(wmts) -> Optional[str]:
    """查找支持KVP编码的GetTile请求地址"""
    try:
        get_tile = wmts.getOperationByName('GetTile')
    except KeyError:
        return None

    for method in get_tile.methods:
        if (method.get('type') or '').lower() != 'get':
            continue
        encodings = [
            value
            for constraint in method.get('constraints') or []
            for value in constraint.values or []
        ]
        # 没有声明编码约束时按KVP处理
        if not encodings or 'KVP' in encodings:
            return method.get('url')
    return None


class WmtsLayerCapabilities:
    """WMTS图层能力

    包装OWSLib的图层元数据，并关联所属的能力文档

    Attributes:
        layer: OWSLib图层元数据
        capabilities: 所属的能力文档
    """

    def __init__(self, layer, capabilities: "WmtsCapabilities"):
        self.layer = layer
        self.capabilities = capabilities

        self.identifier = layer.id
        self.title = layer.title
        self.abstract = layer.abstract
        self.formats = tuple(layer.formats or ())
        # 链接顺序与文档一致
        self.tile_matrix_set_links = tuple(getattr(layer, 'tilematrixsetlinks', None) or ())
        self.resource_urls = tuple(getattr(layer, 'resourceURLs', None) or ())

    @property
    def wgs84_bounding_box(self) -> Optional[Dict[str, float]]:
        bbox = getattr(self.layer, 'boundingBoxWGS84', None)
        if not bbox:
            return None
        west, south, east, north = bbox[:4]
        return {"west": west, "east": east, "south": south, "north": north}

    @property
    def default_style(self) -> Optional[str]:
        """默认样式标识符，未标记默认时使用第一个样式"""
        styles = self.layer.styles or {}
        for identifier, style in styles.items():
            if style.get('isDefault'):
                return identifier
        return next(iter(styles), None)

    def get_resource_url(self, resource_type: str = 'tile') -> Optional[dict]:
        """返回指定资源类型的第一个URL模板"""
        for resource_url in self.resource_urls:
            if resource_url.get('resourceType') == resource_type and resource_url.get('template'):
                return resource_url
        return None

    def __repr__(self):
        return f"WmtsLayerCapabilities(identifier={self.identifier!r}, title={self.title!r})"


class WmtsCapabilities:
    """WMTS能力文档

    解析完成后不再修改

    Attributes:
        wmts: OWSLib的WebMapTileService对象
        service_address: 获取能力文档时使用的服务地址，用于解析相对地址
    """

    def __init__(self, wmts, service_address: Optional[str] = None):
        self.wmts = wmts
        self.service_address = service_address
        self.version = wmts.version
        self.service_title = getattr(wmts.identification, 'title', None)
        self.get_tile_url = _get_tile_kvp_url(wmts)
        self.layers = tuple(WmtsLayerCapabilities(layer, self) for layer in wmts.contents.values())
        self._layers = {layer.identifier: layer for layer in self.layers}

    @classmethod
    def from_xml(cls, content: Union[bytes, str], service_address: Optional[str] = None) -> "WmtsCapabilities":
        """从XML内容创建WMTS能力文档

        Args:
            content: bytes或str形式的GetCapabilities响应
            service_address: 服务地址

        Returns:
            WMTS能力文档

        Raises:
            CapabilitiesParseError: 当文档无法解析或不是WMTS能力文档时
        """
        content = to_bytes(content)
        read_root(content, 'WMTS', ('Capabilities',))

        try:
            wmts = WebMapTileService(service_address or '', xml=content)
        except ServiceException as e:
            raise CapabilitiesParseError('WMTS', f"服务返回异常报告: {e}") from e
        except Exception as e:
            logger.error(f"OWSLib解析WMTS能力文档失败: {e}")
            raise CapabilitiesParseError('WMTS', f"能力文档结构错误: {e}") from e

        return cls(wmts, service_address)

    def get_layer(self, identifier: str) -> Optional[WmtsLayerCapabilities]:
        """按标识符查找图层"""
        return self._layers.get(identifier)

    def get_tile_matrix_set(self, identifier: str):
        """按标识符查找瓦片矩阵集（OWSLib TileMatrixSet）"""
        return self.wmts.tilematrixsets.get(identifier)

    def get_layer_identifiers(self) -> List[str]:
        """返回所有图层标识符"""
        return list(self._layers)
