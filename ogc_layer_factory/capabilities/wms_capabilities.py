"""
WMS能力文档模块

使用OWSLib解析WMS 1.1.1 / 1.3.0 GetCapabilities文档，
在其基础上提供按名称查找图层以及配置生成所需的图层属性
"""

import logging
from typing import Dict, List, Optional, Tuple, Union

from owslib.util import ServiceException, nspath, testXMLValue, xmltag_split
from owslib.wms import WebMapService

from ..errors import CapabilitiesParseError
from .document import read_root, to_bytes

logger = logging.getLogger(__name__)

WMS_NAMESPACE = 'http://www.opengis.net/wms'

# 根元素名称 -> OWSLib解析版本
WMS_ROOT_TAGS = {
    'WMS_Capabilities': '1.3.0',
    'WMT_MS_Capabilities': '1.1.1',
}


def _service_int(root, version: str, tag: str) -> Optional[int]:
    """读取Service节点下的整数字段

    LayerLimit、MaxWidth、MaxHeight 只在WMS 1.3.0中定义，OWSLib不解析这些字段
    """
    if root is None or version != '1.3.0':
        return None
    value = testXMLValue(root.find(nspath(f'Service/{tag}', WMS_NAMESPACE)))
    try:
        return int(value) if value is not None else None
    except ValueError:
        logger.debug(f"忽略无效的{tag}: {value}")
        return None


class WmsService:
    """WMS服务元数据"""

    def __init__(self, wms, root=None):
        identification = wms.identification
        self.name = identification.type
        self.title = identification.title
        self.abstract = identification.abstract
        self.online_resource = getattr(wms.provider, 'url', None) or None
        self.layer_limit = _service_int(root, wms.version, 'LayerLimit')
        self.max_width = _service_int(root, wms.version, 'MaxWidth')
        self.max_height = _service_int(root, wms.version, 'MaxHeight')


class WmsLayerCapabilities:
    """WMS图层能力

    包装OWSLib的图层元数据，并关联所属的能力文档

    Attributes:
        layer: OWSLib图层元数据
        capabilities: 所属的能力文档
    """

    def __init__(self, layer, capabilities: "WmsCapabilities"):
        self.layer = layer
        self.capabilities = capabilities

        self.name = layer.name
        self.title = layer.title
        self.abstract = layer.abstract
        self.queryable = bool(getattr(layer, 'queryable', 0))

    @property
    def parent(self) -> Optional["WmsLayerCapabilities"]:
        """父图层，顶层图层为None"""
        if self.layer.parent is None:
            return None
        return WmsLayerCapabilities(self.layer.parent, self.capabilities)

    @property
    def crses(self) -> Tuple[str, ...]:
        """支持的坐标系（OWSLib已合并父图层的坐标系）"""
        return tuple(self.layer.crsOptions or ())

    @property
    def geographic_bounding_box(self) -> Optional[Dict[str, float]]:
        """WGS84地理范围，未声明时继承父图层"""
        bbox = getattr(self.layer, 'boundingBoxWGS84', None)
        if not bbox:
            return None
        west, south, east, north = bbox[:4]
        return {"west": west, "east": east, "south": south, "north": north}

    @property
    def time_positions(self) -> List[str]:
        """时间维度取值，未声明时继承最近的父图层"""
        layer = self.layer
        while layer is not None:
            dimensions = getattr(layer, 'dimensions', None) or {}
            positions = layer.timepositions or dimensions.get('time', {}).get('values')
            if positions:
                return [value.strip() for value in positions if value and value.strip()]
            layer = layer.parent
        return []

    def __repr__(self):
        return f"WmsLayerCapabilities(name={self.name!r}, title={self.title!r})"


class WmsCapabilities:
    """WMS能力文档

    解析完成后不再修改

    Attributes:
        wms: OWSLib的WebMapService对象
        service_address: 获取能力文档时使用的服务地址，用于解析相对地址
    """

    def __init__(self, wms, root=None, service_address: Optional[str] = None):
        self.wms = wms
        self.service_address = service_address
        self.version = wms.version
        self.service = WmsService(wms, root)

        try:
            get_map = wms.getOperationByName('GetMap')
        except KeyError:
            logger.warning("WMS能力文档中没有GetMap操作")
            get_map = None

        self.get_map_formats = tuple(get_map.formatOptions) if get_map else ()
        self.get_map_url = None
        if get_map:
            self.get_map_url = next(
                (method.get('url') for method in get_map.methods
                 if (method.get('type') or '').lower() == 'get'),
                None,
            )

        self._layers = {
            name: WmsLayerCapabilities(layer, self) for name, layer in wms.contents.items()
        }

    @classmethod
    def from_xml(cls, content: Union[bytes, str], service_address: Optional[str] = None) -> "WmsCapabilities":
        """从XML内容创建WMS能力文档

        Args:
            content: bytes或str形式的GetCapabilities响应
            service_address: 服务地址

        Returns:
            WMS能力文档

        Raises:
            CapabilitiesParseError: 当文档无法解析或不是WMS能力文档时
        """
        content = to_bytes(content)
        root = read_root(content, 'WMS', WMS_ROOT_TAGS)
        version = WMS_ROOT_TAGS[xmltag_split(root.tag)]

        try:
            wms = WebMapService(service_address or '', version=version, xml=content)
        except ServiceException as e:
            raise CapabilitiesParseError('WMS', f"服务返回异常报告: {e}") from e
        except Exception as e:
            logger.error(f"OWSLib解析WMS能力文档失败: {e}")
            raise CapabilitiesParseError('WMS', f"能力文档结构错误: {e}") from e

        return cls(wms, root, service_address)

    def get_named_layers(self) -> List[WmsLayerCapabilities]:
        """返回所有命名图层（按文档顺序）"""
        return list(self._layers.values())

    def get_named_layer(self, name: str) -> Optional[WmsLayerCapabilities]:
        """按名称查找图层（包括嵌套图层）"""
        return self._layers.get(name)
