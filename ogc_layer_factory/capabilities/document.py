"""
能力文档读取工具

使用OWSLib的etree读取文档根节点，用于识别文档类型和版本，
图层内容交给OWSLib的服务对象解析
"""

from typing import Union

from owslib.etree import etree
from owslib.util import xmltag_split

from ..errors import CapabilitiesParseError


def to_bytes(content: Union[bytes, str]) -> bytes:
    """统一转换为bytes，带编码声明的str无法直接交给lxml解析"""
    if isinstance(content, str):
        return content.encode('utf-8')
    return content


def read_root(content: bytes, service_type: str, root_tags):
    """读取能力文档根节点并校验根元素

    Args:
        content: 文档内容
        service_type: 服务类型（WMS/WMTS），用于错误信息
        root_tags: 允许的根元素名称

    Returns:
        根节点

    Raises:
        CapabilitiesParseError: XML格式错误或根元素不匹配时
    """
    try:
        root = etree.fromstring(content)
    except Exception as e:
        raise CapabilitiesParseError(service_type, f"XML格式错误: {e}") from e

    root_tag = xmltag_split(root.tag)
    if root_tag not in root_tags:
        raise CapabilitiesParseError(service_type, f"根元素不是{service_type}能力文档: {root_tag}")
    return root
