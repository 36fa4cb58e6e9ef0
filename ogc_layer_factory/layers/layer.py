"""
图层基类模块
"""

from typing import Any, Dict

from ..models import LayerConfiguration


class Layer:
    """可渲染图层基类

    Attributes:
        configuration: 构建图层所用的配置
        display_name: 图层显示名称
        enabled: 是否显示
    """

    layer_type = "layer"

    def __init__(self, configuration: LayerConfiguration):
        self.configuration = configuration
        self.display_name = configuration.title
        self.enabled = True

    def to_summary(self) -> Dict[str, Any]:
        """生成图层摘要信息"""
        return {
            "display_name": self.display_name,
            "type": self.layer_type,
            "enabled": self.enabled,
            "service": self.configuration.service,
        }

    def __repr__(self):
        return f"{type(self).__name__}(display_name={self.display_name!r})"
