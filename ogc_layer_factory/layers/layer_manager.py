"""
图层管理模块

维护当前已添加的图层列表，供图层工具使用
"""

import logging
from typing import Any, Dict, List, Optional

from .layer import Layer

logger = logging.getLogger(__name__)


class LayerManager:
    """图层管理器

    按添加顺序保存图层
    """

    def __init__(self):
        self._layers: List[Layer] = []

    @property
    def layers(self) -> List[Layer]:
        """当前图层列表（副本）"""
        return list(self._layers)

    def __len__(self):
        return len(self._layers)

    def add_layer(self, layer: Layer) -> int:
        """添加图层

        Args:
            layer: 图层对象

        Returns:
            添加后的图层数量
        """
        if layer is None:
            raise ValueError("图层不能为空")
        self._layers.append(layer)
        logger.info(f"已添加图层 {layer.display_name}，当前共 {len(self._layers)} 个图层")
        return len(self._layers)

    def find_layer(self, display_name: str) -> Optional[Layer]:
        """按显示名称查找第一个匹配的图层"""
        for layer in self._layers:
            if layer.display_name == display_name:
                return layer
        return None

    def remove_layer(self, display_name: str) -> bool:
        """按显示名称移除第一个匹配的图层

        Returns:
            是否找到并移除了图层
        """
        layer = self.find_layer(display_name)
        if layer is None:
            logger.warning(f"未找到图层: {display_name}")
            return False
        self._layers.remove(layer)
        logger.info(f"已移除图层 {display_name}，当前共 {len(self._layers)} 个图层")
        return True

    def clear(self) -> int:
        """清空图层列表

        Returns:
            清空的图层数量
        """
        count = len(self._layers)
        self._layers.clear()
        logger.info(f"已清空 {count} 个图层")
        return count

    def layer_summaries(self) -> List[Dict[str, Any]]:
        """返回所有图层的摘要信息"""
        return [layer.to_summary() for layer in self._layers]


# 全局图层管理器实例
layer_manager = LayerManager()


def get_layer_manager() -> LayerManager:
    """获取图层管理器实例

    Returns:
        图层管理器实例
    """
    return layer_manager
