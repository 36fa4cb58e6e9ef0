"""
图层工厂模块

根据WMS/WMTS服务的能力文档创建可渲染图层：

    获取能力文档 → 解析 → 匹配图层 → 合并/生成配置 → 构建图层 → 回调返回结果

参数错误在任何网络请求之前同步抛出（ArgumentError）；
之后的所有结果（成功或失败）只通过回调函数返回，且每次调用恰好回调一次。
回调约定为 on_complete(error, layer)：成功时 error 为 None，失败时 layer 为 None。
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional

from ..capabilities import (
    CapabilitiesClient,
    CapabilitiesParser,
    WmsCapabilities,
    WmsLayerCapabilities,
    WmtsLayerCapabilities,
    clean_base_url,
)
from ..config import get_settings
from ..errors import ArgumentError, LayerResolutionError
from ..layers import Layer, WmsLayer, WmtsLayer
from ..models import LayerResult, WmsLayerConfiguration, WmtsLayerConfiguration

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[Optional[Exception], Optional[Layer]], Any]

DEFAULT_COMPOSITE_TITLE = "WMS组合图层"


def _as_list(value, single_type) -> List:
    """将单个值包装为列表，序列转换为列表

    Raises:
        TypeError: 既不是单个值也不可迭代时
    """
    if value is None:
        return []
    if isinstance(value, single_type):
        return [value]
    return list(value)


def _deliver(result: LayerResult, on_complete: CompletionCallback):
    if result.success:
        on_complete(None, result.layer)
    else:
        on_complete(result.error, None)


class LayerFactory:
    """图层工厂

    工厂只持有注入的协作对象，不同调用之间不共享可变状态
    """

    def __init__(
        self,
        http_client: Optional[CapabilitiesClient] = None,
        capabilities_parser: Optional[CapabilitiesParser] = None,
        wms_layer_type=WmsLayer,
        wmts_layer_type=WmtsLayer,
        composite_title: str = DEFAULT_COMPOSITE_TITLE,
        strict: bool = False,
    ):
        """初始化图层工厂

        Args:
            http_client: 能力文档HTTP客户端
            capabilities_parser: 能力文档解析器
            wms_layer_type: WMS图层构造器，接收WMS图层配置
            wmts_layer_type: WMTS图层构造器，接收WMTS图层配置
            composite_title: WMS组合图层的显示标题
            strict: 严格模式，请求的图层不存在时返回失败而不是继续创建
        """
        self.http_client = http_client or CapabilitiesClient()
        self.capabilities_parser = capabilities_parser or CapabilitiesParser()
        self.wms_layer_type = wms_layer_type
        self.wmts_layer_type = wmts_layer_type
        self.composite_title = composite_title
        self.strict = strict

    async def close(self):
        """关闭HTTP客户端"""
        await self.http_client.close()

    # 参数校验

    @staticmethod
    def _check_service_address(service_address, method_name: str):
        if not isinstance(service_address, str) or not service_address.strip():
            raise ArgumentError("LayerFactory", method_name, "缺少服务地址")

    @staticmethod
    def _check_callback(on_complete, method_name: str):
        if on_complete is None or not callable(on_complete):
            raise ArgumentError("LayerFactory", method_name, "缺少回调函数")

    # WMS

    def create_from_service_by_names(self, service_address: str, layer_names,
                                     on_complete: CompletionCallback) -> "asyncio.Task[LayerResult]":
        """从WMS服务按图层名称创建图层

        必须在运行中的事件循环内调用。参数校验同步完成，
        随后在后台任务中获取并解析能力文档，完成后调用 on_complete

        Args:
            service_address: WMS服务地址
            layer_names: 单个图层名称或图层名称序列
            on_complete: 回调函数 on_complete(error, layer)

        Returns:
            后台任务，等待后得到 LayerResult

        Raises:
            ArgumentError: 服务地址、图层名称或回调函数缺失时
        """
        method_name = "create_from_service_by_names"
        self._check_service_address(service_address, method_name)

        try:
            layer_names = _as_list(layer_names, str)
        except TypeError:
            raise ArgumentError("LayerFactory", method_name, "图层名称类型错误") from None
        if not layer_names:
            raise ArgumentError("LayerFactory", method_name, "缺少图层名称")
        if not all(isinstance(name, str) for name in layer_names):
            raise ArgumentError("LayerFactory", method_name, "图层名称类型错误")

        self._check_callback(on_complete, method_name)

        loop = asyncio.get_running_loop()
        return loop.create_task(
            self._complete(self._create_from_wms_async(service_address, layer_names), on_complete)
        )

    def create_from_capabilities(self, layer_capabilities,
                                 on_complete: CompletionCallback) -> LayerResult:
        """从已解析的WMS图层能力创建图层

        不发起网络请求，同步完成并调用 on_complete

        Args:
            layer_capabilities: 单个WMS图层能力或图层能力序列
            on_complete: 回调函数 on_complete(error, layer)

        Returns:
            图层创建结果

        Raises:
            ArgumentError: 图层能力或回调函数缺失时
        """
        method_name = "create_from_capabilities"
        try:
            layer_capabilities = _as_list(layer_capabilities, WmsLayerCapabilities)
        except TypeError:
            raise ArgumentError("LayerFactory", method_name, "图层能力类型错误") from None
        if not layer_capabilities:
            raise ArgumentError("LayerFactory", method_name, "缺少图层能力")
        if not all(isinstance(layer, WmsLayerCapabilities) for layer in layer_capabilities):
            raise ArgumentError("LayerFactory", method_name, "图层能力类型错误")

        self._check_callback(on_complete, method_name)

        try:
            result = self._create_wms_layer(layer_capabilities)
        except Exception as e:
            logger.error(f"创建WMS图层失败: {e}")
            result = LayerResult.failure(e)

        _deliver(result, on_complete)
        return result

    async def _create_from_wms_async(self, service_address: str, layer_names: List[str]) -> LayerResult:
        try:
            content = await self.http_client.fetch_capabilities(service_address, 'WMS')
            capabilities = self.capabilities_parser.parse_wms(content, service_address)
            layer_capabilities = self._resolve_wms_layers(capabilities, layer_names)
            return self._create_wms_layer(layer_capabilities, service_address)
        except Exception as e:
            logger.error(f"创建WMS图层失败 {service_address}: {e}")
            return LayerResult.failure(e)

    def _resolve_wms_layers(self, capabilities: WmsCapabilities,
                            layer_names: List[str]) -> List[WmsLayerCapabilities]:
        """按请求顺序匹配图层，不存在的图层跳过"""
        resolved = []
        missing = []
        for name in layer_names:
            layer = capabilities.get_named_layer(name)
            if layer is not None:
                resolved.append(layer)
            else:
                missing.append(name)
                logger.warning(f"WMS能力文档中不存在图层: {name}")

        if missing and self.strict:
            raise LayerResolutionError('WMS', missing)

        if not resolved:
            logger.warning("请求的图层与服务提供的图层均不匹配")

        return resolved

    def _create_wms_layer(self, layer_capabilities: List[WmsLayerCapabilities],
                          service_address: Optional[str] = None) -> LayerResult:
        if layer_capabilities:
            # 图层数量限制仅作提示，不阻止创建
            layer_limit = layer_capabilities[0].capabilities.service.layer_limit
            if layer_limit and layer_limit < len(layer_capabilities):
                logger.warning(
                    f"请求的图层数量 {len(layer_capabilities)} 超过服务限制 {layer_limit}"
                )

        configuration = self.get_layer_config_from_wms_capabilities(layer_capabilities, service_address)
        layer = self.wms_layer_type(configuration)
        logger.info(f"WMS图层创建成功: {configuration.layer_names}")
        return LayerResult.ok(layer)

    def get_layer_config_from_wms_capabilities(
        self,
        wms_layers: List[WmsLayerCapabilities],
        service_address: Optional[str] = None,
    ) -> WmsLayerConfiguration:
        """生成WMS组合图层配置

        以第一个图层的配置为基础，按顺序追加其余图层名称（逗号分隔）

        Args:
            wms_layers: 已匹配的WMS图层能力
            service_address: 服务地址，没有匹配到任何图层时作为配置的服务地址

        Returns:
            WMS图层配置
        """
        if not wms_layers:
            service = clean_base_url(service_address) if service_address else None
            return WmsLayerConfiguration(title=self.composite_title, service=service)

        configuration = WmsLayer.form_layer_configuration(wms_layers[0])
        layer_names = [configuration.layer_names] + [layer.name for layer in wms_layers[1:]]
        return configuration.model_copy(update={
            "title": self.composite_title,
            "layer_names": ",".join(layer_names),
        })

    # WMTS

    def create_from_service_by_identifier(self, service_address: str, layer_identifier: str,
                                          on_complete: CompletionCallback) -> "asyncio.Task[LayerResult]":
        """从WMTS服务按图层标识符创建图层

        必须在运行中的事件循环内调用。参数校验同步完成，
        随后在后台任务中获取并解析能力文档，完成后调用 on_complete

        Args:
            service_address: WMTS服务地址
            layer_identifier: 图层标识符
            on_complete: 回调函数 on_complete(error, layer)

        Returns:
            后台任务，等待后得到 LayerResult

        Raises:
            ArgumentError: 服务地址、图层标识符或回调函数缺失时
        """
        method_name = "create_from_service_by_identifier"
        self._check_service_address(service_address, method_name)

        if not isinstance(layer_identifier, str) or not layer_identifier:
            raise ArgumentError("LayerFactory", method_name, "缺少图层标识符")

        self._check_callback(on_complete, method_name)

        loop = asyncio.get_running_loop()
        return loop.create_task(
            self._complete(self._create_from_wmts_async(service_address, layer_identifier), on_complete)
        )

    def create_from_capability(self, layer_capability: WmtsLayerCapabilities,
                               on_complete: CompletionCallback) -> LayerResult:
        """从已解析的WMTS图层能力创建图层

        不发起网络请求，同步完成并调用 on_complete

        Args:
            layer_capability: WMTS图层能力
            on_complete: 回调函数 on_complete(error, layer)

        Returns:
            图层创建结果

        Raises:
            ArgumentError: 图层能力或回调函数缺失时
        """
        method_name = "create_from_capability"
        if layer_capability is None:
            raise ArgumentError("LayerFactory", method_name, "缺少图层能力")
        if not isinstance(layer_capability, WmtsLayerCapabilities):
            raise ArgumentError("LayerFactory", method_name, "图层能力类型错误")

        self._check_callback(on_complete, method_name)

        try:
            result = self._create_wmts_layer(layer_capability)
        except Exception as e:
            logger.error(f"创建WMTS图层失败: {e}")
            result = LayerResult.failure(e)

        _deliver(result, on_complete)
        return result

    async def _create_from_wmts_async(self, service_address: str, layer_identifier: str) -> LayerResult:
        try:
            content = await self.http_client.fetch_capabilities(service_address, 'WMTS')
            capabilities = self.capabilities_parser.parse_wmts(content, service_address)

            layer_capability = capabilities.get_layer(layer_identifier)
            if layer_capability is None:
                logger.error(f"WMTS能力文档中不存在图层标识符: {layer_identifier}")
                if self.strict:
                    raise LayerResolutionError('WMTS', [layer_identifier])

            return self._create_wmts_layer(layer_capability, layer_identifier, service_address)
        except Exception as e:
            logger.error(f"创建WMTS图层失败 {service_address}: {e}")
            return LayerResult.failure(e)

    def _create_wmts_layer(self, layer_capability: Optional[WmtsLayerCapabilities],
                           layer_identifier: Optional[str] = None,
                           service_address: Optional[str] = None) -> LayerResult:
        if layer_capability is None:
            # 未匹配到图层时仍然创建，配置中只保留请求的标识符
            configuration = WmtsLayerConfiguration(
                title=layer_identifier,
                identifier=layer_identifier,
                service=clean_base_url(service_address) if service_address else None,
            )
        else:
            configuration = WmtsLayer.form_layer_configuration(layer_capability)

        layer = self.wmts_layer_type(configuration)
        logger.info(f"WMTS图层创建成功: {configuration.identifier}")
        return LayerResult.ok(layer)

    # 结果回调

    @staticmethod
    async def _complete(pipeline, on_complete: CompletionCallback) -> LayerResult:
        result = await pipeline
        _deliver(result, on_complete)
        return result


# 全局图层工厂实例，首次使用时按配置创建
_layer_factory: Optional[LayerFactory] = None


def get_layer_factory() -> LayerFactory:
    """获取图层工厂实例

    Returns:
        图层工厂实例
    """
    global _layer_factory

    if _layer_factory is None:
        settings = get_settings()
        _layer_factory = LayerFactory(
            http_client=CapabilitiesClient(timeout=settings.http_timeout),
            composite_title=settings.composite_title,
            strict=settings.strict_resolution,
        )
        logger.info("图层工厂实例创建完成")

    return _layer_factory


async def close_layer_factory():
    """关闭全局图层工厂的HTTP客户端"""
    global _layer_factory

    if _layer_factory is not None:
        await _layer_factory.close()
        _layer_factory = None
        logger.info("图层工厂HTTP客户端已关闭")
