"""
图层工厂数据模型

定义图层配置（构建可渲染图层所需的键值描述）以及图层创建结果
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


class Sector(BaseModel):
    """地理范围（经纬度，单位：度）"""
    min_latitude: float = Field(-90.0, ge=-90.0, le=90.0, description="最小纬度")
    max_latitude: float = Field(90.0, ge=-90.0, le=90.0, description="最大纬度")
    min_longitude: float = Field(-180.0, ge=-180.0, le=180.0, description="最小经度")
    max_longitude: float = Field(180.0, ge=-180.0, le=180.0, description="最大经度")

    @classmethod
    def full_sphere(cls) -> "Sector":
        """覆盖全球的范围"""
        return cls()

    @classmethod
    def from_bounds(cls, west: float, south: float, east: float, north: float) -> "Sector":
        """由边界框生成范围

        坐标按大小排序，并限制在合法的经纬度区间内
        """
        return cls(
            min_latitude=_clamp(min(south, north), 90.0),
            max_latitude=_clamp(max(south, north), 90.0),
            min_longitude=_clamp(min(west, east), 180.0),
            max_longitude=_clamp(max(west, east), 180.0),
        )


class LayerConfiguration(BaseModel):
    """图层配置基类

    每次请求重新构建，不在请求之间共享
    """
    title: Optional[str] = Field(None, description="图层显示标题")
    service: Optional[str] = Field(None, description="服务地址（GetMap/GetTile请求地址）")

    @field_validator('service')
    @classmethod
    def validate_service(cls, v):
        """验证服务地址"""
        if v is not None and not v.lower().startswith(('http://', 'https://')):
            raise ValueError('服务地址必须以http://或https://开头')
        return v

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return self.model_dump()


class WmsLayerConfiguration(LayerConfiguration):
    """WMS图层配置"""
    layer_names: str = Field("", description="逗号分隔的图层名称列表，保持请求顺序")
    version: Optional[str] = Field(None, description="WMS版本")
    format: str = Field("image/png", description="GetMap图像格式")
    coordinate_system: str = Field("EPSG:4326", description="请求使用的坐标系")
    sector: Sector = Field(default_factory=Sector.full_sphere, description="图层地理范围")
    level_zero_delta: float = Field(36.0, gt=0, description="第0级瓦片的经纬度跨度（度）")
    num_levels: int = Field(19, gt=0, description="金字塔层级数")
    size: int = Field(256, gt=0, description="瓦片像素尺寸")
    time_sequences: List[str] = Field(default_factory=list, description="时间维度取值")

    @property
    def layer_name_list(self) -> List[str]:
        """拆分后的图层名称列表"""
        return [name for name in self.layer_names.split(',') if name]


class WmtsLayerConfiguration(LayerConfiguration):
    """WMTS图层配置"""
    identifier: Optional[str] = Field(None, description="WMTS图层标识符")
    resource_url: Optional[str] = Field(None, description="RESTful瓦片URL模板")
    style: Optional[str] = Field(None, description="样式标识符")
    format: Optional[str] = Field(None, description="瓦片格式")
    tile_matrix_set: Optional[str] = Field(None, description="瓦片矩阵集标识符")
    sector: Sector = Field(default_factory=Sector.full_sphere, description="图层地理范围")


class LayerResult(BaseModel):
    """图层创建结果

    成功时只携带图层，失败时只携带错误
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    layer: Optional[Any] = Field(None, description="构建完成的图层")
    error: Optional[Exception] = Field(None, description="失败原因")

    @model_validator(mode='after')
    def validate_single_branch(self):
        """成功和失败必须且只能有一个"""
        if (self.layer is None) == (self.error is None):
            raise ValueError('图层创建结果必须且只能包含图层或错误之一')
        return self

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, layer: Any) -> "LayerResult":
        return cls(layer=layer)

    @classmethod
    def failure(cls, error: Exception) -> "LayerResult":
        return cls(error=error)
