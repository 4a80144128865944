"""GeoAdmin API（swisstopo）のレスポンススキーマ

- 検索: https://api3.geo.admin.ch/services/sdiservices.html#search
- 地物の特定: https://api3.geo.admin.ch/services/sdiservices.html#identify-features
"""
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GeoAdminModel(BaseModel):
    """GeoAdminスキーマの基底クラス（未知のフィールドは無視）"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ForwardLocationProperties(GeoAdminModel):
    """
    検索結果の属性

    スイス座標系（21781/2056）の場合、xは南北方向、yは東西方向。
    lon/latはWGS84の経度・緯度。
    """

    origin: Optional[str] = None
    geom_quadindex: Optional[str] = None
    weight: Optional[int] = None
    rank: Optional[int] = None
    detail: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    num: Optional[int] = None
    x: Optional[float] = None
    y: Optional[float] = None
    label: str
    zoomlevel: Optional[int] = None


class GeoAdminForwardLocation(GeoAdminModel):
    """検索結果1件"""

    id: Optional[Union[int, str]] = None
    properties: ForwardLocationProperties


class GeoAdminForwardResponse(GeoAdminModel):
    """検索（SearchServer）のレスポンス全体（GeoJSON FeatureCollection）"""

    type: Optional[str] = None
    features: list[GeoAdminForwardLocation]


class ReverseLocationAttributes(GeoAdminModel):
    """建物・住宅登録簿（GWR）の属性"""

    egid: Optional[str] = None
    ggdenr: Optional[int] = None
    ggdename: Optional[str] = None
    gdekt: Optional[str] = None
    edid: Optional[str] = None
    egaid: Optional[int] = None
    deinr: Optional[str] = None
    dplz4: str  # 郵便番号（文字列・整数のどちらでも届く）
    dplzname: str  # 地名
    egrid: Optional[str] = None
    esid: Optional[int] = None
    strname: list[str] = Field(default_factory=list)
    strsp: list[str] = Field(default_factory=list)
    strname_deinr: str  # 通り名と番地
    label: Optional[str] = None

    @field_validator("dplz4", "egid", "edid", "deinr", mode="before")
    @classmethod
    def stringify_codes(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class GeoAdminReverseLocation(GeoAdminModel):
    """地物の特定結果1件"""

    id: Optional[Union[int, str]] = None
    feature_id: Optional[Union[int, str]] = Field(default=None, alias="featureId")
    layer_bod_id: Optional[str] = Field(default=None, alias="layerBodId")
    layer_name: Optional[str] = Field(default=None, alias="layerName")
    properties: ReverseLocationAttributes


class GeoAdminReverseResponse(GeoAdminModel):
    """地物の特定（MapServer/identify）のレスポンス全体"""

    results: list[GeoAdminReverseLocation]
