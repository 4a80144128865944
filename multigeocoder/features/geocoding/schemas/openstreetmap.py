"""OpenStreetMap Nominatim（GeoJSON形式）のレスポンススキーマ

See: https://nominatim.org/release-docs/develop/api/Search/#geojson
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class OpenstreetmapModel(BaseModel):
    """Nominatimスキーマの基底クラス（未知のフィールドは無視）"""

    model_config = ConfigDict(extra="ignore")


class AddressDetails(OpenstreetmapModel):
    """住所の詳細（addressdetails=1の場合のみ）"""

    city: Optional[str] = None
    city_district: Optional[str] = None
    construction: Optional[str] = None
    continent: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    house_number: Optional[str] = None
    neighbourhood: Optional[str] = None
    postcode: Optional[str] = None
    public_building: Optional[str] = None
    road: Optional[str] = None
    state: Optional[str] = None
    suburb: Optional[str] = None


class ResultProperties(OpenstreetmapModel):
    """結果のプロパティ"""

    place_id: Optional[int] = None
    osm_type: Optional[str] = None
    osm_id: Optional[int] = None
    display_name: str
    place_rank: Optional[int] = None
    category: Optional[str] = None
    type: Optional[str] = None
    importance: Optional[float] = None
    address: Optional[AddressDetails] = None


class ResultGeometry(OpenstreetmapModel):
    """結果のジオメトリ（座標は経度, 緯度の順）"""

    type: str = "Point"
    coordinates: tuple[float, float]


class OpenstreetmapResult(OpenstreetmapModel):
    """ジオコーディング結果1件（GeoJSON Feature）"""

    type: str = "Feature"
    properties: ResultProperties
    bbox: Optional[tuple[float, float, float, float]] = None
    geometry: ResultGeometry


class OpenstreetmapResponse(OpenstreetmapModel):
    """
    レスポンス全体（GeoJSON FeatureCollection）

    リバースジオコーディングで該当がない場合、Nominatimは
    featuresの代わりに{"error": "Unable to geocode"}を返す。
    """

    type: str = "FeatureCollection"
    licence: Optional[str] = None
    features: list[OpenstreetmapResult] = Field(default_factory=list)
    error: Optional[str] = None

    @model_validator(mode="after")
    def require_features(self) -> "OpenstreetmapResponse":
        if "features" not in self.model_fields_set and self.error is None:
            raise ValueError("features is required")
        return self
