"""OpenCage Geocoding APIのレスポンススキーマ

See: https://opencagedata.com/api#response
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def string_or_int(value: Any) -> Any:
    """文字列・整数のどちらで届いても文字列に正規化する"""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    return value


class OpencageModel(BaseModel):
    """OpenCageスキーマの基底クラス（未知のフィールドは無視）"""

    model_config = ConfigDict(extra="ignore")


class Currency(OpencageModel):
    """通貨メタデータ"""

    alternate_symbols: Optional[list[str]] = None
    decimal_mark: Optional[str] = None
    html_entity: Optional[str] = None
    iso_code: str
    iso_numeric: str  # 文字列・整数のどちらでも届く
    name: Optional[str] = None
    smallest_denomination: Optional[int] = None
    subunit: Optional[str] = None
    subunit_to_unit: Optional[int] = None
    symbol: Optional[str] = None
    symbol_first: Optional[int] = None
    thousands_separator: Optional[str] = None

    @field_validator("iso_numeric", mode="before")
    @classmethod
    def normalize_iso_numeric(cls, value: Any) -> Any:
        return string_or_int(value)


class Sun(OpencageModel):
    """日の出・日の入りのメタデータ（UNIXタイムスタンプ）"""

    rise: dict[str, int] = Field(default_factory=dict)
    set: dict[str, int] = Field(default_factory=dict)


class Timezone(OpencageModel):
    """タイムゾーンのメタデータ"""

    name: str
    now_in_dst: Optional[int] = None
    offset_sec: Optional[int] = None
    offset_string: Optional[str] = None
    short_name: Optional[str] = None

    @field_validator("offset_string", "short_name", mode="before")
    @classmethod
    def normalize_strings(cls, value: Any) -> Any:
        return string_or_int(value)


class Annotations(OpencageModel):
    """結果に付与される注釈情報"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    dms: Optional[dict[str, str]] = Field(default=None, alias="DMS")
    mgrs: Optional[str] = Field(default=None, alias="MGRS")
    maidenhead: Optional[str] = Field(default=None, alias="Maidenhead")
    mercator: Optional[dict[str, float]] = Field(default=None, alias="Mercator")
    osm: Optional[dict[str, str]] = Field(default=None, alias="OSM")
    callingcode: Optional[int] = None
    currency: Optional[Currency] = None
    flag: Optional[str] = None
    geohash: Optional[str] = None
    qibla: Optional[float] = None
    sun: Optional[Sun] = None
    timezone: Optional[Timezone] = None
    what3words: Optional[dict[str, str]] = None


class Bounds(OpencageModel):
    """結果のバウンディングボックス（キーはlat/lng）"""

    northeast: dict[str, float]
    southwest: dict[str, float]


class OpencageResult(OpencageModel):
    """ジオコーディング結果1件"""

    annotations: Optional[Annotations] = None
    bounds: Optional[Bounds] = None
    components: dict[str, str] = Field(default_factory=dict)
    confidence: Optional[int] = None
    formatted: str
    geometry: dict[str, float]  # キーはlat/lng

    @field_validator("components", mode="before")
    @classmethod
    def stringify_components(cls, value: Any) -> Any:
        # "house_number"などが数値で届く場合がある
        if isinstance(value, dict):
            return {key: str(item) for key, item in value.items()}
        return value


class Status(OpencageModel):
    """HTTPステータスのメタデータ"""

    message: str
    code: int


class Timestamp(OpencageModel):
    """タイムスタンプのメタデータ"""

    created_http: Optional[str] = None
    created_unix: Optional[datetime] = None


class OpencageResponse(OpencageModel):
    """フォワード・リバースジオコーディングのレスポンス全体"""

    documentation: Optional[str] = None
    licenses: list[dict[str, str]] = Field(default_factory=list)
    rate: Optional[dict[str, int]] = None
    results: list[OpencageResult]
    status: Optional[Status] = None
    stay_informed: Optional[dict[str, str]] = None
    thanks: Optional[str] = None
    timestamp: Optional[Timestamp] = None
    total_results: Optional[int] = None
