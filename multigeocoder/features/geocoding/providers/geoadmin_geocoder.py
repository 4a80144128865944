"""GeoAdmin API（swisstopo）実装 - スイス国内専用

- 検索: https://api3.geo.admin.ch/services/sdiservices.html#search
- 地物の特定: https://api3.geo.admin.ch/services/sdiservices.html#identify-features

GeoAdmin APIは無料だが、フェアユースポリシーを守ること。
"""
from dataclasses import dataclass
from typing import Optional, Union

from ....shared.exceptions.errors import ConfigurationError, ForwardGeocodingError
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger
from ..domain.enums import GeocodingProvider, SpatialReference
from ..domain.models import InputBounds, Point, format_coordinate
from ..domain.projection import wgs84_to_lv03
from ..schemas.geoadmin import (
    ForwardLocationProperties,
    GeoAdminForwardResponse,
    GeoAdminReverseResponse,
)
from .base import BaseGeocoder, ForwardGeocoder, ReverseGeocoder

logger = get_logger(__name__)

DEFAULT_GEOADMIN_ENDPOINT = "https://api3.geo.admin.ch/rest/services/api/"
DEFAULT_ORIGINS = "zipcode,gg25,district,kantone,gazetteer,address,parcel"

# 建物・住宅登録簿のレイヤー
REVERSE_LAYER = "all:ch.bfs.gebaeude_wohnungs_register"


@dataclass
class GeoAdminParams:
    """
    GeoAdminのフォワードジオコーディング用パラメータ

    Example:
        bbox = InputBounds.new((7.4513398, 46.92792859), (7.4513662, 46.9279467))
        params = (
            GeoAdminParams("Seftigenstrasse Bern")
            .with_origins("address")
            .with_bbox(bbox)
            .build()
        )
    """

    searchtext: str
    origins: str = DEFAULT_ORIGINS
    bbox: Optional[InputBounds] = None
    limit: Optional[int] = 50

    def with_origins(self, origins: str) -> "GeoAdminParams":
        """検索対象の種別（カンマ区切り）を設定"""
        self.origins = origins
        return self

    def with_bbox(self, bbox: InputBounds) -> "GeoAdminParams":
        """検索範囲を設定"""
        self.bbox = bbox
        return self

    def with_limit(self, limit: int) -> "GeoAdminParams":
        """最大結果件数を設定"""
        self.limit = limit
        return self

    def build(self) -> "GeoAdminParams":
        """パラメータのコピーを返す"""
        return GeoAdminParams(
            searchtext=self.searchtext,
            origins=self.origins,
            bbox=self.bbox,
            limit=self.limit,
        )


class GeoAdminGeocoder(BaseGeocoder, ForwardGeocoder, ReverseGeocoder):
    """GeoAdmin API実装"""

    provider = GeocodingProvider.GEOADMIN

    def __init__(
        self,
        endpoint: str = DEFAULT_GEOADMIN_ENDPOINT,
        sr: Union[str, SpatialReference] = SpatialReference.WGS84,
        http_client: Optional[HTTPClient] = None,
    ) -> None:
        """
        Args:
            endpoint: GeoAdmin APIのエンドポイント（末尾のスラッシュを含む）
            sr: 空間参照系。21781 (LV03), 2056 (LV95), 4326 (WGS84), 3857 (Web Pseudo-Mercator)
            http_client: HTTPクライアント（Noneの場合は新規作成）

        Raises:
            ConfigurationError: サポートされていない空間参照系の場合
        """
        self.sr = self._resolve_sr(sr)
        super().__init__(endpoint, http_client=http_client)

    @staticmethod
    def _resolve_sr(sr: Union[str, SpatialReference]) -> SpatialReference:
        if isinstance(sr, SpatialReference):
            return sr
        try:
            return SpatialReference.from_code(sr)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    def with_endpoint(self, endpoint: str) -> "GeoAdminGeocoder":
        """エンドポイントを変更"""
        self.endpoint = endpoint
        return self

    def with_sr(self, sr: Union[str, SpatialReference]) -> "GeoAdminGeocoder":
        """空間参照系を変更"""
        self.sr = self._resolve_sr(sr)
        return self

    def _translate_bbox(self, bbox: InputBounds) -> InputBounds:
        """
        検索範囲を検索エンドポイントが要求するLV03に変換

        WGS84/Web Mercatorの場合のみ変換し、スイス座標系の場合はそのまま使う。
        """
        if self.sr.is_swiss_grid:
            return bbox
        return InputBounds(
            minimum_lonlat=wgs84_to_lv03(bbox.minimum_lonlat),
            maximum_lonlat=wgs84_to_lv03(bbox.maximum_lonlat),
        )

    def _to_point(self, properties: ForwardLocationProperties) -> Point:
        """
        検索結果の属性を(経度, 緯度)順のPointに変換

        スイス座標系ではy=東西方向、x=南北方向のため(y, x)の順で読む。
        """
        if self.sr.is_swiss_grid:
            easting, northing = properties.y, properties.x
        else:
            easting, northing = properties.lon, properties.lat

        if easting is None or northing is None:
            logger.error(f"GeoAdmin result has no coordinates for sr={self.sr.value}")
            raise ForwardGeocodingError(
                f"GeoAdmin result is missing coordinates for sr={self.sr.value}: {properties.label}"
            )
        return Point(x=easting, y=northing)

    def forward_full(self, params: GeoAdminParams) -> GeoAdminForwardResponse:
        """
        住所をフォワードジオコーディングし、レスポンス全体を返す

        Args:
            params: 検索パラメータ（検索対象の種別、検索範囲、最大件数）

        Returns:
            GeoAdminForwardResponse: レスポンス全体

        Raises:
            GeocodingHTTPError: 通信失敗時
            GeocodingDecodeError: レスポンスのデコード失敗時
        """
        query = [
            ("searchText", params.searchtext),
            ("type", "locations"),
            ("origins", params.origins),
            ("sr", self.sr.value),
            ("geometryFormat", "geojson"),
        ]
        if params.bbox is not None:
            query.append(("bbox", self._translate_bbox(params.bbox).to_query_string()))
        if params.limit is not None:
            query.append(("limit", str(params.limit)))

        logger.debug(f"GeoAdmin forward_full: {params.searchtext} (sr={self.sr.value})")
        return self._get_json(f"{self.endpoint}SearchServer", query, GeoAdminForwardResponse)

    def forward(self, address: str) -> list[Point]:
        """
        住所から候補座標を取得

        Raises:
            ForwardGeocodingError: 結果に現在の空間参照系の座標が含まれない場合
        """
        query = [
            ("searchText", address),
            ("type", "locations"),
            ("origins", "address"),
            ("limit", "1"),
            ("sr", self.sr.value),
            ("geometryFormat", "geojson"),
        ]

        logger.debug(f"GeoAdmin forward: {address} (sr={self.sr.value})")
        response = self._get_json(f"{self.endpoint}SearchServer", query, GeoAdminForwardResponse)

        points = [self._to_point(feature.properties) for feature in response.features]

        if not points:
            logger.warning(f"No GeoAdmin results for address: {address}")
        return points

    def reverse_full(self, point: Point) -> GeoAdminReverseResponse:
        """
        座標に該当する建物を特定し、レスポンス全体を返す

        Args:
            point: 現在の空間参照系での座標（経度, 緯度 または 東距, 北距）

        Returns:
            GeoAdminReverseResponse: レスポンス全体

        Raises:
            GeocodingHTTPError: 通信失敗時
            GeocodingDecodeError: レスポンスのデコード失敗時
        """
        query = [
            ("geometry", f"{format_coordinate(point.x)},{format_coordinate(point.y)}"),
            ("geometryType", "esriGeometryPoint"),
            ("layers", REVERSE_LAYER),
            ("mapExtent", "0,0,100,100"),
            ("imageDisplay", "100,100,100"),
            ("tolerance", "50"),
            ("geometryFormat", "geojson"),
            ("sr", self.sr.value),
            ("lang", "en"),
        ]

        logger.debug(f"GeoAdmin identify: ({point.x}, {point.y}) (sr={self.sr.value})")
        return self._get_json(
            f"{self.endpoint}MapServer/identify", query, GeoAdminReverseResponse
        )

    def reverse(self, point: Point) -> Optional[str]:
        response = self.reverse_full(point)

        if not response.results:
            logger.warning(f"No GeoAdmin reverse results for: ({point.x}, {point.y})")
            return None

        properties = response.results[0].properties
        return f"{properties.strname_deinr}, {properties.dplz4} {properties.dplzname}"
