"""OpenStreetMap Nominatim実装

See: https://nominatim.org/release-docs/develop/

Nominatimは無料だが、利用ポリシー（最大1リクエスト/秒など）を守ること。
See: https://operations.osmfoundation.org/policies/nominatim/
"""
from dataclasses import dataclass
from typing import Optional

from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger
from ..domain.enums import GeocodingProvider
from ..domain.models import InputBounds, Point, format_coordinate
from ..schemas.openstreetmap import OpenstreetmapResponse
from .base import BaseGeocoder, ForwardGeocoder, ReverseGeocoder

logger = get_logger(__name__)

DEFAULT_NOMINATIM_ENDPOINT = "https://nominatim.openstreetmap.org/"


@dataclass
class OpenstreetmapParams:
    """
    Nominatimのフォワードジオコーディング用パラメータ

    Example:
        viewbox = InputBounds.new(
            (-0.13806939125061035, 51.51989264641164),
            (-0.13427138328552246, 51.52319711775629),
        )
        params = (
            OpenstreetmapParams("UCL CASA")
            .with_addressdetails(True)
            .with_viewbox(viewbox)
            .build()
        )
    """

    query: str
    addressdetails: bool = False
    viewbox: Optional[InputBounds] = None

    def with_addressdetails(self, addressdetails: bool) -> "OpenstreetmapParams":
        """addressdetailsを設定"""
        self.addressdetails = addressdetails
        return self

    def with_viewbox(self, viewbox: InputBounds) -> "OpenstreetmapParams":
        """検索範囲を設定"""
        self.viewbox = viewbox
        return self

    def build(self) -> "OpenstreetmapParams":
        """パラメータのコピーを返す"""
        return OpenstreetmapParams(
            query=self.query,
            addressdetails=self.addressdetails,
            viewbox=self.viewbox,
        )


class OpenstreetmapGeocoder(BaseGeocoder, ForwardGeocoder, ReverseGeocoder):
    """OpenStreetMap Nominatim実装"""

    provider = GeocodingProvider.OPENSTREETMAP

    def __init__(
        self,
        endpoint: str = DEFAULT_NOMINATIM_ENDPOINT,
        http_client: Optional[HTTPClient] = None,
    ) -> None:
        """
        Args:
            endpoint: Nominatimのエンドポイント（末尾のスラッシュを含む）
            http_client: HTTPクライアント（Noneの場合は新規作成）
        """
        super().__init__(endpoint, http_client=http_client)

    def forward_full(self, params: OpenstreetmapParams) -> OpenstreetmapResponse:
        """
        住所をフォワードジオコーディングし、レスポンス全体を返す

        See: https://nominatim.org/release-docs/develop/api/Search/

        Args:
            params: 検索パラメータ（住所の詳細、検索範囲）

        Returns:
            OpenstreetmapResponse: レスポンス全体

        Raises:
            GeocodingHTTPError: 通信失敗時
            GeocodingDecodeError: レスポンスのデコード失敗時
        """
        query = [
            ("q", params.query),
            ("format", "geojson"),
            ("addressdetails", "1" if params.addressdetails else "0"),
        ]
        if params.viewbox is not None:
            query.append(("viewbox", params.viewbox.to_query_string()))

        logger.debug(f"Nominatim forward_full: {params.query}")
        return self._get_json(f"{self.endpoint}search", query, OpenstreetmapResponse)

    def forward(self, address: str) -> list[Point]:
        logger.debug(f"Nominatim forward: {address}")
        response = self._get_json(
            f"{self.endpoint}search",
            [("q", address), ("format", "geojson")],
            OpenstreetmapResponse,
        )

        # GeoJSONの座標は既に(経度, 緯度)の順
        points = [Point.from_tuple(feature.geometry.coordinates) for feature in response.features]

        if not points:
            logger.warning(f"No Nominatim results for address: {address}")
        return points

    def reverse(self, point: Point) -> Optional[str]:
        logger.debug(f"Nominatim reverse: ({point.x}, {point.y})")
        response = self._get_json(
            f"{self.endpoint}reverse",
            [
                ("lon", format_coordinate(point.x)),
                ("lat", format_coordinate(point.y)),
                ("format", "geojson"),
            ],
            OpenstreetmapResponse,
        )

        if not response.features:
            logger.warning(
                f"No Nominatim reverse results for: ({point.x}, {point.y})"
                + (f" ({response.error})" if response.error else "")
            )
            return None

        return response.features[0].properties.display_name
