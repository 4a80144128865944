"""OpenCage Geocoding API実装

See: https://opencagedata.com/api

無料プランには1リクエスト/秒のレート制限と24時間あたりのクォータがある。
残りのクォータはremaining_calls()で取得できる（有料プランの場合は更新されずNoneのまま）。

OpenCageのAPIは座標を(緯度, 経度)の順で扱うが、
このクラスの入出力は常に(経度, 緯度)の順。
"""
from dataclasses import dataclass
from typing import Optional

import requests

from ....shared.exceptions.errors import (
    ForwardGeocodingError,
    GeocodingDecodeError,
    GeocodingError,
    ReverseGeocodingError,
)
from ....shared.http.client import HTTPClient
from ....shared.http.rate_limiter import RemainingCallsCounter
from ....shared.logging.config import get_logger
from ..domain.enums import GeocodingProvider
from ..domain.models import InputBounds, Point, format_coordinate
from ..schemas.opencage import OpencageResponse
from .base import BaseGeocoder, ForwardGeocoder, ReverseGeocoder

logger = get_logger(__name__)

DEFAULT_OPENCAGE_ENDPOINT = "https://api.opencagedata.com/geocode/v1/json"


@dataclass
class OpencageParameters:
    """
    OpenCageのオプションパラメータ

    Noneのフィールドはクエリに含めない。
    See: https://opencagedata.com/api#forward-opt
    """

    language: Optional[str] = None  # 例: "fr"
    countrycode: Optional[str] = None  # 例: "ch,de"
    limit: Optional[int] = None

    def as_query(self) -> list[tuple[str, str]]:
        """設定済みのパラメータをクエリのリストとして返す"""
        query = []
        if self.language is not None:
            query.append(("language", self.language))
        if self.countrycode is not None:
            query.append(("countrycode", self.countrycode))
        if self.limit is not None:
            query.append(("limit", str(self.limit)))
        return query


class OpencageGeocoder(BaseGeocoder, ForwardGeocoder, ReverseGeocoder):
    """OpenCage Geocoding API実装"""

    provider = GeocodingProvider.OPENCAGE

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_OPENCAGE_ENDPOINT,
        parameters: Optional[OpencageParameters] = None,
        http_client: Optional[HTTPClient] = None,
    ) -> None:
        """
        Args:
            api_key: OpenCage APIキー
            endpoint: APIエンドポイント
            parameters: 全リクエストに付与するオプションパラメータ
            http_client: HTTPクライアント（Noneの場合は新規作成）
        """
        self.api_key = api_key
        self.parameters = parameters or OpencageParameters()
        self._remaining = RemainingCallsCounter()
        super().__init__(endpoint, http_client=http_client)

    def remaining_calls(self) -> Optional[int]:
        """
        24時間あたりのクォータの残りリクエスト数を取得

        初期値はNone。無料プランのキーでAPIを呼び出すたびに
        レスポンスヘッダーの値で更新される。
        """
        return self._remaining.remaining

    def _request(self, url: str, params: list[tuple[str, str]]) -> requests.Response:
        response = super()._request(url, params)
        # レート制限の記録が本来のリクエストを失敗させることはない
        self._remaining.update_from_headers(response.headers)
        return response

    def _base_query(self, q: str, annotations: bool) -> list[tuple[str, str]]:
        return [
            ("q", q),
            ("key", self.api_key),
            ("no_annotations", "0" if annotations else "1"),
            ("no_record", "1"),
        ]

    @staticmethod
    def _check_status(
        response: OpencageResponse, error_class: type[GeocodingError]
    ) -> None:
        # 本文のstatus.codeがHTTPステータスと異なる場合がある
        if response.status is not None and response.status.code != 200:
            logger.error(
                f"OpenCage status {response.status.code}: {response.status.message}"
            )
            raise error_class(
                f"OpenCage returned status {response.status.code}: {response.status.message}"
            )

    @staticmethod
    def _reverse_query(point: Point) -> str:
        # OpenCageは(緯度, 経度)の順を要求する
        return f"{format_coordinate(point.y)}, {format_coordinate(point.x)}"

    def forward_full(
        self, place: str, bounds: Optional[InputBounds] = None
    ) -> OpencageResponse:
        """
        住所をフォワードジオコーディングし、注釈付きのレスポンス全体を返す

        精度の高い結果を得るため、バウンディングボックスで検索範囲を絞ることを推奨。
        See: https://opencagedata.com/api#ambiguous-results

        Args:
            place: 住所文字列
            bounds: 検索範囲（Noneの場合は制限しない）

        Returns:
            OpencageResponse: レスポンス全体

        Raises:
            GeocodingHTTPError: 通信失敗時
            GeocodingDecodeError: レスポンスのデコード失敗時
        """
        query = self._base_query(place, annotations=True)
        if bounds is not None:
            query.append(("bounds", bounds.to_query_string()))
        query.extend(self.parameters.as_query())

        logger.debug(f"OpenCage forward_full: {place}")
        return self._get_json(self.endpoint, query, OpencageResponse)

    def reverse_full(self, point: Point) -> OpencageResponse:
        """
        座標をリバースジオコーディングし、注釈付きのレスポンス全体を返す

        Args:
            point: 座標（経度, 緯度）

        Returns:
            OpencageResponse: レスポンス全体

        Raises:
            GeocodingHTTPError: 通信失敗時
            GeocodingDecodeError: レスポンスのデコード失敗時
        """
        query = self._base_query(self._reverse_query(point), annotations=True)
        query.extend(self.parameters.as_query())

        logger.debug(f"OpenCage reverse_full: ({point.x}, {point.y})")
        return self._get_json(self.endpoint, query, OpencageResponse)

    def forward(self, address: str) -> list[Point]:
        query = self._base_query(address, annotations=False)
        query.extend(self.parameters.as_query())

        logger.debug(f"OpenCage forward: {address}")
        response = self._get_json(self.endpoint, query, OpencageResponse)
        self._check_status(response, ForwardGeocodingError)

        points = []
        for result in response.results:
            try:
                points.append(Point(x=result.geometry["lng"], y=result.geometry["lat"]))
            except KeyError as e:
                raise GeocodingDecodeError(f"OpenCage geometry is missing {e}") from e

        if not points:
            logger.warning(f"No OpenCage results for address: {address}")
        return points

    def reverse(self, point: Point) -> Optional[str]:
        query = self._base_query(self._reverse_query(point), annotations=False)
        query.extend(self.parameters.as_query())

        logger.debug(f"OpenCage reverse: ({point.x}, {point.y})")
        response = self._get_json(self.endpoint, query, OpencageResponse)
        self._check_status(response, ReverseGeocodingError)

        # リバースジオコーディングは通常1件のみ返るが、0件の場合は該当なしとして扱う
        if not response.results:
            logger.warning(f"No OpenCage reverse results for: ({point.x}, {point.y})")
            return None

        return response.results[0].formatted
