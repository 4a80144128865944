"""ジオコーダーの基底クラス"""

from abc import ABC, abstractmethod
from typing import Any, Optional, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ....shared.exceptions.errors import GeocodingDecodeError
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger
from ..domain.models import Point

logger = get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class ForwardGeocoder(ABC):
    """フォワードジオコーディング（住所 -> 座標）のインターフェース"""

    @abstractmethod
    def forward(self, address: str) -> list[Point]:
        """
        住所から候補座標を取得

        プロバイダーの座標順に関係なく、常に(経度, 緯度)の順のPointを返す。

        Args:
            address: 住所文字列

        Returns:
            list[Point]: 全候補の座標（該当なしの場合は空リスト）

        Raises:
            GeocodingHTTPError: 通信失敗時
            GeocodingDecodeError: レスポンスのデコード失敗時
        """
        pass


class ReverseGeocoder(ABC):
    """リバースジオコーディング（座標 -> 住所）のインターフェース"""

    @abstractmethod
    def reverse(self, point: Point) -> Optional[str]:
        """
        座標から住所を取得

        入力は常に(経度, 緯度)の順。プロバイダーが要求する順への変換は各実装が行う。

        Args:
            point: 座標

        Returns:
            Optional[str]: 住所文字列（見つからない場合はNone）

        Raises:
            GeocodingHTTPError: 通信失敗時
            GeocodingDecodeError: レスポンスのデコード失敗時
        """
        pass


class BaseGeocoder:
    """HTTP通信とレスポンスのデコードを共通化したジオコーダー基底クラス"""

    def __init__(self, endpoint: str, http_client: Optional[HTTPClient] = None) -> None:
        """
        Args:
            endpoint: APIエンドポイント
            http_client: HTTPクライアント（Noneの場合は新規作成）
        """
        self.endpoint = endpoint
        self.http_client = http_client or HTTPClient()

        logger.info(f"{self.__class__.__name__} initialized: {self.endpoint}")

    def _request(self, url: str, params: Any) -> requests.Response:
        """GETリクエストを送信（2xx以外はGeocodingHTTPErrorとして送出される）"""
        return self.http_client.get(url, params=params)

    def _decode(self, response: requests.Response, model: type[ResponseT]) -> ResponseT:
        """
        レスポンスボディをスキーマに従ってデコード

        Args:
            response: HTTPレスポンス
            model: レスポンスのスキーマ

        Returns:
            デコード済みのレスポンス

        Raises:
            GeocodingDecodeError: JSONが不正、または必須フィールドが欠落・型不一致の場合
        """
        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {response.url}: {e}")
            raise GeocodingDecodeError(f"Invalid JSON response: {e}") from e

        try:
            return model.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Unexpected {model.__name__} schema from {response.url}: {e}")
            raise GeocodingDecodeError(f"Failed to decode {model.__name__}: {e}") from e

    def _get_json(self, url: str, params: Any, model: type[ResponseT]) -> ResponseT:
        """GETリクエストを送信し、レスポンスをデコードして返す"""
        response = self._request(url, params)
        return self._decode(response, model)

    def close(self) -> None:
        """リソースをクリーンアップ"""
        if self.http_client:
            self.http_client.close()
        logger.debug(f"{self.__class__.__name__} closed")

    def __enter__(self) -> "BaseGeocoder":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
