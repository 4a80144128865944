"""ジオコーディングサービス"""

import time
from typing import Any, Optional

from tqdm import tqdm

from ....infrastructure.config.settings import Settings
from ....shared.exceptions.errors import GeocodingError
from ....shared.logging.config import get_logger
from ..domain.enums import GeocodingProvider
from ..domain.models import BatchGeocodingResult, Point
from ..providers.factory import Geocoder, create_geocoder

logger = get_logger(__name__)


class GeocodingService:
    """設定されたプロバイダーでフォワード・リバースジオコーディングを行うサービス"""

    def __init__(
        self,
        settings: Settings,
        provider: Optional[str] = None,
        geocoder: Optional[Geocoder] = None,
        delay_between_requests: Optional[float] = None,
    ) -> None:
        """
        Args:
            settings: アプリケーション設定
            provider: プロバイダー名（Noneの場合は設定のデフォルト）
            geocoder: ジオコーダー（Noneの場合は設定から生成）
            delay_between_requests: バッチ処理時のリクエスト間の遅延（秒、Noneの場合は設定値）
        """
        self.settings = settings
        self.geocoder = geocoder or create_geocoder(provider, settings)
        self.delay_between_requests = (
            settings.batch_delay_between_requests
            if delay_between_requests is None
            else delay_between_requests
        )

        logger.info(
            f"GeocodingService initialized: geocoder={self.geocoder.__class__.__name__}, "
            f"delay={self.delay_between_requests}s"
        )

    @property
    def provider(self) -> GeocodingProvider:
        """使用中のプロバイダー"""
        return self.geocoder.provider

    def forward(self, address: str) -> list[Point]:
        """
        住所をフォワードジオコーディング

        Args:
            address: 住所文字列

        Returns:
            list[Point]: 候補座標（経度, 緯度）

        Raises:
            GeocodingError: 通信・デコードに失敗した場合
        """
        return self.geocoder.forward(address)

    def reverse(self, point: Point) -> Optional[str]:
        """
        座標をリバースジオコーディング

        Args:
            point: 座標（経度, 緯度）

        Returns:
            Optional[str]: 住所文字列（見つからない場合はNone）

        Raises:
            GeocodingError: 通信・デコードに失敗した場合
        """
        return self.geocoder.reverse(point)

    def forward_batch(
        self, addresses: list[str], show_progress: bool = True
    ) -> BatchGeocodingResult:
        """
        複数の住所をバッチでフォワードジオコーディング

        空の住所と重複する住所はスキップする。
        1件の失敗でバッチ全体を中断せず、失敗として記録する。

        Args:
            addresses: 住所のリスト
            show_progress: プログレスバーを表示するか

        Returns:
            BatchGeocodingResult: 結果（成功、失敗、スキップ数）
        """
        result = BatchGeocodingResult()
        unique_addresses: list[str] = []

        for address in addresses:
            normalized = address.strip() if address else ""
            if not normalized or normalized in unique_addresses:
                result.skipped += 1
                continue
            unique_addresses.append(normalized)

        logger.info(f"Starting batch geocoding: {len(unique_addresses)} addresses")

        # プログレスバーを使用してバッチ処理
        iterator: Any = (
            tqdm(unique_addresses, desc="Geocoding") if show_progress else unique_addresses
        )

        for index, address in enumerate(iterator):
            # レート制限のため遅延（初回を除く）
            if index > 0 and self.delay_between_requests > 0:
                time.sleep(self.delay_between_requests)

            try:
                result.results[address] = self.geocoder.forward(address)
            except GeocodingError as e:
                logger.error(f"Geocoding error for address {address}: {e}")
                result.failures[address] = str(e)

        logger.info(
            f"Batch geocoding completed: {result.success_count} success, "
            f"{result.failure_count} failure, {result.skipped} skipped"
        )

        return result

    def close(self) -> None:
        """リソースをクリーンアップ"""
        self.geocoder.close()

    def __enter__(self) -> "GeocodingService":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
