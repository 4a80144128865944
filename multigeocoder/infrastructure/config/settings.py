"""アプリケーション設定（Pydantic Settings）"""
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...features.geocoding.domain.enums import GeocodingProvider, SpatialReference
from ...shared.http.client import DEFAULT_USER_AGENT


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Project
    project_name: str = Field(
        default="multigeocoder",
        description="プロジェクト名",
    )
    environment: str = Field(
        default="development",
        description="環境 (development, staging, production)",
    )

    # Geocoding
    default_provider: GeocodingProvider = Field(
        default=GeocodingProvider.OPENSTREETMAP,
        description="デフォルトのジオコーディングプロバイダー (opencage, openstreetmap, geoadmin)",
    )

    # HTTP
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="全リクエストに付与するUser-Agent",
    )
    http_timeout: int = Field(
        default=20,
        description="HTTPリクエストのタイムアウト（秒）",
    )
    http_max_retries: int = Field(
        default=0,
        description="トランスポート層のリトライ回数（0の場合はリトライしない）",
    )

    # OpenCage
    opencage_api_key: Optional[str] = Field(
        default=None,
        description="OpenCage APIキー",
    )
    opencage_endpoint: str = Field(
        default="https://api.opencagedata.com/geocode/v1/json",
        description="OpenCage APIのエンドポイント",
    )
    opencage_language: Optional[str] = Field(
        default=None,
        description="OpenCageの結果の言語（例: fr）",
    )
    opencage_countrycode: Optional[str] = Field(
        default=None,
        description="OpenCageの国コードフィルタ（カンマ区切り、例: ch,de）",
    )
    opencage_limit: Optional[int] = Field(
        default=None,
        description="OpenCageの最大結果件数",
    )

    # OpenStreetMap Nominatim
    nominatim_endpoint: str = Field(
        default="https://nominatim.openstreetmap.org/",
        description="Nominatimのエンドポイント（末尾のスラッシュを含む）",
    )

    # GeoAdmin
    geoadmin_endpoint: str = Field(
        default="https://api3.geo.admin.ch/rest/services/api/",
        description="GeoAdmin APIのエンドポイント（末尾のスラッシュを含む）",
    )
    geoadmin_sr: str = Field(
        default=SpatialReference.WGS84.value,
        description="GeoAdminの空間参照系 (21781, 2056, 4326, 3857)",
    )

    # Batch
    batch_delay_between_requests: float = Field(
        default=1.0,
        description="バッチ処理時のリクエスト間の遅延（秒）",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # HTTP server
    port: int = Field(
        default=8080,
        description="HTTPサーバーのポート番号",
    )

    @field_validator("geoadmin_sr")
    @classmethod
    def validate_geoadmin_sr(cls, value: str) -> str:
        """サポートされている空間参照系かを検証"""
        return SpatialReference.from_code(value).value
