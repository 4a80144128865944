"""設定からジオコーダーを生成するファクトリ"""
from typing import Optional, Union

from ....infrastructure.config.settings import Settings
from ....shared.exceptions.errors import ConfigurationError
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger
from ..domain.enums import GeocodingProvider
from .geoadmin_geocoder import GeoAdminGeocoder
from .opencage_geocoder import OpencageGeocoder, OpencageParameters
from .openstreetmap_geocoder import OpenstreetmapGeocoder

logger = get_logger(__name__)

Geocoder = Union[OpencageGeocoder, OpenstreetmapGeocoder, GeoAdminGeocoder]


def create_http_client(settings: Settings) -> HTTPClient:
    """設定からHTTPクライアントを生成"""
    return HTTPClient(
        timeout=settings.http_timeout,
        max_retries=settings.http_max_retries,
        user_agent=settings.user_agent,
    )


def create_geocoder(
    provider: Union[str, GeocodingProvider, None],
    settings: Settings,
    http_client: Optional[HTTPClient] = None,
) -> Geocoder:
    """
    プロバイダーに対応するジオコーダーを生成

    Args:
        provider: プロバイダー（Noneの場合は設定のデフォルト）
        settings: アプリケーション設定
        http_client: HTTPクライアント（Noneの場合は設定から生成）

    Returns:
        Geocoder: ジオコーダー

    Raises:
        ConfigurationError: 不明なプロバイダー、またはAPIキー未設定の場合
    """
    if provider is None:
        provider = settings.default_provider
    elif not isinstance(provider, GeocodingProvider):
        try:
            provider = GeocodingProvider.from_name(provider)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    if provider == GeocodingProvider.OPENCAGE and not settings.opencage_api_key:
        raise ConfigurationError("OPENCAGE_API_KEY is required for the opencage provider")

    client = http_client or create_http_client(settings)

    logger.debug(f"Creating geocoder for provider: {provider.value}")

    if provider == GeocodingProvider.OPENCAGE:
        return OpencageGeocoder(
            api_key=settings.opencage_api_key,
            endpoint=settings.opencage_endpoint,
            parameters=OpencageParameters(
                language=settings.opencage_language,
                countrycode=settings.opencage_countrycode,
                limit=settings.opencage_limit,
            ),
            http_client=client,
        )
    if provider == GeocodingProvider.GEOADMIN:
        return GeoAdminGeocoder(
            endpoint=settings.geoadmin_endpoint,
            sr=settings.geoadmin_sr,
            http_client=client,
        )
    return OpenstreetmapGeocoder(endpoint=settings.nominatim_endpoint, http_client=client)
