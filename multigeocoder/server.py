"""ジオコーディングHTTPサーバー（FastAPI）"""
from collections.abc import Iterator
from typing import Any, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from .features.geocoding.domain.models import Point
from .features.geocoding.services.geocoding_service import GeocodingService
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import (
    ConfigurationError,
    GeocodingDecodeError,
    GeocodingError,
    GeocodingHTTPError,
)
from .shared.logging.config import get_logger, setup_logging

# 設定を読み込み
settings = Settings()

# ロギングを設定
setup_logging(level=settings.log_level)
logger = get_logger(__name__)

# FastAPIアプリケーションを作成
app = FastAPI(
    title="マルチプロバイダー・ジオコーディングサービス",
    description="OpenCage / OpenStreetMap Nominatim / GeoAdminによるフォワード・リバースジオコーディング",
    version="1.0.0",
)


def get_settings() -> Settings:
    """設定を取得（テストで差し替え可能）"""
    return settings


def get_geocoding_service(
    provider: Optional[str] = Query(default=None, description="プロバイダー名"),
    app_settings: Settings = Depends(get_settings),
) -> Iterator[GeocodingService]:
    """リクエストごとにジオコーディングサービスを生成し、終了時にクローズする"""
    try:
        service = GeocodingService(app_settings, provider=provider)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        yield service
    finally:
        service.close()


@app.on_event("startup")
async def startup_event() -> None:
    """起動時の処理"""
    logger.info("Application starting up")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Default provider: {settings.default_provider.value}")


@app.get("/")
async def root() -> dict[str, Any]:
    """ルートエンドポイント"""
    return {
        "service": settings.project_name,
        "version": "1.0.0",
        "status": "running",
        "environment": settings.environment,
        "default_provider": settings.default_provider.value,
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """ヘルスチェックエンドポイント"""
    return {"status": "healthy"}


@app.get("/forward")
def forward(
    q: str = Query(..., min_length=1, description="住所文字列"),
    service: GeocodingService = Depends(get_geocoding_service),
) -> dict[str, Any]:
    """
    住所から座標を取得（フォワードジオコーディング）

    Args:
        q: 住所文字列
        service: ジオコーディングサービス

    Returns:
        dict[str, Any]: 候補座標（[経度, 緯度]のリスト）
    """
    logger.info(f"Forward geocoding request: {q}")
    points = service.forward(q)
    return {
        "provider": service.provider.value,
        "query": q,
        "points": [list(point.to_tuple()) for point in points],
    }


@app.get("/reverse")
def reverse(
    lon: float = Query(..., description="経度（スイス座標系の場合は東距）"),
    lat: float = Query(..., description="緯度（スイス座標系の場合は北距）"),
    service: GeocodingService = Depends(get_geocoding_service),
) -> dict[str, Any]:
    """
    座標から住所を取得（リバースジオコーディング）

    Args:
        lon: 経度
        lat: 緯度
        service: ジオコーディングサービス

    Returns:
        dict[str, Any]: 住所（見つからない場合はnull）
    """
    logger.info(f"Reverse geocoding request: ({lon}, {lat})")
    point = Point(x=lon, y=lat)
    return {
        "provider": service.provider.value,
        "point": list(point.to_tuple()),
        "address": service.reverse(point),
    }


@app.exception_handler(GeocodingError)
async def geocoding_exception_handler(request: Request, exc: GeocodingError) -> JSONResponse:
    """ジオコーディングエラーをHTTPステータスに変換"""
    if isinstance(exc, ConfigurationError):
        status_code = 400
    elif isinstance(exc, (GeocodingHTTPError, GeocodingDecodeError)):
        status_code = 502
    else:
        status_code = 500

    logger.error(f"Geocoding error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": exc.__class__.__name__},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """グローバル例外ハンドラー"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "detail": str(exc)},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
