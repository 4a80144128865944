"""カスタム例外定義"""
from typing import Optional


class GeocodingError(Exception):
    """ジオコーディング基底例外"""

    pass


class GeocodingHTTPError(GeocodingError):
    """
    HTTP関連のエラー

    ネットワーク到達不能、タイムアウト、2xx以外のステータスを表す
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class GeocodingDecodeError(GeocodingError):
    """レスポンスのデコードエラー（不正なJSON、必須フィールドの欠落）"""

    pass


class HeaderParseError(GeocodingError):
    """レート制限ヘッダーの解析エラー"""

    pass


class ForwardGeocodingError(GeocodingError):
    """フォワードジオコーディングエラー"""

    pass


class ReverseGeocodingError(GeocodingError):
    """リバースジオコーディングエラー"""

    pass


class ConfigurationError(GeocodingError):
    """設定エラー"""

    pass
