"""ジオコーディング機能のEnum定義"""
from enum import Enum


class GeocodingProvider(str, Enum):
    """ジオコーディングプロバイダー"""

    OPENCAGE = "opencage"  # 商用API（APIキー必須）
    OPENSTREETMAP = "openstreetmap"  # Nominatim
    GEOADMIN = "geoadmin"  # スイス連邦地理院（swisstopo）

    @classmethod
    def from_name(cls, name: str) -> "GeocodingProvider":
        """プロバイダー名から取得"""
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown geocoding provider: {name}")


class SpatialReference(str, Enum):
    """GeoAdminがサポートする空間参照系（EPSGコード）"""

    LV03 = "21781"  # スイス旧座標系
    LV95 = "2056"  # スイス新座標系
    WGS84 = "4326"
    WEB_MERCATOR = "3857"  # Web Pseudo-Mercator

    @property
    def is_swiss_grid(self) -> bool:
        """スイスの平面直角座標系かどうか"""
        return self in (SpatialReference.LV03, SpatialReference.LV95)

    @classmethod
    def from_code(cls, code: str) -> "SpatialReference":
        """EPSGコードから取得"""
        try:
            return cls(str(code).strip())
        except ValueError:
            raise ValueError(f"Unsupported spatial reference: {code}")
