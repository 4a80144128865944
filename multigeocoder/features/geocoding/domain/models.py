"""ジオコーディング機能のドメインモデル"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Union


def format_coordinate(value: float) -> str:
    """
    座標値をクエリ用の10進表記に変換

    reprの最短表現を保ったまま、指数表記（例: 5e-05）を使わない。

    Args:
        value: 座標値

    Returns:
        str: 10進表記の文字列（例: -0.00005, 2600967.0）
    """
    return format(Decimal(repr(float(value))), "f")


@dataclass(frozen=True)
class Point:
    """
    座標点

    常に(経度, 緯度)の順で保持する。プロバイダーが内部で
    (緯度, 経度)の順を使う場合も、入出力はこの順に揃える。
    平面直角座標系の場合はx=東西方向、y=南北方向。
    """

    x: float  # 経度
    y: float  # 緯度

    @classmethod
    def from_tuple(cls, coords: tuple[float, float]) -> "Point":
        """(経度, 緯度)のタプルから作成"""
        x, y = coords
        return cls(x=float(x), y=float(y))

    def to_tuple(self) -> tuple[float, float]:
        """(経度, 緯度)のタプルとして返す"""
        return (self.x, self.y)


PointLike = Union[Point, tuple[float, float]]


def _to_point(value: PointLike) -> Point:
    if isinstance(value, Point):
        return value
    return Point.from_tuple(value)


@dataclass(frozen=True)
class InputBounds:
    """
    検索範囲を制限するバウンディングボックス

    - minimum_lonlat: 南西（左下）の角
    - maximum_lonlat: 北東（右上）の角
    """

    minimum_lonlat: Point
    maximum_lonlat: Point

    @classmethod
    def new(cls, minimum_lonlat: PointLike, maximum_lonlat: PointLike) -> "InputBounds":
        """Pointまたは(経度, 緯度)のタプルから作成"""
        return cls(
            minimum_lonlat=_to_point(minimum_lonlat),
            maximum_lonlat=_to_point(maximum_lonlat),
        )

    def to_query_string(self) -> str:
        """
        クエリ文字列に変換

        Returns:
            str: "minLon,minLat,maxLon,maxLat"（空白なし）
        """
        return ",".join(
            format_coordinate(value)
            for value in (
                self.minimum_lonlat.x,
                self.minimum_lonlat.y,
                self.maximum_lonlat.x,
                self.maximum_lonlat.y,
            )
        )

    def __str__(self) -> str:
        return self.to_query_string()


@dataclass
class BatchGeocodingResult:
    """バッチジオコーディングの結果"""

    results: dict[str, list[Point]] = field(default_factory=dict)  # 住所 -> 候補座標
    failures: dict[str, str] = field(default_factory=dict)  # 住所 -> エラーメッセージ
    skipped: int = 0  # 空文字・重複でスキップした件数

    @property
    def success_count(self) -> int:
        return len(self.results)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    def to_dict(self) -> dict[str, Any]:
        """JSONシリアライズ可能な辞書に変換"""
        return {
            "results": {
                address: [list(point.to_tuple()) for point in points]
                for address, points in self.results.items()
            },
            "failures": dict(self.failures),
            "success": self.success_count,
            "failure": self.failure_count,
            "skipped": self.skipped,
        }
