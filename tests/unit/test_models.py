"""ドメインモデルのテスト"""

import dataclasses

import pytest

from multigeocoder.features.geocoding.domain.enums import GeocodingProvider, SpatialReference
from multigeocoder.features.geocoding.domain.models import (
    BatchGeocodingResult,
    InputBounds,
    Point,
    format_coordinate,
)


def test_point_keeps_lon_lat_order() -> None:
    """Pointは(経度, 緯度)の順で保持する"""
    point = Point.from_tuple((11.5884858, 48.1700887))

    assert point.x == 11.5884858
    assert point.y == 48.1700887
    assert point.to_tuple() == (11.5884858, 48.1700887)


def test_point_is_immutable() -> None:
    """Pointは変更できない"""
    point = Point(x=1.0, y=2.0)

    with pytest.raises(dataclasses.FrozenInstanceError):
        point.x = 3.0  # type: ignore[misc]


def test_point_equality() -> None:
    """同じ座標のPointは等しい"""
    assert Point(x=7.5, y=46.9) == Point.from_tuple((7.5, 46.9))
    assert Point(x=7.5, y=46.9) != Point(x=46.9, y=7.5)


def test_input_bounds_serialization() -> None:
    """バウンディングボックスは経度,緯度,経度,緯度の順で空白なしに変換される"""
    bounds = InputBounds.new(
        Point(x=-0.13806939125061035, y=51.51989264641164),
        Point(x=-0.13427138328552246, y=51.52319711775629),
    )

    assert bounds.to_query_string() == (
        "-0.13806939125061035,51.51989264641164,-0.13427138328552246,51.52319711775629"
    )
    assert str(bounds) == bounds.to_query_string()


def test_input_bounds_accepts_tuples() -> None:
    """タプルからもバウンディングボックスを作成できる"""
    bounds = InputBounds.new((7.4513398, 46.92792859), (7.4513662, 46.9279467))

    assert bounds.minimum_lonlat == Point(x=7.4513398, y=46.92792859)
    assert bounds.maximum_lonlat == Point(x=7.4513662, y=46.9279467)
    assert str(bounds) == "7.4513398,46.92792859,7.4513662,46.9279467"


def test_input_bounds_integer_coordinates() -> None:
    """整数座標も浮動小数点として変換される"""
    bounds = InputBounds.new((2600967, 1197426), (2600969, 1197428))

    assert str(bounds) == "2600967.0,1197426.0,2600969.0,1197428.0"


def test_batch_result_to_dict() -> None:
    """バッチ結果をJSONシリアライズ可能な辞書に変換できる"""
    result = BatchGeocodingResult(
        results={"Schwabing, München": [Point(x=11.5884858, y=48.1700887)]},
        failures={"nowhere": "Failed to GET"},
        skipped=2,
    )

    assert result.to_dict() == {
        "results": {"Schwabing, München": [[11.5884858, 48.1700887]]},
        "failures": {"nowhere": "Failed to GET"},
        "success": 1,
        "failure": 1,
        "skipped": 2,
    }


@pytest.mark.parametrize(
    "code,is_swiss_grid",
    [
        ("21781", True),
        ("2056", True),
        ("4326", False),
        ("3857", False),
    ],
)
def test_spatial_reference_from_code(code: str, is_swiss_grid: bool) -> None:
    """サポートされている4つの空間参照系"""
    sr = SpatialReference.from_code(code)

    assert sr.value == code
    assert sr.is_swiss_grid is is_swiss_grid


def test_spatial_reference_rejects_unknown_code() -> None:
    """5つ目の空間参照系は受け付けない"""
    with pytest.raises(ValueError, match="Unsupported spatial reference"):
        SpatialReference.from_code("25832")


def test_provider_from_name() -> None:
    """プロバイダー名は大文字小文字を区別しない"""
    assert GeocodingProvider.from_name(" GeoAdmin ") == GeocodingProvider.GEOADMIN

    with pytest.raises(ValueError, match="Unknown geocoding provider"):
        GeocodingProvider.from_name("google")


@pytest.mark.parametrize(
    "value,expected",
    [
        (-0.00005, "-0.00005"),
        (0.00005, "0.00005"),
        (51.5, "51.5"),
        (2600967, "2600967.0"),
        (1e16, "10000000000000000"),
    ],
)
def test_format_coordinate_never_uses_exponent(value: float, expected: str) -> None:
    """座標値は指数表記を使わない10進表記に変換される"""
    assert format_coordinate(value) == expected


def test_input_bounds_near_prime_meridian() -> None:
    """本初子午線付近の座標も10進表記で変換される"""
    bounds = InputBounds.new((-0.00005, 51.5), (0.00005, 51.6))

    assert str(bounds) == "-0.00005,51.5,0.00005,51.6"


def test_point_repr() -> None:
    """表現はdataclassの既定の形式"""
    assert repr(Point(x=7.5, y=46.9)) == "Point(x=7.5, y=46.9)"
