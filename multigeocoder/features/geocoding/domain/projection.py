"""座標変換（WGS84 -> スイス国家座標系LV03）"""
from .models import Point


def wgs84_to_lv03(point: Point) -> Point:
    """
    WGS84の座標をLV03に近似変換

    swisstopoが公開している多項式による近似式（精度は約1〜1.5m）。
    反復計算はなく、有限な入力に対して常に成功する。
    スイス国外の座標では意味のない値になるが検証はしない。

    See: https://www.swisstopo.admin.ch/ (ch1903wgs84_e.pdf)

    Args:
        point: WGS84の座標（経度, 緯度、度単位）

    Returns:
        Point: LV03の座標（東距, 北距）。LV95の原点(2,000,000 / 1,000,000)を差し引いた値
    """
    # 秒単位に変換し、ベルン基準点からの補助値に正規化
    lambda_ = (point.x * 3600 - 26782.5) / 10000
    phi = (point.y * 3600 - 169028.66) / 10000

    x = (
        2600072.37
        + 211455.93 * lambda_
        - 10938.51 * lambda_ * phi
        - 0.36 * lambda_ * phi**2
        - 44.54 * lambda_**3
    )
    y = (
        1200147.07
        + 308807.95 * phi
        + 3745.25 * lambda_**2
        + 76.63 * phi**2
        - 194.56 * lambda_**2 * phi
        + 119.79 * phi**3
    )

    return Point(x=x - 2000000.0, y=y - 1000000.0)
