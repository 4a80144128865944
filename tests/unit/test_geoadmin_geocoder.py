"""GeoAdminジオコーダーのテスト"""

from unittest.mock import MagicMock

import pytest

from multigeocoder.features.geocoding.domain.enums import SpatialReference
from multigeocoder.features.geocoding.domain.models import InputBounds, Point
from multigeocoder.features.geocoding.domain.projection import wgs84_to_lv03
from multigeocoder.features.geocoding.providers.geoadmin_geocoder import (
    DEFAULT_GEOADMIN_ENDPOINT,
    GeoAdminGeocoder,
    GeoAdminParams,
)
from multigeocoder.shared.exceptions.errors import ConfigurationError, ForwardGeocodingError


def _forward_response(properties: dict) -> dict:
    base = {
        "origin": "address",
        "geom_quadindex": "021300220302203002031",
        "weight": 1512,
        "rank": 7,
        "detail": "seftigenstrasse 264 3084 wabern 355 koeniz ch be",
        "num": 264,
        "label": "Seftigenstrasse 264 <b>3084 Wabern</b>",
        "zoomlevel": 10,
    }
    base.update(properties)
    return {
        "type": "FeatureCollection",
        "features": [{"id": 1420809, "properties": base}],
    }


# 空間参照系ごとの検索結果と期待される(経度/東距, 緯度/北距)
FORWARD_CASES = [
    (
        "21781",
        {"x": 197427.0, "y": 600968.75, "lat": 46.92793655395508, "lon": 7.451352119445801},
        Point(x=600968.75, y=197427.0),
    ),
    (
        "2056",
        {"x": 1197427.0, "y": 2600968.75, "lat": 46.92793655395508, "lon": 7.451352119445801},
        Point(x=2600968.75, y=1197427.0),
    ),
    (
        "4326",
        {"x": 46.92793655395508, "y": 7.451352119445801, "lat": 46.92793655395508, "lon": 7.451352119445801},
        Point(x=7.451352119445801, y=46.92793655395508),
    ),
    (
        "3857",
        {"x": 5933158.6, "y": 829471.8, "lat": 46.92793655395508, "lon": 7.451352119445801},
        Point(x=7.451352119445801, y=46.92793655395508),
    ),
]

REVERSE_RESPONSE = {
    "results": [
        {
            "featureId": "1272199_0",
            "bbox": [2600960.0, 1197420.0, 2600970.0, 1197430.0],
            "layerBodId": "ch.bfs.gebaeude_wohnungs_register",
            "layerName": "Register of Buildings and Dwellings",
            "id": "1272199_0",
            "properties": {
                "egid": 1272199,
                "ggdenr": 355,
                "ggdename": "Köniz",
                "gdekt": "BE",
                "edid": 0,
                "egaid": 100120559,
                "deinr": 264,
                "dplz4": 3084,
                "dplzname": "Wabern",
                "egrid": "CH807306583219",
                "esid": 10098323,
                "strname": ["Seftigenstrasse"],
                "strsp": ["de"],
                "strname_deinr": "Seftigenstrasse 264",
                "label": "Seftigenstrasse",
            },
        }
    ]
}


@pytest.fixture
def geocoder(http_client: MagicMock) -> GeoAdminGeocoder:
    return GeoAdminGeocoder(http_client=http_client)


class TestGeoAdminForward:
    """フォワードジオコーディング"""

    @pytest.mark.parametrize("sr,properties,expected", FORWARD_CASES)
    def test_point_order_per_spatial_reference(
        self, http_client, make_response, sr, properties, expected
    ):
        """スイス座標系では(y, x)、それ以外は(lon, lat)の順で読む"""
        geocoder = GeoAdminGeocoder(sr=sr, http_client=http_client)
        http_client.get.return_value = make_response(_forward_response(properties))

        points = geocoder.forward("Seftigenstrasse 264, 3084 Wabern")

        assert points == [expected]

    def test_query_parameters(self, geocoder, http_client, make_response):
        """住所検索は1件に制限して送信する"""
        http_client.get.return_value = make_response(_forward_response(FORWARD_CASES[2][1]))

        geocoder.forward("Seftigenstrasse 264, 3084 Wabern")

        http_client.get.assert_called_once_with(
            f"{DEFAULT_GEOADMIN_ENDPOINT}SearchServer",
            params=[
                ("searchText", "Seftigenstrasse 264, 3084 Wabern"),
                ("type", "locations"),
                ("origins", "address"),
                ("limit", "1"),
                ("sr", "4326"),
                ("geometryFormat", "geojson"),
            ],
        )

    def test_empty_features(self, geocoder, http_client, make_response):
        """該当なしの場合は空リスト"""
        http_client.get.return_value = make_response({"type": "FeatureCollection", "features": []})

        assert geocoder.forward("nowhere") == []

    def test_missing_coordinates_is_forward_error(self, http_client, make_response):
        """現在の座標系の座標がない場合はフォワードジオコーディングエラー"""
        geocoder = GeoAdminGeocoder(sr="2056", http_client=http_client)
        http_client.get.return_value = make_response(
            _forward_response({"lat": 46.92793655395508, "lon": 7.451352119445801})
        )

        with pytest.raises(ForwardGeocodingError):
            geocoder.forward("Seftigenstrasse 264")


class TestGeoAdminForwardFull:
    """検索範囲付きのフォワードジオコーディング"""

    BBOX = InputBounds.new((7.4513398, 46.92792859), (7.4513662, 46.9279467))

    @pytest.mark.parametrize("sr", ["4326", "3857"])
    def test_bbox_translated_to_lv03(self, http_client, make_response, sr):
        """WGS84/Web Mercatorの検索範囲はLV03に変換して送信する"""
        geocoder = GeoAdminGeocoder(sr=sr, http_client=http_client)
        http_client.get.return_value = make_response(_forward_response(FORWARD_CASES[2][1]))

        geocoder.forward_full(GeoAdminParams("Seftigenstrasse Bern").with_bbox(self.BBOX).build())

        expected = InputBounds(
            minimum_lonlat=wgs84_to_lv03(self.BBOX.minimum_lonlat),
            maximum_lonlat=wgs84_to_lv03(self.BBOX.maximum_lonlat),
        )
        sent = dict(http_client.get.call_args.kwargs["params"])
        assert sent["bbox"] == expected.to_query_string()

    @pytest.mark.parametrize("sr", ["21781", "2056"])
    def test_bbox_passed_through_on_swiss_grid(self, http_client, make_response, sr):
        """スイス座標系の検索範囲はそのまま送信する"""
        geocoder = GeoAdminGeocoder(sr=sr, http_client=http_client)
        http_client.get.return_value = make_response(_forward_response(FORWARD_CASES[0][1]))
        bbox = InputBounds.new((600960.0, 197420.0), (600970.0, 197430.0))

        geocoder.forward_full(GeoAdminParams("Seftigenstrasse Bern").with_bbox(bbox).build())

        sent = dict(http_client.get.call_args.kwargs["params"])
        assert sent["bbox"] == "600960.0,197420.0,600970.0,197430.0"

    def test_default_parameters(self, geocoder, http_client, make_response):
        """検索範囲なしの場合は既定の検索対象と件数を送信する"""
        http_client.get.return_value = make_response(_forward_response(FORWARD_CASES[2][1]))

        response = geocoder.forward_full(
            GeoAdminParams("Seftigenstrasse Bern").with_origins("address").with_limit(5).build()
        )

        sent = http_client.get.call_args.kwargs["params"]
        assert sent == [
            ("searchText", "Seftigenstrasse Bern"),
            ("type", "locations"),
            ("origins", "address"),
            ("sr", "4326"),
            ("geometryFormat", "geojson"),
            ("limit", "5"),
        ]
        assert response.features[0].properties.label == "Seftigenstrasse 264 <b>3084 Wabern</b>"


class TestGeoAdminReverse:
    """リバースジオコーディング"""

    def test_formats_address(self, http_client, make_response):
        """通り名と番地、郵便番号、地名を組み立てる"""
        geocoder = GeoAdminGeocoder(sr="2056", http_client=http_client)
        http_client.get.return_value = make_response(REVERSE_RESPONSE)

        address = geocoder.reverse(Point(x=2600968.75, y=1197427.0))

        assert address == "Seftigenstrasse 264, 3084 Wabern"
        url = http_client.get.call_args.args[0]
        sent = dict(http_client.get.call_args.kwargs["params"])
        assert url == f"{DEFAULT_GEOADMIN_ENDPOINT}MapServer/identify"
        assert sent["geometry"] == "2600968.75,1197427.0"
        assert sent["layers"] == "all:ch.bfs.gebaeude_wohnungs_register"
        assert sent["sr"] == "2056"

    def test_default_sr_reverse(self, geocoder, http_client, make_response):
        """既定の空間参照系（WGS84）では経度,緯度で問い合わせる"""
        http_client.get.return_value = make_response(REVERSE_RESPONSE)

        address = geocoder.reverse(Point(x=7.451352119445801, y=46.92793655395508))

        assert address == "Seftigenstrasse 264, 3084 Wabern"
        sent = dict(http_client.get.call_args.kwargs["params"])
        assert sent["geometry"] == "7.451352119445801,46.92793655395508"
        assert sent["sr"] == "4326"

    def test_reverse_full_normalizes_codes(self, geocoder, http_client, make_response):
        """数値で届くコードは文字列に正規化される"""
        http_client.get.return_value = make_response(REVERSE_RESPONSE)

        response = geocoder.reverse_full(Point(x=7.451352119445801, y=46.92793655395508))

        result = response.results[0]
        assert result.layer_bod_id == "ch.bfs.gebaeude_wohnungs_register"
        assert result.properties.dplz4 == "3084"
        assert result.properties.egid == "1272199"
        assert result.properties.deinr == "264"

    def test_empty_results_return_none(self, geocoder, http_client, make_response):
        """該当なしの場合はNone"""
        http_client.get.return_value = make_response({"results": []})

        assert geocoder.reverse(Point(x=7.0, y=46.0)) is None


class TestGeoAdminSpatialReference:
    """空間参照系の設定"""

    @pytest.mark.parametrize("sr", ["21781", "2056", "4326", "3857"])
    def test_supported_codes(self, http_client, sr):
        """4つの空間参照系を受け付ける"""
        geocoder = GeoAdminGeocoder(sr=sr, http_client=http_client)

        assert geocoder.sr == SpatialReference(sr)

    def test_unsupported_code(self, http_client):
        """それ以外は設定エラー"""
        with pytest.raises(ConfigurationError, match="Unsupported spatial reference"):
            GeoAdminGeocoder(sr="25832", http_client=http_client)

    def test_with_sr_and_endpoint(self, geocoder):
        """空間参照系とエンドポイントを変更できる"""
        geocoder.with_sr(SpatialReference.LV95).with_endpoint("https://geoadmin.test/")

        assert geocoder.sr is SpatialReference.LV95
        assert geocoder.endpoint == "https://geoadmin.test/"

        with pytest.raises(ConfigurationError):
            geocoder.with_sr("1234")
