"""テスト共通のフィクスチャ"""

import json
from typing import Any, Callable, Optional
from unittest.mock import MagicMock

import pytest
import requests

from multigeocoder.infrastructure.config.settings import Settings
from multigeocoder.shared.http.client import HTTPClient


def _make_response(
    payload: Any = None,
    status_code: int = 200,
    headers: Optional[dict[str, str]] = None,
    url: str = "https://geocoder.test/",
    text: Optional[str] = None,
) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.encoding = "utf-8"
    body = text if text is not None else json.dumps(payload)
    response._content = body.encode("utf-8")
    if headers:
        response.headers.update(headers)
    return response


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """requests.Responseを組み立てる関数"""
    return _make_response


@pytest.fixture
def http_client() -> MagicMock:
    """通信しないHTTPクライアントのモック"""
    return MagicMock(spec=HTTPClient)


@pytest.fixture
def settings() -> Settings:
    """.envを読み込まないテスト用設定"""
    return Settings(
        _env_file=None,
        opencage_api_key="test-key",
        batch_delay_between_requests=0.0,
    )
