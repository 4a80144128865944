"""HTTPクライアント（ジオコーディングAPI用トランスポート）"""

from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions.errors import GeocodingHTTPError
from ..logging.config import get_logger

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; MultiGeocoder/1.0)"


class HTTPClient:
    """
    ジオコーディングAPI用HTTPクライアント

    Features:
    - 固定User-Agentヘッダー
    - タイムアウト設定
    - セッション管理
    - 呼び出し側が指定した場合のみリトライ（デフォルトはリトライなし）
    """

    def __init__(
        self,
        timeout: int = 20,
        max_retries: int = 0,
        backoff_factor: float = 0.5,
        status_forcelist: tuple[int, ...] = (500, 502, 503, 504),
        user_agent: Optional[str] = None,
    ):
        """
        Args:
            timeout: リクエストタイムアウト（秒）
            max_retries: 最大リトライ回数（0の場合はリトライしない）
            backoff_factor: バックオフ係数
            status_forcelist: リトライ対象のステータスコード
            user_agent: User-Agentヘッダー
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.status_forcelist = status_forcelist
        self.user_agent = user_agent or DEFAULT_USER_AGENT

        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """セッションを作成"""
        session = requests.Session()

        # リトライ設定（リトライを使い切った場合もレスポンスを返し、raise_for_statusで判定する）
        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=self.status_forcelist,
            allowed_methods=["HEAD", "GET"],
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        # デフォルトヘッダー
        session.headers.update({"User-Agent": self.user_agent})

        return session

    def get(
        self,
        url: str,
        params: Optional[Any] = None,
    ) -> requests.Response:
        """
        GETリクエスト

        Args:
            url: リクエストURL
            params: クエリパラメータ（dictまたは(key, value)のリスト）

        Returns:
            レスポンスオブジェクト（ステータスは2xxであることが保証される）

        Raises:
            GeocodingHTTPError: 通信失敗時、または2xx以外のステータスの場合
        """
        try:
            logger.debug(f"GET request to {url}")
            response = self.session.get(
                url,
                params=params,
                timeout=self.timeout,
            )

            response.raise_for_status()
            logger.debug(f"GET request successful: {url} (status={response.status_code})")
            return response

        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f"GET request failed: {url} - status={status_code}")
            raise GeocodingHTTPError(
                f"Failed to GET {url}: {e}", status_code=status_code, url=url
            ) from e
        except requests.RequestException as e:
            logger.error(f"GET request failed: {url} - {e}")
            raise GeocodingHTTPError(f"Failed to GET {url}: {e}", url=url) from e

    def close(self) -> None:
        """セッションをクローズ"""
        if self.session:
            self.session.close()
            logger.debug("HTTP session closed")

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
