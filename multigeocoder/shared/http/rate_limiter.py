"""レート制限（残りリクエスト数）の記録ユーティリティ"""

import threading
from collections.abc import Mapping
from typing import Optional

from ..exceptions.errors import HeaderParseError
from ..logging.config import get_logger

logger = get_logger(__name__)

# 残りリクエスト数を通知するレスポンスヘッダー
RATELIMIT_REMAINING_HEADER = "x-ratelimit-remaining"


def parse_ratelimit_header(value: str) -> int:
    """
    レート制限ヘッダーの値を整数に変換

    Args:
        value: ヘッダー値（例: "2499"）

    Returns:
        int: 残りリクエスト数

    Raises:
        HeaderParseError: 整数として解釈できない場合
    """
    try:
        return int(value.strip())
    except (AttributeError, ValueError) as e:
        raise HeaderParseError(f"Invalid {RATELIMIT_REMAINING_HEADER} header: {value!r}") from e


class RemainingCallsCounter:
    """
    プロバイダーが通知する残りリクエスト数を保持するクラス

    レスポンスヘッダーから機会的に更新され、ローカルで減算されることはない。
    同一クライアントからの並行リクエスト間で共有されるため、ロックで保護する。
    更新はベストエフォート: ロックが取得できない場合は更新をスキップする。
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._remaining: Optional[int] = None

    @property
    def remaining(self) -> Optional[int]:
        """残りリクエスト数（未取得の場合はNone）"""
        with self._lock:
            return self._remaining

    def update_from_headers(self, headers: Mapping[str, str]) -> bool:
        """
        レスポンスヘッダーから残りリクエスト数を更新

        ヘッダーが存在しない、値が不正、ロックが競合している場合は
        値を変更せずにFalseを返す。呼び出し元のリクエストを失敗させることはない。

        Args:
            headers: レスポンスヘッダー（大文字小文字を区別しないマッピングを想定）

        Returns:
            bool: 更新した場合True
        """
        value = headers.get(RATELIMIT_REMAINING_HEADER)
        if value is None:
            return False

        if not self._lock.acquire(blocking=False):
            logger.debug("Rate-limit counter is busy, skipping update")
            return False

        try:
            self._remaining = parse_ratelimit_header(value)
            logger.debug(f"Remaining calls updated: {self._remaining}")
            return True
        except HeaderParseError as e:
            logger.warning(f"Ignoring rate-limit header: {e}")
            return False
        finally:
            self._lock.release()
