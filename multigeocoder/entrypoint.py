"""CLIエントリーポイント"""
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional

from .features.geocoding.domain.enums import GeocodingProvider
from .features.geocoding.domain.models import Point
from .features.geocoding.services.geocoding_service import GeocodingService
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import GeocodingError
from .shared.logging.config import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """コマンドライン引数のパーサーを作成"""
    parser = argparse.ArgumentParser(
        prog="multigeocoder",
        description="複数プロバイダー対応のジオコーディングツール",
    )

    parser.add_argument(
        "--provider",
        type=str,
        choices=[provider.value for provider in GeocodingProvider],
        help="使用するプロバイダー（デフォルト: 設定のDEFAULT_PROVIDER）",
    )

    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="環境変数ファイルのパス（デフォルト: .env）",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="ログレベル",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    forward_parser = subparsers.add_parser("forward", help="住所から座標を取得")
    forward_parser.add_argument("address", type=str, help="住所文字列")

    reverse_parser = subparsers.add_parser("reverse", help="座標から住所を取得")
    reverse_parser.add_argument("lon", type=float, help="経度（スイス座標系の場合は東距）")
    reverse_parser.add_argument("lat", type=float, help="緯度（スイス座標系の場合は北距）")

    batch_parser = subparsers.add_parser("batch", help="ファイル内の住所を一括でジオコーディング")
    batch_parser.add_argument("file", type=Path, help="住所ファイル（1行1住所）")
    batch_parser.add_argument(
        "--no-progress",
        action="store_true",
        help="プログレスバーを表示しない",
    )

    return parser


def run_command(args: argparse.Namespace, service: GeocodingService) -> dict[str, Any]:
    """
    サブコマンドを実行し、出力するJSONを返す

    Args:
        args: コマンドライン引数
        service: ジオコーディングサービス

    Returns:
        dict[str, Any]: 出力内容
    """
    provider = service.provider.value

    if args.command == "forward":
        points = service.forward(args.address)
        return {
            "provider": provider,
            "query": args.address,
            "points": [list(point.to_tuple()) for point in points],
        }

    if args.command == "reverse":
        point = Point(x=args.lon, y=args.lat)
        return {
            "provider": provider,
            "point": list(point.to_tuple()),
            "address": service.reverse(point),
        }

    addresses = args.file.read_text(encoding="utf-8").splitlines()
    result = service.forward_batch(addresses, show_progress=not args.no_progress)
    return {"provider": provider, **result.to_dict()}


def main(argv: Optional[list[str]] = None) -> int:
    """
    メインエントリーポイント

    Returns:
        int: 終了コード（0: 成功, 1: 失敗）
    """
    args = build_parser().parse_args(argv)

    try:
        # 設定を読み込み
        settings = Settings(_env_file=args.env_file)

        # ログレベルを上書き
        if args.log_level:
            settings.log_level = args.log_level

        # ロガーを設定
        setup_logging(level=settings.log_level)

        logger.info(f"Running {args.command} (environment: {settings.environment})")

        with GeocodingService(settings, provider=args.provider) as service:
            output = run_command(args, service)

        print(json.dumps(output, ensure_ascii=False, indent=2))
        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # SIGINT
    except GeocodingError as e:
        logger.error(f"Geocoding failed: {e}")
        return 1
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
