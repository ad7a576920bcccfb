"""SEO ダッシュボード集計: メインエントリーポイント.

サブコマンド:
  stats --user-id N : 指定ユーザーのウィジェット用データを JSON で出力
  onpage            : トップページのインデックス可否を再取得
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime

from seo_stats.cache import TransientCache
from seo_stats.config import HOME_URL, LOG_DIR
from seo_stats.db import get_user
from seo_stats.models import Viewer
from seo_stats.onpage import OnPageOption, refresh_onpage
from seo_stats.service import StatisticsService
from seo_stats.statistics import PostStatistics

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """ロギングの初期設定."""
    log_file = LOG_DIR / f"seo_stats_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def load_viewer(user_id: int) -> Viewer | None:
    """users テーブルから閲覧ユーザーを組み立てる."""
    row = get_user(user_id)
    if row is None:
        return None
    return Viewer(
        user_id=row["id"],
        capabilities=frozenset(row.get("capabilities") or []),
        is_super_admin=bool(row.get("is_super_admin")),
    )


def cmd_stats(user_id: int) -> int:
    viewer = load_viewer(user_id)
    if viewer is None:
        logger.warning("ユーザーが見つかりません: user_id=%d", user_id)
        return 1

    service = StatisticsService(
        statistics=PostStatistics(),
        onpage_option=OnPageOption.load(),
        cache=TransientCache(),
    )
    data = service.get_statistics(viewer)
    print(json.dumps(data, ensure_ascii=False, indent=2))
    return 0


def cmd_onpage() -> int:
    option = OnPageOption.load()
    refresh_onpage(option, HOME_URL)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="seo-stats")
    sub = parser.add_subparsers(dest="command", required=True)

    stats = sub.add_parser("stats", help="ウィジェット用データを出力")
    stats.add_argument("--user-id", type=int, required=True)

    sub.add_parser("onpage", help="インデックス可否を再取得")
    return parser


def run(argv: list[str] | None = None) -> int:
    """メイン処理."""
    args = build_parser().parse_args(argv)
    setup_logging()

    if args.command == "stats":
        return cmd_stats(args.user_id)
    return cmd_onpage()


if __name__ == "__main__":
    sys.exit(run())
