"""ダッシュボードウィジェット用の SEO スコア集計サービス.

処理フロー:
  1. 閲覧ユーザー ID でキャッシュを参照
  2. 未キャッシュならランク別に投稿数を集計し、0 件を除外して保存
  3. 閲覧権限と機能の有効化を確認し、インデックス可否ブロックを付与
"""

from __future__ import annotations

import html
import logging
from urllib.parse import urlencode, urljoin

from seo_stats.config import (
    ADMIN_URL,
    CACHE_KEY,
    CACHE_TTL,
    CHECKER_NAME,
    HEADER_TEXT,
    INDEX_ERROR_URL,
    IS_MULTISITE,
    NETWORK_ACCESS,
    PRODUCT_NAME,
    RANK_LABELS,
    REQUEST_FAILED_URL,
)
from seo_stats.models import IndexabilityStatus, OnPageItem, Rank, RankStat, Viewer

logger = logging.getLogger(__name__)


def _open_link(url: str) -> str:
    return f'<a href="{html.escape(url)}" target="_blank">'


# ステータス -> (スコア, ラベル生成)
_ONPAGE_ITEMS = {
    IndexabilityStatus.INDEXABLE: (
        "good",
        lambda: "Your homepage can be indexed by search engines.",
    ),
    IndexabilityStatus.NOT_INDEXABLE: (
        "bad",
        lambda: (
            f"{_open_link(INDEX_ERROR_URL)}Your homepage cannot be indexed by "
            "search engines</a>. This is very bad for SEO and should be fixed."
        ),
    ),
    IndexabilityStatus.CANNOT_FETCH: (
        "na",
        lambda: (
            f"{_open_link(REQUEST_FAILED_URL)}{PRODUCT_NAME} has not been able to "
            f"fetch your site's indexability status</a> from {CHECKER_NAME}"
        ),
    ),
    IndexabilityStatus.NOT_FETCHED: (
        "na",
        lambda: html.escape(
            f"{PRODUCT_NAME} has not fetched your site's indexability status "
            f"yet from {CHECKER_NAME}"
        ),
    ),
}


class StatisticsService:
    """SEO スコア集計とインデックス可否をまとめて返す.

    Args:
        statistics: get_post_count(rank, viewer) を持つカウンタ
        onpage_option: インデックス可否オプション
        cache: get(key) / set(key, value, ttl) を持つキャッシュストア
    """

    def __init__(self, statistics, onpage_option, cache) -> None:
        self.statistics = statistics
        self.onpage_option = onpage_option
        self.cache = cache

    def get_statistics(self, viewer: Viewer) -> dict:
        """ウィジェット用のレスポンスデータを返す."""
        seo_scores = self._statistic_items(viewer)

        onpage: dict | bool = False
        if self._can_view_onpage(viewer) and self.onpage_option.is_enabled():
            onpage = self._onpage_item()

        return {
            "header": HEADER_TEXT,
            "seo_scores": seo_scores,
            "onpage": onpage,
        }

    def _statistic_items(self, viewer: Viewer) -> list[dict]:
        totals = self.cache.get(CACHE_KEY) or {}
        # JSON で保存するためキーは文字列
        user_key = str(viewer.user_id)

        if user_key in totals:
            logger.debug("キャッシュヒット: user_id=%s", user_key)
            return totals[user_key]

        logger.info("キャッシュ未登録のため集計: user_id=%s", user_key)
        totals[user_key] = [
            stat.to_dict() for stat in self._rank_stats(viewer) if stat.count != 0
        ]
        self.cache.set(CACHE_KEY, totals, CACHE_TTL)
        return totals[user_key]

    def _rank_stats(self, viewer: Viewer) -> list[RankStat]:
        """全ランクを定義順に集計する（0 件を含む）."""
        return [
            RankStat(
                seo_rank=rank.value,
                label=RANK_LABELS[rank.value],
                count=self.statistics.get_post_count(rank, viewer),
                link=self._link_for_rank(rank, viewer),
            )
            for rank in Rank.all()
        ]

    @staticmethod
    def _link_for_rank(rank: Rank, viewer: Viewer) -> str:
        params = {
            "post_status": "publish",
            "post_type": "post",
            "seo_filter": rank.value,
        }
        if not viewer.can("edit_others_posts"):
            params["author"] = viewer.user_id
        return urljoin(ADMIN_URL, "edit.php?" + urlencode(params))

    def _onpage_item(self) -> dict:
        """オプションのステータスを表示用ブロックに変換する. 不明なステータスは空."""
        entry = _ONPAGE_ITEMS.get(self.onpage_option.get_status())
        if entry is None:
            return {}

        score, label = entry
        return OnPageItem(
            score=score,
            label=label(),
            can_fetch=self.onpage_option.should_be_fetched(),
        ).to_dict()

    @staticmethod
    def _can_view_onpage(viewer: Viewer) -> bool:
        if IS_MULTISITE:
            return _grant_network_access(viewer)
        return viewer.can("manage_options")


def _grant_network_access(viewer: Viewer) -> bool:
    """マルチサイトでの閲覧許可.

    superadmin 設定時はネットワーク管理者のみ、それ以外は wpseo_manage_options 権限が必要.
    """
    if NETWORK_ACCESS == "superadmin":
        return viewer.is_super_admin
    return viewer.can("wpseo_manage_options")
