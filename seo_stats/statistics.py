"""ランク別の投稿数カウント."""

from __future__ import annotations

from seo_stats import db
from seo_stats.models import Rank, Viewer


class PostStatistics:
    """閲覧ユーザーから見える公開済み投稿をランク別に数える."""

    def get_post_count(self, rank: Rank, viewer: Viewer) -> int:
        # 他人の投稿を編集できないユーザーは自分の投稿のみ
        author_id = None if viewer.can("edit_others_posts") else viewer.user_id

        if rank is Rank.NO_INDEX:
            return db.count_published_posts(noindex=True, author_id=author_id)

        return db.count_published_posts(
            noindex=False,
            score_range=rank.score_range,
            author_id=author_id,
        )
