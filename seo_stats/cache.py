"""transient キャッシュストア."""

from __future__ import annotations

import logging

from seo_stats import db

logger = logging.getLogger(__name__)


class TransientCache:
    """transients テーブルを使う有効期限付き key-value ストア."""

    def get(self, key: str):
        """値を返す. 期限切れ・未登録は None."""
        return db.get_transient(key)

    def set(self, key: str, value, ttl: int) -> None:
        db.set_transient(key, value, ttl)
        logger.debug("transient を保存: key=%s, ttl=%d", key, ttl)
