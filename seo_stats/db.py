"""Supabase データベース操作モジュール.

全テーブルは seo_dashboard スキーマに配置。
Supabase client のスキーマ指定は .schema() で行う。
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from supabase import Client, create_client

from seo_stats.config import SUPABASE_SCHEMA, SUPABASE_SECRET_KEY, SUPABASE_URL

logger = logging.getLogger(__name__)

_client: Client | None = None


def _get_client() -> Client:
    """クライアントを初回利用時に生成する."""
    global _client
    if _client is None:
        _client = create_client(SUPABASE_URL, SUPABASE_SECRET_KEY)
    return _client


def _table(name: str):
    """seo_dashboard スキーマのテーブルを参照する."""
    return _get_client().schema(SUPABASE_SCHEMA).table(name)


def count_published_posts(
    *,
    noindex: bool,
    score_range: tuple[int, int] | None = None,
    author_id: int | None = None,
) -> int:
    """公開済み投稿の件数を数える.

    Args:
        noindex: noindex 指定の投稿を対象にするか
        score_range: seo_score の範囲（両端含む）。None なら絞り込まない
        author_id: 指定時はその投稿者の投稿のみ
    """
    query = (
        _table("posts")
        .select("id", count="exact", head=True)
        .eq("post_status", "publish")
        .eq("post_type", "post")
        .eq("noindex", noindex)
    )
    if score_range is not None:
        query = query.gte("seo_score", score_range[0]).lte("seo_score", score_range[1])
    if author_id is not None:
        query = query.eq("author_id", author_id)

    resp = query.execute()
    return resp.count or 0


def get_user(user_id: int) -> dict | None:
    """ユーザーを取得する.

    Returns:
        {"id": int, "capabilities": list[str], "is_super_admin": bool}。
        存在しなければ None。
    """
    resp = (
        _table("users")
        .select("id, capabilities, is_super_admin")
        .eq("id", user_id)
        .limit(1)
        .execute()
    )
    if not resp.data:
        return None
    return resp.data[0]


def get_option(name: str) -> dict | None:
    """options テーブルから値 (jsonb) を取得する."""
    resp = _table("options").select("value").eq("name", name).limit(1).execute()
    if not resp.data:
        return None
    return resp.data[0]["value"]


def update_option(name: str, value: dict) -> None:
    """options テーブルに値を保存する."""
    _table("options").upsert({"name": name, "value": value}).execute()
    logger.info("option を更新: %s", name)


def get_transient(key: str, now: datetime | None = None):
    """期限内の transient を取得する. 期限切れ・未登録は None.

    有効期限の比較は DB 側で行う（timestamptz 同士で比較）。
    """
    now = now or datetime.now(timezone.utc)
    resp = (
        _table("transients")
        .select("value")
        .eq("key", key)
        .gt("expires_at", now.isoformat())
        .limit(1)
        .execute()
    )
    if not resp.data:
        return None
    return resp.data[0]["value"]


def set_transient(key: str, value, ttl: int, now: datetime | None = None) -> None:
    """transient を有効期限付きで保存する.

    Args:
        ttl: 有効期間（秒）
    """
    now = now or datetime.now(timezone.utc)
    expires_at = (now + timedelta(seconds=ttl)).isoformat()
    _table("transients").upsert(
        {"key": key, "value": value, "expires_at": expires_at}
    ).execute()
