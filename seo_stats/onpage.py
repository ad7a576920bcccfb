"""トップページのインデックス可否チェックモジュール.

取得戦略:
  1. 外部チェッカー API の JSON（主戦略）
  2. トップページの <meta name="robots"> をパース（フォールバック）
"""

from __future__ import annotations

import logging
import time

import requests
from bs4 import BeautifulSoup

from seo_stats import db
from seo_stats.config import (
    FETCH_INTERVAL,
    INDEXABILITY_API_URL,
    ONPAGE_ENABLED,
    ONPAGE_OPTION_KEY,
    REQUEST_TIMEOUT,
    USER_AGENT,
)
from seo_stats.models import IndexabilityStatus

logger = logging.getLogger(__name__)


class OnPageOption:
    """インデックス可否ステータスを保持するオプション."""

    def __init__(
        self,
        status: IndexabilityStatus = IndexabilityStatus.NOT_FETCHED,
        last_fetch: float = 0,
        enabled: bool = ONPAGE_ENABLED,
    ) -> None:
        self.status = status
        self.last_fetch = last_fetch
        self.enabled = enabled

    @classmethod
    def load(cls) -> OnPageOption:
        """options テーブルから読み込む. 未登録なら未取得状態."""
        value = db.get_option(ONPAGE_OPTION_KEY) or {}
        try:
            status = IndexabilityStatus(value.get("status", IndexabilityStatus.NOT_FETCHED))
        except ValueError:
            logger.warning("不明なステータス値: %s", value.get("status"))
            status = value.get("status")
        return cls(
            status=status,
            last_fetch=value.get("last_fetch", 0),
            # 環境変数で無効化されていれば保存値に関わらず無効
            enabled=ONPAGE_ENABLED and value.get("enabled", True),
        )

    def save(self) -> None:
        db.update_option(ONPAGE_OPTION_KEY, {
            "status": int(self.status),
            "last_fetch": self.last_fetch,
            "enabled": self.enabled,
        })

    def is_enabled(self) -> bool:
        return self.enabled

    def get_status(self):
        return self.status

    def should_be_fetched(self, now: float | None = None) -> bool:
        """前回取得から FETCH_INTERVAL 以上経過していれば True."""
        now = time.time() if now is None else now
        return now - FETCH_INTERVAL > self.last_fetch


def fetch_indexability(home_url: str) -> IndexabilityStatus:
    """トップページがインデックス可能か判定する.

    Returns:
        判定結果。両方の取得に失敗した場合は CANNOT_FETCH。
    """
    status = _fetch_from_checker(home_url)
    if status is not None:
        return status

    logger.warning("チェッカー API 取得失敗。トップページ解析にフォールバック")
    status = _fetch_from_homepage(home_url)
    if status is not None:
        return status

    logger.error("インデックス可否の取得に失敗しました: %s", home_url)
    return IndexabilityStatus.CANNOT_FETCH


def _fetch_from_checker(home_url: str) -> IndexabilityStatus | None:
    """外部チェッカー API に問い合わせる."""
    try:
        resp = requests.get(
            INDEXABILITY_API_URL,
            params={"url": home_url},
            timeout=REQUEST_TIMEOUT,
        )
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        logger.error("チェッカー API 取得失敗: url=%s, error=%s", home_url, e)
        return None
    except ValueError as e:
        logger.warning("チェッカー API JSON パースエラー: %s", e)
        return None

    if not isinstance(data, dict) or "is_indexable" not in data:
        return None

    if data["is_indexable"]:
        return IndexabilityStatus.INDEXABLE
    return IndexabilityStatus.NOT_INDEXABLE


def _fetch_from_homepage(home_url: str) -> IndexabilityStatus | None:
    """トップページの HTML から robots メタタグを確認する."""
    headers = {
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    }
    try:
        resp = requests.get(home_url, headers=headers, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error("トップページ取得失敗: url=%s, error=%s", home_url, e)
        return None

    if "noindex" in resp.headers.get("X-Robots-Tag", "").lower():
        return IndexabilityStatus.NOT_INDEXABLE

    if is_noindex_html(resp.text):
        return IndexabilityStatus.NOT_INDEXABLE
    return IndexabilityStatus.INDEXABLE


def is_noindex_html(html: str) -> bool:
    """<meta name="robots"> に noindex が含まれるか."""
    soup = BeautifulSoup(html, "html.parser")
    for meta in soup.find_all("meta"):
        name = (meta.get("name") or "").lower()
        if name not in ("robots", "googlebot"):
            continue
        directives = [d.strip().lower() for d in (meta.get("content") or "").split(",")]
        if "noindex" in directives or "none" in directives:
            return True
    return False


def refresh_onpage(option: OnPageOption, home_url: str, now: float | None = None) -> bool:
    """必要ならステータスを再取得して保存する.

    Returns:
        取得を実行したか
    """
    if not option.is_enabled():
        logger.info("インデックス可否チェックは無効です")
        return False

    now = time.time() if now is None else now
    if not option.should_be_fetched(now):
        logger.info("前回取得から間隔が短いためスキップ")
        return False

    option.status = fetch_indexability(home_url)
    option.last_fetch = now
    option.save()
    logger.info("インデックス可否を更新: %s", option.status.name)
    return True
