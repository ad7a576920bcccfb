"""db モジュールのモックテスト."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _chain(data=None, count=None) -> MagicMock:
    """メソッドチェーンを自身に返すモック."""
    mock_chain = MagicMock()
    for name in ("select", "eq", "gt", "gte", "lte", "limit", "insert", "upsert"):
        getattr(mock_chain, name).return_value = mock_chain
    mock_chain.execute.return_value = MagicMock(data=data or [], count=count)
    return mock_chain


class TestCountPublishedPosts:
    """count_published_posts のテスト."""

    @patch("seo_stats.db._table")
    def test_score_range_query(self, mock_table):
        from seo_stats.db import count_published_posts

        mock_chain = _chain(count=5)
        mock_table.return_value = mock_chain

        assert count_published_posts(noindex=False, score_range=(41, 70)) == 5

        mock_table.assert_called_once_with("posts")
        mock_chain.select.assert_called_once_with("id", count="exact", head=True)
        mock_chain.gte.assert_called_once_with("seo_score", 41)
        mock_chain.lte.assert_called_once_with("seo_score", 70)
        mock_chain.eq.assert_any_call("noindex", False)

    @patch("seo_stats.db._table")
    def test_author_filter(self, mock_table):
        from seo_stats.db import count_published_posts

        mock_chain = _chain(count=1)
        mock_table.return_value = mock_chain

        count_published_posts(noindex=True, author_id=7)

        mock_chain.eq.assert_any_call("author_id", 7)
        mock_chain.gte.assert_not_called()

    @patch("seo_stats.db._table")
    def test_none_count_is_zero(self, mock_table):
        from seo_stats.db import count_published_posts

        mock_table.return_value = _chain(count=None)
        assert count_published_posts(noindex=True) == 0


class TestTransient:
    """get_transient / set_transient のテスト."""

    @patch("seo_stats.db._table")
    def test_valid_entry(self, mock_table):
        from seo_stats.db import get_transient

        mock_chain = _chain(data=[{"value": {"1": []}}])
        mock_table.return_value = mock_chain

        assert get_transient("key", now=NOW) == {"1": []}
        mock_table.assert_called_once_with("transients")
        mock_chain.eq.assert_called_once_with("key", "key")

    @patch("seo_stats.db._table")
    def test_expiry_compared_in_query(self, mock_table):
        from seo_stats.db import get_transient

        mock_chain = _chain()
        mock_table.return_value = mock_chain

        assert get_transient("key", now=NOW) is None
        mock_chain.gt.assert_called_once_with(
            "expires_at", "2026-10-19T12:00:00+00:00"
        )

    @patch("seo_stats.db._table")
    def test_fractional_expiry_not_parsed(self, mock_table):
        from seo_stats.db import get_transient

        # Postgres は末尾 0 を省いた小数秒を返す
        mock_table.return_value = _chain(data=[{
            "value": {"1": []},
            "expires_at": "2026-10-20T12:00:00.12345+00:00",
        }])

        assert get_transient("key", now=NOW) == {"1": []}

    @patch("seo_stats.db._table")
    def test_missing_entry(self, mock_table):
        from seo_stats.db import get_transient

        mock_table.return_value = _chain()
        assert get_transient("key", now=NOW) is None

    @patch("seo_stats.db._table")
    def test_set_with_expiry(self, mock_table):
        from seo_stats.db import set_transient

        mock_chain = _chain()
        mock_table.return_value = mock_chain

        set_transient("key", {"1": []}, 86400, now=NOW)

        mock_chain.upsert.assert_called_once_with({
            "key": "key",
            "value": {"1": []},
            "expires_at": "2026-10-20T12:00:00+00:00",
        })


class TestOptionsAndUsers:
    """get_option / update_option / get_user のテスト."""

    @patch("seo_stats.db._table")
    def test_get_option(self, mock_table):
        from seo_stats.db import get_option

        mock_table.return_value = _chain(data=[{"value": {"status": 1}}])
        assert get_option("onpage_indexability") == {"status": 1}

    @patch("seo_stats.db._table")
    def test_get_option_missing(self, mock_table):
        from seo_stats.db import get_option

        mock_table.return_value = _chain()
        assert get_option("onpage_indexability") is None

    @patch("seo_stats.db._table")
    def test_update_option(self, mock_table):
        from seo_stats.db import update_option

        mock_chain = _chain()
        mock_table.return_value = mock_chain

        update_option("onpage_indexability", {"status": 0})

        mock_table.assert_called_once_with("options")
        mock_chain.upsert.assert_called_once_with(
            {"name": "onpage_indexability", "value": {"status": 0}}
        )

    @patch("seo_stats.db._table")
    def test_get_user(self, mock_table):
        from seo_stats.db import get_user

        row = {"id": 3, "capabilities": ["edit_posts"], "is_super_admin": False}
        mock_table.return_value = _chain(data=[row])

        assert get_user(3) == row
        mock_table.assert_called_once_with("users")
