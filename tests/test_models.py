"""models モジュールのユニットテスト."""

from seo_stats.models import IndexabilityStatus, OnPageItem, Rank, RankStat, Viewer


class TestRank:
    """Rank のテスト."""

    def test_enumeration_order(self):
        assert [r.value for r in Rank.all()] == ["na", "bad", "ok", "good", "noindex"]

    def test_noindex_has_no_range(self):
        assert Rank.NO_INDEX.score_range is None
        assert Rank.GOOD.score_range == (71, 100)


class TestViewer:
    def test_can(self):
        viewer = Viewer(user_id=3, capabilities=frozenset({"manage_options"}))
        assert viewer.can("manage_options")
        assert not viewer.can("edit_others_posts")


class TestToDict:
    def test_rank_stat(self):
        stat = RankStat(seo_rank="ok", label="OK", count=2, link="/x")
        assert stat.to_dict() == {"seo_rank": "ok", "label": "OK", "count": 2, "link": "/x"}

    def test_onpage_item(self):
        item = OnPageItem(score="na", label="pending", can_fetch=True)
        assert item.to_dict() == {"score": "na", "label": "pending", "can_fetch": True}

    def test_status_values(self):
        assert IndexabilityStatus(99) is IndexabilityStatus.NOT_FETCHED
        assert int(IndexabilityStatus.CANNOT_FETCH) == 2
