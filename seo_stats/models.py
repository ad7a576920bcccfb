"""データモデル定義."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum, IntEnum


class Rank(str, Enum):
    """SEO スコアの評価ランク. 定義順がダッシュボードの表示順."""

    NO_FOCUS = "na"
    BAD = "bad"
    OK = "ok"
    GOOD = "good"
    NO_INDEX = "noindex"

    @classmethod
    def all(cls) -> list[Rank]:
        return list(cls)

    @property
    def score_range(self) -> tuple[int, int] | None:
        """ランクに対応するスコア範囲（両端含む）. noindex は None."""
        return _SCORE_RANGES.get(self)


_SCORE_RANGES: dict[Rank, tuple[int, int]] = {
    Rank.NO_FOCUS: (0, 0),
    Rank.BAD: (1, 40),
    Rank.OK: (41, 70),
    Rank.GOOD: (71, 100),
}


class IndexabilityStatus(IntEnum):
    """トップページのインデックス可否ステータス（オプションの保存値）."""

    NOT_INDEXABLE = 0
    INDEXABLE = 1
    CANNOT_FETCH = 2
    NOT_FETCHED = 99


@dataclass
class Viewer:
    """リクエストを行うユーザー."""

    user_id: int
    capabilities: frozenset[str] = field(default_factory=frozenset)
    is_super_admin: bool = False

    def can(self, capability: str) -> bool:
        return capability in self.capabilities


@dataclass
class RankStat:
    """ウィジェットに表示するランク別集計."""

    seo_rank: str  # Rank の値
    label: str
    count: int
    link: str  # 絞り込み済み投稿一覧の URL

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class OnPageItem:
    """インデックス可否ブロック."""

    score: str  # "good" / "bad" / "na"
    label: str
    can_fetch: bool

    def to_dict(self) -> dict:
        return asdict(self)
