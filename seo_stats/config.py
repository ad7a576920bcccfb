"""設定モジュール: 環境変数・定数定義."""

import os
from pathlib import Path

from dotenv import load_dotenv

# .env はプロジェクトルートに配置
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")


def _env_flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


# --- Supabase ---
SUPABASE_URL: str = os.environ.get("SUPABASE_URL", "")
SUPABASE_SECRET_KEY: str = os.environ.get("SUPABASE_SECRET_KEY", "")
SUPABASE_SCHEMA = "seo_dashboard"

# --- サイト ---
ADMIN_URL: str = os.environ.get("ADMIN_URL", "http://localhost/wp-admin/")
HOME_URL: str = os.environ.get("HOME_URL", "http://localhost/")
IS_MULTISITE: bool = _env_flag("IS_MULTISITE")
# "superadmin" のときはネットワーク管理者のみ閲覧可
NETWORK_ACCESS: str = os.environ.get("NETWORK_ACCESS", "admin")

# --- キャッシュ ---
CACHE_KEY = "seo-dashboard-totals"
CACHE_TTL = 24 * 60 * 60  # 秒

# --- インデックス可否チェック ---
ONPAGE_ENABLED: bool = _env_flag("ONPAGE_ENABLED", "1")
ONPAGE_OPTION_KEY = "onpage_indexability"
INDEXABILITY_API_URL: str = os.environ.get(
    "INDEXABILITY_API_URL", "https://indexability.yoast.onpage.org/"
)
FETCH_INTERVAL = 60 * 60  # 秒
REQUEST_TIMEOUT = 15  # 秒

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)

# --- 表示文言 ---
PRODUCT_NAME: str = os.environ.get("PRODUCT_NAME", "Yoast SEO")
CHECKER_NAME: str = os.environ.get("CHECKER_NAME", "Ryte")

INDEX_ERROR_URL: str = os.environ.get(
    "INDEX_ERROR_URL", "https://yoa.st/onpageindexerror"
)
REQUEST_FAILED_URL: str = os.environ.get(
    "REQUEST_FAILED_URL", "https://yoa.st/onpagerequestfailed"
)

HEADER_TEXT = (
    "Below are your published posts&#8217; SEO scores. "
    "Now is as good a time as any to start improving some of your posts!"
)

RANK_LABELS = {
    "na": "Posts without focus keyword",
    "bad": "Posts with bad SEO score",
    "ok": "Posts with OK SEO score",
    "good": "Posts with good SEO score",
    "noindex": 'Posts that are set to &#8220;<span lang="en">noindex</span>&#8221;',
}

# --- ログ ---
LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_DIR.mkdir(exist_ok=True)
