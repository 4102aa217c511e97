import requests
from typing import Dict, Any, List, Tuple

from ..core.constants import FEED_TIMEOUT_S
from ..core.models import BlogPost, LocationFix
from ..domain.documents import post_from_feed
from ..domain.location_match import fixes_from_feed

class FeedError(RuntimeError):
    """Upstream feed unreachable or returned an unexpected payload."""

def _api_headers(cfg: Dict[str, Any]) -> Dict[str, str]:
    ua = str(cfg.get("user_agent", "HoptoadTracker/1.0") or "HoptoadTracker/1.0")
    return {"User-Agent": ua, "Accept": "application/json"}

def api_get_json(cfg: Dict[str, Any], url: str) -> Any:
    if not url:
        raise FeedError("feed url not configured")
    r = requests.get(url, headers=_api_headers(cfg), timeout=FEED_TIMEOUT_S)
    if r.status_code != 200:
        raise FeedError(f"GET {url} -> HTTP {r.status_code}")
    try:
        return r.json()
    except ValueError as e:
        raise FeedError(f"GET {url} -> invalid JSON: {e}") from e

def fetch_fixes(cfg: Dict[str, Any]) -> List[LocationFix]:
    data = api_get_json(cfg, str(cfg.get("route_url") or ""))
    route = data.get("route") if isinstance(data, dict) else None
    if not isinstance(route, list):
        raise FeedError("route payload has no 'route' array")
    try:
        return fixes_from_feed(route)
    except (KeyError, TypeError, ValueError) as e:
        raise FeedError(f"malformed route entry: {e!r}") from e

def fetch_posts(cfg: Dict[str, Any]) -> List[BlogPost]:
    data = api_get_json(cfg, str(cfg.get("blog_url") or ""))
    posts = data.get("posts") if isinstance(data, dict) else None
    if not isinstance(posts, list):
        raise FeedError("blog payload has no 'posts' array")
    try:
        return [post_from_feed(p) for p in posts]
    except (KeyError, TypeError, AttributeError) as e:
        raise FeedError(f"malformed post entry: {e!r}") from e

class PredictWindFeed:
    def __init__(self, cfg: Dict[str, Any]):
        self.cfg = cfg

    def fetch(self) -> Tuple[List[LocationFix], List[BlogPost]]:
        return fetch_fixes(self.cfg), fetch_posts(self.cfg)
