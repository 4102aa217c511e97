from typing import Any, Callable, Iterable, List, Sequence, Set, TypeVar

from ..core.constants import SHEET_LOCATIONS, SHEET_BLOG_POSTS
from ..core.models import BlogPost, LocationFix

T = TypeVar("T")

def fix_key(fix: LocationFix) -> str:
    return str(fix.epoch)

def post_key(post: BlogPost) -> str:
    return str(post.id)

def normalize_ids(values: Iterable[Any]) -> Set[str]:
    """Sheet cells come back as strings, feed ids as ints; compare as trimmed strings."""
    out = set()
    for v in values:
        if v is None:
            continue
        s = str(v).strip()
        if s:
            out.add(s)
    return out

def diff(fresh: Sequence[T], seen_ids: Set[str], key: Callable[[T], str]) -> List[T]:
    """Records whose key is not in seen_ids, in feed order. Pure."""
    return [r for r in fresh if key(r) not in seen_ids]

class SeenIdRegistry:
    """
    "Already ingested" membership for one cycle.

    The content store is authoritative for post documents. The Blog Posts tab
    records which posts have been logged and announced; a post stays
    unlogged until a cycle gets that far, so an interrupted cycle is retried.
    Fix epochs live only in the Locations tab. Built fresh every cycle.
    """
    def __init__(self, location_ids: Iterable[Any], post_ids: Iterable[Any], logged_post_ids: Iterable[Any]):
        self.location_ids = normalize_ids(location_ids)
        self.post_ids = normalize_ids(post_ids)
        self.logged_post_ids = normalize_ids(logged_post_ids)

    @classmethod
    def load(cls, sheets, content) -> "SeenIdRegistry":
        return cls(
            location_ids=sheets.read_keys(SHEET_LOCATIONS),
            post_ids=content.fetch_post_ids(),
            logged_post_ids=sheets.read_keys(SHEET_BLOG_POSTS),
        )

    def new_fixes(self, fixes: Sequence[LocationFix]) -> List[LocationFix]:
        return diff(fixes, self.location_ids, fix_key)

    def new_posts(self, posts: Sequence[BlogPost]) -> List[BlogPost]:
        return diff(posts, self.post_ids, post_key)

    def unlogged_posts(self, posts: Sequence[BlogPost]) -> List[BlogPost]:
        return diff(posts, self.logged_post_ids, post_key)

    def is_ingested(self, post_id: Any) -> bool:
        return str(post_id).strip() in self.post_ids
