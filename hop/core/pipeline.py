from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .constants import (
    SHEET_LOCATIONS, SHEET_BLOG_POSTS, LOCATION_HEADERS, BLOG_POST_HEADERS, CONTENT_WRITE_DELAY_S
)
from .models import BlogPost, CycleResult, LocationFix, ParsedMessage
from ..adapters.predictwind_api import PredictWindFeed
from ..adapters.sanity_api import SanityStore
from ..adapters.sheets_api import SheetsIndex
from ..adapters.twilio_api import TwilioSms
from ..domain.dedup import SeenIdRegistry
from ..domain.documents import blog_post_row, location_row, post_document, photo_documents
from ..domain.location_match import find_closest_fix
from ..domain.notify import build_sms_body, media_urls, post_link
from ..domain.parse_message import parse_message
from ..utils.fanout import run_all
from ..utils.log import log_line
from ..utils.rate import rate_inc
from ..utils.time import epoch_from_iso

def prepare_post(post: BlogPost, fixes: Sequence[LocationFix]) -> Tuple[ParsedMessage, Optional[LocationFix]]:
    """Parse the body and geotag it with the last fix before it was written."""
    parsed = parse_message(post.raw_body)
    for f in parsed.failures:
        log_line(f"PHOTO DROPPED | post={post.id} | reason={f.reason.value} | token={f.token[:120]!r}", "WARN")
    fix = find_closest_fix(epoch_from_iso(post.created_at), fixes)
    return parsed, fix

def _counted(kind: str, fn: Callable[[], Any]) -> Callable[[], Any]:
    def run():
        try:
            out = fn()
        except Exception:
            rate_inc(kind, False)
            raise
        rate_inc(kind, True)
        return out
    return run

def write_documents(cfg: Dict[str, Any], write: Callable[[Dict[str, Any]], Any], docs: List[Dict[str, Any]]) -> int:
    """Concurrent, staggered document writes. First failure aborts the caller."""
    delay = float(cfg.get("content_write_delay_s", CONTENT_WRITE_DELAY_S) or 0)
    workers = int(cfg.get("max_workers", 8) or 1)
    tasks = [_counted("write", (lambda d=d: write(d))) for d in docs]
    run_all(tasks, stagger_s=delay, max_workers=workers)
    return len(tasks)

class Pipeline:
    def __init__(self, cfg: Dict[str, Any], feed=None, sheets=None, content=None, sms=None):
        self.cfg = cfg
        self.feed = feed or PredictWindFeed(cfg)
        self.sheets = sheets or SheetsIndex(cfg)
        self.content = content or SanityStore(cfg)
        self.sms = sms or TwilioSms(cfg)

    def run_cycle(self) -> CycleResult:
        """One ingestion cycle. Any fetch or write failure propagates."""
        result = CycleResult()
        sms_enabled = bool(self.cfg.get("sms_enabled", True))

        # 1. Seen ids (+ roster), fresh every cycle
        registry = SeenIdRegistry.load(self.sheets, self.content)
        subscribers = self.sheets.read_subscribers() if sms_enabled else []

        # 2. Feed
        fixes, posts = self.feed.fetch()

        # 3. Content store: posts new to the store, plus stored posts the log
        #    has not caught up with (their photos may not have landed yet)
        new_posts = registry.new_posts(posts)
        unlogged = registry.unlogged_posts(posts)
        new_ids = {p.id for p in new_posts}
        to_write = new_posts + [p for p in unlogged if p.id not in new_ids]
        docs: List[Dict[str, Any]] = []
        prepared: Dict[str, ParsedMessage] = {}
        for post in to_write:
            parsed, fix = prepare_post(post, fixes)
            prepared[post.id] = parsed
            if fix is None:
                log_line(f"POST {post.id} | no location fix before {post.created_at}", "WARN")
            docs.append(post_document(post, parsed, fix))
            photos = photo_documents(parsed, post.id)
            docs.extend(photos)
            result.photos_written += len(photos)
            result.photos_dropped += len(parsed.failures)
        write_documents(self.cfg, self.content.create_if_absent, docs)
        result.new_posts = len(new_posts)

        # 4. Locations tab
        new_fixes = registry.new_fixes(fixes)
        if new_fixes:
            self.sheets.append_rows(SHEET_LOCATIONS, LOCATION_HEADERS, [location_row(f) for f in new_fixes])
        result.new_fixes = len(new_fixes)

        # 5. Blog Posts tab, then one text per subscriber for each newly logged post
        result.logged_posts = self.sheets.append_rows(
            SHEET_BLOG_POSTS, BLOG_POST_HEADERS, [blog_post_row(p) for p in unlogged]
        )
        if sms_enabled and unlogged and subscribers:
            result.notifications_sent = self._notify(subscribers, unlogged, prepared)

        # 6. Summary
        log_line(
            f"CYCLE | added {result.new_fixes} locations and {result.new_posts} blog posts "
            f"(logged {result.logged_posts}) | photos={result.photos_written} dropped={result.photos_dropped} "
            f"| {result.notifications_sent} texts sent"
        )
        return result

    def _notify(self, subscribers: List[str], posts: List[BlogPost], prepared: Dict[str, ParsedMessage]) -> int:
        template = self.cfg.get("post_link_template")
        messages = []
        for post in posts:
            parsed = prepared[post.id]
            body = build_sms_body(post, parsed, post_link(template, post))
            messages.append((body, media_urls(parsed)))

        tasks = []
        for number in subscribers:
            for body, media in messages:
                tasks.append(_counted("sms", (lambda n=number, b=body, m=media: self.sms.send(n, b, m))))
        run_all(tasks, max_workers=int(self.cfg.get("max_workers", 8) or 1))
        return len(tasks)
