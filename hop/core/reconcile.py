from typing import Any, Dict, Optional, Sequence

from .models import BlogPost, LocationFix, ReconcileResult, ReplaceState
from .pipeline import prepare_post, write_documents
from ..adapters.predictwind_api import PredictWindFeed
from ..adapters.sanity_api import SanityStore
from ..domain.documents import post_document, photo_documents
from ..utils.log import log_line
from ..utils.time import now_utc_iso

def needs_republish(post: BlogPost, stored: Dict[str, Any]) -> bool:
    """Feed title/rendered html differ from what is stored."""
    return (stored.get("html") or "") != post.html_body or (stored.get("title") or "") != post.title

class Reconciler:
    """
    Slow cycle: republish stored posts whose upstream content changed.

    Never creates posts. A republish is a two-phase replace recorded on the
    post document (pending-replace -> replaced); a post left in
    pending-replace by a crash is resumed on the next run.
    """
    def __init__(self, cfg: Dict[str, Any], feed=None, content=None):
        self.cfg = cfg
        self.feed = feed or PredictWindFeed(cfg)
        self.content = content or SanityStore(cfg)

    def run_cycle(self) -> ReconcileResult:
        result = ReconcileResult()
        fixes, posts = self.feed.fetch()
        stored_posts = self.content.fetch_posts()

        for post in posts:
            result.checked += 1
            stored = stored_posts.get(post.id)
            if stored is None:
                log_line(f"RECONCILE | post {post.id} not stored yet, skipping")
                result.skipped_missing += 1
                continue

            resume = stored.get("replaceState") == ReplaceState.PENDING.value
            if not resume and not needs_republish(post, stored):
                result.skipped_unchanged += 1
                continue

            self.republish(post, fixes, resume=resume)
            if resume:
                result.resumed += 1
            else:
                result.republished += 1

        log_line(
            f"RECONCILE | checked={result.checked} republished={result.republished} "
            f"resumed={result.resumed} unchanged={result.skipped_unchanged} missing={result.skipped_missing}"
        )
        return result

    def republish(self, post: BlogPost, fixes: Sequence[LocationFix], resume: bool = False) -> None:
        log_line(f"REPUBLISH | post {post.id}{' (resume)' if resume else ''}")
        updated_at = now_utc_iso()

        # Phase 1: mark, clear old photos, replace the post body
        self.content.patch_set(post.id, {"replaceState": ReplaceState.PENDING.value})
        self.content.delete_photos_for_post(post.id)
        parsed, fix = prepare_post(post, fixes)
        self.content.create_or_replace(
            post_document(post, parsed, fix, replace_state=ReplaceState.PENDING, updated_at=updated_at)
        )

        # Phase 2: photos, then flip the marker
        write_documents(self.cfg, self.content.create_if_absent, photo_documents(parsed, post.id))
        self.content.patch_set(post.id, {"replaceState": ReplaceState.REPLACED.value, "updatedAt": updated_at})

    def republish_by_id(self, post_id: str) -> Optional[BlogPost]:
        """Force one stored post through republish (manual repair). None if the feed or the store lacks it."""
        if self.content.get_post(str(post_id)) is None:
            log_line(f"REPUBLISH | post {post_id} not stored, nothing to replace", "WARN")
            return None
        fixes, posts = self.feed.fetch()
        for post in posts:
            if post.id == str(post_id):
                self.republish(post, fixes)
                return post
        return None
