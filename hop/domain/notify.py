from typing import List, Optional

from ..core.constants import SMS_MAX_LEN
from ..core.models import BlogPost, ParsedMessage
from ..utils.time import TZ_PACIFIC, parse_iso

def format_sent_at(created_at: str) -> str:
    """Short en-US stamp in Pacific time, e.g. '9/10/21, 5:00 AM'."""
    dt = parse_iso(created_at)
    if dt is None:
        return ""
    local = dt.astimezone(TZ_PACIFIC)
    hour = local.hour % 12 or 12
    ampm = "AM" if local.hour < 12 else "PM"
    return f"{local.month}/{local.day}/{local:%y}, {hour}:{local:%M} {ampm}"

def message_header(post: BlogPost) -> str:
    return f"{format_sent_at(post.created_at)} PST: {post.title}"

def post_link(template: Optional[str], post: BlogPost) -> str:
    if not template:
        return ""
    return template.format(topic_id=post.id)

def format_body(post: BlogPost, parsed: ParsedMessage) -> str:
    return f"{message_header(post)}\n\n{parsed.text}"

def fallback_body(post: BlogPost, link: str, limit: int = SMS_MAX_LEN) -> str:
    """Header + title, cut so the link still fits within limit."""
    tail = f"\n\n{link}" if link else ""
    head = message_header(post)[: max(0, limit - len(tail))]
    return f"{head}{tail}"

def build_sms_body(post: BlogPost, parsed: ParsedMessage, link: str, limit: int = SMS_MAX_LEN) -> str:
    body = format_body(post, parsed)
    if len(body) <= limit:
        return body
    return fallback_body(post, link, limit)

def media_urls(parsed: ParsedMessage) -> List[str]:
    return [p.source_url for p in parsed.photos]
