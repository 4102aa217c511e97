from typing import Any, Dict, List, Optional

from ..core.constants import DOC_POST, DOC_PHOTO, LOCATION_HEADERS, BLOG_POST_HEADERS
from ..core.models import BlogPost, LocationFix, ParsedMessage, Photo, ReplaceState

def post_from_feed(obj: Dict[str, Any]) -> BlogPost:
    """One entry of the feed's posts array. KeyError on a missing topic_id."""
    return BlogPost(
        id=str(obj["topic_id"]),
        title=str(obj.get("title") or ""),
        raw_body=str(obj.get("raw") or ""),
        html_body=str(obj.get("cooked") or ""),
        created_at=str(obj.get("created_at") or ""),
    )

def location_row(fix: LocationFix) -> Dict[str, Any]:
    row = {
        "time": fix.epoch,
        "latitude": fix.latitude,
        "longitude": fix.longitude,
        "course": fix.course,
        "bsp": fix.boat_speed,
        "twa": fix.twa,
        "twd": fix.twd,
        "tws": fix.tws,
        "gust": fix.gust,
        "isSample": fix.is_sample,
    }
    return {h: row[h] for h in LOCATION_HEADERS}

def blog_post_row(post: BlogPost) -> Dict[str, Any]:
    row = {
        "topic_id": post.id,
        "title": post.title,
        "raw": post.raw_body,
        "cooked": post.html_body,
        "created_at": post.created_at,
    }
    return {h: row[h] for h in BLOG_POST_HEADERS}

def location_field(fix: Optional[LocationFix]) -> Optional[Dict[str, Any]]:
    if fix is None:
        return None
    return {
        "_type": "geopoint",
        "lat": fix.latitude,
        "lng": fix.longitude,
        "time": fix.epoch,
        "course": fix.course,
        "bsp": fix.boat_speed,
        "twa": fix.twa,
        "twd": fix.twd,
        "tws": fix.tws,
        "gust": fix.gust,
    }

def post_document(
    post: BlogPost,
    parsed: ParsedMessage,
    fix: Optional[LocationFix],
    replace_state: Optional[ReplaceState] = None,
    updated_at: Optional[str] = None,
) -> Dict[str, Any]:
    doc: Dict[str, Any] = {
        "_id": post.id,
        "_type": DOC_POST,
        "title": post.title,
        "content": parsed.text,
        "html": post.html_body,
        "createdAt": post.created_at,
    }
    loc = location_field(fix)
    if loc is not None:
        doc["location"] = loc
    if replace_state is not None:
        doc["replaceState"] = replace_state.value
    if updated_at:
        doc["updatedAt"] = updated_at
    return doc

def photo_document(photo: Photo, post_id: str) -> Dict[str, Any]:
    return {
        "_id": photo.id,
        "_type": DOC_PHOTO,
        "url": photo.source_url,
        "width": photo.width,
        "height": photo.height,
        "alt": photo.alt_text,
        "post": {"_type": "reference", "_ref": post_id},
    }

def photo_documents(parsed: ParsedMessage, post_id: str) -> List[Dict[str, Any]]:
    return [photo_document(p, post_id) for p in parsed.photos]
