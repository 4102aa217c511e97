from typing import List, Optional
from urllib.parse import urlsplit

from ..core.constants import RE_PHOTO_TOKEN, RE_DIMENSIONS, RE_HTTP_URL, RE_IMAGE_FILENAME
from ..core.models import DropReason, ParsedMessage, Photo, PhotoParseFailure, PhotoResult

def parse_dimensions(dims: Optional[str]) -> Optional[tuple]:
    m = RE_DIMENSIONS.match(dims or "")
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))

def photo_id_from_url(url: str) -> Optional[str]:
    """Filename stem of the last path segment, for jpg/jpeg/png only."""
    path = urlsplit(url).path
    m = RE_IMAGE_FILENAME.search(path.rsplit("/", 1)[-1])
    if not m or not m.group(1):
        return None
    return m.group(1)

def parse_photo_token(token: str, alt: str, dims: Optional[str], target: str) -> PhotoResult:
    size = parse_dimensions(dims)
    if size is None:
        return PhotoParseFailure(token, DropReason.BAD_DIMENSIONS)

    url = (target or "").strip()
    if not RE_HTTP_URL.match(url):
        return PhotoParseFailure(token, DropReason.BAD_URL)

    photo_id = photo_id_from_url(url)
    if not photo_id:
        return PhotoParseFailure(token, DropReason.BAD_FILENAME)

    width, height = size
    return Photo(id=photo_id, source_url=url, width=width, height=height, alt_text=alt or "Photo")

def parse_message(raw: Optional[str]) -> ParsedMessage:
    """
    Split a raw post body into plain text and photo results.

    Every `![Photo|WxH](URL)` token is removed from the text. Each token
    yields either a Photo or a PhotoParseFailure (never raises), in the order
    the tokens appear.
    """
    raw = raw or ""
    results: List[PhotoResult] = []
    for m in RE_PHOTO_TOKEN.finditer(raw):
        results.append(parse_photo_token(m.group(0), m.group("alt"), m.group("dims"), m.group("target")))

    if not results:
        return ParsedMessage(text=raw.strip())

    text = RE_PHOTO_TOKEN.sub("", raw).strip()
    return ParsedMessage(text=text, results=results)
