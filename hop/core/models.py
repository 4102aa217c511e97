from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

class ReplaceState(str, Enum):
    PENDING = "pending-replace"
    REPLACED = "replaced"

class DropReason(str, Enum):
    BAD_DIMENSIONS = "bad_dimensions"
    BAD_URL = "bad_url"
    BAD_FILENAME = "bad_filename"

@dataclass(frozen=True)
class LocationFix:
    epoch: int
    latitude: float
    longitude: float
    course: Optional[float] = None
    boat_speed: Optional[float] = None
    twa: Optional[float] = None
    twd: Optional[float] = None
    tws: Optional[float] = None
    gust: Optional[float] = None
    is_sample: bool = False

@dataclass
class BlogPost:
    id: str
    title: str
    raw_body: str
    html_body: str
    created_at: str

@dataclass(frozen=True)
class Photo:
    id: str
    source_url: str
    width: int
    height: int
    alt_text: str = "Photo"

@dataclass(frozen=True)
class PhotoParseFailure:
    token: str
    reason: DropReason

PhotoResult = Union[Photo, PhotoParseFailure]

@dataclass
class ParsedMessage:
    text: str
    results: List[PhotoResult] = field(default_factory=list)

    @property
    def photos(self) -> List[Photo]:
        return [r for r in self.results if isinstance(r, Photo)]

    @property
    def failures(self) -> List[PhotoParseFailure]:
        return [r for r in self.results if isinstance(r, PhotoParseFailure)]

@dataclass
class CycleResult:
    new_fixes: int = 0
    new_posts: int = 0
    logged_posts: int = 0
    photos_written: int = 0
    photos_dropped: int = 0
    notifications_sent: int = 0

@dataclass
class ReconcileResult:
    checked: int = 0
    skipped_missing: int = 0
    skipped_unchanged: int = 0
    republished: int = 0
    resumed: int = 0
