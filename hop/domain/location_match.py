from typing import Any, Dict, List, Optional, Sequence

from ..core.models import LocationFix

def fix_from_feed(obj: Dict[str, Any]) -> LocationFix:
    """Flatten one route entry {t, p:{lat,lon}, bearing, bsp, ...}. KeyError/TypeError on a bad shape."""
    p = obj["p"]
    return LocationFix(
        epoch=int(obj["t"]),
        latitude=float(p["lat"]),
        longitude=float(p["lon"]),
        course=obj.get("bearing"),
        boat_speed=obj.get("bsp"),
        twa=obj.get("twa"),
        twd=obj.get("twd"),
        tws=obj.get("tws"),
        gust=obj.get("gust"),
        is_sample=bool(obj.get("isSample", False)),
    )

def fixes_from_feed(route: List[Dict[str, Any]]) -> List[LocationFix]:
    return [fix_from_feed(o) for o in route]

def find_closest_fix(target_epoch: Optional[int], fixes: Sequence[LocationFix]) -> Optional[LocationFix]:
    """
    Last fix at or before target_epoch, or None.

    Assumes `fixes` is ascending by epoch (feed order) and does not sort it.
    Scanning starts at the second fix: the answer is the fix right before the
    first one that reaches the target. A target past the final fix has no
    answer, since the vessel may have moved on since.
    """
    if target_epoch is None or len(fixes) < 2:
        return None
    for i in range(1, len(fixes)):
        if fixes[i].epoch >= target_epoch:
            prev = fixes[i - 1]
            return prev if prev.epoch <= target_epoch else None
    return None
