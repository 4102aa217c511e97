from datetime import datetime, timezone
from zoneinfo import ZoneInfo
from typing import Optional

TZ_PACIFIC = ZoneInfo("America/Los_Angeles")

def now_pacific() -> datetime:
    return datetime.now(TZ_PACIFIC)

def now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")

def parse_iso(created_at: Optional[str]) -> Optional[datetime]:
    """Parse upstream timestamps like 2021-09-10T12:00:00.123Z (naive values are UTC)."""
    if not created_at:
        return None
    s = str(created_at).strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt

def epoch_from_iso(created_at: Optional[str]) -> Optional[int]:
    dt = parse_iso(created_at)
    if dt is None:
        return None
    return int(dt.timestamp())
