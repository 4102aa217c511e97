import threading
from datetime import datetime
from pathlib import Path
from typing import Optional, Any
from .time import now_pacific

# Set by setup_log_paths(); None means stdout only.
BOT_LOG_DIR: Optional[Path] = None
BOT_LOG_PREFIX = "bot"

_LOG_LOCK = threading.Lock()

def log_path_for(ts: datetime) -> Optional[Path]:
    """logs/<prefix>-YYYY-MM-DD.log for the Pacific date of ts."""
    if BOT_LOG_DIR is None:
        return None
    return BOT_LOG_DIR / f"{BOT_LOG_PREFIX}-{ts.strftime('%Y-%m-%d')}.log"

def setup_log_paths(log_dir: Path, prefix: str = "bot") -> Path:
    """Point log_line at log_dir; the file rolls over at Pacific midnight."""
    global BOT_LOG_DIR, BOT_LOG_PREFIX
    log_dir.mkdir(parents=True, exist_ok=True)
    BOT_LOG_DIR = log_dir
    BOT_LOG_PREFIX = prefix
    return log_path_for(now_pacific())

def _append(path: Path, line: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(line + "\n")

def log_line(msg: Any, level: str = "INFO") -> None:
    """
    Logging wrapper (single timestamp, readable):
    - Prefix every line with: YYYY-MM-DD // HH:MM:SS+HH:MM - LEVEL |
    - Fan-out workers log from threads, so writes are serialized.
    """
    line = str(msg).strip()

    with _LOG_LOCK:
        ts = now_pacific()
        prefix = ts.strftime("%Y-%m-%d // %H:%M:%S%z")
        if len(prefix) >= 5:
            prefix = prefix[:-2] + ":" + prefix[-2:]

        lvl = (level or "INFO").upper()
        full = f"{prefix} - {lvl} | {line}" if line else f"{prefix} - {lvl} |"

        path = log_path_for(ts)
        if path:
            _append(path, full)

        print(full, flush=True)
