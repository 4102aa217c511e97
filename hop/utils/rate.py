import threading
import time

from .log import log_line

RATE_WINDOW_S = 3600.0

_RATE_LOCK = threading.Lock()

RATE_STATE = {
    "t0": None,
    "next_log": None,
    "sms_ok": 0,
    "sms_fail": 0,
    "writes_ok": 0,
    "writes_fail": 0,
}

def rate_inc(kind: str, ok: bool) -> None:
    if kind == "sms":
        k = "sms_ok" if ok else "sms_fail"
    elif kind == "write":
        k = "writes_ok" if ok else "writes_fail"
    else:
        return
    with _RATE_LOCK:
        RATE_STATE[k] = int(RATE_STATE.get(k, 0) or 0) + 1

def rate_reset() -> None:
    with _RATE_LOCK:
        for k in ("sms_ok", "sms_fail", "writes_ok", "writes_fail"):
            RATE_STATE[k] = 0
        RATE_STATE["t0"] = None
        RATE_STATE["next_log"] = None

def rate_maybe_log(now: float | None = None) -> bool:
    """Emit one RATE line per window. Returns True if a line was written."""
    now = time.time() if now is None else now
    with _RATE_LOCK:
        if RATE_STATE.get("t0") is None:
            RATE_STATE["t0"] = now
            RATE_STATE["next_log"] = now + RATE_WINDOW_S

        if now < float(RATE_STATE.get("next_log") or 0):
            return False

        w = int(RATE_WINDOW_S // 60)
        line = (
            f"RATE | window={w}m | "
            f"sms={RATE_STATE.get('sms_ok', 0)} ok/{RATE_STATE.get('sms_fail', 0)} fail | "
            f"writes={RATE_STATE.get('writes_ok', 0)} ok/{RATE_STATE.get('writes_fail', 0)} fail"
        )
        RATE_STATE["t0"] = now
        RATE_STATE["next_log"] = now + RATE_WINDOW_S
        for k in ("sms_ok", "sms_fail", "writes_ok", "writes_fail"):
            RATE_STATE[k] = 0

    log_line(line)
    return True
