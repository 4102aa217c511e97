import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .pipeline import Pipeline
from .reconcile import Reconciler
from ..utils.log import log_line, setup_log_paths
from ..utils.rate import rate_maybe_log

ROOT = Path(".").resolve()
LOG_DIR = ROOT / "logs"

def run_guarded(name: str, fn: Callable[[], Any]) -> Optional[Any]:
    """Run one cycle; log and swallow its failure so the next tick retries from scratch."""
    try:
        return fn()
    except Exception as e:
        log_line(f"{name} FAILED | err={e!r}", "ERROR")
        return None

def run_loop(
    cfg: Dict[str, Any],
    pipeline: Optional[Pipeline] = None,
    reconciler: Optional[Reconciler] = None,
    max_ticks: Optional[int] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    log_dir: Optional[Path] = None,
) -> None:
    """
    Drive the fast ingestion cycle and the slow reconciliation cycle.

    Both are due immediately on start. Cycles run one at a time in this
    process. `max_ticks` bounds the loop (tests); None runs forever.
    """
    import hop
    setup_log_paths(log_dir or LOG_DIR)
    log_line(f"MAIN LOOP STARTED (Hoptoad Tracker v{hop.__version__})")

    pipeline = pipeline or Pipeline(cfg)
    reconciler = reconciler or Reconciler(cfg)

    ingest_every = float(cfg.get("ingest_interval_s", 600))
    reconcile_every = float(cfg.get("reconcile_interval_s", 3600))
    tick = float(cfg.get("tick_s", 15))

    next_ingest = clock()
    next_reconcile = clock()
    ticks = 0

    while max_ticks is None or ticks < max_ticks:
        ticks += 1
        try:
            now = clock()
            if now >= next_ingest:
                run_guarded("INGEST", pipeline.run_cycle)
                next_ingest = now + ingest_every

            now = clock()
            if now >= next_reconcile:
                run_guarded("RECONCILE", reconciler.run_cycle)
                next_reconcile = now + reconcile_every

            rate_maybe_log()
            sleep(tick)
        except KeyboardInterrupt:
            log_line("MAIN LOOP STOPPED (KeyboardInterrupt)")
            break
