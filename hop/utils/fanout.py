import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Sequence

DEFAULT_MAX_WORKERS = 8

def _staggered(fn: Callable[[], Any], start_at: float) -> Callable[[], Any]:
    def run():
        # Only the time left until this task's slot; workers reuse threads.
        wait = start_at - time.monotonic()
        if wait > 0:
            time.sleep(wait)
        return fn()
    return run

def run_all(
    tasks: Sequence[Callable[[], Any]],
    stagger_s: float = 0.0,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[Any]:
    """
    Run zero-arg callables concurrently and wait for all of them.

    Task i starts no earlier than i * stagger_s after the batch began, so the
    whole batch is spread over roughly len(tasks) * stagger_s. Results come
    back in submission order; the first failure (in that order) is re-raised
    once every task has finished.
    """
    if not tasks:
        return []

    workers = max(1, min(int(max_workers or 1), len(tasks)))
    start = time.monotonic()
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fanout") as pool:
        futures = [pool.submit(_staggered(t, start + i * stagger_s)) for i, t in enumerate(tasks)]
        # Leaving the block joins every worker before result() is consulted.
    return [f.result() for f in futures]
