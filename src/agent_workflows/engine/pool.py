from __future__ import annotations

import logging
from collections.abc import Iterator
from concurrent.futures import Executor, ThreadPoolExecutor
from contextlib import contextmanager

logger = logging.getLogger(__name__)


@contextmanager
def worker_pool(size: int, executor: Executor | None = None) -> Iterator[Executor]:
    """Yield an executor for one fan-out.

    A caller-supplied ``executor`` is shared and left running. Otherwise a
    pool of ``size`` threads is created and shut down on every exit path,
    waiting for in-flight calls and dropping queued ones.
    """

    if executor is not None:
        yield executor
        return

    pool = ThreadPoolExecutor(max_workers=max(size, 1), thread_name_prefix="workflow-worker")
    logger.debug(f"Started worker pool with {size} thread(s)")
    try:
        yield pool
    finally:
        pool.shutdown(wait=True, cancel_futures=True)
        logger.debug("Worker pool shut down")
