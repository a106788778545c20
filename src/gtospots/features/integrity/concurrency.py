"""Worker pool that keeps validation and store I/O off the event loop.

The pool is built on first use and sized from ``GTOSPOTS_WORKERS`` (default:
up to four threads).  ``shutdown_pool`` releases it; the next call to
:func:`run_blocking` builds a fresh one.
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any

__all__ = ["WORKERS_ENV_VAR", "pool_size", "run_blocking", "shutdown_pool"]

logger = logging.getLogger(__name__)

WORKERS_ENV_VAR = "GTOSPOTS_WORKERS"
_DEFAULT_WORKERS = 4
_MAX_WORKERS = 32

_pool: ThreadPoolExecutor | None = None
_pool_lock = threading.Lock()


def pool_size() -> int:
    raw = (os.getenv(WORKERS_ENV_VAR) or "").strip()
    if raw.isdigit() and int(raw) > 0:
        return min(int(raw), _MAX_WORKERS)
    return max(1, min(_DEFAULT_WORKERS, os.cpu_count() or 1))


def _integrity_pool() -> ThreadPoolExecutor:
    global _pool
    with _pool_lock:
        if _pool is None:
            size = pool_size()
            _pool = ThreadPoolExecutor(max_workers=size, thread_name_prefix="gtospots-integrity")
            logger.debug("Started integrity worker pool with %d thread(s)", size)
        return _pool


async def run_blocking(func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_integrity_pool(), partial(func, *args, **kwargs))


def shutdown_pool(wait: bool = True) -> None:
    global _pool
    with _pool_lock:
        pool, _pool = _pool, None
    if pool is not None:
        pool.shutdown(wait=wait)
        logger.debug("Integrity worker pool stopped")
