"""Concurrent retrieval of all shares under an NMT root."""

from __future__ import annotations

import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable

from .get import leaf_to_share
from .plugin import BlockGetter, Cid, get_node
from .share import MAX_SQUARE_SIZE

# Limit of squares that are fetched concurrently.
NUM_CONCURRENT_SQUARES = 8
# Global limit of workers spawned by get_shares: a square may need up to
# MAX_SQUARE_SIZE calls each with up to MAX_SQUARE_SIZE/2 workers, times the
# number of squares fetched at once. Workers are only started as load grows.
NUM_WORKERS_LIMIT = MAX_SQUARE_SIZE * MAX_SQUARE_SIZE // 2 * NUM_CONCURRENT_SQUARES

_POLL_INTERVAL = 0.01

_pool = ThreadPoolExecutor(max_workers=NUM_WORKERS_LIMIT, thread_name_prefix="get-shares")


@dataclass(frozen=True)
class _Job:
    cid: Cid
    pos: int


def _next_job(jobs: queue.SimpleQueue, cancel: threading.Event | None) -> _Job | None:
    while True:
        if cancel is not None and cancel.is_set():
            return None
        try:
            return jobs.get(timeout=_POLL_INTERVAL)
        except queue.Empty:
            continue


def get_shares(
    getter: BlockGetter,
    root: Cid,
    shares: int,
    put: Callable[[int, bytes], None],
    cancel: threading.Event | None = None,
) -> None:
    """Fetch the ``shares`` leaves under ``root``, handing each to ``put``.

    Nodes are fetched concurrently; failed fetches are skipped. The call
    returns once every node of the binary tree has been processed, or as soon
    as ``cancel`` is set while nodes are still awaited.
    """
    jobs: queue.SimpleQueue = queue.SimpleQueue()
    jobs.put(_Job(root, 0))
    # a binary tree with `shares` leaves has this many nodes
    total = shares * 2 - 1

    def work(job: _Job) -> None:
        try:
            node = get_node(getter, job.cid)
        except Exception:
            return  # fetch as much as possible, ignoring failures
        links = node.links()
        if len(links) == 1:
            try:
                leaf = get_node(getter, links[0].cid)
            except Exception:
                return
            put(job.pos, leaf_to_share(leaf))
            return
        for i, link in enumerate(links):
            if cancel is not None and cancel.is_set():
                return
            jobs.put(_Job(link.cid, job.pos * 2 + i))

    futures: list[Future] = []
    for _ in range(total):
        job = _next_job(jobs, cancel)
        if job is None:
            return
        futures.append(_pool.submit(work, job))
    wait(futures)