"""Data-parallel map over the location dimension."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable

logger = logging.getLogger(__name__)


def resolve_workers(workers: int | None) -> int:
    if workers is None:
        return max(1, os.cpu_count() or 1)
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    return int(workers)


def location_chunks(n_locations: int, chunk_size: int) -> list[range]:
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
    return [range(start, min(start + chunk_size, n_locations)) for start in range(0, n_locations, chunk_size)]


def map_locations(
    func: Callable[[int], None],
    n_locations: int,
    workers: int | None = None,
    chunk_size: int = 512,
) -> None:
    """Call ``func(i)`` once for every location index.

    ``func`` must only write to slot ``i`` of pre-sized outputs, so no locking is
    needed. Inputs are shared read-only between threads. Exceptions raised by
    ``func`` propagate to the caller.
    """

    if n_locations <= 0:
        return
    n_workers = min(resolve_workers(workers), n_locations)
    chunks = location_chunks(n_locations, chunk_size)

    def run_chunk(indices: range) -> int:
        for i in indices:
            func(i)
        return len(indices)

    if n_workers == 1 or len(chunks) == 1:
        for chunk in chunks:
            run_chunk(chunk)
        return

    logger.debug("Mapping %d locations over %d chunks with %d workers", n_locations, len(chunks), n_workers)
    with ThreadPoolExecutor(max_workers=n_workers) as executor:
        futures = {executor.submit(run_chunk, chunk): chunk for chunk in chunks}
        for future in as_completed(futures):
            future.result()
