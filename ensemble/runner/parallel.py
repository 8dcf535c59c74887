"""
Parallel suite scheduling.

N asyncio workers pull suites from a queue; each finished suite's batch
of case results is handed to a single consumer that reports it, so
reporters never see concurrent calls.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Iterable

if TYPE_CHECKING:
    from ..reporting.models import CaseResult
    from ..reporting.reporter import Reporter
    from ..schema_parsing import Suite

logger = logging.getLogger(__name__)

RunSuiteFunc = Callable[["Suite"], Awaitable["list[CaseResult]"]]


async def run_parallel(
    suites: Iterable[Suite],
    run_suite: RunSuiteFunc,
    reporter: Reporter,
    workers: int = 1,
) -> None:
    """
    Run suites on ``workers`` concurrent workers and report each batch.

    The reporter is initialized first and flushed once every suite has
    been reported. Batches arrive in completion order. A worker that raises
    stops; the other workers keep draining the queue and their batches
    are reported before the first error is re-raised, without a flush.
    """
    workers = max(1, workers)
    pending: asyncio.Queue[Suite] = asyncio.Queue()
    for suite in suites:
        pending.put_nowait(suite)

    results: asyncio.Queue[list[CaseResult] | None] = asyncio.Queue()

    async def worker(worker_id: int) -> None:
        while True:
            try:
                suite = pending.get_nowait()
            except asyncio.QueueEmpty:
                return
            logger.debug(f"Worker {worker_id} picked suite {suite.full_name}")
            await results.put(await run_suite(suite))

    async def consume() -> None:
        while True:
            batch = await results.get()
            if batch is None:
                return
            if batch:
                reporter.report(batch)

    reporter.init()
    consumer = asyncio.create_task(consume())
    try:
        outcomes = await asyncio.gather(
            *(worker(i) for i in range(workers)), return_exceptions=True
        )
    finally:
        await results.put(None)
        await consumer

    failures = [o for o in outcomes if isinstance(o, BaseException)]
    if failures:
        logger.error(f"{len(failures)} worker(s) failed, run is incomplete")
        raise failures[0]

    reporter.flush()
