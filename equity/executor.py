"""Run independent work items in-process or across a multiprocessing pool.

Each work item produces an AggregateTally; the runner merges them in item
order and polls the cancellation hook between items.
"""

from multiprocessing import Pool, cpu_count
from typing import Callable, Optional, Sequence

from equity.tally import AggregateTally
from utils.exceptions import CalculationCancelledError, WorkerProcessError
from utils.logger import get_engine_logger


def resolve_workers(num_workers: int) -> int:
    """0 means one worker per CPU core."""
    return num_workers if num_workers > 0 else cpu_count()


def run_work_items(worker: Callable[[tuple], AggregateTally],
                   items: Sequence[tuple],
                   num_players: int,
                   num_workers: int = 1,
                   should_cancel: Optional[Callable[[], bool]] = None) -> AggregateTally:
    """Evaluate work items and merge their tallies.

    Args:
        worker: Module-level function (must be picklable for the pool)
        items: Work item argument tuples
        num_players: Number of contending players
        num_workers: Worker processes; 1 runs in the calling process
        should_cancel: Polled between work items

    Returns:
        The merged tally

    Raises:
        CalculationCancelledError: should_cancel returned True
        WorkerProcessError: a pool worker raised
    """
    logger = get_engine_logger()
    total = AggregateTally.empty(num_players)
    num_items = len(items)

    if num_workers <= 1 or num_items <= 1:
        for done, item in enumerate(items):
            _check_cancel(should_cancel, done, num_items)
            total = total.merge(worker(item))
        return total

    logger.debug("Dispatching %d work items to %d processes", num_items, num_workers)
    with Pool(min(num_workers, num_items)) as pool:
        results = pool.imap(worker, items)
        for done in range(num_items):
            _check_cancel(should_cancel, done, num_items)
            try:
                partial = next(results)
            except Exception as e:
                logger.error("Work item %d failed: %r", done, e)
                raise WorkerProcessError(
                    f"Work item {done} failed", worker_id=done, original_error=e
                ) from e
            total = total.merge(partial)
    return total


def _check_cancel(should_cancel: Optional[Callable[[], bool]], done: int, total: int) -> None:
    if should_cancel is not None and should_cancel():
        get_engine_logger().info("Calculation cancelled after %d/%d work items", done, total)
        raise CalculationCancelledError(done, total)
