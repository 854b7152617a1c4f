"""Monte Carlo simulation of the remaining board.

Trials are split into fixed-size batches. Batch i draws from its own
generator seeded with SeedSequence(seed).spawn(n)[i], so a given seed,
trial count and batch size give the same tally whatever the worker count.
"""

from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from models.core import Card, GameVariant
from equity.tally import AggregateTally, record_showdown
from equity.executor import run_work_items
from utils.logger import get_engine_logger


def _simulate_batch(args: Tuple) -> AggregateTally:
    """Run one batch of trials (module level so the pool can pickle it).

    Args:
        args: (variant, player_hands, known_board, pool, trials, seed_sequence)
    """
    variant, player_hands, known_board, pool, trials, seed_sequence = args
    rng = np.random.default_rng(seed_sequence)
    tally = AggregateTally.empty(len(player_hands))
    missing = 5 - len(known_board)
    pool_size = len(pool)

    for _ in range(trials):
        if missing:
            drawn = rng.choice(pool_size, size=missing, replace=False)
            board = known_board + [pool[i] for i in drawn]
        else:
            board = known_board
        record_showdown(tally, variant, player_hands, board)
    return tally


def batch_sizes(trials: int, batch_size: int) -> List[int]:
    """Split trials into batches of batch_size, the last one possibly smaller."""
    if trials <= 0:
        raise ValueError(f"Number of trials must be positive, got {trials}")
    if batch_size <= 0:
        raise ValueError(f"Batch size must be positive, got {batch_size}")
    full, remainder = divmod(trials, batch_size)
    return [batch_size] * full + ([remainder] if remainder else [])


def simulate(player_hands: Sequence[Sequence[Card]],
             known_board: Sequence[Card],
             pool: Sequence[Card],
             trials: int,
             variant: GameVariant = GameVariant.TEXAS_HOLDEM,
             seed: Optional[int] = None,
             batch_size: int = 2500,
             num_workers: int = 1,
             should_cancel: Optional[Callable[[], bool]] = None) -> AggregateTally:
    """Sample random completions of the board uniformly without replacement.

    Args:
        player_hands: Hole cards of the contending players
        known_board: Known board cards (0-5)
        pool: Unseen cards to draw from
        trials: Number of sampled boards
        variant: Game variant
        seed: Root seed; None draws fresh OS entropy
        batch_size: Trials per work item
        num_workers: Worker processes (1 runs in the calling process)
        should_cancel: Polled between batches

    Returns:
        Tally with exactly `trials` scenarios
    """
    missing = 5 - len(known_board)
    if missing < 0:
        raise ValueError(f"Board has {len(known_board)} cards, at most 5 allowed")
    if len(pool) < missing:
        raise ValueError(f"Pool of {len(pool)} cards cannot complete a board missing {missing}")

    sizes = batch_sizes(trials, batch_size)
    seeds = np.random.SeedSequence(seed).spawn(len(sizes))
    hands = [list(h) for h in player_hands]
    board = list(known_board)
    cards = list(pool)

    items = [
        (variant, hands, board, cards, size, seed_sequence)
        for size, seed_sequence in zip(sizes, seeds)
    ]
    get_engine_logger().debug(
        "Simulation: %d trials in %d batches (seed=%s)", trials, len(items), seed
    )
    return run_work_items(_simulate_batch, items, len(player_hands),
                          num_workers=num_workers, should_cancel=should_cancel)
