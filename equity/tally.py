"""Outcome tally: per-player win/tie/share counters for a batch of scenarios.

所有计数都是整数（numpy int64），因此多个工作进程的部分结果可以按任意顺序
相加合并而得到完全相同的结果。底池份额以“半个底池”为单位记录：

- 没有合格低牌时，高牌赢家分得 2 个单位（整个底池）
- 存在合格低牌时，高牌赢家和低牌赢家各分 1 个单位
- M 人平分时，每人在 share_units[i, M] 上累加该单位数

最终 Equity = sum_M share_units[i, M] / (2 * M) / 场景总数。
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from models.core import Card, GameVariant
from environment.variant_rules import best_high, best_low


@dataclass
class AggregateTally:
    """Accumulated outcome counts for a fixed list of contending players.

    Attributes:
        num_players: Number of contending players
        scenarios: Number of scenarios recorded
        low_scenarios: Scenarios in which at least one low hand qualified
        high_wins: Scenarios each player won the high pot alone
        high_ties: Scenarios each player split the high pot
        low_wins: Scenarios each player won the low pot alone
        low_ties: Scenarios each player split the low pot
        low_qualified: Scenarios each player held a qualifying low
        share_units: Half-pot units received, indexed [player, tie-group size]
    """
    num_players: int
    scenarios: int
    low_scenarios: int
    high_wins: np.ndarray
    high_ties: np.ndarray
    low_wins: np.ndarray
    low_ties: np.ndarray
    low_qualified: np.ndarray
    share_units: np.ndarray

    @classmethod
    def empty(cls, num_players: int) -> 'AggregateTally':
        """Create a tally with every counter at zero."""
        if num_players < 1:
            raise ValueError(f"Number of players must be positive, got {num_players}")
        zeros = lambda: np.zeros(num_players, dtype=np.int64)
        return cls(
            num_players=num_players,
            scenarios=0,
            low_scenarios=0,
            high_wins=zeros(),
            high_ties=zeros(),
            low_wins=zeros(),
            low_ties=zeros(),
            low_qualified=zeros(),
            share_units=np.zeros((num_players, num_players + 1), dtype=np.int64),
        )

    def record(self, high_strengths: Sequence[Tuple[int, ...]],
               low_keys: Optional[Sequence[Optional[Tuple[int, ...]]]] = None) -> None:
        """Record one scenario.

        Args:
            high_strengths: Each player's high-hand strength (larger wins)
            low_keys: Each player's low key (smaller wins, None if not
                qualified), or None when no low pot is contested
        """
        if len(high_strengths) != self.num_players:
            raise ValueError(f"Expected {self.num_players} hands, got {len(high_strengths)}")

        self.scenarios += 1

        low_winners = []
        if low_keys is not None:
            qualified = [i for i, key in enumerate(low_keys) if key is not None]
            if qualified:
                best = min(low_keys[i] for i in qualified)
                low_winners = [i for i in qualified if low_keys[i] == best]
                for i in qualified:
                    self.low_qualified[i] += 1

        best_high = max(high_strengths)
        high_winners = [i for i, s in enumerate(high_strengths) if s == best_high]

        if low_winners:
            self.low_scenarios += 1
            self._award(high_winners, 1, self.high_wins, self.high_ties)
            self._award(low_winners, 1, self.low_wins, self.low_ties)
        else:
            self._award(high_winners, 2, self.high_wins, self.high_ties)

    def _award(self, winners: List[int], units: int,
               wins: np.ndarray, ties: np.ndarray) -> None:
        group = len(winners)
        for i in winners:
            if group == 1:
                wins[i] += 1
            else:
                ties[i] += 1
            self.share_units[i, group] += units

    def merge(self, other: 'AggregateTally') -> 'AggregateTally':
        """Return a new tally holding the sum of both tallies."""
        if other.num_players != self.num_players:
            raise ValueError(
                f"Cannot merge tallies for {self.num_players} and {other.num_players} players"
            )
        return AggregateTally(
            num_players=self.num_players,
            scenarios=self.scenarios + other.scenarios,
            low_scenarios=self.low_scenarios + other.low_scenarios,
            high_wins=self.high_wins + other.high_wins,
            high_ties=self.high_ties + other.high_ties,
            low_wins=self.low_wins + other.low_wins,
            low_ties=self.low_ties + other.low_ties,
            low_qualified=self.low_qualified + other.low_qualified,
            share_units=self.share_units + other.share_units,
        )

    __add__ = merge

    def __eq__(self, other) -> bool:
        if not isinstance(other, AggregateTally):
            return NotImplemented
        return (
            self.num_players == other.num_players
            and self.scenarios == other.scenarios
            and self.low_scenarios == other.low_scenarios
            and np.array_equal(self.high_wins, other.high_wins)
            and np.array_equal(self.high_ties, other.high_ties)
            and np.array_equal(self.low_wins, other.low_wins)
            and np.array_equal(self.low_ties, other.low_ties)
            and np.array_equal(self.low_qualified, other.low_qualified)
            and np.array_equal(self.share_units, other.share_units)
        )


def merge_tallies(tallies: Sequence[AggregateTally], num_players: int) -> AggregateTally:
    """Sum a sequence of tallies; an empty sequence gives an empty tally."""
    total = AggregateTally.empty(num_players)
    for tally in tallies:
        total = total.merge(tally)
    return total


def record_showdown(tally: AggregateTally, variant: GameVariant,
                    player_hands: Sequence[Sequence[Card]],
                    board: Sequence[Card]) -> None:
    """Evaluate every player on a complete board and record the outcome."""
    highs = [best_high(variant, hole, board) for hole in player_hands]
    lows = None
    if variant.has_low_pot:
        lows = [best_low(variant, hole, board) for hole in player_hands]
    tally.record(highs, lows)
