"""Choose between exact enumeration and Monte Carlo simulation."""

from dataclasses import dataclass
from math import comb
from typing import Optional

from models.core import CalculationMode, EquityConfig


@dataclass(frozen=True)
class ModeDecision:
    """The calculation mode chosen for one request.

    Attributes:
        exact: True for exhaustive enumeration
        trials: Simulation size (None when exact)
        unknown_cards: Board cards still to come
        scenario_count: Scenarios that will be evaluated
    """
    exact: bool
    trials: Optional[int]
    unknown_cards: int
    scenario_count: int


@dataclass(frozen=True)
class ModePolicy:
    """Crossover policy: enumerate when at most exact_threshold board cards are unknown.

    Attributes:
        exact_threshold: Largest unknown-card count still enumerated exactly
        default_trials: Simulation size when the caller gives none
    """
    exact_threshold: int = 4
    default_trials: int = 10000

    def __post_init__(self):
        if not 0 <= self.exact_threshold <= 5:
            raise ValueError(f"Exact threshold must be in [0, 5], got {self.exact_threshold}")
        if self.default_trials <= 0:
            raise ValueError(f"Default trials must be positive, got {self.default_trials}")

    @classmethod
    def from_config(cls, config: EquityConfig) -> 'ModePolicy':
        return cls(exact_threshold=config.exact_threshold, default_trials=config.default_trials)

    def select(self, unknown_cards: int, pool_size: Optional[int] = None,
               override: Optional[CalculationMode] = None) -> ModeDecision:
        """Decide the mode for a board with unknown_cards slots left.

        A caller override wins, except that a complete board is always a
        single exact scenario.

        Args:
            unknown_cards: Missing board cards (0-5)
            pool_size: Size of the unseen pool, used to count exact scenarios
            override: Explicit caller choice

        Returns:
            ModeDecision
        """
        if not 0 <= unknown_cards <= 5:
            raise ValueError(f"Unknown card count must be in [0, 5], got {unknown_cards}")

        if unknown_cards == 0:
            exact = True
        elif override is not None:
            exact = override.exact
        else:
            exact = unknown_cards <= self.exact_threshold

        if exact:
            count = comb(pool_size, unknown_cards) if pool_size is not None else 0
            return ModeDecision(exact=True, trials=None,
                                unknown_cards=unknown_cards, scenario_count=count)

        trials = self.default_trials
        if override is not None and override.trials is not None:
            trials = override.trials
        return ModeDecision(exact=False, trials=trials,
                            unknown_cards=unknown_cards, scenario_count=trials)


def select_mode(unknown_cards: int, policy: Optional[ModePolicy] = None,
                pool_size: Optional[int] = None,
                override: Optional[CalculationMode] = None) -> ModeDecision:
    """Convenience wrapper around ModePolicy.select (default policy if none given)."""
    return (policy or ModePolicy()).select(unknown_cards, pool_size=pool_size, override=override)
