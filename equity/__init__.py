"""Equity engine: exact enumeration, Monte Carlo simulation and aggregation."""

from .tally import AggregateTally, merge_tallies, record_showdown
from .aggregator import aggregate, equity_fractions
from .mode_selector import ModeDecision, ModePolicy, select_mode
from .enumeration import enumerate_exact
from .simulation import simulate
from .equity_calculator import EquityCalculator, compute_equity, equal_split_placeholder

__all__ = [
    'AggregateTally',
    'merge_tallies',
    'record_showdown',
    'aggregate',
    'equity_fractions',
    'ModeDecision',
    'ModePolicy',
    'select_mode',
    'enumerate_exact',
    'simulate',
    'EquityCalculator',
    'compute_equity',
    'equal_split_placeholder',
]
