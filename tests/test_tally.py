"""Outcome tally and equity aggregation tests.

Covers:
- win/tie/share accounting for single winners and N-way ties
- Hi/Lo pot splitting, scoops and low-pot reversion
- merge by addition
- conversion into rounded percentages
"""

from unittest.mock import patch

import numpy as np
import pytest
from hypothesis import given, strategies as st, settings

from models.core import GameVariant, parse_cards
from equity.tally import AggregateTally, merge_tallies, record_showdown
from equity.aggregator import aggregate, equity_fractions
from utils.exceptions import NoScenariosError


# ============================================================================
# AggregateTally.record
# ============================================================================

class TestRecord:
    """High-pot accounting."""

    def test_single_winner(self):
        tally = AggregateTally.empty(2)
        tally.record([(5, 10), (3, 14)])
        assert tally.scenarios == 1
        assert tally.high_wins.tolist() == [1, 0]
        assert tally.high_ties.tolist() == [0, 0]
        assert tally.share_units[0, 1] == 2
        assert tally.share_units[1].sum() == 0

    def test_two_way_tie(self):
        tally = AggregateTally.empty(2)
        tally.record([(1, 10, 9), (1, 10, 9)])
        assert tally.high_wins.tolist() == [0, 0]
        assert tally.high_ties.tolist() == [1, 1]
        assert tally.share_units[:, 2].tolist() == [2, 2]

    def test_three_way_tie_among_four(self):
        tally = AggregateTally.empty(4)
        tally.record([(4, 9), (4, 9), (2, 14), (4, 9)])
        assert tally.high_ties.tolist() == [1, 1, 0, 1]
        assert tally.share_units[:, 3].tolist() == [2, 2, 0, 2]
        fractions = equity_fractions(tally)
        assert fractions.tolist() == pytest.approx([1 / 3, 1 / 3, 0, 1 / 3])

    def test_wrong_player_count(self):
        tally = AggregateTally.empty(2)
        with pytest.raises(ValueError, match="Expected 2 hands"):
            tally.record([(1,), (2,), (3,)])

    def test_empty_needs_players(self):
        with pytest.raises(ValueError):
            AggregateTally.empty(0)


class TestRecordHiLo:
    """Split-pot accounting."""

    def test_split_between_high_and_low(self):
        tally = AggregateTally.empty(2)
        tally.record([(6, 10), (1, 8)], [None, (8, 6, 4, 3, 1)])
        assert tally.low_scenarios == 1
        assert tally.high_wins.tolist() == [1, 0]
        assert tally.low_wins.tolist() == [0, 1]
        assert tally.low_qualified.tolist() == [0, 1]
        assert equity_fractions(tally).tolist() == pytest.approx([0.5, 0.5])

    def test_scoop(self):
        tally = AggregateTally.empty(2)
        tally.record([(4, 5), (1, 13)], [(5, 4, 3, 2, 1), (7, 6, 4, 3, 2)])
        assert tally.high_wins.tolist() == [1, 0]
        assert tally.low_wins.tolist() == [1, 0]
        assert equity_fractions(tally).tolist() == pytest.approx([1.0, 0.0])

    def test_no_low_reverts_to_high(self):
        tally = AggregateTally.empty(3)
        tally.record([(6, 10), (2, 9), (1, 14)], [None, None, None])
        assert tally.low_scenarios == 0
        assert tally.low_wins.sum() == 0
        assert tally.low_ties.sum() == 0
        assert tally.share_units[0, 1] == 2
        assert equity_fractions(tally).tolist() == pytest.approx([1.0, 0.0, 0.0])

    def test_quartered(self):
        """Two players tie the low, one of them also wins the high."""
        tally = AggregateTally.empty(2)
        low = (6, 4, 3, 2, 1)
        tally.record([(3, 8), (1, 12)], [low, low])
        assert tally.low_ties.tolist() == [1, 1]
        assert equity_fractions(tally).tolist() == pytest.approx([0.75, 0.25])


class TestMerge:
    """Tally merging by addition."""

    def _sample(self, outcomes):
        tally = AggregateTally.empty(3)
        for highs in outcomes:
            tally.record(highs)
        return tally

    def test_merge_sums_counters(self):
        a = self._sample([[(3,), (1,), (1,)], [(1,), (1,), (1,)]])
        b = self._sample([[(0,), (4,), (2,)]])
        merged = a + b
        assert merged.scenarios == 3
        assert merged.high_wins.tolist() == [1, 1, 0]
        assert merged.high_ties.tolist() == [1, 1, 1]

    def test_merge_is_order_independent(self):
        a = self._sample([[(3,), (1,), (1,)]])
        b = self._sample([[(0,), (4,), (2,)]])
        c = self._sample([[(2,), (2,), (0,)]])
        assert (a + b) + c == a + (b + c)
        assert a + b + c == c + a + b

    def test_merge_leaves_operands_unchanged(self):
        a = self._sample([[(3,), (1,), (1,)]])
        b = self._sample([[(0,), (4,), (2,)]])
        _ = a + b
        assert a.scenarios == 1
        assert b.scenarios == 1

    def test_merge_player_mismatch(self):
        with pytest.raises(ValueError, match="Cannot merge"):
            AggregateTally.empty(2) + AggregateTally.empty(3)

    def test_merge_tallies_empty(self):
        assert merge_tallies([], 2) == AggregateTally.empty(2)


class TestRecordShowdown:
    """Evaluation of one completed board."""

    def test_holdem_showdown(self):
        tally = AggregateTally.empty(2)
        board = parse_cards('2c 7d 9h Js Qc')
        record_showdown(tally, GameVariant.TEXAS_HOLDEM,
                        [parse_cards('AsAh'), parse_cards('KsKh')], board)
        assert tally.high_wins.tolist() == [1, 0]
        assert tally.low_scenarios == 0

    def test_holdem_board_plays(self):
        tally = AggregateTally.empty(2)
        board = parse_cards('Ts Js Qs Ks As')
        record_showdown(tally, GameVariant.TEXAS_HOLDEM,
                        [parse_cards('2c2d'), parse_cards('3h4h')], board)
        assert tally.high_ties.tolist() == [1, 1]

    def test_omaha_hi_lo_showdown(self):
        tally = AggregateTally.empty(2)
        board = parse_cards('3h 4d 5c Ks Kh')
        record_showdown(tally, GameVariant.OMAHA_HI_LO,
                        [parse_cards('As2dQcJc'), parse_cards('KdKc9s9h')], board)
        # Quads take the high, the wheel takes the low
        assert tally.high_wins.tolist() == [0, 1]
        assert tally.low_wins.tolist() == [1, 0]


# ============================================================================
# aggregate
# ============================================================================

class TestAggregate:
    """Conversion into reported percentages."""

    def test_percentages(self):
        tally = AggregateTally.empty(2)
        tally.record([(2,), (1,)])
        tally.record([(2,), (1,)])
        tally.record([(1,), (2,)])
        tally.record([(1,), (1,)])
        results = aggregate(tally, ['a', 'b'])
        assert [r.player_id for r in results] == ['a', 'b']
        assert results[0].win_pct == 50.0
        assert results[0].tie_pct == 25.0
        assert results[0].equity == 62.5
        assert results[1].equity == 37.5

    def test_rounding_to_two_decimals(self):
        tally = AggregateTally.empty(2)
        tally.record([(2,), (1,)])
        tally.record([(1,), (2,)])
        tally.record([(1,), (2,)])
        results = aggregate(tally, ['a', 'b'])
        assert results[0].equity == 33.33
        assert results[1].equity == 66.67

    def test_explicit_total(self):
        tally = AggregateTally.empty(2)
        tally.record([(2,), (1,)])
        results = aggregate(tally, ['a', 'b'], total_scenarios=4)
        assert results[0].equity == 25.0

    def test_no_scenarios_is_logged_and_raised(self):
        tally = AggregateTally.empty(2)
        with patch('equity.aggregator.get_engine_logger') as mock_logger:
            with pytest.raises(NoScenariosError):
                aggregate(tally, ['a', 'b'])
            mock_logger.return_value.error.assert_called_once()

    def test_player_id_count_mismatch(self):
        tally = AggregateTally.empty(2)
        tally.record([(2,), (1,)])
        with pytest.raises(ValueError, match="player ids"):
            aggregate(tally, ['a'])

    def test_hi_lo_low_percentages(self):
        tally = AggregateTally.empty(2)
        tally.record([(6,), (1,)], [None, (8, 6, 4, 3, 1)])
        tally.record([(6,), (1,)], [None, None])
        results = aggregate(tally, ['a', 'b'])
        assert results[1].low_win_pct == 50.0
        assert results[0].equity == 75.0
        assert results[1].equity == 25.0


strength = st.integers(min_value=0, max_value=3).map(lambda v: (v,))
low_key = st.one_of(st.none(), st.sampled_from([(5, 4, 3, 2, 1), (7, 5, 3, 2, 1), (8, 7, 6, 5, 4)]))


class TestPropertyBasedTally:
    """Property-based tests for tallies."""

    @settings(max_examples=100, deadline=None)
    @given(
        num_players=st.integers(min_value=2, max_value=6),
        data=st.data(),
    )
    def test_equity_sums_to_one(self, num_players, data):
        scenarios = data.draw(st.integers(min_value=1, max_value=20))
        hi_lo = data.draw(st.booleans())
        tally = AggregateTally.empty(num_players)
        for _ in range(scenarios):
            highs = data.draw(st.lists(strength, min_size=num_players, max_size=num_players))
            lows = None
            if hi_lo:
                lows = data.draw(st.lists(low_key, min_size=num_players, max_size=num_players))
            tally.record(highs, lows)

        fractions = equity_fractions(tally)
        assert fractions.sum() == pytest.approx(1.0)
        assert np.all(fractions >= 0)
        assert np.all(fractions <= 1)

        results = aggregate(tally, list(range(num_players)))
        assert sum(r.equity for r in results) == pytest.approx(100.0, abs=0.01 * num_players)
