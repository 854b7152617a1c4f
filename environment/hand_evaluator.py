"""Hand evaluation for Hold'em and Omaha (high and 8-or-better low)."""

from typing import Iterable, List, Optional, Sequence, Tuple
from collections import Counter
from itertools import combinations

from models.core import Card, HandRank


# Highest rank a low hand may contain (8-or-better).
LOW_QUALIFIER = 8

HAND_NAMES = {
    HandRank.HIGH_CARD: 'high card',
    HandRank.PAIR: 'pair',
    HandRank.TWO_PAIR: 'two pair',
    HandRank.THREE_OF_A_KIND: 'three of a kind',
    HandRank.STRAIGHT: 'straight',
    HandRank.FLUSH: 'flush',
    HandRank.FULL_HOUSE: 'full house',
    HandRank.FOUR_OF_A_KIND: 'four of a kind',
    HandRank.STRAIGHT_FLUSH: 'straight flush',
}


class HandEvaluator:
    """Evaluates poker hands and compares them."""

    @staticmethod
    def evaluate_hand(cards: Sequence[Card]) -> Tuple[HandRank, List[int]]:
        """Evaluate a poker hand and return its rank and kickers.

        For 6 or 7 cards the result is the best 5-card hand, identical to
        what best_of_subsets returns but computed from rank and suit counts.

        Args:
            cards: List of 5-7 cards to evaluate

        Returns:
            Tuple of (HandRank, kickers) where kickers is a list of ranks
            in descending significance used for tie-breaking
        """
        if len(cards) < 5:
            raise ValueError(f"Need at least 5 cards to evaluate, got {len(cards)}")
        if len(cards) > 7:
            raise ValueError(f"Can evaluate at most 7 cards, got {len(cards)}")

        if len(cards) == 5:
            return HandEvaluator._evaluate_five_cards(cards)

        return HandEvaluator._evaluate_best(cards)

    @staticmethod
    def best_of_subsets(cards: Sequence[Card]) -> Tuple[HandRank, List[int]]:
        """Find the best 5-card hand by trying every 5-card combination."""
        best_rank = HandRank.HIGH_CARD
        best_kickers = []

        for combo in combinations(cards, 5):
            rank, kickers = HandEvaluator._evaluate_five_cards(combo)
            if (rank.value > best_rank.value or
                    (rank.value == best_rank.value and kickers > best_kickers)):
                best_rank = rank
                best_kickers = kickers

        return best_rank, best_kickers

    @staticmethod
    def _evaluate_five_cards(cards: Sequence[Card]) -> Tuple[HandRank, List[int]]:
        """Evaluate exactly 5 cards."""
        ranks = sorted([c.rank for c in cards], reverse=True)
        suits = [c.suit for c in cards]

        is_flush_hand = is_flush(suits)
        is_straight_hand, straight_high = is_straight(ranks)

        # Straight flush
        if is_flush_hand and is_straight_hand:
            return HandRank.STRAIGHT_FLUSH, [straight_high]

        rank_counts = Counter(ranks)
        counts = sorted(rank_counts.values(), reverse=True)

        # Four of a kind
        if counts[0] == 4:
            quad_rank = [r for r, c in rank_counts.items() if c == 4][0]
            kicker = [r for r, c in rank_counts.items() if c == 1][0]
            return HandRank.FOUR_OF_A_KIND, [quad_rank, kicker]

        # Full house
        if counts[0] == 3 and counts[1] == 2:
            trip_rank = [r for r, c in rank_counts.items() if c == 3][0]
            pair_rank = [r for r, c in rank_counts.items() if c == 2][0]
            return HandRank.FULL_HOUSE, [trip_rank, pair_rank]

        if is_flush_hand:
            return HandRank.FLUSH, ranks

        if is_straight_hand:
            return HandRank.STRAIGHT, [straight_high]

        # Three of a kind
        if counts[0] == 3:
            trip_rank = [r for r, c in rank_counts.items() if c == 3][0]
            kickers = sorted([r for r, c in rank_counts.items() if c == 1], reverse=True)
            return HandRank.THREE_OF_A_KIND, [trip_rank] + kickers

        # Two pair
        if counts[0] == 2 and counts[1] == 2:
            pairs = sorted([r for r, c in rank_counts.items() if c == 2], reverse=True)
            kicker = [r for r, c in rank_counts.items() if c == 1][0]
            return HandRank.TWO_PAIR, pairs + [kicker]

        # One pair
        if counts[0] == 2:
            pair_rank = [r for r, c in rank_counts.items() if c == 2][0]
            kickers = sorted([r for r, c in rank_counts.items() if c == 1], reverse=True)
            return HandRank.PAIR, [pair_rank] + kickers

        return HandRank.HIGH_CARD, ranks

    @staticmethod
    def _evaluate_best(cards: Sequence[Card]) -> Tuple[HandRank, List[int]]:
        """Evaluate the best 5-card hand out of 6 or 7 cards."""
        rank_counts = Counter(c.rank for c in cards)
        by_suit = {}
        for c in cards:
            by_suit.setdefault(c.suit, []).append(c.rank)

        flush_ranks = None
        for suited in by_suit.values():
            if len(suited) >= 5:
                flush_ranks = sorted(suited, reverse=True)
                break

        if flush_ranks is not None:
            high = straight_high(flush_ranks)
            if high:
                return HandRank.STRAIGHT_FLUSH, [high]

        distinct = sorted(rank_counts, reverse=True)
        quads = [r for r in distinct if rank_counts[r] == 4]
        trips = [r for r in distinct if rank_counts[r] == 3]
        pairs = [r for r in distinct if rank_counts[r] == 2]

        if quads:
            quad_rank = quads[0]
            kicker = max(r for r in distinct if r != quad_rank)
            return HandRank.FOUR_OF_A_KIND, [quad_rank, kicker]

        if trips and (len(trips) > 1 or pairs):
            trip_rank = trips[0]
            pair_rank = max(trips[1:] + pairs)
            return HandRank.FULL_HOUSE, [trip_rank, pair_rank]

        if flush_ranks is not None:
            return HandRank.FLUSH, flush_ranks[:5]

        high = straight_high(distinct)
        if high:
            return HandRank.STRAIGHT, [high]

        if trips:
            trip_rank = trips[0]
            kickers = [r for r in distinct if r != trip_rank][:2]
            return HandRank.THREE_OF_A_KIND, [trip_rank] + kickers

        if len(pairs) >= 2:
            high_pair, low_pair = pairs[0], pairs[1]
            kicker = max(r for r in distinct if r != high_pair and r != low_pair)
            return HandRank.TWO_PAIR, [high_pair, low_pair, kicker]

        if pairs:
            pair_rank = pairs[0]
            kickers = [r for r in distinct if r != pair_rank][:3]
            return HandRank.PAIR, [pair_rank] + kickers

        return HandRank.HIGH_CARD, distinct[:5]

    @staticmethod
    def evaluate_low(cards: Sequence[Card]) -> Optional[Tuple[int, ...]]:
        """Evaluate the best ace-to-five low of 8 or better.

        Straights and flushes do not count against a low hand and the Ace
        plays as 1. Any five distinct ranks from the given cards may be used;
        callers restrict the cards (e.g. Omaha 2+3 subsets) beforehand.

        Returns:
            None if fewer than five distinct ranks of 8 or lower exist,
            otherwise the five chosen ranks from highest to lowest. A smaller
            tuple is a better low, e.g. (5, 4, 3, 2, 1) beats (6, 4, 3, 2, 1).
        """
        low_ranks = sorted({1 if c.rank == 14 else c.rank for c in cards
                            if c.rank == 14 or c.rank <= LOW_QUALIFIER})
        if len(low_ranks) < 5:
            return None
        return tuple(sorted(low_ranks[:5], reverse=True))


def is_flush(suits: List[str]) -> bool:
    """Check if all cards have the same suit."""
    return len(set(suits)) == 1


def is_straight(ranks: List[int]) -> Tuple[bool, int]:
    """Check if five cards form a straight.

    Returns:
        Tuple of (is_straight, high_card_rank)
    """
    sorted_ranks = sorted(set(ranks), reverse=True)

    if len(sorted_ranks) == 5:
        if sorted_ranks[0] - sorted_ranks[4] == 4:
            return True, sorted_ranks[0]

    # A-2-3-4-5 (wheel)
    if sorted_ranks == [14, 5, 4, 3, 2]:
        return True, 5  # In a wheel, the high card is 5, not Ace

    return False, 0


def straight_high(ranks: Iterable[int]) -> int:
    """Return the high card of the best straight in any set of ranks, or 0."""
    present = set(ranks)
    if 14 in present:
        present.add(1)
    for high in range(14, 4, -1):
        if (high in present and high - 1 in present and high - 2 in present
                and high - 3 in present and high - 4 in present):
            return high
    return 0


def evaluate_hand(cards: Sequence[Card]) -> Tuple[HandRank, List[int]]:
    """Convenience function to evaluate a hand of 5-7 cards."""
    return HandEvaluator.evaluate_hand(cards)


def evaluate_low(cards: Sequence[Card]) -> Optional[Tuple[int, ...]]:
    """Convenience function for HandEvaluator.evaluate_low."""
    return HandEvaluator.evaluate_low(cards)


def hand_strength(cards: Sequence[Card]) -> Tuple[int, ...]:
    """Return a tuple that orders hands: larger is stronger, equal ties."""
    rank, kickers = HandEvaluator.evaluate_hand(cards)
    return (rank.value, *kickers)


def describe_hand(rank: HandRank, kickers: Sequence[int]) -> str:
    """Human-readable category name; the ace-high straight flush is a royal flush."""
    if rank == HandRank.STRAIGHT_FLUSH and kickers and kickers[0] == 14:
        return 'royal flush'
    return HAND_NAMES[rank]
