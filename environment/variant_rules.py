"""Per-variant hand-formation rules.

Each game variant maps to a strategy that offers the evaluator the legal
5-card (or, for Hold'em, 7-card) candidate sets:

- Texas Hold'em: any five of the two hole cards plus the board
- Omaha: exactly two of the four hole cards plus exactly three board cards
"""

from itertools import combinations
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from models.core import Card, GameVariant, HandRank
from environment.hand_evaluator import HandEvaluator


def _holdem_candidates(hole_cards: Sequence[Card], board: Sequence[Card]) -> Iterator[List[Card]]:
    """Hold'em plays the best five of all seven cards, offered as one set."""
    yield list(hole_cards) + list(board)


def _omaha_candidates(hole_cards: Sequence[Card], board: Sequence[Card]) -> Iterator[List[Card]]:
    """Omaha plays exactly two hole cards and exactly three board cards."""
    board_triples = list(combinations(board, 3))
    for hole_pair in combinations(hole_cards, 2):
        for board_triple in board_triples:
            yield [hole_pair[0], hole_pair[1], *board_triple]


CANDIDATE_STRATEGIES: Dict[GameVariant, Callable[[Sequence[Card], Sequence[Card]], Iterator[List[Card]]]] = {
    GameVariant.TEXAS_HOLDEM: _holdem_candidates,
    GameVariant.OMAHA_HIGH: _omaha_candidates,
    GameVariant.OMAHA_HI_LO: _omaha_candidates,
}


def candidate_hands(variant: GameVariant, hole_cards: Sequence[Card],
                    board: Sequence[Card]) -> Iterator[List[Card]]:
    """Yield the card sets a player may form a hand from under the variant."""
    return CANDIDATE_STRATEGIES[variant](hole_cards, board)


def best_hand(variant: GameVariant, hole_cards: Sequence[Card],
              board: Sequence[Card]) -> Tuple[HandRank, List[int]]:
    """Return the best (HandRank, kickers) a player can make."""
    best = None
    best_key = None
    for cards in candidate_hands(variant, hole_cards, board):
        rank, kickers = HandEvaluator.evaluate_hand(cards)
        key = (rank.value, kickers)
        if best_key is None or key > best_key:
            best_key = key
            best = (rank, kickers)
    return best


def best_high(variant: GameVariant, hole_cards: Sequence[Card],
              board: Sequence[Card]) -> Tuple[int, ...]:
    """Return the comparable strength of the best high hand (larger wins)."""
    rank, kickers = best_hand(variant, hole_cards, board)
    return (rank.value, *kickers)


def best_low(variant: GameVariant, hole_cards: Sequence[Card],
             board: Sequence[Card]) -> Optional[Tuple[int, ...]]:
    """Return the best qualifying low key (smaller wins), or None."""
    best = None
    for cards in candidate_hands(variant, hole_cards, board):
        low = HandEvaluator.evaluate_low(cards)
        if low is not None and (best is None or low < best):
            best = low
    return best
