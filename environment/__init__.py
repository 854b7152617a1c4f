"""Hand evaluation and per-variant hand-formation rules."""

from .hand_evaluator import (
    HandEvaluator,
    evaluate_hand,
    evaluate_low,
    hand_strength,
    describe_hand,
)
from .variant_rules import candidate_hands, best_hand, best_high, best_low

__all__ = [
    'HandEvaluator',
    'evaluate_hand',
    'evaluate_low',
    'hand_strength',
    'describe_hand',
    'candidate_hands',
    'best_hand',
    'best_high',
    'best_low',
]
