"""Demonstration of the equity engine."""

from models.core import CalculationMode, EquityConfig, GameVariant, PlayerHand, parse_cards
from environment.hand_evaluator import evaluate_hand, evaluate_low, describe_hand
from environment.variant_rules import best_hand, best_low
from equity import EquityCalculator


def _print_result(result):
    mode = "exact" if result.exact else f"{result.trials} trials"
    print(f"   Mode: {mode}, scenarios: {result.scenarios_evaluated}")
    for player in result.players:
        if not player.included:
            print(f"   {player.player_id}: (unknown cards)")
            continue
        line = (f"   {player.player_id}: equity {player.equity:6.2f}%  "
                f"win {player.win_pct:6.2f}%  tie {player.tie_pct:6.2f}%")
        if result.variant.has_low_pot:
            line += f"  low win {player.low_win_pct:6.2f}%  low tie {player.low_tie_pct:6.2f}%"
        if player.hand_name:
            line += f"  [{player.hand_name}]"
        print(line)
    print()


def demo_hand_evaluation():
    """Demonstrate high and low evaluation."""
    print("=== Hand Evaluation Demo ===\n")

    for label in ["As Ks Qs Js Ts", "Ah 2d 3c 4s 5h", "8h 8d 8c Ks Kh 2c 3d"]:
        cards = parse_cards(label)
        rank, kickers = evaluate_hand(cards)
        print(f"   {label}: {rank.name} ({describe_hand(rank, kickers)}), kickers {kickers}")
    print()

    print("8-or-better low (ace plays low, smaller key wins):")
    for label in ["Ah 2d 3c 4s 5h", "8h 7d 6c 4s 3h", "9h 7d 6c 4s 3h", "Ah Ad 3c 4s 5h"]:
        low = evaluate_low(parse_cards(label))
        print(f"   {label}: {low if low is not None else 'does not qualify'}")
    print()


def demo_omaha_rules():
    """Omaha must use exactly two hole cards and three board cards."""
    print("=== Omaha Rules Demo ===\n")

    hole = parse_cards("As Ks 2d 3d")
    board = parse_cards("Qs Js 9s 4c 5h")
    print(f"   Hole: {' '.join(map(str, hole))}  Board: {' '.join(map(str, board))}")

    # Hold'em may use any five of the seven cards, so AsKs makes the flush
    rank, kickers = best_hand(GameVariant.TEXAS_HOLDEM, hole[:2], board)
    print(f"   texas-holdem (As Ks): {describe_hand(rank, kickers)}")

    # Omaha must use exactly two of the four hole cards
    rank, kickers = best_hand(GameVariant.OMAHA_HIGH, hole, board)
    print(f"   omaha-high: {describe_hand(rank, kickers)}")
    print(f"   omaha-hi-lo low: {best_low(GameVariant.OMAHA_HI_LO, hole, board)}")
    print()


def demo_equity():
    """Compute equity for each variant."""
    print("=== Equity Demo ===\n")
    calculator = EquityCalculator(EquityConfig(num_workers=1))

    print("1. Hold'em on the flop, AhKh vs QsQd (exact):")
    result = calculator.compute_equity(
        [("Hero", "AhKh"), ("Villain", "QsQd")], board="2h 7h 9c")
    _print_result(result)

    print("2. Hold'em preflop, three players, one unknown (simulation):")
    result = calculator.compute_equity(
        [PlayerHand("P1", "AsAh"), PlayerHand("P2", ""), PlayerHand("P3", "7c8c")],
        mode=CalculationMode.simulate(20000), seed=7)
    _print_result(result)

    print("3. Omaha high on the turn:")
    result = calculator.compute_equity(
        [("P1", "AsKsQdJd"), ("P2", "9h9c8h7c")],
        board="Ts 9s 2d 3c", variant=GameVariant.OMAHA_HIGH)
    _print_result(result)

    print("4. Omaha hi/lo on the turn:")
    result = calculator.compute_equity(
        [("P1", "As2dKcKh"), ("P2", "QsQdJcJh")],
        board="3c 4h 9d Ts", variant="omaha-hi-lo")
    _print_result(result)


if __name__ == "__main__":
    print("Poker Equity Engine Demo\n")
    print("=" * 60)
    print()

    demo_hand_evaluation()
    print("=" * 60)
    print()

    demo_omaha_rules()
    print("=" * 60)
    print()

    demo_equity()
    print("=" * 60)
    print()

    print("All equity engine features working correctly!")
