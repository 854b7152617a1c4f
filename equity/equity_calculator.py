"""Equity计算器模块。

本模块提供引擎唯一的对外入口 EquityCalculator.compute_equity：

- 校验输入（手牌张数、重复牌、参与比牌的玩家数量）
- 根据未知公共牌数量选择精确枚举或蒙特卡洛模拟
- 合并计数并转换为每个玩家的 equity / win% / tie%

每次请求都拥有独立的牌池和计数，不同请求之间没有共享状态。
"""

import time
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Union

from models.core import (
    Board,
    CalculationMode,
    Card,
    EquityConfig,
    EquityResult,
    GameVariant,
    PlayerHand,
    PlayerResult,
    remaining_deck,
    validate_no_duplicates,
)
from environment.hand_evaluator import describe_hand
from environment.variant_rules import best_hand
from equity.aggregator import aggregate
from equity.enumeration import enumerate_exact
from equity.executor import resolve_workers
from equity.mode_selector import ModeDecision, ModePolicy
from equity.simulation import simulate
from utils.exceptions import (
    IncompletePlayerHandError,
    InsufficientPlayersError,
    InvalidParameterError,
)
from utils.logger import LoggerMixin


PlayersInput = Iterable[Union[PlayerHand, Tuple[Any, Any]]]
BoardInput = Union[Board, str, Sequence[Card], Sequence[str], None]


class EquityCalculator(LoggerMixin):
    """Equity计算器类。

    根据配置选择计算模式，并在场景数量足够大时使用多进程并行计算。
    """

    def __init__(self, config: Optional[EquityConfig] = None,
                 policy: Optional[ModePolicy] = None):
        """初始化Equity计算器。

        Args:
            config: 引擎配置（默认使用EquityConfig()）
            policy: 模式选择策略（默认由config的阈值和模拟次数构造）
        """
        self.config = config or EquityConfig()
        self.policy = policy or ModePolicy.from_config(self.config)
        self.num_workers = resolve_workers(self.config.num_workers)

    def compute_equity(self, players: PlayersInput,
                       board: BoardInput = None,
                       variant: Union[GameVariant, str] = GameVariant.TEXAS_HOLDEM,
                       mode: Optional[CalculationMode] = None,
                       seed: Optional[int] = None,
                       should_cancel: Optional[Callable[[], bool]] = None) -> EquityResult:
        """计算每个玩家的Equity。

        Args:
            players: PlayerHand列表，或 (player_id, hole_cards) 元组
            board: 已知公共牌（Board、牌面字符串或牌列表）
            variant: 游戏变体
            mode: 调用方指定的计算模式（None表示由策略决定）
            seed: 模拟随机种子（None时使用配置中的random_seed）
            should_cancel: 取消检查回调，在工作单元之间调用

        Returns:
            EquityResult，players顺序与输入一致

        Raises:
            InvalidParameterError: 随机种子为负数
            IncompletePlayerHandError: 玩家手牌张数既不是0也不是变体要求的张数
            DuplicateCardError: 同一张牌出现多次
            InsufficientPlayersError: 少于2名玩家有完整手牌
            CalculationCancelledError: 计算被取消
        """
        if seed is not None and (not isinstance(seed, int) or seed < 0):
            raise InvalidParameterError('seed', seed, 'must be a non-negative integer')

        variant = GameVariant.from_value(variant)
        board = _coerce_board(board)
        hands = _coerce_players(players)

        contenders = self._validate(hands, board, variant)
        used = [c for hand in contenders for c in hand.hole_cards] + board.known
        pool = remaining_deck(used)

        decision = self.policy.select(board.missing, pool_size=len(pool), override=mode)
        self.logger.info(
            "Computing %s equity for %d players: %s, %d unknown board cards",
            variant.value, len(contenders),
            "exact" if decision.exact else f"{decision.trials} trials",
            board.missing,
        )

        start = time.time()
        tally = self._run(decision, contenders, board, pool, variant, seed, should_cancel)
        elapsed = time.time() - start
        self.logger.info("Evaluated %d scenarios in %.3fs", tally.scenarios, elapsed)

        results = aggregate(tally, [p.player_id for p in contenders])
        if len(board.known) >= 3:
            for hand, result in zip(contenders, results):
                rank, kickers = best_hand(variant, hand.hole_cards, board.known)
                result.hand_name = describe_hand(rank, kickers)

        by_contender = iter(results)
        ordered = [
            PlayerResult(player_id=hand.player_id, included=False) if hand.is_empty
            else next(by_contender)
            for hand in hands
        ]

        return EquityResult(
            players=ordered,
            exact=decision.exact,
            scenarios_evaluated=tally.scenarios,
            variant=variant,
            trials=decision.trials,
        )

    def _validate(self, hands: List[PlayerHand], board: Board,
                  variant: GameVariant) -> List[PlayerHand]:
        required = variant.hole_card_count
        for hand in hands:
            count = len(hand.hole_cards)
            if count not in (0, required):
                raise IncompletePlayerHandError(hand.player_id, count, required)

        validate_no_duplicates([c for hand in hands for c in hand.hole_cards] + board.known)

        contenders = [hand for hand in hands if not hand.is_empty]
        if len(contenders) < 2:
            raise InsufficientPlayersError(len(contenders))
        return contenders

    def _run(self, decision: ModeDecision, contenders: List[PlayerHand], board: Board,
             pool: List[Card], variant: GameVariant, seed: Optional[int],
             should_cancel: Optional[Callable[[], bool]]):
        workers = self.num_workers
        if decision.scenario_count < self.config.parallel_min_scenarios:
            workers = 1
        hole_cards = [hand.hole_cards for hand in contenders]

        if decision.exact:
            return enumerate_exact(hole_cards, board.known, pool, variant,
                                   num_workers=workers, should_cancel=should_cancel)

        if seed is None:
            seed = self.config.random_seed
        return simulate(hole_cards, board.known, pool, decision.trials, variant,
                        seed=seed, batch_size=self.config.batch_size,
                        num_workers=workers, should_cancel=should_cancel)


def compute_equity(players: PlayersInput, board: BoardInput = None,
                   variant: Union[GameVariant, str] = GameVariant.TEXAS_HOLDEM,
                   mode: Optional[CalculationMode] = None,
                   seed: Optional[int] = None,
                   config: Optional[EquityConfig] = None) -> EquityResult:
    """便捷函数：使用给定配置计算一次Equity。"""
    return EquityCalculator(config).compute_equity(players, board, variant, mode=mode, seed=seed)


def equal_split_placeholder(players: PlayersInput,
                            variant: Union[GameVariant, str] = GameVariant.TEXAS_HOLDEM) -> EquityResult:
    """少于2名玩家有完整手牌时显示的中性结果：每位玩家平分100%。

    这是调用方（界面层）的兜底显示，不经过引擎计算，因此scenarios_evaluated为0。

    Args:
        players: PlayerHand列表，或 (player_id, hole_cards) 元组
        variant: 请求的游戏变体（原样回显）
    """
    hands = _coerce_players(players)
    share = round(100.0 / len(hands), 2) if hands else 0.0
    return EquityResult(
        players=[PlayerResult(player_id=hand.player_id, equity=share) for hand in hands],
        exact=False,
        scenarios_evaluated=0,
        variant=GameVariant.from_value(variant),
    )


def _coerce_players(players: PlayersInput) -> List[PlayerHand]:
    hands = []
    for player in players:
        if isinstance(player, PlayerHand):
            hands.append(player)
        else:
            player_id, hole_cards = player
            hands.append(PlayerHand(player_id=player_id, hole_cards=hole_cards))
    return hands


def _coerce_board(board: BoardInput) -> Board:
    if isinstance(board, Board):
        return board
    return Board(known=board or [])
