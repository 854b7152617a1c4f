"""精确枚举模块 - 遍历所有可能的剩余公共牌组合。

工作按“首张补牌”切分：第 i 个工作单元负责所有以 pool[i] 作为第一张
（按牌池顺序）的组合。各单元互不重叠且覆盖全部 C(n, k) 种补牌，
因此合并后的结果与串行遍历完全相同。
"""

from itertools import combinations
from math import comb
from typing import Callable, List, Optional, Sequence, Tuple

from models.core import Card, GameVariant
from equity.tally import AggregateTally, record_showdown
from equity.executor import run_work_items
from utils.logger import get_engine_logger


def _enumerate_chunk(args: Tuple) -> AggregateTally:
    """枚举一个工作单元（用于并行计算，必须是模块级函数）。

    Args:
        args: (variant, player_hands, known_board, pool, missing, lead_index)
            lead_index 为 None 表示公共牌已完整
    """
    variant, player_hands, known_board, pool, missing, lead_index = args
    tally = AggregateTally.empty(len(player_hands))

    if lead_index is None:
        record_showdown(tally, variant, player_hands, known_board)
        return tally

    lead = pool[lead_index]
    for rest in combinations(pool[lead_index + 1:], missing - 1):
        board = known_board + [lead, *rest]
        record_showdown(tally, variant, player_hands, board)
    return tally


def build_work_items(variant: GameVariant, player_hands: Sequence[Sequence[Card]],
                     known_board: Sequence[Card], pool: Sequence[Card]) -> List[Tuple]:
    """将枚举空间切分为互不重叠的工作单元。"""
    hands = [list(h) for h in player_hands]
    board = list(known_board)
    cards = list(pool)
    missing = 5 - len(board)

    if missing == 0:
        return [(variant, hands, board, cards, 0, None)]
    return [
        (variant, hands, board, cards, missing, i)
        for i in range(len(cards) - missing + 1)
    ]


def enumerate_exact(player_hands: Sequence[Sequence[Card]],
                    known_board: Sequence[Card],
                    pool: Sequence[Card],
                    variant: GameVariant = GameVariant.TEXAS_HOLDEM,
                    num_workers: int = 1,
                    should_cancel: Optional[Callable[[], bool]] = None) -> AggregateTally:
    """对所有剩余公共牌组合进行精确枚举。

    Args:
        player_hands: 参与比牌的玩家底牌
        known_board: 已知公共牌（0-5张）
        pool: 未出现的牌
        variant: 游戏变体
        num_workers: 工作进程数（1=当前进程内计算）
        should_cancel: 取消检查回调，在工作单元之间调用

    Returns:
        场景数为 C(len(pool), 5 - len(known_board)) 的计数结果
    """
    missing = 5 - len(known_board)
    if missing < 0:
        raise ValueError(f"Board has {len(known_board)} cards, at most 5 allowed")
    if len(pool) < missing:
        raise ValueError(f"Pool of {len(pool)} cards cannot complete a board missing {missing}")

    items = build_work_items(variant, player_hands, known_board, pool)
    get_engine_logger().debug(
        "Exact enumeration: %d boards in %d work items", comb(len(pool), missing), len(items)
    )
    return run_work_items(_enumerate_chunk, items, len(player_hands),
                          num_workers=num_workers, should_cancel=should_cancel)
