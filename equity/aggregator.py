"""Equity聚合模块 - 将原始计数转换为对外报告的百分比。

内部计算全程使用完整精度（整数计数 + float64），只在最终报告时
四舍五入到两位小数，避免在大量场景上累积误差。
"""

from typing import Any, List, Optional, Sequence

import numpy as np

from models.core import PlayerResult
from equity.tally import AggregateTally
from utils.exceptions import NoScenariosError
from utils.logger import get_engine_logger


# 报告百分比保留的小数位数
REPORT_DECIMALS = 2


def equity_fractions(tally: AggregateTally, total_scenarios: Optional[int] = None) -> np.ndarray:
    """计算每个玩家的期望底池份额（0-1之间，未四舍五入）。

    Args:
        tally: 累积的结果计数
        total_scenarios: 场景总数（默认取tally.scenarios）

    Returns:
        形状为 (num_players,) 的float64数组

    Raises:
        NoScenariosError: 场景总数为0
    """
    total = _checked_total(tally, total_scenarios)
    group_sizes = np.arange(tally.num_players + 1, dtype=np.float64)
    weights = np.zeros_like(group_sizes)
    weights[1:] = 1.0 / (2.0 * group_sizes[1:])
    return (tally.share_units @ weights) / total


def aggregate(tally: AggregateTally, player_ids: Sequence[Any],
              total_scenarios: Optional[int] = None) -> List[PlayerResult]:
    """将计数转换为每个玩家的 equity / win% / tie% 结果。

    Args:
        tally: 累积的结果计数
        player_ids: 与tally中玩家顺序一致的玩家标识
        total_scenarios: 场景总数（默认取tally.scenarios）

    Returns:
        PlayerResult列表，百分比已四舍五入到两位小数

    Raises:
        NoScenariosError: 场景总数为0
        ValueError: 玩家标识数量与tally不一致
    """
    if len(player_ids) != tally.num_players:
        raise ValueError(
            f"Expected {tally.num_players} player ids, got {len(player_ids)}"
        )

    total = _checked_total(tally, total_scenarios)
    equity = equity_fractions(tally, total) * 100.0
    win_pct = tally.high_wins / total * 100.0
    tie_pct = tally.high_ties / total * 100.0
    low_win_pct = tally.low_wins / total * 100.0
    low_tie_pct = tally.low_ties / total * 100.0

    return [
        PlayerResult(
            player_id=player_id,
            equity=_round(equity[i]),
            win_pct=_round(win_pct[i]),
            tie_pct=_round(tie_pct[i]),
            low_win_pct=_round(low_win_pct[i]),
            low_tie_pct=_round(low_tie_pct[i]),
        )
        for i, player_id in enumerate(player_ids)
    ]


def _checked_total(tally: AggregateTally, total_scenarios: Optional[int]) -> int:
    total = tally.scenarios if total_scenarios is None else total_scenarios
    if total <= 0:
        get_engine_logger().error(
            "Aggregation aborted: %d scenarios for %d players", total, tally.num_players
        )
        raise NoScenariosError()
    return total


def _round(value: float) -> float:
    return round(float(value), REPORT_DECIMALS)
