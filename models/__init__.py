"""扑克Equity引擎的核心数据模型。

本模块导出以下组件：

- Card: 扑克牌（不可变值类型）
- HandRank: 手牌等级枚举
- GameVariant: 游戏变体枚举（德州扑克、奥马哈高牌、奥马哈高低牌）
- PlayerHand: 玩家底牌
- Board: 公共牌
- CalculationMode: 精确枚举/蒙特卡洛模拟模式
- PlayerResult / EquityResult: 计算结果
- EquityConfig: 引擎配置
- 牌组工具函数：create_deck, remaining_deck, validate_no_duplicates, parse_card, parse_cards
"""

from .core import (
    Card,
    HandRank,
    GameVariant,
    PlayerHand,
    Board,
    CalculationMode,
    PlayerResult,
    EquityResult,
    EquityConfig,
    create_deck,
    remaining_deck,
    validate_no_duplicates,
    parse_card,
    parse_cards,
)

__all__ = [
    'Card',
    'HandRank',
    'GameVariant',
    'PlayerHand',
    'Board',
    'CalculationMode',
    'PlayerResult',
    'EquityResult',
    'EquityConfig',
    'create_deck',
    'remaining_deck',
    'validate_no_duplicates',
    'parse_card',
    'parse_cards',
]
