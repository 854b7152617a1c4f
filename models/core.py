"""Core data classes for the poker hand-equity engine."""

from dataclasses import dataclass, field
from typing import List, Tuple, Dict, Any, Optional, Iterable, Union
from enum import Enum

from utils.exceptions import (
    InvalidCardError,
    DuplicateCardError,
    InvalidBoardError,
)


RANKS = range(2, 15)
SUITS = ('h', 'd', 'c', 's')

RANK_LABELS = {10: 'T', 11: 'J', 12: 'Q', 13: 'K', 14: 'A'}
LABEL_RANKS = {'T': 10, 'J': 11, 'Q': 12, 'K': 13, 'A': 14}
SUIT_SYMBOLS = {'h': '♥', 'd': '♦', 'c': '♣', 's': '♠'}
SUIT_NAMES = {'hearts': 'h', 'diamonds': 'd', 'clubs': 'c', 'spades': 's'}


class HandRank(Enum):
    """Poker hand rankings."""
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8


class GameVariant(Enum):
    """游戏变体枚举。

    - TEXAS_HOLDEM: 2张底牌，7选5
    - OMAHA_HIGH: 4张底牌，必须使用2张底牌+3张公共牌
    - OMAHA_HI_LO: 同OMAHA_HIGH，另外争夺低牌底池（8或更小）
    """
    TEXAS_HOLDEM = "texas-holdem"
    OMAHA_HIGH = "omaha-high"
    OMAHA_HI_LO = "omaha-hi-lo"

    @property
    def hole_card_count(self) -> int:
        """Number of hole cards a complete hand holds."""
        return 2 if self is GameVariant.TEXAS_HOLDEM else 4

    @property
    def has_low_pot(self) -> bool:
        """Whether a qualifying low hand takes half the pot."""
        return self is GameVariant.OMAHA_HI_LO

    @classmethod
    def from_value(cls, value: Union[str, 'GameVariant']) -> 'GameVariant':
        """从字符串解析游戏变体（接受 'holdem'、'omaha'、'omaha-8' 等别名）。"""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace('_', '-')
        aliases = {
            'holdem': cls.TEXAS_HOLDEM,
            'hold-em': cls.TEXAS_HOLDEM,
            "hold'em": cls.TEXAS_HOLDEM,
            'omaha': cls.OMAHA_HIGH,
            'plo': cls.OMAHA_HIGH,
            'omaha-hilo': cls.OMAHA_HI_LO,
            'omaha-8': cls.OMAHA_HI_LO,
        }
        if key in aliases:
            return aliases[key]
        for variant in cls:
            if variant.value == key:
                return variant
        valid = [v.value for v in cls]
        raise ValueError(f"Unknown game variant: {value!r}. Must be one of {valid}.")


@dataclass(frozen=True)
class Card:
    """Represents a playing card.

    Attributes:
        rank: Card rank (2-14, where 11=J, 12=Q, 13=K, 14=A)
        suit: Card suit ('h'=hearts, 'd'=diamonds, 'c'=clubs, 's'=spades)
    """
    rank: int  # 2-14 (2-10, J=11, Q=12, K=13, A=14)
    suit: str  # 'h', 'd', 'c', 's'

    def __post_init__(self):
        """Validate card values."""
        if not isinstance(self.rank, int) or isinstance(self.rank, bool) or not 2 <= self.rank <= 14:
            raise InvalidCardError(f"Invalid rank: {self.rank}. Must be between 2 and 14.",
                                   rank=self.rank, suit=self.suit)
        if self.suit not in SUITS:
            raise InvalidCardError(f"Invalid suit: {self.suit}. Must be one of 'h', 'd', 'c', 's'.",
                                   rank=self.rank, suit=self.suit)

    def __str__(self) -> str:
        """String representation of the card."""
        rank_str = {11: 'J', 12: 'Q', 13: 'K', 14: 'A'}.get(self.rank, str(self.rank))
        return f"{rank_str}{SUIT_SYMBOLS[self.suit]}"

    @property
    def label(self) -> str:
        """Two-character label such as 'Ah' or 'Td'."""
        return f"{RANK_LABELS.get(self.rank, str(self.rank))}{self.suit}"

    @property
    def index(self) -> int:
        """Position of the card in the deck returned by create_deck (0-51)."""
        return (self.rank - 2) * 4 + SUITS.index(self.suit)


def create_deck() -> List[Card]:
    """Create a complete 52-card deck in rank-major order."""
    return [Card(rank=rank, suit=suit) for rank in RANKS for suit in SUITS]


def remaining_deck(used_cards: Iterable[Card]) -> List[Card]:
    """Return the unseen pool: the deck minus every used card, in deck order."""
    used = set(used_cards)
    return [c for c in create_deck() if c not in used]


def validate_no_duplicates(cards: Iterable[Card]) -> None:
    """Raise DuplicateCardError if any card appears more than once."""
    seen = set()
    for card in cards:
        if card in seen:
            raise DuplicateCardError(card)
        seen.add(card)


def parse_card(label: str) -> Card:
    """Parse a card label such as 'As', 'td', '10h' or 'Q♠'.

    Raises:
        InvalidCardError: If the label is not a valid card
    """
    if not isinstance(label, str):
        raise InvalidCardError(f"Invalid card label: {label!r}")
    text = label.strip()
    if len(text) < 2:
        raise InvalidCardError(f"Invalid card label: {label!r}")

    rank_text, suit_text = text[:-1].upper(), text[-1]
    symbol_suits = {symbol: suit for suit, symbol in SUIT_SYMBOLS.items()}
    suit = symbol_suits.get(suit_text, suit_text.lower())

    if rank_text == '10':
        rank = 10
    elif rank_text in LABEL_RANKS:
        rank = LABEL_RANKS[rank_text]
    elif rank_text.isdigit() and len(rank_text) == 1:
        rank = int(rank_text)
    else:
        raise InvalidCardError(f"Invalid rank in card label: {label!r}")

    return Card(rank=rank, suit=suit)


def parse_cards(cards: Union[str, Iterable[str], None]) -> List[Card]:
    """Parse a list of labels or a compact string ('AsKd', 'As Kd', '10h9h').

    An empty string or None yields an empty list.
    """
    if cards is None:
        return []
    if isinstance(cards, str):
        text = cards.replace(',', ' ').strip()
        if not text:
            return []
        labels = []
        for token in text.split():
            labels.extend(_split_compact(token))
        return [parse_card(label) for label in labels]
    return [c if isinstance(c, Card) else parse_card(c) for c in cards]


def _split_compact(token: str) -> List[str]:
    """Split 'AsKd10h' into ['As', 'Kd', '10h']."""
    labels = []
    i = 0
    while i < len(token):
        width = 3 if token.startswith('10', i) else 2
        piece = token[i:i + width]
        if len(piece) < 2:
            raise InvalidCardError(f"Invalid card string: {token!r}")
        labels.append(piece)
        i += width
    return labels


@dataclass
class PlayerHand:
    """A player's hole cards.

    An empty hand means the player's cards are unknown; such a player is
    reported but takes no part in the showdown.

    Attributes:
        player_id: Caller-chosen identifier echoed back in the result
        hole_cards: 0, 2 (Hold'em) or 4 (Omaha) cards
    """
    player_id: Any
    hole_cards: List[Card] = field(default_factory=list)

    def __post_init__(self):
        self.hole_cards = parse_cards(self.hole_cards)

    @property
    def is_empty(self) -> bool:
        return len(self.hole_cards) == 0


@dataclass
class Board:
    """Known community cards (0-5), flop/turn/river flattened.

    Attributes:
        known: Known board cards in dealing order
    """
    known: List[Card] = field(default_factory=list)

    def __post_init__(self):
        self.known = parse_cards(self.known)
        if len(self.known) > 5:
            raise InvalidBoardError(len(self.known))

    @classmethod
    def from_streets(cls, flop: Optional[Iterable[Optional[Card]]] = None,
                     turn: Optional[Card] = None,
                     river: Optional[Card] = None) -> 'Board':
        """Build a board from street slots; empty slots (None) are skipped."""
        slots = list(flop or []) + [turn, river]
        return cls(known=[c for c in slots if c is not None])

    @property
    def missing(self) -> int:
        """Number of board slots still to be dealt."""
        return 5 - len(self.known)


@dataclass(frozen=True)
class CalculationMode:
    """Caller override of the exact/simulation choice.

    Attributes:
        exact: True for exhaustive enumeration
        trials: Simulation size (ignored when exact)
    """
    exact: bool
    trials: Optional[int] = None

    def __post_init__(self):
        if not self.exact and self.trials is not None and self.trials <= 0:
            raise ValueError(f"Number of trials must be positive, got {self.trials}")

    @classmethod
    def exhaustive(cls) -> 'CalculationMode':
        return cls(exact=True)

    @classmethod
    def simulate(cls, trials: Optional[int] = None) -> 'CalculationMode':
        return cls(exact=False, trials=trials)


@dataclass
class PlayerResult:
    """单个玩家的Equity结果（百分比，保留两位小数）。

    Attributes:
        player_id: 玩家标识
        equity: 期望底池份额（0-100）
        win_pct: 独赢（高牌底池）的场景百分比
        tie_pct: 平分（高牌底池）的场景百分比
        low_win_pct: 独赢低牌底池的场景百分比（仅Hi/Lo）
        low_tie_pct: 平分低牌底池的场景百分比（仅Hi/Lo）
        included: 是否参与计算（无底牌的玩家为False）
        hand_name: 当前公共牌上的成牌名称（公共牌少于3张时为None）
    """
    player_id: Any
    equity: float = 0.0
    win_pct: float = 0.0
    tie_pct: float = 0.0
    low_win_pct: float = 0.0
    low_tie_pct: float = 0.0
    included: bool = True
    hand_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.player_id,
            'equity': self.equity,
            'win_pct': self.win_pct,
            'tie_pct': self.tie_pct,
            'low_win_pct': self.low_win_pct,
            'low_tie_pct': self.low_tie_pct,
            'included': self.included,
            'hand_name': self.hand_name,
        }


@dataclass
class EquityResult:
    """一次Equity计算的完整结果。

    Attributes:
        players: 每个玩家的结果（与输入顺序一致）
        exact: 是否为精确枚举结果
        scenarios_evaluated: 评估的场景数量
        variant: 游戏变体
        trials: 模拟次数（精确模式下为None）
    """
    players: List[PlayerResult]
    exact: bool
    scenarios_evaluated: int
    variant: GameVariant = GameVariant.TEXAS_HOLDEM
    trials: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'players': [p.to_dict() for p in self.players],
            'exact': self.exact,
            'scenarios_evaluated': self.scenarios_evaluated,
            'variant': self.variant.value,
            'trials': self.trials,
        }

    def for_player(self, player_id: Any) -> PlayerResult:
        for result in self.players:
            if result.player_id == player_id:
                return result
        raise KeyError(player_id)


@dataclass
class EquityConfig:
    """Equity引擎配置参数。

    Attributes:
        exact_threshold: 未知公共牌数不超过该值时使用精确枚举
        default_trials: 调用方未指定时的蒙特卡洛模拟次数
        num_workers: 并行工作进程数（0=使用所有CPU核心）
        parallel_min_scenarios: 场景数低于该值时在当前进程内计算
        batch_size: 每个模拟工作单元的试验次数
        random_seed: 默认随机种子（None表示每次运行结果不同）
    """
    exact_threshold: int = 4
    default_trials: int = 10000
    num_workers: int = 0
    parallel_min_scenarios: int = 50000
    batch_size: int = 2500
    random_seed: Optional[int] = None

    def __post_init__(self):
        """Validate configuration parameters."""
        if not isinstance(self.exact_threshold, int) or not 0 <= self.exact_threshold <= 5:
            raise ValueError(f"Exact threshold must be an integer in [0, 5], got {self.exact_threshold}")
        if self.default_trials <= 0:
            raise ValueError(f"Default trials must be positive, got {self.default_trials}")
        if self.num_workers < 0:
            raise ValueError(f"Number of workers cannot be negative, got {self.num_workers}")
        if self.parallel_min_scenarios < 0:
            raise ValueError(f"Parallel minimum scenarios cannot be negative, got {self.parallel_min_scenarios}")
        if self.batch_size <= 0:
            raise ValueError(f"Batch size must be positive, got {self.batch_size}")
        if self.random_seed is not None and self.random_seed < 0:
            raise ValueError(f"Random seed cannot be negative, got {self.random_seed}")
