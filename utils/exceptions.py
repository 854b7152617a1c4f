"""自定义异常类模块 - 定义Equity引擎中使用的所有自定义异常。

引擎需要处理以下类型的错误：
1. 卡牌错误 - 无效的点数/花色、同一张牌被重复分配
2. 输入错误 - 玩家底牌数量不完整、有效玩家不足、公共牌过多
3. 计算错误 - 场景数为0、计算被取消、工作进程失败
4. 配置错误 - 无效的参数值、配置文件格式错误

引擎不做任何静默恢复：以上错误全部以类型化异常的形式报告给调用方。
"""

from typing import Optional, List, Any


class EquityEngineError(Exception):
    """Equity引擎的基础异常类。

    所有自定义异常都继承自此类，便于统一捕获和处理。

    Attributes:
        message: 错误信息
        details: 额外的错误详情
    """

    def __init__(self, message: str, details: Optional[Any] = None):
        """初始化异常。

        Args:
            message: 错误信息
            details: 额外的错误详情（可选）
        """
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        """返回异常的字符串表示。"""
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


# ============== 卡牌错误 ==============

class CardError(EquityEngineError):
    """卡牌错误的基类。"""
    pass


class InvalidCardError(CardError, ValueError):
    """无效卡牌错误。

    当点数不在2-14范围内、花色不在 h/d/c/s 中或卡牌标签无法解析时抛出。

    Attributes:
        rank: 传入的点数（可能为None）
        suit: 传入的花色（可能为None）
    """

    def __init__(self, message: str, rank: Any = None, suit: Any = None):
        self.rank = rank
        self.suit = suit
        details = None
        if rank is not None or suit is not None:
            details = {"rank": rank, "suit": suit}
        super().__init__(message, details=details)


class DuplicateCardError(CardError):
    """重复卡牌错误。

    当同一张牌同时出现在多个玩家手牌和/或公共牌中时抛出。

    Attributes:
        card: 重复出现的牌
    """

    def __init__(self, card: Any):
        self.card = card
        label = getattr(card, "label", card)
        message = f"Duplicate card: {label} is assigned more than once"
        super().__init__(message, details={"card": str(label)})


# ============== 输入错误 ==============

class HandInputError(EquityEngineError):
    """玩家手牌/公共牌输入错误的基类。"""
    pass


class IncompletePlayerHandError(HandInputError):
    """玩家底牌不完整错误。

    底牌数量既不是0（未知）也不是该变体要求的数量（2或4）时抛出。

    Attributes:
        player_id: 玩家标识
        card_count: 实际底牌数量
        required: 该变体要求的底牌数量
    """

    def __init__(self, player_id: Any, card_count: int, required: int):
        self.player_id = player_id
        self.card_count = card_count
        self.required = required
        message = (
            f"Player {player_id} has {card_count} hole cards; "
            f"expected 0 (unknown) or {required}"
        )
        super().__init__(message, details={
            "player_id": player_id,
            "card_count": card_count,
            "required": required
        })


class InsufficientPlayersError(HandInputError):
    """有效玩家不足错误。

    拥有完整底牌的玩家少于2人时抛出。

    Attributes:
        player_count: 拥有完整底牌的玩家数量
    """

    def __init__(self, player_count: int):
        self.player_count = player_count
        message = f"At least 2 players with complete hands are required, got {player_count}"
        super().__init__(message, details={"player_count": player_count})


class InvalidBoardError(HandInputError):
    """公共牌数量错误（超过5张）。

    Attributes:
        card_count: 公共牌数量
    """

    def __init__(self, card_count: int):
        self.card_count = card_count
        message = f"A board holds at most 5 cards, got {card_count}"
        super().__init__(message, details={"card_count": card_count})


# ============== 计算错误 ==============

class CalculationError(EquityEngineError):
    """计算过程错误的基类。"""
    pass


class NoScenariosError(CalculationError):
    """场景数为0错误。

    输入合法时永远不应出现；出现即说明前置条件被破坏，
    必须中止而不是返回NaN百分比。
    """

    def __init__(self, message: str = "No scenarios were evaluated"):
        super().__init__(message)


class CalculationCancelledError(CalculationError):
    """计算被调用方取消。

    取消只在工作单元之间生效，部分结果会被丢弃。

    Attributes:
        completed_batches: 取消前已完成的工作单元数
        total_batches: 工作单元总数
    """

    def __init__(self, completed_batches: int, total_batches: int):
        self.completed_batches = completed_batches
        self.total_batches = total_batches
        message = f"Calculation cancelled after {completed_batches}/{total_batches} batches"
        super().__init__(message, details={
            "completed_batches": completed_batches,
            "total_batches": total_batches
        })


class WorkerProcessError(CalculationError):
    """工作进程错误。

    当并行计算的工作进程失败时抛出。

    Attributes:
        worker_id: 失败的工作单元编号（未知时为None）
        original_error: 原始异常
    """

    def __init__(
        self,
        message: str = "Worker process failed",
        worker_id: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        self.worker_id = worker_id
        self.original_error = original_error
        details = {}
        if worker_id is not None:
            details["worker_id"] = worker_id
        if original_error is not None:
            details["original_error"] = repr(original_error)
        super().__init__(message, details=details if details else None)


# ============== 配置错误 ==============

class ConfigurationError(EquityEngineError):
    """配置错误的基类。

    当配置参数无效、缺失或不兼容时抛出。
    """
    pass


class InvalidParameterError(ConfigurationError):
    """无效参数错误。

    Attributes:
        parameter_name: 参数名称
        parameter_value: 参数值
        reason: 无效原因
    """

    def __init__(self, parameter_name: str, parameter_value: Any, reason: str):
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value
        self.reason = reason
        message = f"Invalid parameter '{parameter_name}': {reason} (value: {parameter_value!r})"
        super().__init__(message, details={
            "parameter_name": parameter_name,
            "parameter_value": parameter_value,
            "reason": reason
        })


class ConfigValidationError(ConfigurationError):
    """配置验证错误，包含所有验证错误信息。

    Attributes:
        errors: 验证错误列表
    """

    def __init__(self, errors: List[str]):
        self.errors = errors
        message = f"Configuration validation failed: {'; '.join(errors)}"
        super().__init__(message, details={"errors": errors})


class ConfigFileError(ConfigurationError):
    """配置文件错误。

    当配置文件不存在或格式错误时抛出。

    Attributes:
        file_path: 配置文件路径
    """

    def __init__(self, file_path: str, message: Optional[str] = None):
        self.file_path = file_path
        if message is None:
            message = f"Malformed configuration file: {file_path}"
        super().__init__(message, details={"file_path": file_path})
