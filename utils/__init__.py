"""工具函数和辅助模块。

该包提供以下功能：
- 自定义异常（exceptions）
- 日志记录（logger）
- 配置管理（config_manager，需单独导入：from utils.config_manager import ConfigManager）
"""

from utils.exceptions import (
    # 基础异常
    EquityEngineError,
    # 卡牌错误
    CardError,
    InvalidCardError,
    DuplicateCardError,
    # 输入错误
    HandInputError,
    IncompletePlayerHandError,
    InsufficientPlayersError,
    InvalidBoardError,
    # 计算错误
    CalculationError,
    NoScenariosError,
    CalculationCancelledError,
    WorkerProcessError,
    # 配置错误
    ConfigurationError,
    InvalidParameterError,
    ConfigValidationError,
    ConfigFileError,
)

from utils.logger import (
    LoggerConfig,
    get_logger,
    clear_loggers,
    LoggerMixin,
    configure_logging,
    get_engine_logger,
    get_cli_logger,
)

__all__ = [
    # 基础异常
    'EquityEngineError',
    # 卡牌错误
    'CardError',
    'InvalidCardError',
    'DuplicateCardError',
    # 输入错误
    'HandInputError',
    'IncompletePlayerHandError',
    'InsufficientPlayersError',
    'InvalidBoardError',
    # 计算错误
    'CalculationError',
    'NoScenariosError',
    'CalculationCancelledError',
    'WorkerProcessError',
    # 配置错误
    'ConfigurationError',
    'InvalidParameterError',
    'ConfigValidationError',
    'ConfigFileError',
    # 日志功能
    'LoggerConfig',
    'get_logger',
    'clear_loggers',
    'LoggerMixin',
    'configure_logging',
    'get_engine_logger',
    'get_cli_logger',
]
