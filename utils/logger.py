"""日志记录模块 - Equity引擎和命令行使用的日志器。

基于Python标准库logging：
- 引擎日志器 'equity' 和命令行日志器 'cli'，以及 LoggerMixin 按类名命名的日志器
- 控制台输出到stderr，文件输出（带轮转）默认关闭，引擎作为库使用时不写磁盘
- configure_logging 替换全局配置并清空缓存，日志器在下次获取时重建
"""

import logging
import sys
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict


LOG_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}

DEFAULT_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
DETAILED_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - [%(filename)s:%(lineno)d] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# 单个日志文件最大 10MB，保留 5 个备份
MAX_FILE_SIZE = 10 * 1024 * 1024
BACKUP_COUNT = 5


@dataclass
class LoggerConfig:
    """日志配置。

    Attributes:
        level: 日志级别名称（不区分大小写）
        log_path: 日志文件路径（仅在file_output为True时使用）
        console_output: 是否输出到stderr
        file_output: 是否写入轮转日志文件
        detailed: 是否在每条日志中包含文件名和行号
    """
    level: str = 'WARNING'
    log_path: str = 'logs/equity_engine.log'
    console_output: bool = True
    file_output: bool = False
    detailed: bool = False

    def __post_init__(self):
        self.level = self.level.upper()
        if self.level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.level}. Valid levels: {list(LOG_LEVELS.keys())}")


_config = LoggerConfig()
_loggers: Dict[str, logging.Logger] = {}


def _build_logger(name: str, config: LoggerConfig) -> logging.Logger:
    logger = logging.getLogger(name)
    level = LOG_LEVELS[config.level]
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = logging.Formatter(
        DETAILED_FORMAT if config.detailed else DEFAULT_FORMAT, DATE_FORMAT
    )
    handlers = []
    if config.console_output:
        handlers.append(logging.StreamHandler(sys.stderr))
    if config.file_output:
        log_path = Path(config.log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_path, maxBytes=MAX_FILE_SIZE, backupCount=BACKUP_COUNT, encoding='utf-8'
        ))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # 不传播到根日志器，避免宿主程序的处理器重复输出
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """获取按当前全局配置创建的日志器（同名只创建一次）。"""
    if name not in _loggers:
        _loggers[name] = _build_logger(name, _config)
    return _loggers[name]


def get_engine_logger() -> logging.Logger:
    """获取计算引擎的日志器。"""
    return get_logger('equity')


def get_cli_logger() -> logging.Logger:
    """获取命令行模块的日志器。"""
    return get_logger('cli')


def clear_loggers() -> None:
    """关闭并清除所有缓存的日志器。"""
    for logger in _loggers.values():
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
    _loggers.clear()


def configure_logging(level: str = 'WARNING', log_path: str = 'logs/equity_engine.log',
                      console_output: bool = True, file_output: bool = False,
                      detailed: bool = False) -> LoggerConfig:
    """替换全局日志配置。

    已缓存的日志器会被清除，下次获取时按新配置重新创建。

    Returns:
        生效的配置

    Raises:
        ValueError: 日志级别无效
    """
    global _config
    _config = LoggerConfig(
        level=level,
        log_path=log_path,
        console_output=console_output,
        file_output=file_output,
        detailed=detailed,
    )
    clear_loggers()
    return _config


class LoggerMixin:
    """日志器混入类。

    继承此类的类将自动获得一个以类名命名的日志器。
    """

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
