"""配置管理器模块 - 处理Equity引擎配置的加载、保存和验证。"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import List, Dict, Any, Union

from models.core import EquityConfig
from utils.exceptions import ConfigFileError, ConfigValidationError


# 默认配置值（与 configs/default_config.json 保持一致）
DEFAULT_CONFIG = {
    'exact_threshold': 4,
    'default_trials': 10000,
    'num_workers': 0,  # 0 = 使用所有CPU核心
    'parallel_min_scenarios': 50000,
    'batch_size': 2500,
    'random_seed': None,
}

# 可选参数列表（有默认值的参数）
OPTIONAL_PARAMS = list(DEFAULT_CONFIG.keys())


class ConfigManager:
    """配置管理器 - 负责引擎配置的加载、保存和验证。

    提供以下功能：
    - 从JSON文件加载配置
    - 将配置保存为JSON文件
    - 验证配置参数的有效性
    - 为缺失的可选参数应用默认值
    """

    def load_config(self, path: Union[str, Path]) -> EquityConfig:
        """从JSON文件加载引擎配置。

        Args:
            path: JSON配置文件的路径

        Returns:
            EquityConfig: 加载的配置对象

        Raises:
            ConfigFileError: 配置文件不存在或JSON格式无效
            ConfigValidationError: 配置参数无效
        """
        path = Path(path)

        if not path.exists():
            raise ConfigFileError(str(path), f"Configuration file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFileError(str(path), f"Malformed configuration file {path}: {e}") from e

        if not isinstance(config_dict, dict):
            raise ConfigFileError(str(path), f"Configuration root must be an object: {path}")

        config_dict = self._apply_defaults(config_dict)

        errors = self.validate_config(config_dict)
        if errors:
            raise ConfigValidationError(errors)

        return EquityConfig(**config_dict)

    def save_config(self, config: EquityConfig, path: Union[str, Path]) -> None:
        """将引擎配置保存为JSON文件。"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(asdict(config), f, indent=2, ensure_ascii=False)

    def validate_config(self, config: Union[EquityConfig, Dict[str, Any]]) -> List[str]:
        """验证配置参数的有效性。

        Args:
            config: 要验证的配置（EquityConfig对象或字典）

        Returns:
            List[str]: 错误信息列表，配置有效时为空列表
        """
        errors = []

        if isinstance(config, EquityConfig):
            config_dict = asdict(config)
        else:
            config_dict = config

        for key in config_dict:
            if key not in DEFAULT_CONFIG:
                errors.append(f"{key}: unknown parameter")

        # 验证exact_threshold（精确枚举阈值）
        if 'exact_threshold' in config_dict:
            et = config_dict['exact_threshold']
            if not _is_int(et):
                errors.append(f"exact_threshold: must be an integer, got {type(et).__name__}")
            elif not 0 <= et <= 5:
                errors.append(f"exact_threshold: must be in [0, 5], got {et}")

        for key in ('default_trials', 'batch_size'):
            if key in config_dict:
                value = config_dict[key]
                if not _is_int(value):
                    errors.append(f"{key}: must be an integer, got {type(value).__name__}")
                elif value <= 0:
                    errors.append(f"{key}: must be a positive integer, got {value}")

        for key in ('num_workers', 'parallel_min_scenarios'):
            if key in config_dict:
                value = config_dict[key]
                if not _is_int(value):
                    errors.append(f"{key}: must be an integer, got {type(value).__name__}")
                elif value < 0:
                    errors.append(f"{key}: must be a non-negative integer, got {value}")

        # 验证random_seed（随机种子，可为null）
        if 'random_seed' in config_dict:
            seed = config_dict['random_seed']
            if seed is not None:
                if not _is_int(seed):
                    errors.append(f"random_seed: must be an integer or null, got {type(seed).__name__}")
                elif seed < 0:
                    errors.append(f"random_seed: must be non-negative, got {seed}")

        return errors

    def get_default_config(self) -> EquityConfig:
        """返回默认配置对象。"""
        return EquityConfig(**DEFAULT_CONFIG)

    def _apply_defaults(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """为缺失的可选参数应用默认值。"""
        result = dict(DEFAULT_CONFIG)
        result.update(config_dict)
        return result


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
