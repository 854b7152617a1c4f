#!/usr/bin/env python3
"""扑克手牌Equity计算命令行界面。

本模块提供命令行接口，支持以下功能：
- equity: 计算每个玩家的Equity / 胜率 / 平局率
- evaluate: 评估一手牌的牌型（高牌或8-or-better低牌）
- init-config: 生成默认配置文件

使用示例：
    python cli.py equity --player AsAh --player KsKh
    python cli.py equity --variant omaha-hi-lo --player AsKs2d3d --player QhQd9c9s --board 4c5hTd
    python cli.py equity --player AsKs --player "" --player QhQd --trials 20000 --seed 7
    python cli.py evaluate --cards "As Ks Qs Js Ts"
    python cli.py init-config --output configs/my_config.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from models.core import (
    Board,
    CalculationMode,
    EquityConfig,
    EquityResult,
    GameVariant,
    PlayerHand,
    parse_cards,
)
from environment.hand_evaluator import HandEvaluator, describe_hand
from equity.equity_calculator import EquityCalculator, equal_split_placeholder
from utils.config_manager import ConfigManager
from utils.exceptions import EquityEngineError, InsufficientPlayersError
from utils.logger import configure_logging, get_cli_logger


VARIANT_CHOICES = [v.value for v in GameVariant]


def create_parser() -> argparse.ArgumentParser:
    """创建命令行参数解析器。

    Returns:
        配置好的ArgumentParser对象
    """
    parser = argparse.ArgumentParser(
        prog='poker-equity',
        description='扑克手牌Equity计算 - 精确枚举与蒙特卡洛模拟',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
示例:
  %(prog)s equity --player AsAh --player KsKh
  %(prog)s equity --variant omaha-high --player AsKsQdJd --player 9h9c8h7c --board 2s3s4d
  %(prog)s evaluate --cards "Ah 2d 3c 4s 5h"
  %(prog)s init-config --output config.json
        '''
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='日志级别（默认: WARNING）'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        help='同时将日志写入该文件（按大小轮转）'
    )

    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    # equity 子命令
    equity_parser = subparsers.add_parser(
        'equity',
        help='计算玩家Equity',
        description='计算每个玩家的Equity、胜率和平局率'
    )
    equity_parser.add_argument(
        '--variant', '-v',
        type=str,
        default=GameVariant.TEXAS_HOLDEM.value,
        choices=VARIANT_CHOICES,
        help='游戏变体（默认: texas-holdem）'
    )
    equity_parser.add_argument(
        '--player', '-p',
        type=str,
        action='append',
        default=[],
        help='玩家手牌，例如 AsKd；空字符串表示未知手牌（可重复指定）'
    )
    equity_parser.add_argument(
        '--board', '-b',
        type=str,
        default='',
        help='已知公共牌，例如 "Ah Kd 7c"'
    )
    mode_group = equity_parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        '--exact',
        action='store_true',
        help='强制使用精确枚举'
    )
    mode_group.add_argument(
        '--trials', '-t',
        type=int,
        help='强制使用蒙特卡洛模拟并指定模拟次数'
    )
    equity_parser.add_argument(
        '--seed', '-s',
        type=int,
        help='模拟随机种子'
    )
    equity_parser.add_argument(
        '--workers', '-w',
        type=int,
        help='工作进程数（覆盖配置文件中的值，0=所有CPU核心）'
    )
    equity_parser.add_argument(
        '--config', '-c',
        type=str,
        help='引擎配置文件路径（JSON格式）'
    )
    equity_parser.add_argument(
        '--output', '-o',
        type=str,
        help='结果输出文件路径（JSON格式）'
    )
    equity_parser.add_argument(
        '--json',
        action='store_true',
        help='以JSON格式打印结果'
    )

    # evaluate 子命令
    eval_parser = subparsers.add_parser(
        'evaluate',
        help='评估牌型',
        description='评估5-7张牌组成的最佳牌型'
    )
    eval_parser.add_argument(
        '--cards',
        type=str,
        required=True,
        help='要评估的牌，例如 "As Ks Qs Js Ts"'
    )
    eval_parser.add_argument(
        '--low',
        action='store_true',
        help='同时评估8-or-better低牌'
    )

    # init-config 子命令
    init_parser = subparsers.add_parser(
        'init-config',
        help='生成默认配置文件',
        description='将默认引擎配置写入JSON文件'
    )
    init_parser.add_argument(
        '--output', '-o',
        type=str,
        default='configs/default_config.json',
        help='配置文件输出路径（默认: configs/default_config.json）'
    )

    return parser


def cmd_equity(args: argparse.Namespace) -> int:
    """执行equity命令。

    Args:
        args: 命令行参数

    Returns:
        退出码（0=成功，非0=失败）
    """
    logger = get_cli_logger()

    if args.config:
        try:
            config = ConfigManager().load_config(args.config)
        except EquityEngineError as e:
            print(f"错误: 配置无效: {e}")
            return 1
    else:
        config = EquityConfig()

    if args.workers is not None:
        if args.workers < 0:
            print(f"错误: 工作进程数不能为负数，当前值: {args.workers}")
            return 1
        config.num_workers = args.workers

    if args.trials is not None and args.trials <= 0:
        print(f"错误: 模拟次数必须为正数，当前值: {args.trials}")
        return 1

    mode = None
    if args.exact:
        mode = CalculationMode.exhaustive()
    elif args.trials is not None:
        mode = CalculationMode.simulate(args.trials)

    try:
        players = [
            PlayerHand(player_id=f"P{i + 1}", hole_cards=cards)
            for i, cards in enumerate(args.player)
        ]
        board = Board(known=args.board)
    except EquityEngineError as e:
        print(f"错误: 无效输入: {e}")
        return 1

    if not players:
        print("错误: 至少需要指定一名玩家（--player）")
        return 1

    variant = GameVariant.from_value(args.variant)
    try:
        result = EquityCalculator(config).compute_equity(
            players, board, variant, mode=mode, seed=args.seed
        )
    except InsufficientPlayersError as e:
        logger.info("Showing equal split: %s", e)
        result = equal_split_placeholder(players, variant)
    except EquityEngineError as e:
        print(f"错误: {e}")
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        _print_equity_table(result, players, board)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
        print(f"\n结果已保存到: {output_path}")

    return 0


def cmd_evaluate(args: argparse.Namespace) -> int:
    """执行evaluate命令。

    Args:
        args: 命令行参数

    Returns:
        退出码（0=成功，非0=失败）
    """
    try:
        cards = parse_cards(args.cards)
        rank, kickers = HandEvaluator.evaluate_hand(cards)
    except ValueError as e:
        print(f"错误: {e}")
        return 1

    print(f"牌: {' '.join(str(c) for c in cards)}")
    print(f"牌型: {rank.name} ({describe_hand(rank, kickers)})")
    print(f"比较键: {(rank.value, *kickers)}")

    if args.low:
        low = HandEvaluator.evaluate_low(cards)
        if low is None:
            print("低牌: 不合格")
        else:
            print(f"低牌: {'-'.join(str(r) for r in low)}")

    return 0


def cmd_init_config(args: argparse.Namespace) -> int:
    """执行init-config命令。

    Args:
        args: 命令行参数

    Returns:
        退出码（0=成功，非0=失败）
    """
    try:
        ConfigManager().save_config(EquityConfig(), args.output)
    except OSError as e:
        print(f"错误: 保存失败: {e}")
        return 1

    print(f"默认配置已保存到: {args.output}")
    return 0


def _print_equity_table(result: EquityResult, players: List[PlayerHand], board: Board) -> None:
    """打印每个玩家的结果表格。"""
    hi_lo = result.variant.has_low_pot

    print(f"变体: {result.variant.value}")
    print(f"公共牌: {' '.join(str(c) for c in board.known) or '-'}")
    if result.scenarios_evaluated == 0:
        print("模式: 未计算（少于2名玩家有完整手牌，显示平均分配）")
    elif result.exact:
        print(f"模式: 精确枚举（{result.scenarios_evaluated} 个场景）")
    else:
        print(f"模式: 蒙特卡洛模拟（{result.scenarios_evaluated} 次）")
    print()

    header = f"{'玩家':<6}{'手牌':<16}{'Equity':>9}{'Win%':>9}{'Tie%':>9}"
    if hi_lo:
        header += f"{'LoWin%':>9}{'LoTie%':>9}"
    header += "  牌型"
    print(header)
    print("-" * len(header))

    for hand, player in zip(players, result.players):
        cards = ' '.join(str(c) for c in hand.hole_cards) or '?'
        line = (f"{str(player.player_id):<6}{cards:<16}"
                f"{player.equity:>9.2f}{player.win_pct:>9.2f}{player.tie_pct:>9.2f}")
        if hi_lo:
            line += f"{player.low_win_pct:>9.2f}{player.low_tie_pct:>9.2f}"
        line += f"  {player.hand_name or ''}"
        print(line)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI主入口点。

    Args:
        argv: 命令行参数列表（如果为None则使用sys.argv）

    Returns:
        退出码
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.log_file:
        configure_logging(level=args.log_level, log_path=args.log_file, file_output=True)
    else:
        configure_logging(level=args.log_level)

    # 如果没有指定命令，显示帮助
    if not args.command:
        parser.print_help()
        return 0

    command_handlers = {
        'equity': cmd_equity,
        'evaluate': cmd_evaluate,
        'init-config': cmd_init_config,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
