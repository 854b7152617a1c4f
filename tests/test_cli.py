"""CLI命令行界面的单元测试。

本模块测试CLI的以下功能：
- 命令行参数解析
- 各个子命令的调用
- 无效参数的错误处理
- 帮助信息显示
"""

import json
import os
import shutil
import tempfile
from pathlib import Path

import pytest

from cli import create_parser, main, VARIANT_CHOICES
from models.core import EquityConfig
from utils.config_manager import ConfigManager
from utils.logger import configure_logging


RIVER_BOARD = '2c 7d 9h Js Qc'


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    configure_logging(level='WARNING')


# ============================================================================
# 参数解析测试
# ============================================================================

class TestArgumentParsing:
    """测试命令行参数解析。"""

    def test_parser_creation(self):
        parser = create_parser()
        assert parser.prog == 'poker-equity'

    def test_equity_command_defaults(self):
        args = create_parser().parse_args(['equity'])
        assert args.command == 'equity'
        assert args.variant == 'texas-holdem'
        assert args.player == []
        assert args.board == ''
        assert args.exact is False
        assert args.trials is None
        assert args.seed is None
        assert args.workers is None
        assert args.json is False

    def test_equity_command_parsing(self):
        args = create_parser().parse_args([
            'equity', '-v', 'omaha-hi-lo',
            '-p', 'AsKs2d3d', '-p', '', '-p', 'QhQd9c9s',
            '-b', '4c 5h Td', '-t', '5000', '-s', '9', '-w', '2',
        ])
        assert args.variant == 'omaha-hi-lo'
        assert args.player == ['AsKs2d3d', '', 'QhQd9c9s']
        assert args.board == '4c 5h Td'
        assert args.trials == 5000
        assert args.seed == 9
        assert args.workers == 2

    def test_exact_and_trials_are_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(['equity', '--exact', '--trials', '10'])

    def test_invalid_variant_rejected(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(['equity', '--variant', 'stud'])

    def test_variant_choices(self):
        assert VARIANT_CHOICES == ['texas-holdem', 'omaha-high', 'omaha-hi-lo']

    def test_evaluate_command_parsing(self):
        args = create_parser().parse_args(['evaluate', '--cards', 'As Ks Qs Js Ts', '--low'])
        assert args.command == 'evaluate'
        assert args.cards == 'As Ks Qs Js Ts'
        assert args.low is True

    def test_evaluate_requires_cards(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(['evaluate'])

    def test_init_config_default_output(self):
        args = create_parser().parse_args(['init-config'])
        assert args.output == 'configs/default_config.json'

    def test_no_command(self):
        args = create_parser().parse_args([])
        assert args.command is None
        assert args.log_level == 'WARNING'
        assert args.log_file is None


# ============================================================================
# 命令执行测试
# ============================================================================

class TestCommandExecution:
    """测试命令执行。"""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_main_no_command_shows_help(self, capsys):
        assert main([]) == 0
        captured = capsys.readouterr()
        assert 'poker-equity' in captured.out

    def test_equity_json_output(self, capsys):
        exit_code = main([
            'equity', '-p', 'AsAh', '-p', 'KsKh', '-b', RIVER_BOARD, '-w', '1', '--json',
        ])
        assert exit_code == 0

        data = json.loads(capsys.readouterr().out)
        assert data['exact'] is True
        assert data['scenarios_evaluated'] == 1
        assert data['variant'] == 'texas-holdem'
        assert [p['id'] for p in data['players']] == ['P1', 'P2']
        assert data['players'][0]['equity'] == 100.0
        assert data['players'][1]['equity'] == 0.0

    def test_equity_table_output(self, capsys):
        exit_code = main(['equity', '-p', 'AsAh', '-p', 'KsKh', '-b', RIVER_BOARD, '-w', '1'])
        assert exit_code == 0

        out = capsys.readouterr().out
        assert '精确枚举' in out
        assert 'P1' in out and 'P2' in out
        assert 'LoWin%' not in out

    def test_hi_lo_table_has_low_columns(self, capsys):
        exit_code = main([
            'equity', '-v', 'omaha-hi-lo',
            '-p', 'As2dKcKh', '-p', 'QsQdJcJh',
            '-b', '3c 4h 9d Ts 8s', '-w', '1',
        ])
        assert exit_code == 0
        assert 'LoWin%' in capsys.readouterr().out

    def test_equity_simulation_with_seed(self, capsys):
        argv = ['equity', '-p', 'AsKd', '-p', '7h7c', '-b', '2s 9d', '-t', '500', '-s', '3',
                '-w', '1', '--json']
        assert main(argv) == 0
        first = json.loads(capsys.readouterr().out)
        assert main(argv) == 0
        second = json.loads(capsys.readouterr().out)

        assert first['exact'] is False
        assert first['trials'] == 500
        assert first['players'] == second['players']

    def test_unknown_player_is_reported(self, capsys):
        exit_code = main([
            'equity', '-p', 'AsAh', '-p', '', '-p', 'KsKh', '-b', RIVER_BOARD, '-w', '1', '--json',
        ])
        assert exit_code == 0
        players = json.loads(capsys.readouterr().out)['players']
        assert players[1]['id'] == 'P2'
        assert players[1]['included'] is False
        assert players[1]['equity'] == 0.0

    def test_single_known_hand_shows_equal_split(self, capsys):
        exit_code = main(['equity', '-p', 'AsAh', '-p', '', '-w', '1', '--json'])
        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert [p['equity'] for p in data['players']] == [50.0, 50.0]
        assert data['scenarios_evaluated'] == 0

    def test_single_known_hand_keeps_variant(self, capsys):
        exit_code = main(['equity', '--variant', 'omaha-hi-lo', '-p', 'AsKs2d3d', '-p', ''])
        assert exit_code == 0
        out = capsys.readouterr().out
        assert '变体: omaha-hi-lo' in out
        assert '未计算' in out
        assert '蒙特卡洛模拟' not in out
        assert 'LoWin%' in out

    def test_single_known_hand_json_variant(self, capsys):
        exit_code = main(['equity', '--variant', 'omaha-hi-lo', '-p', 'AsKs2d3d', '-p', '', '--json'])
        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert data['variant'] == 'omaha-hi-lo'
        assert data['scenarios_evaluated'] == 0

    def test_equity_output_file(self, capsys):
        output_path = Path(self.temp_dir) / 'out' / 'result.json'
        exit_code = main([
            'equity', '-p', 'AsAh', '-p', 'KsKh', '-b', RIVER_BOARD, '-w', '1',
            '-o', str(output_path),
        ])
        assert exit_code == 0
        assert '结果已保存到' in capsys.readouterr().out
        with open(output_path, 'r', encoding='utf-8') as f:
            assert json.load(f)['players'][0]['id'] == 'P1'

    def test_log_file_option(self, capsys):
        log_path = Path(self.temp_dir) / 'logs' / 'engine.log'
        exit_code = main([
            '--log-level', 'INFO', '--log-file', str(log_path),
            'equity', '-p', 'AsAh', '-p', 'KsKh', '-b', RIVER_BOARD, '-w', '1', '--json',
        ])
        assert exit_code == 0
        json.loads(capsys.readouterr().out)
        configure_logging(level='WARNING')

        content = log_path.read_text(encoding='utf-8')
        assert 'Computing texas-holdem equity for 2 players' in content
        assert 'Evaluated 1 scenarios' in content

    def test_equity_with_config_file(self, capsys):
        config_path = Path(self.temp_dir) / 'config.json'
        ConfigManager().save_config(EquityConfig(num_workers=1, random_seed=5), config_path)
        exit_code = main([
            'equity', '-p', 'AsKd', '-p', '7h7c', '-b', '2s 9d', '-t', '300',
            '-c', str(config_path), '--json',
        ])
        assert exit_code == 0
        assert json.loads(capsys.readouterr().out)['trials'] == 300

    def test_evaluate_high(self, capsys):
        assert main(['evaluate', '--cards', 'As Ks Qs Js Ts']) == 0
        out = capsys.readouterr().out
        assert '牌型: STRAIGHT_FLUSH (royal flush)' in out
        assert '低牌' not in out

    def test_evaluate_low_qualifying(self, capsys):
        assert main(['evaluate', '--cards', 'Ah 2d 3c 4s 5h', '--low']) == 0
        assert '低牌: 5-4-3-2-1' in capsys.readouterr().out

    def test_evaluate_low_not_qualifying(self, capsys):
        assert main(['evaluate', '--cards', 'Ah Kd Qc Js 9h', '--low']) == 0
        assert '低牌: 不合格' in capsys.readouterr().out

    def test_init_config_writes_defaults(self, capsys):
        output_path = Path(self.temp_dir) / 'configs' / 'engine.json'
        assert main(['init-config', '-o', str(output_path)]) == 0
        assert '默认配置已保存到' in capsys.readouterr().out
        assert ConfigManager().load_config(output_path) == EquityConfig()


# ============================================================================
# 错误处理测试
# ============================================================================

class TestErrorHandling:
    """测试错误处理。"""

    def test_invalid_card(self, capsys):
        assert main(['equity', '-p', 'AsXx', '-p', 'KsKh']) == 1
        assert '错误' in capsys.readouterr().out

    def test_too_many_board_cards(self, capsys):
        assert main(['equity', '-p', 'AsAh', '-p', 'KsKh', '-b', '2c 3c 4c 5c 6c 7c']) == 1
        assert '错误' in capsys.readouterr().out

    def test_duplicate_card(self, capsys):
        assert main(['equity', '-p', 'AsAh', '-p', 'AsKh', '-w', '1']) == 1
        assert 'As' in capsys.readouterr().out

    def test_wrong_hole_card_count(self, capsys):
        assert main(['equity', '-v', 'omaha-high', '-p', 'AsAh', '-p', 'KsKh', '-w', '1']) == 1
        assert '错误' in capsys.readouterr().out

    def test_no_players(self, capsys):
        assert main(['equity']) == 1
        assert '--player' in capsys.readouterr().out

    def test_negative_workers(self, capsys):
        assert main(['equity', '-p', 'AsAh', '-p', 'KsKh', '-w', '-1']) == 1
        assert '工作进程数' in capsys.readouterr().out

    def test_non_positive_trials(self, capsys):
        assert main(['equity', '-p', 'AsAh', '-p', 'KsKh', '-t', '0']) == 1
        assert '模拟次数' in capsys.readouterr().out

    def test_missing_config_file(self, capsys):
        assert main(['equity', '-p', 'AsAh', '-p', 'KsKh', '-c', '/nonexistent/config.json']) == 1
        assert '配置无效' in capsys.readouterr().out

    def test_evaluate_too_few_cards(self, capsys):
        assert main(['evaluate', '--cards', 'As Ks']) == 1
        assert '错误' in capsys.readouterr().out


# ============================================================================
# 帮助信息测试
# ============================================================================

class TestHelpInformation:
    """测试帮助信息显示。"""

    @pytest.mark.parametrize("argv", [
        ['--help'],
        ['equity', '--help'],
        ['evaluate', '--help'],
        ['init-config', '--help'],
    ])
    def test_help_exits_cleanly(self, argv, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code == 0
        assert 'usage' in capsys.readouterr().out.lower()
