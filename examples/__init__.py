"""示例脚本 - 演示扑克手牌Equity引擎的使用方法。

本目录包含以下示例脚本：
- demo_equity.py: 演示牌型评估、8-or-better低牌以及三种变体的Equity计算

运行示例：
    python examples/demo_equity.py
"""
