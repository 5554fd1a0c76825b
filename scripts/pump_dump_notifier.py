"""
Bittrex 暴涨暴跌通知脚本。

功能：
- 前台运行：每分钟检查 BTC 计价市场，last/low > 1.75 或 last/high < 0.75 时发送通知
- 服务管理：install | remove | start | stop | status

无需安装即可在仓库根目录直接运行：python scripts/pump_dump_notifier.py
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bittrex_notifier.cli import main

if __name__ == "__main__":
    main()
