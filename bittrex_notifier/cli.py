"""
命令行入口。

用法：bittrex_notifier [install | remove | start | stop | status]
不带参数时在前台运行轮询循环。
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import SERVICE_NAME, Settings
from .errors import MarketFetchError, ServiceError
from .poller import run_forever
from .service import ServiceManager

USAGE = f"Usage: {SERVICE_NAME} install | remove | start | stop | status"
COMMANDS = ("install", "remove", "start", "stop", "status")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """解析命令行参数。"""
    parser = argparse.ArgumentParser(
        prog=SERVICE_NAME,
        description="监控 Bittrex BTC 市场的暴涨暴跌并发送桌面通知",
        usage=USAGE,
    )
    parser.add_argument("command", nargs="?", help="服务管理命令，省略时前台运行")
    # 命令之后的多余参数一律忽略
    args, _ = parser.parse_known_args(argv)
    return args


def manage(command: str, manager: Optional[ServiceManager] = None) -> str:
    manager = manager or ServiceManager()
    return getattr(manager, command)()


def main(argv: Optional[List[str]] = None) -> None:
    """主函数：服务管理命令或前台轮询。"""
    args = parse_args(argv)
    setup_logging()

    if args.command is not None and args.command not in COMMANDS:
        print(USAGE)
        return

    try:
        if args.command:
            status = manage(args.command)
        else:
            asyncio.run(run_forever(Settings()))
            status = "Service exited"
    except (ServiceError, MarketFetchError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    print(status)
