"""
行情走势图。

获取最近 24 小时的 30 分钟 K 线，绘制收盘价折线图并写入临时 PNG 文件。
使用 matplotlib 的面向对象接口（不经过 pyplot），可以在工作线程中安全绘制。
"""

import asyncio
import logging
from pathlib import Path
from typing import Sequence

import httpx
from matplotlib.figure import Figure

from .config import Settings
from .fetchers.bittrex import fetch_ticks_async
from .indicators import chart_series
from .rate_limiter import AsyncConcurrencyLimiter, bittrex_public_limiter, to_thread_drained
from .results import StageResult
from .storage import create_chart_file, remove_file

logger = logging.getLogger(__name__)

LINE_COLOR = "#000000"
LINE_WIDTH = 2.5


def render_line_chart(x: Sequence[float], y: Sequence[float], output_path: Path) -> None:
    """把单条折线写成 PNG。"""
    fig = Figure(figsize=(4, 2.5), dpi=100)
    ax = fig.add_subplot(1, 1, 1)
    ax.plot(list(x), list(y), color=LINE_COLOR, linewidth=LINE_WIDTH)
    ax.set_xlim(min(x), max(x) if len(x) > 1 else min(x) + 1)
    ax.grid(True, linestyle="--", alpha=0.3)
    fig.tight_layout()
    fig.savefig(output_path, format="png")


async def render_chart_async(
    client: httpx.AsyncClient,
    symbol: str,
    settings: Settings,
    limiter: AsyncConcurrencyLimiter = bittrex_public_limiter,
) -> StageResult:
    """
    生成 symbol 的走势图，成功时 value 为 PNG 路径（调用方负责删除）。

    K 线获取失败、数据为空或绘图失败都返回 DEGRADED，不抛异常。
    """
    try:
        ticks = await fetch_ticks_async(client, symbol, settings.tick_interval, limiter=limiter)
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("[%s] 获取 K 线失败：%s", symbol, exc)
        return StageResult.degraded(f"获取 K 线失败：{exc}")

    x, y = chart_series(ticks, settings.chart_points)
    if not x:
        return StageResult.degraded("没有可用的 K 线数据")
    if len(x) < settings.chart_points:
        logger.debug("[%s] K 线仅 %d 根，不足 %d 根", symbol, len(x), settings.chart_points)

    path = None
    try:
        path = create_chart_file(symbol)
        await to_thread_drained(render_line_chart, x, y, path)
    except asyncio.CancelledError:
        remove_file(path)
        raise
    except (OSError, ValueError, RuntimeError) as exc:
        remove_file(path)
        logger.warning("[%s] 绘制图表失败：%s", symbol, exc)
        return StageResult.degraded(f"绘制图表失败：{exc}")
    return StageResult.ok(path)
