"""
桌面通知构建与并发分发。

每个被标记的市场对应一个 asyncio 任务：生成走势图 → 构建通知 → 发送 → 删除图表文件。
单个任务失败不影响其他任务，dispatch_async 在所有任务结束后才返回。
"""

import asyncio
import logging
import shutil
import subprocess
from typing import List, Optional, Protocol, Sequence

import httpx
from plyer import notification as plyer_notification

from .charts import render_chart_async
from .config import SERVICE_NAME, Settings
from .errors import NotificationError
from .indicators import summary_changes
from .models import MarketSummary, Notification
from .rate_limiter import AsyncConcurrencyLimiter, bittrex_public_limiter, to_thread_drained
from .results import StageResult
from .storage import market_icon_path, remove_file

logger = logging.getLogger(__name__)

TERMINAL_NOTIFIER = "terminal-notifier"


class NotificationSink(Protocol):
    def deliver(self, note: Notification) -> None:
        """发送通知，失败时抛出 NotificationError。"""


class TerminalNotifierSink:
    """macOS：通过 terminal-notifier 发送，支持副标题、声音、链接和内容图片。"""

    def __init__(self, executable: str = TERMINAL_NOTIFIER, timeout: float = 30) -> None:
        self.executable = executable
        self.timeout = timeout

    def build_command(self, note: Notification) -> List[str]:
        cmd = [
            self.executable,
            "-title", note.title,
            "-subtitle", note.subtitle,
            "-message", note.message,
            "-group", note.group,
            "-sound", note.sound,
            "-open", note.link,
            "-appIcon", note.app_icon,
        ]
        if note.content_image:
            cmd += ["-contentImage", note.content_image]
        return cmd

    def deliver(self, note: Notification) -> None:
        try:
            completed = subprocess.run(
                self.build_command(note),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise NotificationError(f"{self.executable} 调用失败：{exc}") from exc
        if completed.returncode != 0:
            raise NotificationError(
                f"{self.executable} 退出码 {completed.returncode}：{completed.stderr.strip()}"
            )


class PlyerSink:
    """跨平台后备方案，只支持标题、正文和图标。"""

    def __init__(self, app_name: str = SERVICE_NAME, timeout: int = 10) -> None:
        self.app_name = app_name
        self.timeout = timeout

    def deliver(self, note: Notification) -> None:
        try:
            plyer_notification.notify(
                title=note.title,
                message=f"{note.subtitle}: {note.message}",
                app_name=self.app_name,
                app_icon=note.app_icon,
                timeout=self.timeout,
            )
        except Exception as exc:  # plyer 各平台后端抛出的异常类型不统一
            raise NotificationError(f"plyer 发送失败：{exc}") from exc


def default_sink() -> NotificationSink:
    if shutil.which(TERMINAL_NOTIFIER):
        return TerminalNotifierSink()
    return PlyerSink()


def build_notification(
    summary: MarketSummary,
    settings: Settings,
    content_image: Optional[str] = None,
) -> Notification:
    low_change, high_change = summary_changes(summary)
    volume = float(summary.base_volume)
    return Notification(
        title=summary.symbol,
        subtitle=settings.exchange_name,
        message=f"L {low_change:.1f}% | H {high_change:.1f}% | {volume:.0f}b",
        group=f"com.{summary.symbol}.price",
        sound=settings.sound,
        link=f"{settings.market_url}{summary.symbol}",
        app_icon=str(market_icon_path(settings.logo_dir, summary.symbol)),
        content_image=content_image,
    )


async def notify_market_async(
    client: httpx.AsyncClient,
    summary: MarketSummary,
    settings: Settings,
    sink: NotificationSink,
    limiter: AsyncConcurrencyLimiter = bittrex_public_limiter,
) -> StageResult:
    chart_path = None
    try:
        chart = await render_chart_async(client, summary.symbol, settings, limiter=limiter)
        if chart.is_ok:
            chart_path = str(chart.value)
        note = build_notification(summary, settings, chart_path)
        try:
            await to_thread_drained(sink.deliver, note)
        except NotificationError as exc:
            logger.error("[%s] 通知发送失败：%s", summary.symbol, exc)
            return StageResult.degraded(str(exc), note)
        if not chart.is_ok:
            return StageResult.degraded(f"通知已发送（无图表）：{chart.detail}", note)
        return StageResult.ok(note)
    finally:
        remove_file(chart_path)


async def dispatch_async(
    client: httpx.AsyncClient,
    markets: Sequence[MarketSummary],
    settings: Settings,
    sink: NotificationSink,
    limiter: AsyncConcurrencyLimiter = bittrex_public_limiter,
) -> List[StageResult]:
    """为每个市场并发发送一条通知，按输入顺序返回结果。"""
    if not markets:
        return []
    results = await asyncio.gather(
        *(notify_market_async(client, m, settings, sink, limiter=limiter) for m in markets),
        return_exceptions=True,
    )
    # 整体取消时 gather 本身抛出 CancelledError，不会走到这里；
    # 这里的 CancelledError 只来自单个任务，按失败处理，不影响其他结果
    normalized: List[StageResult] = []
    for market, result in zip(markets, results):
        if isinstance(result, asyncio.CancelledError):
            logger.warning("[%s] 通知任务被取消", market.symbol)
            normalized.append(StageResult.degraded("通知任务被取消"))
        elif isinstance(result, BaseException):
            logger.error("[%s] 通知任务异常：%s", market.symbol, result)
            normalized.append(StageResult.degraded(f"通知任务异常：{result}"))
        else:
            normalized.append(result)
    return normalized
