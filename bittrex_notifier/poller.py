"""
主轮询循环。

启动后立即执行一轮「获取 → 筛选 → 通知」，之后每隔 poll_interval 秒重复。
收到 SIGINT / SIGTERM 时取消正在进行的一轮并等待其任务全部结束后退出。
获取市场概况失败视为致命错误，直接向上抛出 MarketFetchError。
"""

import asyncio
import logging
import signal
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from .config import BITTREX_MAX_CONCURRENT_REQUESTS, BITTREX_MIN_REQUEST_INTERVAL, Settings
from .errors import MarketFetchError
from .fetchers.bittrex import fetch_market_summaries_async
from .filters import run_pipeline
from .logos import ensure_logo_cache
from .models import MarketSummary
from .notifier import NotificationSink, default_sink, dispatch_async
from .rate_limiter import AsyncConcurrencyLimiter
from .results import StageResult

logger = logging.getLogger(__name__)


@dataclass
class CycleReport:
    summaries: int = 0
    pumps: List[MarketSummary] = field(default_factory=list)
    dumps: List[MarketSummary] = field(default_factory=list)
    results: List[StageResult] = field(default_factory=list)

    @property
    def degraded(self) -> int:
        return sum(1 for r in self.results if not r.is_ok)


class PumpDumpPoller:
    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient,
        sink: Optional[NotificationSink] = None,
        limiter: Optional[AsyncConcurrencyLimiter] = None,
    ) -> None:
        self.settings = settings
        self.client = client
        self.sink = sink or default_sink()
        self.limiter = limiter or AsyncConcurrencyLimiter(
            BITTREX_MAX_CONCURRENT_REQUESTS,
            BITTREX_MIN_REQUEST_INTERVAL,
        )

    async def run_cycle(self) -> CycleReport:
        try:
            summaries = await fetch_market_summaries_async(self.client, limiter=self.limiter)
        except (httpx.HTTPError, ValueError) as exc:
            raise MarketFetchError(f"获取市场概况失败：{exc}") from exc

        outcome = run_pipeline(summaries, self.settings)
        logger.info(
            "市场 %d 个，暴涨 %d 个，暴跌 %d 个",
            len(summaries),
            len(outcome.pumps),
            len(outcome.dumps),
        )
        results = await dispatch_async(
            self.client,
            outcome.flagged(),
            self.settings,
            self.sink,
            limiter=self.limiter,
        )
        report = CycleReport(len(summaries), outcome.pumps, outcome.dumps, results)
        if report.degraded:
            logger.warning("本轮 %d 条通知降级或失败", report.degraded)
        return report

    async def run(self, stop_event: asyncio.Event) -> None:
        """循环执行直到 stop_event 被设置；致命错误直接抛出。"""
        loop = asyncio.get_running_loop()
        while not stop_event.is_set():
            started = loop.time()
            cycle = asyncio.ensure_future(self.run_cycle())
            stopper = asyncio.ensure_future(stop_event.wait())
            try:
                await asyncio.wait({cycle, stopper}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                stopper.cancel()
                if not cycle.done():
                    logger.info("收到退出信号，取消进行中的通知任务...")
                    cycle.cancel()
                    await asyncio.gather(cycle, return_exceptions=True)

            if not cycle.cancelled():
                cycle.result()
            if stop_event.is_set():
                break

            remaining = self.settings.poll_interval - (loop.time() - started)
            if remaining > 0:
                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=remaining)
                except asyncio.TimeoutError:
                    pass


def install_signal_handlers(stop_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError):
            # Windows 事件循环不支持 add_signal_handler
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(stop_event.set))


async def run_forever(settings: Settings, sink: Optional[NotificationSink] = None) -> None:
    """前台运行入口：准备图标缓存后进入轮询，直到收到退出信号。"""
    logos = await asyncio.to_thread(ensure_logo_cache, settings)
    if not logos.is_ok:
        logger.warning("图标缓存不可用：%s", logos.detail)

    stop_event = asyncio.Event()
    install_signal_handlers(stop_event)
    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        poller = PumpDumpPoller(settings, client, sink)
        await poller.run(stop_event)
