import asyncio

from bittrex_notifier.config import (
    BITTREX_MAX_CONCURRENT_REQUESTS,
    BITTREX_MIN_REQUEST_INTERVAL,
)


class AsyncConcurrencyLimiter:
    """限制同时在途的请求数，并保证相邻两次请求之间的最小间隔。"""

    def __init__(self, max_concurrent: int, min_interval: float = 0.0) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1")
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self._max_concurrent = max_concurrent
        self._min_interval = min_interval
        self._sem = None
        self._lock = None
        self._last_acquire = 0.0

    def _ensure_primitives(self) -> None:
        # asyncio 原语在首次使用时创建，避免模块导入时绑定到错误的事件循环
        if self._sem is None:
            self._sem = asyncio.Semaphore(self._max_concurrent)
            self._lock = asyncio.Lock()

    async def __aenter__(self):
        self._ensure_primitives()
        await self._sem.acquire()
        if self._min_interval <= 0:
            return self

        try:
            async with self._lock:
                loop = asyncio.get_running_loop()
                now = loop.time()
                wait_for = self._min_interval - (now - self._last_acquire)
                if wait_for > 0:
                    await asyncio.sleep(wait_for)
                    now = loop.time()
                self._last_acquire = now
        except BaseException:
            self._sem.release()
            raise

        return self

    async def __aexit__(self, exc_type, exc, tb):
        self._sem.release()
        return False


bittrex_public_limiter = AsyncConcurrencyLimiter(
    BITTREX_MAX_CONCURRENT_REQUESTS,
    BITTREX_MIN_REQUEST_INTERVAL,
)


async def to_thread_drained(func, *args):
    """
    在工作线程中执行 func。

    任务被取消时线程无法中断，这里先等线程结束再抛出 CancelledError，
    保证调用方在清理临时文件时线程已不再读写该文件。
    """
    future = asyncio.ensure_future(asyncio.to_thread(func, *args))
    try:
        return await asyncio.shield(future)
    except asyncio.CancelledError:
        while not future.done():
            try:
                await asyncio.wait({future})
            except asyncio.CancelledError:
                continue
        if not future.cancelled():
            future.exception()
        raise
