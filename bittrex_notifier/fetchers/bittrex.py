from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional

import httpx
import requests

from bittrex_notifier.config import (
    BITTREX_PUB_API_V2,
    BITTREX_PUBLIC_API,
    REQUEST_TIMEOUT,
    TICK_INTERVAL,
)
from bittrex_notifier.models import Market, MarketSummary, Tick
from bittrex_notifier.rate_limiter import AsyncConcurrencyLimiter, bittrex_public_limiter


def _unwrap(payload: Any) -> List[Any]:
    """校验 Bittrex 响应信封 {"success", "message", "result"} 并返回 result 列表。"""
    if not isinstance(payload, dict):
        raise ValueError(f"API 返回格式错误：期望字典，得到 {type(payload)}")
    if not payload.get("success"):
        raise ValueError(f"Bittrex API 错误：{payload.get('message') or '未知错误'}")
    result = payload.get("result")
    if result is None:
        return []
    if not isinstance(result, list):
        raise ValueError(f"API 返回格式错误：期望列表，得到 {type(result)}")
    return result


def list_markets(session: Optional[requests.Session] = None) -> List[Market]:
    """列出 Bittrex 全部市场（含图标地址），同步调用，仅在启动时使用一次。"""
    getter = session.get if session is not None else requests.get
    response = getter(f"{BITTREX_PUBLIC_API}/getmarkets", timeout=REQUEST_TIMEOUT)
    response.raise_for_status()
    return [Market.from_api(entry) for entry in _unwrap(response.json())]


def download_logo(
    url: str,
    destination: Path,
    session: Optional[requests.Session] = None,
) -> None:
    """下载单个图标到指定路径；失败时抛出 requests 异常或 OSError。"""
    getter = session.get if session is not None else requests.get
    response = getter(url, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()
    destination.write_bytes(response.content)


async def fetch_market_summaries_async(
    client: httpx.AsyncClient,
    limiter: AsyncConcurrencyLimiter = bittrex_public_limiter,
) -> List[MarketSummary]:
    async with limiter:
        response = await client.get(
            f"{BITTREX_PUBLIC_API}/getmarketsummaries",
            timeout=REQUEST_TIMEOUT,
        )
    response.raise_for_status()
    entries = _unwrap(response.json(parse_float=Decimal))
    return [MarketSummary.from_api(entry) for entry in entries if isinstance(entry, dict)]


async def fetch_ticks_async(
    client: httpx.AsyncClient,
    symbol: str,
    interval: str = TICK_INTERVAL,
    limiter: AsyncConcurrencyLimiter = bittrex_public_limiter,
) -> List[Tick]:
    """获取 K 线历史，按时间正序返回（最旧的在前）。"""
    async with limiter:
        response = await client.get(
            f"{BITTREX_PUB_API_V2}/market/GetTicks",
            params={"marketName": symbol.upper(), "tickInterval": interval},
            timeout=REQUEST_TIMEOUT,
        )
    response.raise_for_status()
    entries = _unwrap(response.json(parse_float=Decimal))
    return [Tick.from_api(entry) for entry in entries if isinstance(entry, dict)]
