"""
交易对图标缓存。

首次运行时把所有市场的图标下载到临时目录，之后通知直接引用本地文件。
目录存在即视为缓存完整，不做逐个文件的校验。
"""

import logging
from typing import Callable, List, Optional

import requests

from .config import Settings
from .fetchers.bittrex import download_logo, list_markets
from .models import Market
from .results import StageResult
from .storage import logo_path, remove_tree

logger = logging.getLogger(__name__)


def ensure_logo_cache(
    settings: Settings,
    fetch_markets: Optional[Callable[[requests.Session], List[Market]]] = None,
    download: Optional[Callable[..., None]] = None,
) -> StageResult:
    logo_dir = settings.logo_dir
    if logo_dir.exists():
        return StageResult.ok(logo_dir, "图标缓存已存在")

    fetch_markets = fetch_markets or list_markets
    download = download or download_logo

    logo_dir.mkdir(parents=True, exist_ok=True)
    with requests.Session() as session:
        try:
            markets = fetch_markets(session)
        except (requests.RequestException, ValueError) as exc:
            # 拿不到市场列表时回滚目录，下次启动重新下载
            remove_tree(logo_dir)
            logger.warning("获取市场列表失败，跳过图标下载：%s", exc)
            return StageResult.degraded(f"获取市场列表失败：{exc}")

        logger.info("正在下载 %d 个市场图标...", len(markets))
        failures = 0
        for market in markets:
            if not market.logo_url:
                continue
            target = logo_path(logo_dir, market.base_currency, market.market_currency)
            try:
                download(market.logo_url, target, session=session)
            except (requests.RequestException, OSError) as exc:
                failures += 1
                logger.debug("下载图标失败 %s：%s", market.symbol, exc)

    if failures:
        return StageResult.degraded(f"{failures} 个图标下载失败", logo_dir)
    return StageResult.ok(logo_dir)
