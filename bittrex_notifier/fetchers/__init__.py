from .bittrex import (
    download_logo,
    fetch_market_summaries_async,
    fetch_ticks_async,
    list_markets,
)

__all__ = [
    "fetch_market_summaries_async",
    "fetch_ticks_async",
    "list_markets",
    "download_logo",
]
