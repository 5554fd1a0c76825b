from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional


def to_decimal(value: Any) -> Decimal:
    """将 API 字段转换为 Decimal，缺失或非法值视为 0。"""
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal(0)


@dataclass(frozen=True)
class MarketSummary:
    """单个市场的 24 小时概况（每轮轮询获取一次，不持久化）。"""

    symbol: str
    last: Decimal
    low: Decimal
    high: Decimal
    base_volume: Decimal

    @classmethod
    def from_api(cls, entry: Dict[str, Any]) -> "MarketSummary":
        return cls(
            symbol=str(entry.get("MarketName") or ""),
            last=to_decimal(entry.get("Last")),
            low=to_decimal(entry.get("Low")),
            high=to_decimal(entry.get("High")),
            base_volume=to_decimal(entry.get("BaseVolume")),
        )


@dataclass(frozen=True)
class Market:
    symbol: str
    base_currency: str
    market_currency: str
    logo_url: Optional[str] = None

    @classmethod
    def from_api(cls, entry: Dict[str, Any]) -> "Market":
        return cls(
            symbol=str(entry.get("MarketName") or ""),
            base_currency=str(entry.get("BaseCurrency") or ""),
            market_currency=str(entry.get("MarketCurrency") or ""),
            logo_url=entry.get("LogoUrl") or None,
        )


@dataclass(frozen=True)
class Tick:
    timestamp: str
    close: Decimal

    @classmethod
    def from_api(cls, entry: Dict[str, Any]) -> "Tick":
        return cls(timestamp=str(entry.get("T") or ""), close=to_decimal(entry.get("C")))


@dataclass
class Notification:
    """一条桌面通知，交给通知后端后即丢弃。"""

    title: str
    subtitle: str
    message: str
    group: str
    sound: str
    link: str
    app_icon: str
    content_image: Optional[str] = None
