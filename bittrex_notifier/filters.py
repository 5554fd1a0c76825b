"""
涨跌异动筛选。

按固定顺序执行：
1. 计价币筛选：只保留以 BTC- 开头的市场
2. 成交量筛选：BaseVolume 严格大于阈值
3. 暴涨筛选：last / low > 阈值
4. 暴跌筛选：last / high < 阈值

3 和 4 都作用于第 2 步的结果，同一市场可能同时出现在两个列表中。
所有比较都使用 Decimal，避免浮点误差。筛选不修改输入。
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List

from .config import Settings
from .models import MarketSummary


@dataclass
class FilterOutcome:
    pumps: List[MarketSummary] = field(default_factory=list)
    dumps: List[MarketSummary] = field(default_factory=list)

    def flagged(self) -> List[MarketSummary]:
        """暴涨在前、暴跌在后，交给通知分发。"""
        return self.pumps + self.dumps


def _as_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def filter_base_currency(
    summaries: Iterable[MarketSummary], base_currency: str
) -> List[MarketSummary]:
    prefix = f"{base_currency.upper()}-"
    return [s for s in summaries if s.symbol.startswith(prefix)]


def filter_volume(summaries: Iterable[MarketSummary], threshold) -> List[MarketSummary]:
    limit = _as_decimal(threshold)
    return [s for s in summaries if s.base_volume > limit]


def filter_pumps(summaries: Iterable[MarketSummary], threshold) -> List[MarketSummary]:
    limit = _as_decimal(threshold)
    # low 为 0 时无法计算比值，直接跳过
    return [s for s in summaries if s.low > 0 and s.last / s.low > limit]


def filter_dumps(summaries: Iterable[MarketSummary], threshold) -> List[MarketSummary]:
    limit = _as_decimal(threshold)
    return [s for s in summaries if s.high > 0 and s.last / s.high < limit]


def run_pipeline(summaries: Iterable[MarketSummary], settings: Settings) -> FilterOutcome:
    candidates = filter_volume(
        filter_base_currency(summaries, settings.base_currency),
        settings.volume_threshold,
    )
    return FilterOutcome(
        pumps=filter_pumps(candidates, settings.pump_threshold),
        dumps=filter_dumps(candidates, settings.dump_threshold),
    )
