from decimal import Decimal
from typing import List, Sequence, Tuple

from .models import MarketSummary, Tick

_HUNDRED = Decimal(100)


def percent_change(current: Decimal, reference: Decimal) -> float:
    """(current - reference) / reference * 100，参考值为 0 时返回 0。"""
    if reference == 0:
        return 0.0
    return float((current - reference) / reference * _HUNDRED)


def summary_changes(summary: MarketSummary) -> Tuple[float, float]:
    """返回最新价相对 24h 最低价、最高价的涨跌幅（%）。"""
    return (
        percent_change(summary.last, summary.low),
        percent_change(summary.last, summary.high),
    )


def chart_series(ticks: Sequence[Tick], points: int) -> Tuple[List[float], List[float]]:
    """
    取最近 points 根 K 线作为图表数据：x 为 1..n，y 为收盘价。

    K 线不足 points 根时使用全部数据，不补齐。
    """
    recent = list(ticks[-points:]) if points > 0 else []
    x = [float(i + 1) for i in range(len(recent))]
    y = [float(tick.close) for tick in recent]
    return x, y
