from decimal import Decimal
from pathlib import Path

import httpx

from bittrex_notifier.charts import render_chart_async
from bittrex_notifier.indicators import chart_series, percent_change
from bittrex_notifier.models import Tick
from bittrex_notifier.results import StageStatus

from conftest import ticks_payload


def _ticks(count):
    return [Tick(timestamp=str(i), close=Decimal(i)) for i in range(count)]


class TestChartSeries:
    def test_exactly_48_ticks(self):
        x, y = chart_series(_ticks(48), 48)
        assert x == [float(i) for i in range(1, 49)]
        assert y == [float(i) for i in range(48)]

    def test_keeps_most_recent_ticks(self):
        x, y = chart_series(_ticks(100), 48)
        assert len(x) == 48
        assert y[0] == 52.0
        assert y[-1] == 99.0

    def test_shorter_history_uses_all_ticks(self):
        x, y = chart_series(_ticks(10), 48)
        assert x == [float(i) for i in range(1, 11)]
        assert len(y) == 10

    def test_empty_history(self):
        assert chart_series([], 48) == ([], [])


def test_percent_change_zero_reference():
    assert percent_change(Decimal("5"), Decimal("0")) == 0.0
    assert percent_change(Decimal("150"), Decimal("100")) == 50.0


async def test_renders_png_to_temp_file(settings, limiter):
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json=ticks_payload([0.001 * (i + 1) for i in range(60)]))
    )
    async with httpx.AsyncClient(transport=transport) as client:
        result = await render_chart_async(client, "BTC-LTC", settings, limiter=limiter)

    assert result.is_ok
    path = Path(result.value)
    try:
        assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
    finally:
        path.unlink()


async def test_short_history_still_renders(settings, limiter):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=ticks_payload([1.0, 2.0, 1.5])))
    async with httpx.AsyncClient(transport=transport) as client:
        result = await render_chart_async(client, "BTC-LTC", settings, limiter=limiter)

    assert result.is_ok
    Path(result.value).unlink()


async def test_empty_history_is_degraded(settings, limiter):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=ticks_payload([])))
    async with httpx.AsyncClient(transport=transport) as client:
        result = await render_chart_async(client, "BTC-LTC", settings, limiter=limiter)

    assert result.status is StageStatus.DEGRADED
    assert result.value is None


async def test_tick_fetch_failure_is_degraded(settings, limiter):
    transport = httpx.MockTransport(lambda request: httpx.Response(500))
    async with httpx.AsyncClient(transport=transport) as client:
        result = await render_chart_async(client, "BTC-LTC", settings, limiter=limiter)

    assert result.status is StageStatus.DEGRADED
