import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest

# 确保项目根目录在 sys.path
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from bittrex_notifier.config import Settings  # noqa: E402
from bittrex_notifier.models import MarketSummary  # noqa: E402
from bittrex_notifier.rate_limiter import AsyncConcurrencyLimiter  # noqa: E402


def make_summary(symbol="BTC-LTC", last="1", low="1", high="1", volume="500") -> MarketSummary:
    return MarketSummary(
        symbol=symbol,
        last=Decimal(last),
        low=Decimal(low),
        high=Decimal(high),
        base_volume=Decimal(volume),
    )


def summary_payload(symbol, last, low, high, volume):
    return {
        "MarketName": symbol,
        "Last": last,
        "Low": low,
        "High": high,
        "BaseVolume": volume,
        "Volume": 1000.0,
    }


def ticks_payload(closes):
    return {
        "success": True,
        "message": "",
        "result": [
            {"O": c, "H": c, "L": c, "C": c, "V": 1.0, "T": f"2017-10-16T{i // 2:02d}:{(i % 2) * 30:02d}:00"}
            for i, c in enumerate(closes)
        ],
    }


class RecordingSink:
    """记录收到的通知，可指定某些市场发送失败。"""

    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.delivered = []
        self.attempted = []
        self.chart_existed = {}

    def deliver(self, note):
        from bittrex_notifier.errors import NotificationError

        self.attempted.append(note)
        if note.content_image:
            self.chart_existed[note.title] = Path(note.content_image).exists()
        if note.title in self.fail_for:
            raise NotificationError("mock failure")
        self.delivered.append(note)


@pytest.fixture
def settings(tmp_path):
    return Settings(logo_dir=tmp_path / "logos", poll_interval=0.01)


@pytest.fixture
def limiter():
    return AsyncConcurrencyLimiter(10)
