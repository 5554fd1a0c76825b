import tempfile
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

# 服务名称（守护进程 / 通知分组使用）
SERVICE_NAME = "bittrex_notifier"
SERVICE_DESCRIPTION = "Desktop notification of pump & dumps on Bittrex"
EXCHANGE_NAME = "Bittrex"

# 交易所基础 URL
BITTREX_BASE_URL = "https://bittrex.com"
BITTREX_PUBLIC_API = f"{BITTREX_BASE_URL}/api/v1.1/public"
BITTREX_PUB_API_V2 = f"{BITTREX_BASE_URL}/Api/v2.0/pub"
BITTREX_MARKET_URL = f"{BITTREX_BASE_URL}/Market/Index?MarketName="

BITTREX_MAX_CONCURRENT_REQUESTS = 10
BITTREX_MIN_REQUEST_INTERVAL = 0.05
REQUEST_TIMEOUT = 30

# 筛选阈值
BASE_CURRENCY = "BTC"
VOLUME_THRESHOLD = Decimal("200.0")
PUMP_THRESHOLD = Decimal("1.75")
DUMP_THRESHOLD = Decimal("0.75")

# 图表：30 分钟 K 线，取最近 48 根（约 24 小时）
TICK_INTERVAL = "thirtyMin"
CHART_POINTS = 48

POLL_INTERVAL = 60.0

# 图标缓存目录
LOGO_DIR = Path(tempfile.gettempdir()) / "bittrex_logos"

NOTIFICATION_SOUND = "Basso"


@dataclass(frozen=True)
class Settings:
    """
    运行期配置，启动时构建一次并传递给各组件。

    默认值即上面的模块常量；测试可以替换阈值、目录或轮询间隔。
    """

    base_currency: str = BASE_CURRENCY
    volume_threshold: Decimal = VOLUME_THRESHOLD
    pump_threshold: Decimal = PUMP_THRESHOLD
    dump_threshold: Decimal = DUMP_THRESHOLD
    tick_interval: str = TICK_INTERVAL
    chart_points: int = CHART_POINTS
    poll_interval: float = POLL_INTERVAL
    logo_dir: Path = LOGO_DIR
    exchange_name: str = EXCHANGE_NAME
    market_url: str = BITTREX_MARKET_URL
    sound: str = NOTIFICATION_SOUND
    request_timeout: float = REQUEST_TIMEOUT
