class BittrexNotifierError(Exception):
    """所有业务异常的基类。"""


class MarketFetchError(BittrexNotifierError):
    """获取市场概况失败，属于致命错误。"""


class NotificationError(BittrexNotifierError):
    """桌面通知发送失败。"""


class ServiceError(BittrexNotifierError):
    """后台服务安装 / 启停失败。"""
