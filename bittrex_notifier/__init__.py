"""
bittrex_notifier
~~~~~~~~~~~~~~~~

Bittrex 暴涨暴跌桌面通知：
- 每分钟拉取全部市场 24h 概况，筛选 BTC 计价的异动市场
- 为每个异动市场绘制最近 24 小时走势图并发送桌面通知
- 本地缓存交易对图标
- 以 systemd / launchd 后台服务方式运行

入口：
- bittrex_notifier.cli:main
- scripts/pump_dump_notifier.py
"""

__version__ = "0.1.0"
