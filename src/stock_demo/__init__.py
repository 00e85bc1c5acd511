"""
stock_demo: live price feed + background task demo.

Subpackages:
- feed: LiveValueFeed / FeedSubscription
- tasks: BackgroundTaskRunner / TaskHandle
- core: ports, schedulers, dispatchers, AppState
- services, views: the demo screen built on top of them
- cli, connectors: console front end
"""

__version__ = "0.1.0"
