# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "STOCK_DEMO_APP_NAME": "App display name (default: stock-demo).",
    "STOCK_DEMO_LOG_LEVEL": "Console logging level (default: INFO).",
    "STOCK_DEMO_DATA_DIR": "Local data directory for logs (default: .local/stock_demo).",
    # Live price feed
    "STOCK_DEMO_FEED_INTERVAL_MS": "Delay between price ticks in milliseconds (default: 500).",
    "STOCK_DEMO_FEED_MAX_SAMPLES": "Number of prices a feed emits before it completes (default: 50).",
    "STOCK_DEMO_FEED_MAX_HUNDREDTHS": "Upper bound of a price in hundredths, max 9999 (default: 9999).",
    # Background tasks
    "STOCK_DEMO_LONG_TASK_SECONDS": "Duration of the long-running task (default: 6).",
    "STOCK_DEMO_MAX_OUTSTANDING_TASKS": "Max concurrently running background tasks (default: 8).",
    # Console view
    "STOCK_DEMO_PRICE_FORMAT": "Price line format, '{}' is the price (default: 'Current Price: {} €').",
    "STOCK_DEMO_PRINT_TICKS": "Print every price tick to the console (true/false, default: true).",
}
