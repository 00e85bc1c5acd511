"""Services used by views: stock_data.py (price feed + long-running task)."""
