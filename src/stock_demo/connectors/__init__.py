"""Front ends that drive AppState: console_connector.py (interactive REPL)."""
