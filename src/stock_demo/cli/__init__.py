"""
Console application.

Components:
- main.py: entrypoint (stock-demo console script)
- bootstrap.py: composition root (AppState wiring + shutdown)
- commands.py: slash-command registry
"""
