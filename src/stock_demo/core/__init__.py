"""
Core contracts shared by the feed, the task runner and the view.

Components:
- ports.py: Protocols for schedulers, dispatchers and waiters
- scheduling.py: concrete schedulers (threading, asyncio, virtual time)
- dispatch.py: concrete dispatchers (inline, UI thread, asyncio)
- state.py: AppState wiring container used by the console app
"""
