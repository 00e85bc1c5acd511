"""
Headless views.

Components:
- advanced_view.py: realtime price + async task view model (attach/detach lifecycle)
- drag_drop.py: drag-and-drop board model
"""
