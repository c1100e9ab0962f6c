"""
Core wiring.

Components:
- ports.py: Protocols the rest of the app depends on
- clock.py: system wall clock
- state.py: AppState passed to connectors and task helpers
"""
