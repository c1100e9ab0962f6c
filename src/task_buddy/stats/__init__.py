"""
Statistics subsystem.

Components:
- stats_models.py: UserStats snapshot + JSON record mapping
- stats_store.py: StatisticsStore (streak transitions on app load / task completion)
"""
