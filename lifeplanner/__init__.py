"""
Portfolio Life Planner: local data layer for a calendar, task manager,
goal tracker and daily journal.
"""

__version__ = "0.1.0"
