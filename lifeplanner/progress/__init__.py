"""
Progress module for Portfolio Life Planner.

Completion and consistency metrics, timeframe presets, life area and
goal progress reports, and their Rich formatting.
"""

from .metrics import (
    TIMEFRAMES,
    DayBucket,
    bucket_tasks_by_day,
    completion_rate,
    consistency_rate,
    count_days,
    goal_progress,
    resolve_timeframe,
)
from .aggregator import ProgressAggregator, LifeAreaProgress, GoalProgress
from .formatter import ProgressFormatter

__all__ = [
    # Metrics
    'TIMEFRAMES',
    'DayBucket',
    'bucket_tasks_by_day',
    'completion_rate',
    'consistency_rate',
    'count_days',
    'goal_progress',
    'resolve_timeframe',
    # Aggregator
    'ProgressAggregator',
    'LifeAreaProgress',
    'GoalProgress',
    # Formatter
    'ProgressFormatter',
]
