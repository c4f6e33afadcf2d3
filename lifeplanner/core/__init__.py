"""
Core module for Portfolio Life Planner
Contains storage, configuration, models and repositories
"""

from .config import Config
from .database import Database
from .errors import (
    DuplicateKeyError,
    NotFoundError,
    PlannerError,
    ReferentialGuardError,
    ValidationError,
)
from .models import DaySummary, Goal, JournalEntry, LifeArea, Project, Task
from .planner import Planner, open_planner

__all__ = [
    'Config', 'Database', 'Planner', 'open_planner',
    'LifeArea', 'Goal', 'Project', 'Task', 'JournalEntry', 'DaySummary',
    'PlannerError', 'NotFoundError', 'DuplicateKeyError', 'ValidationError', 'ReferentialGuardError',
]
