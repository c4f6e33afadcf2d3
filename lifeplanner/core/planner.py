"""
The Planner handle: one storage engine shared by all repositories.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .config import Config
from .database import Database
from .repositories import (
    DaySummaryRepository,
    GoalRepository,
    JournalEntryRepository,
    LifeAreaRepository,
    ProjectRepository,
    TaskRepository,
)
from .seed import seed_database

logger = logging.getLogger(__name__)


class Planner:
    """
    Bundles the repositories over a single Database.

    Build one at startup with open_planner() and close it at exit.
    """

    def __init__(self, db: Database, config: Optional[Config] = None):
        self.db = db
        self.config = config
        self.life_areas = LifeAreaRepository(db)
        self.goals = GoalRepository(db)
        self.projects = ProjectRepository(db)
        self.tasks = TaskRepository(db)
        self.journal_entries = JournalEntryRepository(db)
        self.day_summaries = DaySummaryRepository(db)

    async def seed(self) -> bool:
        defaults = self.config.get_default_life_areas() if self.config else None
        return await seed_database(self.life_areas, defaults)

    def close(self) -> None:
        self.db.close()

    async def __aenter__(self) -> 'Planner':
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()


async def open_planner(
    config: Optional[Config] = None,
    db_path: Optional[Union[str, Path]] = None,
    seed: bool = True
) -> Planner:
    """
    Open the database, create the schema and seed it once.

    Args:
        config: Configuration (creates default if not provided)
        db_path: Overrides config.get_database_path()
        seed: Populate default life areas on a fresh database

    Returns:
        Ready-to-use Planner
    """
    if config is None:
        config = Config()
    db = Database(db_path if db_path is not None else config.get_database_path())
    db.open()
    try:
        db.initialize()
        planner = Planner(db, config)
        if seed:
            await planner.seed()
    except Exception:
        db.close()
        raise
    logger.info("Planner ready (%s)", db.db_path)
    return planner
