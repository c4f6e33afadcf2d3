"""
Initial data for a fresh database.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from .repositories import LifeAreaRepository

logger = logging.getLogger(__name__)

DEFAULT_LIFE_AREAS: List[Dict[str, Any]] = [
    {"name": "Health", "color": "#10B981", "order": 1},
    {"name": "Family", "color": "#3B82F6", "order": 2},
    {"name": "Finance", "color": "#F59E0B", "order": 3},
    {"name": "Learning", "color": "#8B5CF6", "order": 4},
    {"name": "Community", "color": "#EF4444", "order": 5},
]


async def seed_database(
    life_areas: LifeAreaRepository,
    defaults: Optional[Sequence[Dict[str, Any]]] = None
) -> bool:
    """
    Insert the default life areas unless any life area already exists.

    Runs once during startup (see open_planner). Calling it again is
    harmless. The existence check and the inserts run without an await
    that yields to the event loop, so two seeders on the same loop cannot
    both pass the check.

    Args:
        life_areas: Life area repository to populate
        defaults: Rows of name/color/order (defaults to DEFAULT_LIFE_AREAS)

    Returns:
        True if the defaults were inserted, False if the database was
        already populated
    """
    if await life_areas.count() > 0:
        logger.debug("Life areas present, skipping seed")
        return False

    rows = list(defaults) if defaults else DEFAULT_LIFE_AREAS
    for row in rows:
        await life_areas.create(name=row["name"], color=row["color"], order=int(row["order"]))

    logger.info("Seeded %d default life areas", len(rows))
    return True
