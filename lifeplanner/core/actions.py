"""
Planner actions that span more than one repository call.

These are the operations the command layer performs on behalf of the
user: validating input, reordering and deleting life areas, and turning a
goal's drafted steps into scheduled tasks.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence

from .dates import DayLike, to_day
from .errors import NotFoundError, ReferentialGuardError, ValidationError
from .models import Goal, LifeArea, Task
from .planner import Planner
from .repositories import LifeAreaRepository

logger = logging.getLogger(__name__)


# ============================================================================
# Input validation
# ============================================================================

def require_text(value: Optional[str], field_name: str) -> str:
    """Strip and reject empty required text"""
    text = (value or "").strip()
    if not text:
        raise ValidationError(field_name, "must not be empty")
    return text


def require_choice(value: str, choices: Sequence, field_name: str):
    if value not in choices:
        allowed = ", ".join(str(c) for c in choices)
        raise ValidationError(field_name, f"must be one of {allowed}")
    return value


def require_range(value: Optional[int], low: int, high: int, field_name: str) -> Optional[int]:
    if value is not None and not low <= value <= high:
        raise ValidationError(field_name, f"must be between {low} and {high}")
    return value


# ============================================================================
# Life areas
# ============================================================================

def next_life_area_order(areas: Iterable[LifeArea]) -> int:
    """Order value for a new area: one past the current maximum"""
    orders = [area.order for area in areas]
    return max(orders) + 1 if orders else 1


async def move_life_area(life_areas: LifeAreaRepository, area_id: str, direction: str) -> List[LifeArea]:
    """
    Move a life area one step up or down in the display order.

    The area swaps its order value with its neighbour, so the set of
    order values is unchanged. Moving the first area up or the last area
    down does nothing.

    Args:
        life_areas: Life area repository
        area_id: Area to move
        direction: 'up' or 'down'

    Returns:
        All life areas in their new order
    """
    require_choice(direction, ("up", "down"), "direction")
    areas = await life_areas.get_all()
    index = next((i for i, area in enumerate(areas) if area.id == area_id), None)
    if index is None:
        raise NotFoundError("LifeArea", area_id)

    target_index = index - 1 if direction == "up" else index + 1
    if target_index < 0 or target_index >= len(areas):
        return areas

    await life_areas.swap_order(areas[index].id, areas[target_index].id)
    return await life_areas.get_all()


async def delete_life_area(planner: Planner, area_id: str) -> None:
    """
    Delete a life area that nothing references.

    Raises:
        ReferentialGuardError: if goals or tasks still point at the area
    """
    goals = await planner.goals.get_by_life_area(area_id)
    tasks = await planner.tasks.get_by_life_area(area_id)
    if goals or tasks:
        logger.warning(
            "Refusing to delete life area %s: %d goals, %d tasks",
            area_id, len(goals), len(tasks)
        )
        raise ReferentialGuardError(area_id, len(goals), len(tasks))
    await planner.life_areas.delete(area_id)


# ============================================================================
# Goal breakdown
# ============================================================================

@dataclass
class GoalTaskDraft:
    """A step of a goal that has not been put on the calendar yet"""
    title: str
    description: Optional[str] = None
    priority: str = "medium"
    estimated_minutes: Optional[int] = None
    due_date: Optional[date] = None
    dependencies: List[str] = field(default_factory=list)


def default_schedule_day(draft: GoalTaskDraft, today: date) -> date:
    """Tomorrow, or the due date if that comes first"""
    tomorrow = today + timedelta(days=1)
    if draft.due_date is not None and draft.due_date <= tomorrow:
        return draft.due_date
    return tomorrow


async def schedule_goal_task(planner: Planner, goal: Goal, draft: GoalTaskDraft, day: DayLike) -> Task:
    """
    Create the real task for a drafted goal step on the given day.

    The task belongs to the goal's life area and is flagged is_goal_task.
    """
    title = require_text(draft.title, "title")
    return await planner.tasks.create(
        title=title,
        life_area_id=goal.life_area_id,
        goal_id=goal.id,
        priority=draft.priority,
        notes=draft.description,
        estimated_minutes=draft.estimated_minutes,
        scheduled_date=to_day(day),
        due_date=draft.due_date,
        dependencies=list(draft.dependencies),
        is_goal_task=True,
        tags=[],
    )
