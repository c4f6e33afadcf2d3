"""
Progress aggregation for life areas and goals.

Reads tasks and goals through the repositories and combines them with
the pure calculations in metrics into report structures for display.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from lifeplanner.core.config import Config
from lifeplanner.core.errors import NotFoundError
from lifeplanner.core.models import Goal, LifeArea, Task
from lifeplanner.core.planner import Planner
from lifeplanner.progress.metrics import (
    DayBucket,
    active_days,
    bucket_tasks_by_day,
    completion_rate,
    consistency_rate,
    count_days,
    goal_progress,
    resolve_timeframe,
    tasks_in_range,
)


@dataclass
class LifeAreaProgress:
    """Progress of one life area over a timeframe"""
    life_area: LifeArea
    timeframe: str
    start: datetime
    end: datetime
    total_tasks: int
    completed_tasks: int
    active_days: int
    total_days: int
    completion_rate: float
    consistency_rate: float
    goals: List[Goal] = field(default_factory=list)
    breakdown: List[DayBucket] = field(default_factory=list)


@dataclass
class GoalProgress:
    """A goal with its tasks and completion percentage"""
    goal: Goal
    life_area: Optional[LifeArea]
    tasks: List[Task]
    completed_tasks: int
    progress: float


class ProgressAggregator:
    """
    Builds progress reports from repository reads.

    Never writes.
    """

    def __init__(self, planner: Planner, config: Optional[Config] = None):
        """
        Initialize aggregator.

        Args:
            planner: Open planner handle
            config: Configuration (falls back to the planner's)
        """
        self.planner = planner
        self.config = config or planner.config

    def _week_start(self) -> str:
        if self.config is None:
            return "sunday"
        return self.config.get("first_day_of_week", "settings", "sunday")

    def _default_timeframe(self) -> str:
        if self.config is None:
            return "month"
        return self.config.get("default_timeframe", "preferences", "month")

    async def build(
        self,
        life_area_id: str,
        timeframe: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> LifeAreaProgress:
        """
        Progress report for a life area.

        Args:
            life_area_id: Area to report on
            timeframe: One of metrics.TIMEFRAMES (defaults to preference)
            now: Reference instant (defaults to local now)

        Raises:
            NotFoundError: if the life area does not exist
        """
        area = await self.planner.life_areas.get_by_id(life_area_id)
        if area is None:
            raise NotFoundError("LifeArea", life_area_id)

        if timeframe is None:
            timeframe = self._default_timeframe()
        if now is None:
            now = datetime.now().astimezone()

        start, end = resolve_timeframe(timeframe, now, self._week_start())
        total_days = count_days(start, end)

        area_tasks = await self.planner.tasks.get_by_life_area(life_area_id)
        timeframe_tasks = tasks_in_range(area_tasks, start, end)
        completed = [t for t in timeframe_tasks if t.is_completed]
        days_with_tasks = active_days(timeframe_tasks)

        return LifeAreaProgress(
            life_area=area,
            timeframe=timeframe,
            start=start,
            end=end,
            total_tasks=len(timeframe_tasks),
            completed_tasks=len(completed),
            active_days=len(days_with_tasks),
            total_days=total_days,
            completion_rate=completion_rate(timeframe_tasks),
            consistency_rate=consistency_rate(len(days_with_tasks), total_days),
            goals=await self.planner.goals.get_by_life_area(life_area_id),
            breakdown=bucket_tasks_by_day(timeframe_tasks, start, end),
        )

    async def goal_overview(self, goal_id: str) -> GoalProgress:
        """
        A goal, its life area and its tasks.

        Raises:
            NotFoundError: if the goal does not exist
        """
        goal = await self.planner.goals.get_by_id(goal_id)
        if goal is None:
            raise NotFoundError("Goal", goal_id)

        tasks = await self.planner.tasks.get_by_goal(goal_id)
        return GoalProgress(
            goal=goal,
            life_area=await self.planner.life_areas.get_by_id(goal.life_area_id),
            tasks=tasks,
            completed_tasks=sum(1 for t in tasks if t.is_completed),
            progress=goal_progress(tasks),
        )
