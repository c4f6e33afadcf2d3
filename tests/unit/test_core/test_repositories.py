"""
Unit tests for the repositories.
Covers CRUD round trips, patch-style updates, day-keyed upserts and the
task query helpers.
"""

import asyncio
import pytest
import pytest_asyncio
from dataclasses import replace
from datetime import date, datetime, timedelta
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from lifeplanner.core.errors import DuplicateKeyError, NotFoundError


@pytest_asyncio.fixture
async def area_id(planner):
    """Id of a freshly created life area."""
    area = await planner.life_areas.create(name="Health", color="#10B981", order=1)
    return area.id


class TestCrud:
    """Tests for the generic repository operations."""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, planner):
        """create() fills in a unique id and both timestamps."""
        first = await planner.life_areas.create(name="Health", order=1)
        second = await planner.life_areas.create(name="Family", order=2)
        assert first.id and second.id and first.id != second.id
        assert first.created_at is not None
        assert first.created_at == first.updated_at

    @pytest.mark.asyncio
    async def test_create_then_get_round_trip(self, planner, area_id):
        """A created goal reads back with equal fields."""
        goal = await planner.goals.create(
            life_area_id=area_id, title="Run a marathon",
            description="Autumn race", target_date=date(2024, 10, 1),
        )
        loaded = await planner.goals.get_by_id(goal.id)
        assert loaded == goal

    @pytest.mark.asyncio
    async def test_task_with_every_field_round_trips(self, planner, area_id):
        """Lists, booleans, dates and optional ids all survive storage."""
        goal = await planner.goals.create(life_area_id=area_id, title="Marathon")
        project = await planner.projects.create(goal_id=goal.id, title="Base block")
        task = await planner.tasks.create(
            life_area_id=area_id, goal_id=goal.id, project_id=project.id,
            title="Long run", notes="Easy pace", priority="high",
            estimated_minutes=90, scheduled_date=date(2024, 6, 1),
            due_date=date(2024, 6, 2), dependencies=["t0", "t1"],
            tags=["outdoor", "endurance"], is_goal_task=True,
        )
        assert await planner.tasks.get_by_id(task.id) == task

    @pytest.mark.asyncio
    async def test_journal_entry_round_trips(self, planner):
        """An upserted journal entry reads back unchanged."""
        entry = await planner.journal_entries.upsert_by_date(date(2024, 6, 1), "Good run", mood="great")
        assert await planner.journal_entries.get_by_id(entry.id) == entry
        assert await planner.journal_entries.get_by_date("2024-06-01") == entry

    @pytest.mark.asyncio
    async def test_day_summary_round_trips(self, planner):
        """A created day summary reads back unchanged by its date key."""
        summary = await planner.day_summaries.create(
            date(2024, 6, 1), reflection="Solid day", energy_level=4, score=8
        )
        assert await planner.day_summaries.get_by_id("2024-06-01") == summary
        assert await planner.day_summaries.get_by_date(date(2024, 6, 1)) == summary

    @pytest.mark.asyncio
    async def test_create_rejects_id(self, planner):
        """Ids are always generated, never supplied."""
        with pytest.raises(ValueError):
            await planner.life_areas.create(id="custom", name="Health")

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, planner):
        assert await planner.tasks.get_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_update_overlays_changes(self, planner, area_id):
        """Only the passed fields change; updated_at moves forward."""
        goal = await planner.goals.create(life_area_id=area_id, title="Read", description="12 books")
        updated = await planner.goals.update(goal.id, status="paused")

        assert updated.status == "paused"
        assert updated.title == "Read"
        assert updated.description == "12 books"
        assert updated.created_at == goal.created_at
        assert updated.updated_at >= goal.updated_at

        loaded = await planner.goals.get_by_id(goal.id)
        assert loaded.status == "paused"

    @pytest.mark.asyncio
    async def test_update_none_clears_field(self, planner, area_id):
        """Passing None clears an optional field."""
        goal = await planner.goals.create(
            life_area_id=area_id, title="Read", target_date="2024-12-31"
        )
        updated = await planner.goals.update(goal.id, target_date=None)
        assert updated.target_date is None
        assert (await planner.goals.get_by_id(goal.id)).target_date is None

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, planner):
        """Updating a missing record raises NotFoundError and writes nothing."""
        with pytest.raises(NotFoundError):
            await planner.goals.update("missing", title="x")
        assert await planner.goals.count() == 0

    @pytest.mark.asyncio
    async def test_update_rejects_protected_fields(self, planner, area_id):
        with pytest.raises(ValueError):
            await planner.life_areas.update(area_id, id="other")
        with pytest.raises(ValueError):
            await planner.life_areas.update(area_id, created_at=datetime.now())

    @pytest.mark.asyncio
    async def test_update_restamps_passed_updated_at(self, planner, area_id):
        """A passed updated_at is accepted but replaced by the new stamp."""
        before = await planner.life_areas.get_by_id(area_id)
        stale = before.updated_at - timedelta(days=30)

        updated = await planner.life_areas.update(area_id, name="Fitness", updated_at=stale)

        assert updated.name == "Fitness"
        assert updated.updated_at >= before.updated_at
        assert (await planner.life_areas.get_by_id(area_id)).updated_at == updated.updated_at

    @pytest.mark.asyncio
    async def test_delete(self, planner, area_id):
        """delete() removes the record; deleting again is a no-op."""
        await planner.life_areas.delete(area_id)
        assert await planner.life_areas.get_by_id(area_id) is None
        await planner.life_areas.delete(area_id)


class TestLifeAreas:
    """Tests for LifeAreaRepository."""

    @pytest.mark.asyncio
    async def test_get_all_sorted_by_order(self, planner):
        """get_all() is ascending by order, not insertion."""
        await planner.life_areas.create(name="Finance", order=3)
        await planner.life_areas.create(name="Health", order=1)
        await planner.life_areas.create(name="Family", order=2)
        names = [area.name for area in await planner.life_areas.get_all()]
        assert names == ["Health", "Family", "Finance"]

    @pytest.mark.asyncio
    async def test_swap_order(self, planner):
        """swap_order() exchanges the two order values."""
        health = await planner.life_areas.create(name="Health", order=1)
        family = await planner.life_areas.create(name="Family", order=2)

        await planner.life_areas.swap_order(health.id, family.id)

        assert (await planner.life_areas.get_by_id(health.id)).order == 2
        assert (await planner.life_areas.get_by_id(family.id)).order == 1

    @pytest.mark.asyncio
    async def test_swap_order_missing(self, planner, area_id):
        with pytest.raises(NotFoundError):
            await planner.life_areas.swap_order(area_id, "missing")


class TestTasks:
    """Tests for TaskRepository queries."""

    @pytest.mark.asyncio
    async def test_get_by_date(self, planner, area_id):
        """Tasks are found by calendar day whatever form the day takes."""
        await planner.tasks.create(life_area_id=area_id, title="Run", scheduled_date="2024-06-01")
        await planner.tasks.create(life_area_id=area_id, title="Swim", scheduled_date="2024-06-02")

        by_date = await planner.tasks.get_by_date(date(2024, 6, 1))
        by_datetime = await planner.tasks.get_by_date(datetime(2024, 6, 1, 21, 0))
        assert [t.title for t in by_date] == ["Run"]
        assert [t.title for t in by_datetime] == ["Run"]

    @pytest.mark.asyncio
    async def test_get_by_goal_and_life_area(self, planner, area_id):
        goal = await planner.goals.create(life_area_id=area_id, title="Fitness")
        other = await planner.life_areas.create(name="Family", order=2)
        await planner.tasks.create(life_area_id=area_id, goal_id=goal.id, title="Run")
        await planner.tasks.create(life_area_id=other.id, title="Call mom")

        assert [t.title for t in await planner.tasks.get_by_goal(goal.id)] == ["Run"]
        assert [t.title for t in await planner.tasks.get_by_life_area(other.id)] == ["Call mom"]

    @pytest.mark.asyncio
    async def test_get_by_project(self, planner, area_id):
        goal = await planner.goals.create(life_area_id=area_id, title="Fitness")
        project = await planner.projects.create(goal_id=goal.id, title="Race prep")
        await planner.tasks.create(life_area_id=area_id, project_id=project.id, title="Long run")

        assert [p.title for p in await planner.projects.get_by_goal(goal.id)] == ["Race prep"]
        assert [t.title for t in await planner.tasks.get_by_project(project.id)] == ["Long run"]

    @pytest.mark.asyncio
    async def test_complete_and_uncomplete(self, planner, area_id):
        """complete() stamps completed_at; uncomplete() clears it."""
        task = await planner.tasks.create(life_area_id=area_id, title="Run")

        done = await planner.tasks.complete(task.id)
        assert done.is_completed
        assert [t.id for t in await planner.tasks.get_completed()] == [task.id]

        reopened = await planner.tasks.uncomplete(task.id)
        assert reopened.completed_at is None
        assert await planner.tasks.get_completed() == []

    @pytest.mark.asyncio
    async def test_complete_round_trip_keeps_other_fields(self, planner, area_id):
        """complete() then uncomplete() changes nothing but updated_at."""
        task = await planner.tasks.create(
            life_area_id=area_id, title="Run", notes="5k", priority="high",
            scheduled_date="2024-06-01", due_date="2024-06-03", tags=["outdoor"],
        )
        await planner.tasks.complete(task.id)
        back = await planner.tasks.uncomplete(task.id)

        assert replace(back, updated_at=task.updated_at) == task
        assert await planner.tasks.get_by_id(task.id) == back

    @pytest.mark.asyncio
    async def test_complete_missing(self, planner):
        with pytest.raises(NotFoundError):
            await planner.tasks.complete("missing")

    @pytest.mark.asyncio
    async def test_tags_and_dependencies_round_trip(self, planner, area_id):
        first = await planner.tasks.create(life_area_id=area_id, title="Buy shoes")
        second = await planner.tasks.create(
            life_area_id=area_id, title="Run", tags=["outdoor", "cardio"],
            dependencies=[first.id],
        )
        loaded = await planner.tasks.get_by_id(second.id)
        assert loaded.tags == ["outdoor", "cardio"]
        assert loaded.dependencies == [first.id]
        assert loaded.is_goal_task is False


class TestJournalEntries:
    """Tests for JournalEntryRepository upserts."""

    @pytest.mark.asyncio
    async def test_upsert_twice_keeps_one_entry(self, planner):
        """Two upserts for the same day leave a single entry with the latest text."""
        first = await planner.journal_entries.upsert_by_date("2024-06-01", "Morning", "good")
        second = await planner.journal_entries.upsert_by_date(date(2024, 6, 1), "Evening", "great")

        assert second.id == first.id
        assert await planner.journal_entries.count() == 1
        entry = await planner.journal_entries.get_by_date("2024-06-01")
        assert entry.content == "Evening"
        assert entry.mood == "great"
        assert entry.created_at == first.created_at

    @pytest.mark.asyncio
    async def test_upsert_without_mood_keeps_mood(self, planner):
        await planner.journal_entries.upsert_by_date("2024-06-01", "Morning", "bad")
        entry = await planner.journal_entries.upsert_by_date("2024-06-01", "Better now")
        assert entry.mood == "bad"

    @pytest.mark.asyncio
    async def test_upsert_none_mood_clears(self, planner):
        await planner.journal_entries.upsert_by_date("2024-06-01", "Morning", "bad")
        entry = await planner.journal_entries.upsert_by_date("2024-06-01", "Morning", None)
        assert entry.mood is None

    @pytest.mark.asyncio
    async def test_days_are_independent(self, planner):
        await planner.journal_entries.upsert_by_date("2024-06-01", "One")
        await planner.journal_entries.upsert_by_date("2024-06-02", "Two")
        assert (await planner.journal_entries.get_by_date("2024-06-02")).content == "Two"
        assert await planner.journal_entries.get_by_date("2024-06-03") is None

    @pytest.mark.asyncio
    async def test_concurrent_upserts_keep_one_entry(self, planner):
        """Interleaved upserts on one loop never create a second entry."""
        await asyncio.gather(*(
            planner.journal_entries.upsert_by_date("2024-06-01", f"draft {i}")
            for i in range(5)
        ))
        assert await planner.journal_entries.count() == 1


class TestDaySummaries:
    """Tests for DaySummaryRepository."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, planner):
        summary = await planner.day_summaries.create(date(2024, 6, 1), score=7, energy_level=4)
        assert summary.date == "2024-06-01"
        loaded = await planner.day_summaries.get_by_date("2024-06-01")
        assert loaded.score == 7
        assert loaded.energy_level == 4

    @pytest.mark.asyncio
    async def test_create_twice_raises(self, planner):
        """The date is the primary key; a second create collides."""
        await planner.day_summaries.create("2024-06-01")
        with pytest.raises(DuplicateKeyError):
            await planner.day_summaries.create("2024-06-01")

    @pytest.mark.asyncio
    async def test_upsert_overlays(self, planner):
        await planner.day_summaries.upsert_by_date("2024-06-01", score=5, reflection="Slow")
        summary = await planner.day_summaries.upsert_by_date("2024-06-01", score=8)
        assert summary.score == 8
        assert summary.reflection == "Slow"
        assert await planner.day_summaries.count() == 1

    @pytest.mark.asyncio
    async def test_update_missing_and_delete(self, planner):
        with pytest.raises(NotFoundError):
            await planner.day_summaries.update("2024-06-01", score=3)
        await planner.day_summaries.create("2024-06-01", score=3)
        await planner.day_summaries.delete(date(2024, 6, 1))
        assert await planner.day_summaries.get_by_date("2024-06-01") is None


class TestScenarios:
    """End-to-end flows through several repositories."""

    @pytest.mark.asyncio
    async def test_goal_task_flow(self, planner):
        """Area, goal and scheduled task are found by goal and by day, then completed."""
        await planner.seed()
        health = (await planner.life_areas.get_all())[0]
        assert health.name == "Health"

        goal = await planner.goals.create(life_area_id=health.id, title="Run a 5K")
        task = await planner.tasks.create(
            life_area_id=health.id, goal_id=goal.id, title="Buy shoes",
            scheduled_date=date(2024, 6, 1),
        )

        assert [t.id for t in await planner.tasks.get_by_goal(goal.id)] == [task.id]
        assert [t.id for t in await planner.tasks.get_by_date("2024-06-01")] == [task.id]

        done = await planner.tasks.complete(task.id)
        assert done.completed_at is not None
        assert done.title == "Buy shoes"
        assert done.scheduled_date == task.scheduled_date

    @pytest.mark.asyncio
    async def test_journal_edit_keeps_mood(self, planner):
        await planner.journal_entries.upsert_by_date("2024-06-01", "Great day", "great")
        await planner.journal_entries.upsert_by_date("2024-06-01", "Edited")

        entry = await planner.journal_entries.get_by_date("2024-06-01")
        assert (entry.content, entry.mood) == ("Edited", "great")
