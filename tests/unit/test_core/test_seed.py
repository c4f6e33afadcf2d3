"""
Unit tests for seeding and planner startup.
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from lifeplanner.core.planner import open_planner
from lifeplanner.core.seed import DEFAULT_LIFE_AREAS, seed_database


class TestSeedDatabase:
    """Tests for seed_database."""

    @pytest.mark.asyncio
    async def test_seeds_empty_database(self, planner):
        """An empty database receives the five default life areas in order."""
        assert await seed_database(planner.life_areas) is True

        areas = await planner.life_areas.get_all()
        assert [(a.name, a.color, a.order) for a in areas] == [
            ("Health", "#10B981", 1),
            ("Family", "#3B82F6", 2),
            ("Finance", "#F59E0B", 3),
            ("Learning", "#8B5CF6", 4),
            ("Community", "#EF4444", 5),
        ]

    @pytest.mark.asyncio
    async def test_second_seed_is_noop(self, planner):
        """Seeding twice leaves exactly five areas."""
        await seed_database(planner.life_areas)
        assert await seed_database(planner.life_areas) is False
        assert await planner.life_areas.count() == len(DEFAULT_LIFE_AREAS)

    @pytest.mark.asyncio
    async def test_existing_area_prevents_seed(self, planner):
        """Any existing life area means the database is not seeded."""
        await planner.life_areas.create(name="Custom", order=1)
        assert await seed_database(planner.life_areas) is False
        assert [a.name for a in await planner.life_areas.get_all()] == ["Custom"]

    @pytest.mark.asyncio
    async def test_custom_defaults(self, planner):
        defaults = [{"name": "Work", "color": "#000000", "order": 1}]
        await seed_database(planner.life_areas, defaults)
        assert [a.name for a in await planner.life_areas.get_all()] == ["Work"]

    @pytest.mark.asyncio
    async def test_planner_seed_uses_config(self, planner, config):
        """Planner.seed() reads the defaults from life_areas.json."""
        config.set("defaults", [{"name": "Only", "color": "#111111", "order": 1}], section="life_areas")
        assert await planner.seed() is True
        assert [a.name for a in await planner.life_areas.get_all()] == ["Only"]


class TestOpenPlanner:
    """Tests for open_planner."""

    @pytest.mark.asyncio
    async def test_open_creates_and_seeds(self, tmp_path, config):
        """A new database file is created and seeded once."""
        db_file = tmp_path / "data" / "planner.db"
        planner = await open_planner(config, db_path=db_file)
        try:
            assert db_file.exists()
            assert await planner.life_areas.count() == 5
        finally:
            planner.close()

        # Reopening does not seed again
        async with await open_planner(config, db_path=db_file) as reopened:
            assert await reopened.life_areas.count() == 5

    @pytest.mark.asyncio
    async def test_open_without_seed(self, tmp_path, config):
        async with await open_planner(config, db_path=tmp_path / "planner.db", seed=False) as planner:
            assert await planner.life_areas.count() == 0

    @pytest.mark.asyncio
    async def test_open_uses_env_path(self, tmp_path, config, monkeypatch):
        """PLANNER_DB_PATH picks the database file."""
        db_file = tmp_path / "env.db"
        monkeypatch.setenv("PLANNER_DB_PATH", str(db_file))
        async with await open_planner(config) as planner:
            assert Path(planner.db.db_path) == db_file
        assert db_file.exists()
