#!/usr/bin/env python3
"""
Database initialization script for Portfolio Life Planner
Creates the SQLite store with all tables and seeds the default life areas
"""

import asyncio
import sqlite3
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from lifeplanner.core.config import Config
from lifeplanner.core.planner import open_planner


async def create_database(config: Config, db_path: Path) -> bool:
    """Create schema and default life areas"""
    async with await open_planner(config, db_path=db_path) as planner:
        areas = await planner.life_areas.get_all()
        tables = planner.db.table_names()

    print("✓ Database schema created successfully!")
    print(f"✓ Database location: {db_path}")
    print(f"✓ Life areas: {', '.join(area.name for area in areas)}")
    print(f"\n✓ Tables created: {', '.join(tables)}")
    return True


def init_database() -> bool:
    """Initialize the database, asking before replacing an existing file"""
    config = Config()
    db_path = config.get_database_path()

    if db_path.exists():
        response = input(f"Database already exists at {db_path}. Overwrite? (yes/no): ")
        if response.lower() != 'yes':
            print("Aborting database initialization.")
            return False
        db_path.unlink()

    print(f"Creating database at {db_path}...")
    try:
        return asyncio.run(create_database(config, db_path))
    except sqlite3.Error as e:
        print(f"✗ Database error: {e}")
        return False


if __name__ == "__main__":
    print("=" * 60)
    print("Portfolio Life Planner - Database Initialization")
    print("=" * 60)
    print()

    success = init_database()

    if success:
        print("\n" + "=" * 60)
        print("Database initialization complete!")
        print("=" * 60)
        sys.exit(0)
    else:
        print("\n" + "=" * 60)
        print("Database initialization failed!")
        print("=" * 60)
        sys.exit(1)
