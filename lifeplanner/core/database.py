"""
Embedded storage engine for Portfolio Life Planner

A small document store on top of SQLite. Each table is declared up front
with a primary key and a fixed set of indexed fields; records go in and
come out as plain dictionaries of column values.

Usage:
    db = Database(config.get_database_path())
    db.initialize()
    db.add("life_areas", {"id": "...", "name": "Health", ...})
    db.where_equals("tasks", "goal_id", goal_id)
"""

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .errors import DuplicateKeyError

logger = logging.getLogger(__name__)

DATABASE_NAME = "PortfolioLifePlannerDB"
SCHEMA_VERSION = 1


@dataclass(frozen=True)
class TableSchema:
    """Static definition of one table"""
    name: str
    primary_key: str
    columns: Tuple[Tuple[str, str], ...]  # (name, sqlite type)
    indexes: Tuple[str, ...] = ()

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.columns)

    def create_statements(self) -> List[str]:
        """DDL for the table and its secondary indexes"""
        column_defs = []
        for name, sql_type in self.columns:
            definition = f'"{name}" {sql_type}'
            if name == self.primary_key:
                definition += " PRIMARY KEY NOT NULL"
            column_defs.append(definition)

        statements = [
            f'CREATE TABLE IF NOT EXISTS "{self.name}" (\n    '
            + ",\n    ".join(column_defs)
            + "\n)"
        ]
        for column in self.indexes:
            statements.append(
                f'CREATE INDEX IF NOT EXISTS "idx_{self.name}_{column}" '
                f'ON "{self.name}"("{column}")'
            )
        return statements


_TIMESTAMPS = (("created_at", "TEXT"), ("updated_at", "TEXT"))

# Fixed for the lifetime of the application. There is no migration path.
SCHEMA: Dict[str, TableSchema] = {
    schema.name: schema for schema in (
        TableSchema(
            name="life_areas",
            primary_key="id",
            columns=(
                ("id", "TEXT"),
                ("name", "TEXT NOT NULL"),
                ("color", "TEXT"),
                ("order", "INTEGER NOT NULL DEFAULT 0"),
            ) + _TIMESTAMPS,
            indexes=("name", "order"),
        ),
        TableSchema(
            name="goals",
            primary_key="id",
            columns=(
                ("id", "TEXT"),
                ("life_area_id", "TEXT NOT NULL"),
                ("title", "TEXT NOT NULL"),
                ("description", "TEXT"),
                ("target_date", "TEXT"),
                ("status", "TEXT NOT NULL DEFAULT 'active'"),
            ) + _TIMESTAMPS,
            indexes=("life_area_id", "status", "target_date"),
        ),
        TableSchema(
            name="projects",
            primary_key="id",
            columns=(
                ("id", "TEXT"),
                ("goal_id", "TEXT"),
                ("title", "TEXT NOT NULL"),
                ("status", "TEXT NOT NULL DEFAULT 'active'"),
            ) + _TIMESTAMPS,
            indexes=("goal_id", "status"),
        ),
        TableSchema(
            name="tasks",
            primary_key="id",
            columns=(
                ("id", "TEXT"),
                ("life_area_id", "TEXT NOT NULL"),
                ("goal_id", "TEXT"),
                ("project_id", "TEXT"),
                ("title", "TEXT NOT NULL"),
                ("notes", "TEXT"),
                ("priority", "TEXT NOT NULL DEFAULT 'medium'"),
                ("estimated_minutes", "INTEGER"),
                ("scheduled_date", "TEXT"),
                ("due_date", "TEXT"),
                ("completed_at", "TEXT"),
                ("dependencies", "TEXT"),
                ("tags", "TEXT"),
                ("is_goal_task", "INTEGER NOT NULL DEFAULT 0"),
            ) + _TIMESTAMPS,
            indexes=(
                "life_area_id", "goal_id", "project_id",
                "scheduled_date", "completed_at", "priority",
            ),
        ),
        TableSchema(
            name="journal_entries",
            primary_key="id",
            columns=(
                ("id", "TEXT"),
                ("date", "TEXT NOT NULL"),
                ("content", "TEXT NOT NULL DEFAULT ''"),
                ("mood", "TEXT"),
            ) + _TIMESTAMPS,
            indexes=("date",),
        ),
        TableSchema(
            name="day_summaries",
            primary_key="date",
            columns=(
                ("date", "TEXT"),
                ("reflection", "TEXT"),
                ("energy_level", "INTEGER"),
                ("score", "INTEGER"),
            ) + _TIMESTAMPS,
        ),
    )
}


class Database:
    """
    SQLite-backed record store.

    One instance owns one connection for its whole lifetime. Construct it
    once at startup, call initialize(), hand it to the repositories and
    close() it at shutdown.
    """

    def __init__(self, db_path: Union[str, Path], schema: Optional[Dict[str, TableSchema]] = None):
        """
        Args:
            db_path: Path to the database file, or ":memory:"
            schema: Table definitions (defaults to SCHEMA)
        """
        self.db_path = db_path if str(db_path) == ":memory:" else Path(db_path)
        self.schema = schema if schema is not None else SCHEMA
        self._conn: Optional[sqlite3.Connection] = None

    def open(self) -> 'Database':
        if self._conn is None:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
            logger.debug("Opened database at %s", self.db_path)
        return self

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("Closed database at %s", self.db_path)

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def __enter__(self) -> 'Database':
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Commit on success, roll back on any exception"""
        conn = self._connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self.open()
        return self._conn

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """
        Create all declared tables and indexes if they are missing.

        Safe to call on every startup. The schema version is static; a
        database stamped with another version is refused.
        """
        with self.transaction() as conn:
            version = conn.execute("PRAGMA user_version").fetchone()[0]
            if version not in (0, SCHEMA_VERSION):
                raise sqlite3.DatabaseError(
                    f"Database at {self.db_path} has schema version {version}, "
                    f"expected {SCHEMA_VERSION}"
                )
            for table in self.schema.values():
                for statement in table.create_statements():
                    conn.execute(statement)
            conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
        logger.info("Database initialized at %s (%d tables)", self.db_path, len(self.schema))

    def table_names(self) -> List[str]:
        rows = self._connection().execute(
            "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name;"
        ).fetchall()
        return [row['name'] for row in rows]

    def _table(self, table: str) -> TableSchema:
        try:
            return self.schema[table]
        except KeyError:
            raise ValueError(f"Unknown table: {table}") from None

    def _indexed(self, table: str, column: str) -> TableSchema:
        schema = self._table(table)
        if column != schema.primary_key and column not in schema.indexes:
            raise ValueError(f"{table}.{column} is not an indexed field")
        return schema

    def _row_values(self, schema: TableSchema, record: Dict[str, Any]) -> Tuple[str, Tuple[Any, ...]]:
        unknown = set(record) - set(schema.column_names)
        if unknown:
            raise ValueError(f"Unknown columns for {schema.name}: {sorted(unknown)}")
        if record.get(schema.primary_key) in (None, ""):
            raise ValueError(f"Missing primary key {schema.primary_key} for {schema.name}")
        names = [name for name in schema.column_names if name in record]
        columns = ", ".join(f'"{name}"' for name in names)
        return columns, tuple(record[name] for name in names)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add(self, table: str, record: Dict[str, Any]) -> None:
        """Insert a record; raises DuplicateKeyError if the key exists"""
        schema = self._table(table)
        columns, values = self._row_values(schema, record)
        placeholders = ", ".join("?" for _ in values)
        try:
            with self.transaction() as conn:
                conn.execute(
                    f'INSERT INTO "{table}" ({columns}) VALUES ({placeholders})',
                    values
                )
        except sqlite3.IntegrityError as e:
            if self.get(table, record[schema.primary_key]) is not None:
                raise DuplicateKeyError(table, record[schema.primary_key]) from e
            raise

    def put(self, table: str, record: Dict[str, Any]) -> None:
        """Insert or replace a record by primary key"""
        schema = self._table(table)
        columns, values = self._row_values(schema, record)
        placeholders = ", ".join("?" for _ in values)
        with self.transaction() as conn:
            conn.execute(
                f'INSERT OR REPLACE INTO "{table}" ({columns}) VALUES ({placeholders})',
                values
            )

    def put_many(self, table: str, records: List[Dict[str, Any]]) -> None:
        """put() several records in one transaction"""
        schema = self._table(table)
        with self.transaction() as conn:
            for record in records:
                columns, values = self._row_values(schema, record)
                placeholders = ", ".join("?" for _ in values)
                conn.execute(
                    f'INSERT OR REPLACE INTO "{table}" ({columns}) VALUES ({placeholders})',
                    values
                )

    def delete(self, table: str, key: Any) -> int:
        """Delete by primary key. Missing keys are not an error."""
        schema = self._table(table)
        with self.transaction() as conn:
            cursor = conn.execute(
                f'DELETE FROM "{table}" WHERE "{schema.primary_key}" = ?',
                (key,)
            )
            return cursor.rowcount

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _select(self, query: str, params: Tuple = ()) -> List[Dict[str, Any]]:
        rows = self._connection().execute(query, params).fetchall()
        return [dict(row) for row in rows]

    def get(self, table: str, key: Any) -> Optional[Dict[str, Any]]:
        """Fetch by primary key; None if absent"""
        schema = self._table(table)
        rows = self._select(
            f'SELECT * FROM "{table}" WHERE "{schema.primary_key}" = ?',
            (key,)
        )
        return rows[0] if rows else None

    def all(self, table: str) -> List[Dict[str, Any]]:
        self._table(table)
        return self._select(f'SELECT * FROM "{table}" ORDER BY rowid')

    def order_by(self, table: str, column: str) -> List[Dict[str, Any]]:
        """All records sorted ascending by an indexed field"""
        self._indexed(table, column)
        return self._select(f'SELECT * FROM "{table}" ORDER BY "{column}" ASC, rowid ASC')

    def where_equals(self, table: str, column: str, value: Any) -> List[Dict[str, Any]]:
        """Records whose indexed field equals value"""
        self._indexed(table, column)
        return self._select(
            f'SELECT * FROM "{table}" WHERE "{column}" = ? ORDER BY rowid',
            (value,)
        )

    def where_above(self, table: str, column: str, value: Any) -> List[Dict[str, Any]]:
        """Records whose indexed field is strictly greater than value"""
        self._indexed(table, column)
        return self._select(
            f'SELECT * FROM "{table}" WHERE "{column}" > ? ORDER BY "{column}" ASC',
            (value,)
        )

    def count(self, table: str) -> int:
        self._table(table)
        row = self._connection().execute(f'SELECT COUNT(*) AS count FROM "{table}"').fetchone()
        return row['count'] if row else 0
