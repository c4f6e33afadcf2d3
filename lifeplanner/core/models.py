"""
Data models for Portfolio Life Planner
Defines the six record types: life areas, goals, projects, tasks,
journal entries and day summaries.
"""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any, ClassVar, Dict, List, Optional
import json

from .dates import parse_optional_day, to_day_key

GOAL_STATUSES = ("active", "completed", "paused")
PROJECT_STATUSES = GOAL_STATUSES
TASK_PRIORITIES = ("low", "medium", "high")
MOODS = ("great", "good", "okay", "bad", "terrible")
ENERGY_LEVELS = (1, 2, 3, 4, 5)
SCORE_MIN, SCORE_MAX = 0, 10


def _parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    """Parse datetime string from database"""
    if dt_str:
        try:
            return datetime.fromisoformat(dt_str)
        except (ValueError, TypeError):
            return None
    return None


def _parse_date(date_str: Optional[str]) -> Optional[date]:
    """Parse YYYY-MM-DD string from database"""
    if date_str:
        try:
            return date.fromisoformat(date_str)
        except (ValueError, TypeError):
            return None
    return None


def _parse_json_list(json_str: Optional[str]) -> Optional[List[str]]:
    """Parse JSON array string from database"""
    if json_str is None:
        return None
    try:
        result = json.loads(json_str)
        return result if isinstance(result, list) else []
    except (json.JSONDecodeError, TypeError):
        return []


def _to_column(value: Any) -> Any:
    """Convert a model attribute to a value sqlite can store"""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, list):
        return json.dumps(value)
    return value


class Record:
    """
    Shared record behaviour.

    TABLE and KEY name the storage table and primary key column; column
    names are the dataclass field names.
    """
    TABLE: ClassVar[str] = ""
    KEY: ClassVar[str] = "id"

    @property
    def key(self) -> str:
        return getattr(self, self.KEY)

    def to_record(self) -> Dict[str, Any]:
        """Flatten to a storage row"""
        return {f.name: _to_column(getattr(self, f.name)) for f in fields(self)}


@dataclass
class LifeArea(Record):
    """Top-level category that groups goals and tasks"""
    TABLE: ClassVar[str] = "life_areas"

    id: str = ""
    name: str = ""
    color: str = "#6B7280"
    order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> 'LifeArea':
        """Create LifeArea from database row dictionary"""
        return cls(
            id=data.get('id', ''),
            name=data.get('name', ''),
            color=data.get('color', '#6B7280'),
            order=int(data.get('order') or 0),
            created_at=_parse_datetime(data.get('created_at')),
            updated_at=_parse_datetime(data.get('updated_at'))
        )


@dataclass
class Goal(Record):
    """Goal data model"""
    TABLE: ClassVar[str] = "goals"

    id: str = ""
    life_area_id: str = ""
    title: str = ""
    description: Optional[str] = None
    target_date: Optional[date] = None
    status: str = "active"  # 'active', 'completed', 'paused'
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.target_date = parse_optional_day(self.target_date)

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> 'Goal':
        """Create Goal from database row dictionary"""
        return cls(
            id=data.get('id', ''),
            life_area_id=data.get('life_area_id', ''),
            title=data.get('title', ''),
            description=data.get('description'),
            target_date=_parse_date(data.get('target_date')),
            status=data.get('status', 'active'),
            created_at=_parse_datetime(data.get('created_at')),
            updated_at=_parse_datetime(data.get('updated_at'))
        )


@dataclass
class Project(Record):
    """Project data model. Kept in the schema, not used by any command."""
    TABLE: ClassVar[str] = "projects"

    id: str = ""
    goal_id: str = ""
    title: str = ""
    status: str = "active"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> 'Project':
        """Create Project from database row dictionary"""
        return cls(
            id=data.get('id', ''),
            goal_id=data.get('goal_id', ''),
            title=data.get('title', ''),
            status=data.get('status', 'active'),
            created_at=_parse_datetime(data.get('created_at')),
            updated_at=_parse_datetime(data.get('updated_at'))
        )


@dataclass
class Task(Record):
    """Task data model"""
    TABLE: ClassVar[str] = "tasks"

    id: str = ""
    life_area_id: str = ""
    goal_id: Optional[str] = None
    project_id: Optional[str] = None
    title: str = ""
    notes: Optional[str] = None
    priority: str = "medium"  # 'low', 'medium', 'high'
    estimated_minutes: Optional[int] = None
    scheduled_date: Optional[date] = None
    due_date: Optional[date] = None
    completed_at: Optional[datetime] = None
    # Task ids; never checked for cycles
    dependencies: Optional[List[str]] = None
    tags: List[str] = field(default_factory=list)
    is_goal_task: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.scheduled_date = parse_optional_day(self.scheduled_date)
        self.due_date = parse_optional_day(self.due_date)
        if self.tags is None:
            self.tags = []

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def is_overdue(self, today: date) -> bool:
        """Check if task is past its due date and still pending"""
        return self.due_date is not None and not self.is_completed and self.due_date < today

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> 'Task':
        """Create Task from database row dictionary"""
        return cls(
            id=data.get('id', ''),
            life_area_id=data.get('life_area_id', ''),
            goal_id=data.get('goal_id'),
            project_id=data.get('project_id'),
            title=data.get('title', ''),
            notes=data.get('notes'),
            priority=data.get('priority', 'medium'),
            estimated_minutes=data.get('estimated_minutes'),
            scheduled_date=_parse_date(data.get('scheduled_date')),
            due_date=_parse_date(data.get('due_date')),
            completed_at=_parse_datetime(data.get('completed_at')),
            dependencies=_parse_json_list(data.get('dependencies')),
            tags=_parse_json_list(data.get('tags')) or [],
            is_goal_task=bool(data.get('is_goal_task', False)),
            created_at=_parse_datetime(data.get('created_at')),
            updated_at=_parse_datetime(data.get('updated_at'))
        )


@dataclass
class JournalEntry(Record):
    """Free-text reflection for one calendar day"""
    TABLE: ClassVar[str] = "journal_entries"

    id: str = ""
    date: str = ""  # YYYY-MM-DD
    content: str = ""
    mood: Optional[str] = None  # 'great', 'good', 'okay', 'bad', 'terrible'
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.date:
            self.date = to_day_key(self.date)

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> 'JournalEntry':
        """Create JournalEntry from database row dictionary"""
        return cls(
            id=data.get('id', ''),
            date=data.get('date', ''),
            content=data.get('content', ''),
            mood=data.get('mood'),
            created_at=_parse_datetime(data.get('created_at')),
            updated_at=_parse_datetime(data.get('updated_at'))
        )


@dataclass
class DaySummary(Record):
    """Per-day rollup, keyed by the date itself"""
    TABLE: ClassVar[str] = "day_summaries"
    KEY: ClassVar[str] = "date"

    date: str = ""  # YYYY-MM-DD
    reflection: Optional[str] = None
    energy_level: Optional[int] = None  # 1-5
    score: Optional[int] = None  # 0-10
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.date:
            self.date = to_day_key(self.date)

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> 'DaySummary':
        """Create DaySummary from database row dictionary"""
        return cls(
            date=data.get('date', ''),
            reflection=data.get('reflection'),
            energy_level=data.get('energy_level'),
            score=data.get('score'),
            created_at=_parse_datetime(data.get('created_at')),
            updated_at=_parse_datetime(data.get('updated_at'))
        )
