"""
Exceptions raised by the planner data layer.

Storage failures from sqlite3 are deliberately not wrapped; they
propagate unchanged to the caller.
"""


class PlannerError(Exception):
    """Base class for planner errors"""


class NotFoundError(PlannerError, LookupError):
    """An update or reference named a record that does not exist"""

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} with id {key} not found")


class DuplicateKeyError(PlannerError):
    """An insert collided with an existing primary key"""

    def __init__(self, table: str, key: str):
        self.table = table
        self.key = key
        super().__init__(f"Record {key} already exists in {table}")


class ValidationError(PlannerError, ValueError):
    """Input rejected at the command boundary before reaching a repository"""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class ReferentialGuardError(PlannerError):
    """A life area still has dependent goals or tasks and cannot be deleted"""

    def __init__(self, life_area_id: str, goal_count: int, task_count: int):
        self.life_area_id = life_area_id
        self.goal_count = goal_count
        self.task_count = task_count
        super().__init__(
            f"Cannot delete life area {life_area_id}: it has "
            f"{goal_count} goal(s) and {task_count} task(s). "
            "Move or delete them first."
        )
