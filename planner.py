#!/usr/bin/env python3
"""
Portfolio Life Planner - Command Line Interface
Manage life areas, goals, tasks, the daily journal and day summaries
"""

import asyncio
import logging
import os
import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from lifeplanner.core import Config, LifeArea, Planner, PlannerError, Task, open_planner
from lifeplanner.core.actions import (
    GoalTaskDraft,
    default_schedule_day,
    delete_life_area,
    move_life_area,
    next_life_area_order,
    require_choice,
    require_range,
    require_text,
    schedule_goal_task,
)
from lifeplanner.core.autosave import JournalAutosaver
from lifeplanner.core.dates import to_day, to_day_key
from lifeplanner.core.errors import NotFoundError, ValidationError
from lifeplanner.core.models import (
    ENERGY_LEVELS,
    GOAL_STATUSES,
    MOODS,
    SCORE_MAX,
    SCORE_MIN,
    TASK_PRIORITIES,
)
from lifeplanner.progress import TIMEFRAMES, ProgressAggregator, ProgressFormatter

# Initialize CLI app and console
app = typer.Typer(help="Portfolio Life Planner - calendar, tasks, goals and journal")
areas_app = typer.Typer(help="Life area management")
goals_app = typer.Typer(help="Goal management")
journal_app = typer.Typer(help="Daily journal")
summary_app = typer.Typer(help="Day summaries")
app.add_typer(areas_app, name="areas")
app.add_typer(goals_app, name="goals")
app.add_typer(journal_app, name="journal")
app.add_typer(summary_app, name="summary")

console = Console()
logger = logging.getLogger("planner")

T = TypeVar("T")

MOOD_ICONS = {
    "great": "😄",
    "good": "🙂",
    "okay": "😐",
    "bad": "😔",
    "terrible": "😢",
}

PRIORITY_STYLES = {
    "high": "red bold",
    "medium": "white",
    "low": "dim",
}

_config: Optional[Config] = None


def get_config() -> Config:
    """Config from PLANNER_CONFIG_DIR, or the default config directory"""
    global _config
    if _config is None:
        config_dir = os.environ.get("PLANNER_CONFIG_DIR")
        _config = Config(Path(config_dir) if config_dir else None)
    return _config


def run_with_planner(action: Callable[[Planner], Awaitable[T]], failure: str, seed: bool = True) -> T:
    """
    Open the planner, run one action and close it again.

    Any failure is reported in red and ends the command with exit code 1;
    nothing has been written for a failed single-record operation.
    """
    async def session() -> T:
        planner = await open_planner(get_config(), seed=seed)
        try:
            return await action(planner)
        finally:
            planner.close()

    try:
        return asyncio.run(session())
    except PlannerError as e:
        logger.warning("%s: %s", failure, e)
        console.print(f"[red]{failure}: {escape(str(e))}[/red]")
    except Exception as e:
        logger.exception(failure)
        console.print(f"[red]{failure}: {escape(str(e))}[/red]")
    raise typer.Exit(1)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    """Portfolio Life Planner"""
    level = "DEBUG" if verbose else get_config().get("log_level", "settings", "INFO")
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


# ============================================================================
# Helper Functions
# ============================================================================

def parse_day(value: str) -> date:
    """
    Parse 'today', 'tomorrow', 'yesterday', a weekday name or a date.

    Weekday names mean the next such day (today excluded).
    """
    text = value.lower().strip()
    today = date.today()

    if text in ['today', 'td']:
        return today
    elif text in ['tomorrow', 'tmr', 'tom']:
        return today + timedelta(days=1)
    elif text in ['yesterday', 'yday']:
        return today - timedelta(days=1)

    days = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']
    if text in days:
        days_ahead = days.index(text) - today.weekday()
        if days_ahead <= 0:  # Target day already happened this week
            days_ahead += 7
        return today + timedelta(days=days_ahead)

    try:
        return to_day(value)
    except ValueError:
        raise typer.BadParameter(f"Could not parse date: {value}")


def validate(check: Callable[..., T], *args) -> T:
    """Run a field check, reporting failures as a bad CLI parameter"""
    try:
        return check(*args)
    except ValidationError as e:
        raise typer.BadParameter(str(e))


def optional_day(value: Optional[str]) -> Optional[date]:
    return parse_day(value) if value else None


async def resolve_area(planner: Planner, ref: str) -> LifeArea:
    """Find a life area by id or (case-insensitive) name"""
    area = await planner.life_areas.get_by_id(ref)
    if area is not None:
        return area
    for candidate in await planner.life_areas.get_all():
        if candidate.name.lower() == ref.lower():
            return candidate
    raise NotFoundError("LifeArea", ref)


def format_task(task: Task) -> str:
    """One-line task display with completion mark and priority"""
    mark = "[green]✓[/green]" if task.is_completed else "[dim]○[/dim]"
    style = PRIORITY_STYLES.get(task.priority, "white")
    title = escape(task.title)
    if task.is_completed:
        title = f"[strike dim]{title}[/strike dim]"
    return f"{mark} {title} [{style}]({task.priority})[/{style}]"


def render_tasks(tasks: List[Task], areas: List[LifeArea], title: str) -> None:
    if not tasks:
        console.print(f"[dim]No tasks for {title}[/dim]")
        return

    names = {area.id: area.name for area in areas}
    today = date.today()
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Task", min_width=30)
    table.add_column("Area", width=12)
    table.add_column("Due", width=10)
    table.add_column("Est", justify="right", width=6)

    for task in tasks:
        due = task.due_date.strftime("%m/%d") if task.due_date else "-"
        if task.is_overdue(today):
            due = f"[red bold]{due}![/red bold]"
        table.add_row(
            task.id,
            format_task(task),
            escape(names.get(task.life_area_id, "?")),
            due,
            f"{task.estimated_minutes}m" if task.estimated_minutes else "-",
        )
    console.print(table)


# ============================================================================
# Life areas
# ============================================================================

@app.command()
def seed():
    """Create the default life areas if the database has none"""
    async def action(planner: Planner) -> bool:
        return await planner.seed()

    created = run_with_planner(action, "Error seeding database", seed=False)
    if created:
        console.print("[green]✓[/green] Seeded default life areas")
    else:
        console.print("[dim]Life areas already present, nothing to do[/dim]")


@areas_app.command("list")
def areas_list():
    """List life areas in display order"""
    areas = run_with_planner(lambda p: p.life_areas.get_all(), "Error loading life areas")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Order", justify="right", width=6)
    table.add_column("Name", min_width=16)
    table.add_column("Color", width=9)
    table.add_column("ID", style="dim", no_wrap=True)
    for area in areas:
        table.add_row(str(area.order), escape(area.name), area.color, area.id)
    console.print(table)


@areas_app.command("add")
def areas_add(
    name: str = typer.Argument(..., help="Life area name"),
    color: str = typer.Option("#6B7280", "--color", "-c", help="Display color"),
    order: Optional[int] = typer.Option(None, "--order", "-o", help="Sort position (defaults to last)"),
):
    """Add a life area"""
    name = validate(require_text, name, "name")

    async def action(planner: Planner) -> LifeArea:
        position = order
        if position is None:
            position = next_life_area_order(await planner.life_areas.get_all())
        return await planner.life_areas.create(name=name, color=color, order=position)

    area = run_with_planner(action, "Error creating life area")
    console.print(f"[green]✓[/green] Created life area: {escape(area.name)} [dim]({area.id})[/dim]")


@areas_app.command("update")
def areas_update(
    area_ref: str = typer.Argument(..., help="Life area id or name"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    color: Optional[str] = typer.Option(None, "--color", "-c", help="New color"),
):
    """Rename or recolor a life area"""
    changes = {}
    if name is not None:
        changes["name"] = validate(require_text, name, "name")
    if color is not None:
        changes["color"] = color

    async def action(planner: Planner) -> LifeArea:
        area = await resolve_area(planner, area_ref)
        return await planner.life_areas.update(area.id, **changes)

    area = run_with_planner(action, "Error updating life area")
    console.print(f"[green]✓[/green] Updated life area: {escape(area.name)}")


@areas_app.command("move")
def areas_move(
    area_ref: str = typer.Argument(..., help="Life area id or name"),
    direction: str = typer.Argument(..., help="'up' or 'down'"),
):
    """Move a life area up or down in the display order"""
    async def action(planner: Planner) -> List[LifeArea]:
        area = await resolve_area(planner, area_ref)
        return await move_life_area(planner.life_areas, area.id, direction)

    areas = run_with_planner(action, "Error reordering life areas")
    console.print("  ".join(f"{a.order}. {escape(a.name)}" for a in areas))


@areas_app.command("delete")
def areas_delete(area_ref: str = typer.Argument(..., help="Life area id or name")):
    """Delete a life area that has no goals or tasks"""
    async def action(planner: Planner) -> LifeArea:
        area = await resolve_area(planner, area_ref)
        await delete_life_area(planner, area.id)
        return area

    area = run_with_planner(action, "Error deleting life area")
    console.print(f"[green]✓[/green] Deleted life area: {escape(area.name)}")


# ============================================================================
# Goals
# ============================================================================

@goals_app.command("list")
def goals_list(area_ref: Optional[str] = typer.Option(None, "--area", "-a", help="Only this life area")):
    """List goals"""
    async def action(planner: Planner):
        areas = await planner.life_areas.get_all()
        if area_ref:
            area = await resolve_area(planner, area_ref)
            goals = await planner.goals.get_by_life_area(area.id)
        else:
            goals = await planner.goals.get_all()
        return areas, goals

    areas, goals = run_with_planner(action, "Error loading goals")
    if not goals:
        console.print("[dim]No goals yet[/dim]")
        return

    names = {area.id: area.name for area in areas}
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Goal", min_width=24)
    table.add_column("Area", width=12)
    table.add_column("Status", width=10)
    table.add_column("Target", width=10)
    for goal in goals:
        table.add_row(
            goal.id,
            escape(goal.title),
            escape(names.get(goal.life_area_id, "?")),
            goal.status,
            goal.target_date.isoformat() if goal.target_date else "-",
        )
    console.print(table)


@goals_app.command("add")
def goals_add(
    title: str = typer.Argument(..., help="Goal title"),
    area_ref: str = typer.Option(..., "--area", "-a", help="Life area id or name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Target date"),
    status: str = typer.Option("active", "--status", "-s", help="active, completed or paused"),
):
    """Add a goal to a life area"""
    title = validate(require_text, title, "title")
    validate(require_choice, status, GOAL_STATUSES, "status")
    target_date = optional_day(target)

    async def action(planner: Planner):
        area = await resolve_area(planner, area_ref)
        return await planner.goals.create(
            title=title,
            life_area_id=area.id,
            description=(description or "").strip() or None,
            target_date=target_date,
            status=status,
        )

    goal = run_with_planner(action, "Error creating goal")
    console.print(f"[green]✓[/green] Created goal: {escape(goal.title)} [dim]({goal.id})[/dim]")


@goals_app.command("show")
def goals_show(goal_id: str = typer.Argument(..., help="Goal ID")):
    """Show a goal with its tasks and progress"""
    async def action(planner: Planner):
        overview = await ProgressAggregator(planner).goal_overview(goal_id)
        return overview, await planner.life_areas.get_all()

    overview, areas = run_with_planner(action, "Error loading goal")
    console.print(ProgressFormatter(console).render_goal(overview))
    render_tasks(overview.tasks, areas, "Goal tasks")


@goals_app.command("update")
def goals_update(
    goal_id: str = typer.Argument(..., help="Goal ID"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    area_ref: Optional[str] = typer.Option(None, "--area", "-a", help="Move to life area"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Target date"),
    clear_target: bool = typer.Option(False, "--clear-target", help="Remove the target date"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="active, completed or paused"),
):
    """Edit a goal"""
    changes: dict = {}
    if title is not None:
        changes["title"] = validate(require_text, title, "title")
    if description is not None:
        changes["description"] = description.strip() or None
    if status is not None:
        changes["status"] = validate(require_choice, status, GOAL_STATUSES, "status")
    if clear_target:
        changes["target_date"] = None
    elif target is not None:
        changes["target_date"] = parse_day(target)

    async def action(planner: Planner):
        if area_ref is not None:
            changes["life_area_id"] = (await resolve_area(planner, area_ref)).id
        return await planner.goals.update(goal_id, **changes)

    goal = run_with_planner(action, "Error updating goal")
    console.print(f"[green]✓[/green] Updated goal: {escape(goal.title)}")


@goals_app.command("delete")
def goals_delete(goal_id: str = typer.Argument(..., help="Goal ID")):
    """Delete a goal (its tasks are kept)"""
    run_with_planner(lambda p: p.goals.delete(goal_id), "Error deleting goal")
    console.print(f"[green]✓[/green] Deleted goal {goal_id}")


@goals_app.command("schedule")
def goals_schedule(
    goal_id: str = typer.Argument(..., help="Goal ID"),
    title: str = typer.Argument(..., help="Step title"),
    on: Optional[str] = typer.Option(None, "--on", help="Day to schedule (default: tomorrow or due date)"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Details"),
    priority: str = typer.Option("medium", "--priority", "-p", help="low, medium or high"),
    estimate: Optional[int] = typer.Option(None, "--estimate", "-e", help="Estimated minutes"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date"),
    depends_on: Optional[List[str]] = typer.Option(None, "--depends-on", help="Task ID this step depends on"),
):
    """Put a step of a goal on the calendar as a task"""
    draft = GoalTaskDraft(
        title=validate(require_text, title, "title"),
        description=(description or "").strip() or None,
        priority=validate(require_choice, priority, TASK_PRIORITIES, "priority"),
        estimated_minutes=estimate,
        due_date=optional_day(due),
        dependencies=list(depends_on or []),
    )
    day = parse_day(on) if on else default_schedule_day(draft, date.today())

    async def action(planner: Planner) -> Task:
        goal = await planner.goals.get_by_id(goal_id)
        if goal is None:
            raise NotFoundError("Goal", goal_id)
        return await schedule_goal_task(planner, goal, draft, day)

    task = run_with_planner(action, "Error scheduling task")
    console.print(f"[green]✓[/green] Scheduled {escape(task.title)} on {to_day_key(task.scheduled_date)}")


# ============================================================================
# Tasks
# ============================================================================

@app.command()
def add(
    title: str = typer.Argument(..., help="Task title"),
    area_ref: Optional[str] = typer.Option(None, "--area", "-a", help="Life area id or name (default: first area)"),
    goal_id: Optional[str] = typer.Option(None, "--goal", "-g", help="Goal ID"),
    on: str = typer.Option("today", "--on", help="Scheduled day (today, tomorrow, monday, 2024-06-01)"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="low, medium or high"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Notes"),
    estimate: Optional[int] = typer.Option(None, "--estimate", "-e", help="Estimated minutes"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due date"),
    tag: Optional[List[str]] = typer.Option(None, "--tag", help="Tag (repeatable)"),
):
    """
    Add a task

    Examples:
      planner add "Buy shoes" --area Health --on 2024-06-01
      planner add "Review budget" -a Finance -p high --estimate 30
    """
    title = validate(require_text, title, "title")
    if priority is None:
        priority = get_config().get("default_task_priority", "preferences", "medium")
    validate(require_choice, priority, TASK_PRIORITIES, "priority")
    scheduled = parse_day(on)
    due_date = optional_day(due)

    async def action(planner: Planner) -> Task:
        if area_ref:
            area = await resolve_area(planner, area_ref)
        else:
            areas = await planner.life_areas.get_all()
            if not areas:
                raise NotFoundError("LifeArea", "(any)")
            area = areas[0]
        if goal_id and await planner.goals.get_by_id(goal_id) is None:
            raise NotFoundError("Goal", goal_id)
        return await planner.tasks.create(
            title=title,
            life_area_id=area.id,
            goal_id=goal_id,
            priority=priority,
            notes=(notes or "").strip() or None,
            estimated_minutes=estimate,
            scheduled_date=scheduled,
            due_date=due_date,
            tags=list(tag or []),
        )

    task = run_with_planner(action, "Error creating task")
    console.print(f"[green]✓[/green] Created task: {escape(task.title)} [dim]({task.id})[/dim]")


@app.command()
def done(task_id: str = typer.Argument(..., help="Task ID to mark as done")):
    """Mark a task as completed"""
    task = run_with_planner(lambda p: p.tasks.complete(task_id), "Error completing task")
    console.print(f"[green]✓[/green] Completed: {escape(task.title)}")


@app.command()
def undo(task_id: str = typer.Argument(..., help="Task ID to reopen")):
    """Mark a completed task as pending again"""
    task = run_with_planner(lambda p: p.tasks.uncomplete(task_id), "Error reopening task")
    console.print(f"[yellow]○[/yellow] Reopened: {escape(task.title)}")


@app.command()
def edit(
    task_id: str = typer.Argument(..., help="Task ID to edit"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Notes"),
    clear_notes: bool = typer.Option(False, "--clear-notes", help="Remove the notes"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="low, medium or high"),
    on: Optional[str] = typer.Option(None, "--on", help="Move to another day"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due date"),
    clear_due: bool = typer.Option(False, "--clear-due", help="Remove the due date"),
    estimate: Optional[int] = typer.Option(None, "--estimate", "-e", help="Estimated minutes"),
    tag: Optional[List[str]] = typer.Option(None, "--tag", help="Replace tags (repeatable)"),
):
    """
    Edit a task

    Only the given options change; --clear-notes and --clear-due remove a value.
    """
    changes: dict = {}
    if title is not None:
        changes["title"] = validate(require_text, title, "title")
    if clear_notes:
        changes["notes"] = None
    elif notes is not None:
        changes["notes"] = notes.strip() or None
    if priority is not None:
        changes["priority"] = validate(require_choice, priority, TASK_PRIORITIES, "priority")
    if on is not None:
        changes["scheduled_date"] = parse_day(on)
    if clear_due:
        changes["due_date"] = None
    elif due is not None:
        changes["due_date"] = parse_day(due)
    if estimate is not None:
        changes["estimated_minutes"] = estimate
    if tag:
        changes["tags"] = list(tag)

    task = run_with_planner(lambda p: p.tasks.update(task_id, **changes), "Error updating task")
    console.print(f"[green]✓[/green] Updated task: {escape(task.title)}")


@app.command("delete")
def delete_task(task_id: str = typer.Argument(..., help="Task ID to delete")):
    """Delete a task"""
    run_with_planner(lambda p: p.tasks.delete(task_id), "Error deleting task")
    console.print(f"[green]✓[/green] Deleted task {task_id}")


@app.command()
def day(when: str = typer.Argument("today", help="Day to show (today, tomorrow, 2024-06-01)")):
    """Show a day's tasks, journal entry and summary"""
    target = parse_day(when)

    async def action(planner: Planner):
        return (
            await planner.life_areas.get_all(),
            await planner.tasks.get_by_date(target),
            await planner.journal_entries.get_by_date(target),
            await planner.day_summaries.get_by_date(target),
        )

    areas, tasks, entry, summary = run_with_planner(action, "Error loading day")
    heading = target.strftime("%A, %B %d, %Y")
    render_tasks(tasks, areas, heading)

    if entry is not None:
        icon = MOOD_ICONS.get(entry.mood, "")
        console.print(Panel(escape(entry.content), title=f"Journal {icon}".strip(), border_style="green"))
    if summary is not None:
        parts = []
        if summary.energy_level is not None:
            parts.append(f"Energy: {summary.energy_level}/5")
        if summary.score is not None:
            parts.append(f"Score: {summary.score}/10")
        if summary.reflection:
            parts.append(escape(summary.reflection))
        console.print(Panel("\n".join(parts) or "[dim]empty[/dim]", title="Day Summary", border_style="blue"))


@app.command()
def today():
    """Show today's tasks, journal entry and summary"""
    day("today")


# ============================================================================
# Journal and day summaries
# ============================================================================

@journal_app.command("write")
def journal_write(
    content: str = typer.Argument(..., help="Journal text"),
    when: str = typer.Option("today", "--date", help="Day of the entry"),
    mood: Optional[str] = typer.Option(None, "--mood", "-m", help="great, good, okay, bad or terrible"),
):
    """Write the journal entry for a day (replaces its text)"""
    content = validate(require_text, content, "content")
    target = parse_day(when)
    if mood is not None:
        validate(require_choice, mood, MOODS, "mood")

    async def action(planner: Planner):
        if mood is None:
            # Keep whatever mood the entry already has
            return await planner.journal_entries.upsert_by_date(target, content)
        return await planner.journal_entries.upsert_by_date(target, content, mood)

    entry = run_with_planner(action, "Error saving journal entry")
    console.print(f"[green]✓[/green] Saved journal for {entry.date} {MOOD_ICONS.get(entry.mood, '')}")


@journal_app.command("compose")
def journal_compose(when: str = typer.Option("today", "--date", help="Day of the entry")):
    """
    Type a journal entry line by line; it is autosaved as you go.

    Finish with Ctrl-D.
    """
    target = parse_day(when)
    config = get_config()

    async def action(planner: Planner):
        saver = JournalAutosaver(
            planner.journal_entries,
            target,
            delay=float(config.get("autosave_delay_seconds", "settings", 1.0)),
            default_mood=config.get("default_mood", "preferences", "good"),
        )
        entry = await saver.load()
        if entry is not None:
            console.print(f"[dim]{escape(entry.content)}[/dim]")
        lines = [saver.content] if saver.content else []
        while True:
            line = await asyncio.to_thread(sys.stdin.readline)
            if not line:
                break
            lines.append(line.rstrip("\n"))
            saver.edit("\n".join(lines))
        await saver.close()
        return saver

    saver = run_with_planner(action, "Error composing journal entry")
    if saver.last_saved is not None:
        console.print(f"[green]✓[/green] Saved journal for {saver.day_key}")
    else:
        console.print("[dim]Nothing to save[/dim]")


@journal_app.command("show")
def journal_show(when: str = typer.Argument("today", help="Day of the entry")):
    """Print the journal entry for a day"""
    target = parse_day(when)
    entry = run_with_planner(lambda p: p.journal_entries.get_by_date(target), "Error loading journal entry")
    if entry is None:
        console.print(f"[dim]No journal entry for {to_day_key(target)}[/dim]")
        return
    icon = MOOD_ICONS.get(entry.mood, "")
    console.print(Panel(escape(entry.content), title=f"{entry.date} {icon}".strip(), border_style="green"))


@summary_app.command("set")
def summary_set(
    when: str = typer.Option("today", "--date", help="Day to summarize"),
    reflection: Optional[str] = typer.Option(None, "--reflection", "-r", help="Reflection text"),
    energy: Optional[int] = typer.Option(None, "--energy", "-e", help="Energy level 1-5"),
    score: Optional[int] = typer.Option(None, "--score", "-s", help="Day score 0-10"),
):
    """Create or update the summary for a day"""
    target = parse_day(when)
    fields: dict = {}
    if reflection is not None:
        fields["reflection"] = reflection.strip() or None
    if energy is not None:
        fields["energy_level"] = validate(require_range, energy, ENERGY_LEVELS[0], ENERGY_LEVELS[-1], "energy")
    if score is not None:
        fields["score"] = validate(require_range, score, SCORE_MIN, SCORE_MAX, "score")

    summary = run_with_planner(
        lambda p: p.day_summaries.upsert_by_date(target, **fields),
        "Error saving day summary"
    )
    console.print(f"[green]✓[/green] Saved summary for {summary.date}")


# ============================================================================
# Progress
# ============================================================================

@app.command()
def progress(
    area_ref: str = typer.Argument(..., help="Life area id or name"),
    timeframe: Optional[str] = typer.Option(None, "--timeframe", "-t", help=", ".join(TIMEFRAMES)),
):
    """Show completion and consistency for a life area"""
    if timeframe is not None:
        validate(require_choice, timeframe, TIMEFRAMES, "timeframe")

    async def action(planner: Planner):
        area = await resolve_area(planner, area_ref)
        return await ProgressAggregator(planner, get_config()).build(area.id, timeframe, datetime.now().astimezone())

    report = run_with_planner(action, "Error building progress report")
    ProgressFormatter(console).display(report)


if __name__ == "__main__":
    app()
