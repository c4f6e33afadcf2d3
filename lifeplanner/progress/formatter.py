"""
Rich formatter for progress reports.

Renders LifeAreaProgress and GoalProgress as panels and tables for the
command line.
"""

from typing import List, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box
from rich.errors import StyleSyntaxError
from rich.markup import escape
from rich.style import Style

from lifeplanner.core.models import Goal
from lifeplanner.progress.aggregator import GoalProgress, LifeAreaProgress
from lifeplanner.progress.metrics import DayBucket

TIMEFRAME_LABELS = {
    "week": "This Week",
    "month": "This Month",
    "3months": "Last 3 Months",
    "halfyear": "Last 6 Months",
    "year": "This Year",
}

GOAL_STATUS_STYLES = {
    "active": "green",
    "paused": "yellow",
    "completed": "dim",
}


def _area_style(color: str) -> str:
    """Life area colors are user input; fall back to no color if unparseable"""
    try:
        Style.parse(color)
    except StyleSyntaxError:
        return ""
    return color


def _rate_style(rate: float) -> str:
    if rate >= 80:
        return "green bold"
    if rate >= 50:
        return "yellow"
    return "red"


def progress_bar(rate: float, width: int = 20) -> str:
    """Text bar such as '████████░░░░ 66%'"""
    filled = int(round(rate / 100 * width))
    filled = max(0, min(width, filled))
    return f"{'█' * filled}{'░' * (width - filled)} {rate:.0f}%"


class ProgressFormatter:
    """Rich-based formatter for progress reports"""

    def __init__(self, console: Optional[Console] = None):
        """
        Args:
            console: Rich Console instance (creates default if not provided)
        """
        self.console = console or Console()

    def format_header(self, report: LifeAreaProgress) -> Panel:
        label = TIMEFRAME_LABELS.get(report.timeframe, report.timeframe)
        content = Text()
        content.append(f"{report.life_area.name}\n", style=f"bold {_area_style(report.life_area.color)}")
        content.append(
            f"{label}: {report.start.strftime('%b %d, %Y')} - {report.end.strftime('%b %d, %Y')}",
            style="dim"
        )
        return Panel(
            content,
            title="[bold]Progress[/bold]",
            title_align="center",
            border_style="blue",
            padding=(0, 2),
        )

    def format_stats(self, report: LifeAreaProgress) -> Table:
        table = Table(show_header=False, box=box.SIMPLE, padding=(0, 1))
        table.add_column("Metric", style="bold")
        table.add_column("Value")

        table.add_row(
            "Completion",
            f"[{_rate_style(report.completion_rate)}]{progress_bar(report.completion_rate)}[/]"
        )
        table.add_row(
            "Consistency",
            f"[{_rate_style(report.consistency_rate)}]{progress_bar(report.consistency_rate)}[/]"
        )
        table.add_row("Tasks", f"{report.completed_tasks}/{report.total_tasks} completed")
        table.add_row("Active days", f"{report.active_days}/{report.total_days}")
        return table

    def format_goals(self, goals: List[Goal]) -> Optional[Panel]:
        if not goals:
            return None

        table = Table(show_header=True, header_style="bold cyan", box=None, expand=True)
        table.add_column("Goal", min_width=24)
        table.add_column("Status", width=10)
        table.add_column("Target", width=12)
        for goal in goals:
            style = GOAL_STATUS_STYLES.get(goal.status, "white")
            target = goal.target_date.strftime("%b %d, %Y") if goal.target_date else "[dim]---[/dim]"
            table.add_row(escape(goal.title), f"[{style}]{goal.status}[/{style}]", target)

        return Panel(table, title=f"Goals ({len(goals)})", border_style="magenta")

    def format_breakdown(self, breakdown: List[DayBucket]) -> Panel:
        if not breakdown:
            return Panel("[dim]No scheduled tasks in this timeframe[/dim]", title="Daily Breakdown")

        table = Table(show_header=True, header_style="bold cyan", box=None, expand=True)
        table.add_column("Date", width=12)
        table.add_column("Done", justify="right", width=8)
        table.add_column("Tasks", min_width=30)
        for bucket in breakdown:
            titles = ", ".join(
                f"[strike dim]{escape(t.title)}[/strike dim]" if t.is_completed else escape(t.title)
                for t in bucket.tasks
            )
            table.add_row(bucket.date, f"{bucket.completed}/{bucket.total}", titles)

        return Panel(table, title="Daily Breakdown", border_style="cyan")

    def render(self, report: LifeAreaProgress) -> Group:
        parts = [self.format_header(report), self.format_stats(report)]
        goals_panel = self.format_goals(report.goals)
        if goals_panel is not None:
            parts.append(goals_panel)
        parts.append(self.format_breakdown(report.breakdown))
        return Group(*parts)

    def render_goal(self, overview: GoalProgress) -> Panel:
        goal = overview.goal
        lines = Text()
        lines.append(f"{goal.title}\n", style="bold")
        if goal.description:
            lines.append(f"{goal.description}\n")
        if overview.life_area is not None:
            lines.append("Life area: ")
            lines.append(f"{overview.life_area.name}\n", style=_area_style(overview.life_area.color))
        lines.append(f"Status: {goal.status}\n")
        if goal.target_date:
            lines.append(f"Target: {goal.target_date.isoformat()}\n")
        lines.append(
            f"Progress: {progress_bar(overview.progress)} "
            f"({overview.completed_tasks}/{len(overview.tasks)} tasks)",
            style=_rate_style(overview.progress)
        )
        return Panel(lines, title="Goal", border_style="magenta")

    def display(self, report: LifeAreaProgress) -> None:
        self.console.print(self.render(report))
