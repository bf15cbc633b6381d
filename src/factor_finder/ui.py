from dataclasses import dataclass, field
from typing import List, Optional

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text

from factor_finder.event_queue import EventQueue
from factor_finder.logs import LEVEL_STYLE, LOG_BUFFER, event_logger
from factor_finder.models.events import (
    CandidateBatch,
    Complete,
    Error,
    FactorFound,
    Log,
    Progress as ProgressEvent,
    SMinResult,
    Status,
    TaskEvent,
)
from factor_finder.models.results import SearchResults
from factor_finder.numeric.bigint import to_decimal

MAX_CANDIDATES_SHOWN = 20
MAX_DIGITS_SHOWN = 80
LOG_LINES_VISIBLE = 10


@dataclass
class SearchView:
    """Consumer-side state of a running search, rebuilt from its events."""

    title: str
    status: str = "Initializing..."
    progress: float = 0.0
    results: SearchResults = field(default_factory=SearchResults)
    error: Optional[Error] = None
    finished: bool = False

    def apply(self, event: TaskEvent) -> None:
        self.results.apply(event)
        match event:
            case Log(message=message):
                event_logger().info(message)
            case Status(message=message):
                self.status = message
            case ProgressEvent(value=value):
                self.progress = value
            case FactorFound(factor=factor, method=method):
                event_logger().info(f"Factor found by {method}: {factor}")
            case CandidateBatch(candidates=candidates):
                event_logger().debug(f"{len(candidates)} new S candidate(s)")
            case SMinResult(s_min=s_min):
                event_logger().info(f"S_min calculated: {shorten(s_min)}")
                self.status = "S_min found"
                self.finished = True
            case Complete():
                self.status = "Scan complete"
                self.progress = 100.0
                self.finished = True
            case Error():
                event_logger().error(event.message)
                self.status = "Error"
                self.error = event
                self.finished = True


def shorten(digits: str, limit: int = MAX_DIGITS_SHOWN) -> str:
    if len(digits) <= limit:
        return digits
    return f"{digits[:limit]}... ({len(digits)} digits)"


def render_log_panel(title: str, max_lines: int) -> Panel:
    """Render exactly max_lines log entries (cropped to width, no wrap)."""
    items = list(LOG_BUFFER)[-max_lines:]
    if len(items) < max_lines:
        items = [(0, "")] * (max_lines - len(items)) + items

    grid = Table.grid(padding=(0, 0))
    grid.add_column(no_wrap=True, overflow="crop")
    for lvl, msg in items:
        style = LEVEL_STYLE.get(lvl, "")
        grid.add_row(Text(msg, style=style))
    return Panel(grid, title=title, padding=(0, 1))


def factors_table(results: SearchResults) -> Table:
    t = Table(title=f"Found Factors ({len(results.factors)})", show_edge=False)
    t.add_column("Factor", justify="right", style="green", overflow="fold")
    t.add_column("Method", style="cyan")
    for found in results.factors:
        t.add_row(shorten(to_decimal(found.factor)), str(found.method))
    return t


def candidates_table(results: SearchResults) -> Table:
    t = Table(title=f"S-Candidates ({len(results.candidates)})", show_edge=False)
    t.add_column("S", justify="right", style="yellow", overflow="fold")
    shown: List[int] = []
    for s in results.candidates:
        if len(shown) >= MAX_CANDIDATES_SHOWN:
            break
        shown.append(s)
    for s in shown:
        t.add_row(shorten(to_decimal(s)))
    if len(results.candidates) > len(shown):
        t.add_row(f"[dim]... {len(results.candidates) - len(shown)} more[/dim]")
    return t


def render_summary(view: SearchView) -> Group:
    parts = [factors_table(view.results)]
    if len(view.results.candidates):
        parts.append(candidates_table(view.results))
    if view.results.s_min is not None:
        parts.append(f"[bold]S_min[/bold] = {shorten(to_decimal(view.results.s_min))}")
    if view.error is not None:
        parts.append(Text(f"Error ({view.error.kind}): {view.error.message}", style="red"))
    return Group(*parts)


def get_progress(console: Console) -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(bar_width=30),
        TextColumn("{task.percentage:>5.1f}%"),
        expand=True,
        console=console,
    )


def render(view: SearchView, progress: Progress) -> Panel:
    return Panel(
        Group(
            Panel(progress, title="Processing", padding=(0, 1)),
            render_summary(view),
            render_log_panel("Log", LOG_LINES_VISIBLE),
        ),
        title=view.title,
    )


def ui_loop(events: EventQueue[TaskEvent], view: SearchView, console: Console) -> SearchView:
    """Render events until the queue closes."""
    progress = get_progress(console)
    bar = progress.add_task(view.status, total=100)
    with Live(render(view, progress), console=console, refresh_per_second=10, screen=False) as live:
        for event in events:
            view.apply(event)
            progress.update(bar, completed=view.progress, description=view.status)
            live.update(render(view, progress))
    return view


def plain_loop(events: EventQueue[TaskEvent], view: SearchView, console: Console) -> SearchView:
    """Print one line per event; for pipes and logs."""
    for event in events:
        view.apply(event)
        match event:
            case Log(message=message) | Status(message=message):
                console.print(message, markup=False, highlight=False)
            case FactorFound(factor=factor, method=method):
                console.print(f"factor {factor} ({method})", markup=False, highlight=False)
            case CandidateBatch(candidates=candidates):
                console.print(f"candidates {' '.join(candidates)}", markup=False, highlight=False)
            case SMinResult(s_min=s_min):
                console.print(f"s_min {s_min}", markup=False, highlight=False)
            case Complete():
                console.print("complete", markup=False, highlight=False)
            case Error(kind=kind, message=message):
                console.print(f"error ({kind}): {message}", style="red", markup=False, highlight=False)
    return view
