"""CLI commands for Time Dilation using Typer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console, Group
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table

from time_dilation import __version__
from time_dilation.core.config import Config, get_config
from time_dilation.focus.ledger import DailyTask, format_minutes
from time_dilation.focus.session import PomodoroSession, SessionSnapshot
from time_dilation.focus.timer import CompletionEvent, TimerMode

# Initialize Typer app
app = typer.Typer(
    name="time-dilation",
    help="Pomodoro timer with a daily goal ledger.",
    add_completion=False,
)

console = Console()

_MODE_COLORS = {
    TimerMode.FOCUS: "blue",
    TimerMode.SHORT_BREAK: "green",
    TimerMode.LONG_BREAK: "magenta",
}


def _console_handler() -> logging.Handler:
    # Shares the CLI console so records print above a running Live panel
    handler = RichHandler(console=console, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))
    return handler


def setup_logging(log_level: str, log_file: Path | None = None) -> None:
    """Configure logging for the application."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [_console_handler()]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    # Keep the live display readable
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def _load_config(config_path: Path | None) -> Config:
    try:
        if config_path is not None:
            return Config.load(config_path)
        return get_config()
    except (ValidationError, OSError) as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(1)


def _tasks_table(tasks: tuple[DailyTask, ...] | list[DailyTask], selected_task_id: str | None) -> Table:
    table = Table(title="Daily Tasks", show_header=True, header_style="bold cyan")
    table.add_column("")
    table.add_column("Task")
    table.add_column("Progress")
    table.add_column("Completed")

    for task in tasks:
        marker = "▶" if task.id == selected_task_id else ""
        progress = f"{task.format_progress()} ({task.progress_percent:.0f}%)"
        table.add_row(marker, f"{task.name} [dim]({task.id})[/dim]", progress, task.format_completed())

    return table


def render_snapshot(snapshot: SessionSnapshot) -> Panel:
    """Render one frame of the running session."""
    ts = snapshot.timer
    color = _MODE_COLORS[ts.mode]

    if ts.is_complete:
        status = "[bold green]Complete![/bold green]"
    else:
        status = f"[dim]{ts.status_label}[/dim]"

    body = Group(
        f"[bold {color}]{ts.time_remaining_display}[/bold {color}]  {ts.mode.label}",
        ProgressBar(total=100, completed=snapshot.progress_percent, complete_style=color),
        status,
        _tasks_table(snapshot.tasks, snapshot.selected_task_id),
    )
    return Panel(body, title="Time Dilation", border_style=color)


@app.command()
def run(
    mode: str = typer.Option("focus", "--mode", "-m", help="focus, short-break or long-break"),
    task: str = typer.Option(None, "--task", "-t", help="Task id to credit on completion"),
    minutes: int = typer.Option(None, "--minutes", help="Override this mode's duration"),
    tick_interval: float = typer.Option(None, "--tick-interval", help="Seconds per tick"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    log_level: str = typer.Option(None, "--log-level", "-l", help="Log level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    """Run one countdown in the terminal and credit it to a task."""
    config = _load_config(config_path)
    setup_logging(log_level or config.log_level)

    if tick_interval is not None:
        if tick_interval <= 0:
            console.print("[red]--tick-interval must be positive[/red]")
            raise typer.Exit(1)
        config = config.model_copy(
            update={"timer": config.timer.model_copy(update={"tick_interval_seconds": tick_interval})}
        )

    session = PomodoroSession(config, scheduled=True)

    try:
        session.select_mode(mode)
    except ValueError:
        console.print(f"[red]Unknown mode:[/red] {mode} (expected focus, short-break or long-break)")
        raise typer.Exit(1)

    if task:
        session.select_task(task)
        if session.ledger.get_task(task) is None:
            console.print(f"[yellow]No task {task!r}; this countdown will not be credited[/yellow]")

    if minutes is not None:
        session.open_settings()
        session.edit_duration(mode, str(minutes))
        session.save_settings()

    async def run_countdown() -> None:
        from rich.live import Live

        done = asyncio.Event()

        def on_complete(event: CompletionEvent, credited: DailyTask | None) -> None:
            done.set()

        session.on_complete = on_complete

        with Live(render_snapshot(session.snapshot()), console=console, refresh_per_second=4) as live:
            session.on_change = lambda snapshot: live.update(render_snapshot(snapshot))
            session.start()
            await done.wait()

    console.print(f"[green]Starting {session.timer_state.mode.label}[/green] "
                  f"({session.timer_state.time_remaining_display}). Press Ctrl+C to stop\n")

    try:
        asyncio.run(run_countdown())
    except KeyboardInterrupt:
        session.pause()
        console.print(f"\n[yellow]Stopped with {session.timer_state.time_remaining_display} left[/yellow]")
    finally:
        session.on_change = None

    if session.timer_state.is_complete:
        credited = session.ledger.selected_task
        if credited:
            console.print(f"[bold green]{session.timer_state.mode.label} complete![/bold green] "
                          f"{credited.name}: {credited.format_progress()}")
        else:
            console.print(f"[bold green]{session.timer_state.mode.label} complete![/bold green]")

    console.print(_tasks_table(session.tasks, session.selected_task_id))


@app.command()
def tasks(
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
) -> None:
    """Show the configured daily tasks."""
    config = _load_config(config_path)
    session = PomodoroSession(config)

    console.print(_tasks_table(session.tasks, session.selected_task_id))
    console.print(
        f"\n[dim]Daily target: {format_minutes(session.ledger.total_target_minutes)}[/dim]"
    )


@app.command()
def config_show(
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
) -> None:
    """Show current configuration."""
    config = _load_config(config_path)

    table = Table(title="Time Dilation Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting")
    table.add_column("Value")

    table.add_row("[bold]Paths[/bold]", "")
    table.add_row("  Config File", str(config.config_file))
    table.add_row("  Log Level", config.log_level)

    table.add_row("[bold]Timer[/bold]", "")
    table.add_row("  Focus", f"{config.timer.focus_minutes} min")
    table.add_row("  Short Break", f"{config.timer.short_break_minutes} min")
    table.add_row("  Long Break", f"{config.timer.long_break_minutes} min")
    table.add_row("  Tick Interval", f"{config.timer.tick_interval_seconds}s")
    table.add_row("  Credit Breaks", str(config.timer.credit_break_sessions))

    table.add_row("[bold]Tasks[/bold]", "")
    for t in config.tasks:
        default = " [dim](default)[/dim]" if t.id == config.default_task_id else ""
        table.add_row(f"  {t.id}", f"{t.name}, {t.target_minutes} min{default}")

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Time Dilation v{__version__}")


@app.callback()
def main_callback() -> None:
    """Time Dilation - Pomodoro timer with a daily goal ledger."""
    pass


if __name__ == "__main__":
    app()
