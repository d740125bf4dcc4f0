"""
MathPath CLI - arithmetic practice from the terminal.

Usage:
    mathpath profiles                      # List learner profiles
    mathpath create-profile Ada            # Add a profile
    mathpath path Ada                      # Show the learning path
    mathpath plan                          # Show a lesson plan
    mathpath sample add_within_10 --kind comparison
    mathpath finish Ada --score 8          # Record a finished lesson
"""

from __future__ import annotations

import random
import sys
from dataclasses import dataclass, field
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import get_settings
from mathpath import __version__
from mathpath.core.rng import RandomSource, resolve_rng
from mathpath.curriculum import Curriculum, default_curriculum
from mathpath.db.store import ProgressStore, open_store
from mathpath.exercises import get_handler
from mathpath.exercises.base import (
    Comparison,
    DirectChoice,
    Exercise,
    MultiSelect,
    SequenceOrder,
    TileOrder,
)
from mathpath.progression import MasteryLevel, Profile, ProgressionService
from mathpath.session import SESSION_COMPOSITION, SlotKind, generate_for_slot, plan_session

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="mathpath",
    help="🧮 MathPath - adaptive arithmetic practice",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

console = Console()


@dataclass
class CLIContext:
    """Per-invocation state shared by commands. The store opens lazily."""

    database_url: str | None = None
    seed: int | None = None
    curriculum: Curriculum = field(default_factory=default_curriculum)
    _store: ProgressStore | None = None

    @property
    def store(self) -> ProgressStore:
        if self._store is None:
            self._store = open_store(self.database_url)
        return self._store

    @property
    def service(self) -> ProgressionService:
        return ProgressionService(self.store, self.curriculum)

    @property
    def rng(self) -> RandomSource:
        seed = self.seed if self.seed is not None else get_settings().random_seed
        if seed is None:
            return resolve_rng()
        return random.Random(seed)


@app.callback()
def main_callback(
    ctx: typer.Context,
    database_url: Annotated[
        str | None, typer.Option("--database-url", help="SQLAlchemy URL of the progress database")
    ] = None,
    seed: Annotated[
        int | None, typer.Option("--seed", help="Seed for reproducible exercises")
    ] = None,
) -> None:
    """MathPath CLI."""
    ctx.obj = CLIContext(database_url=database_url, seed=seed)


def _require_profile(cli: CLIContext, name: str) -> Profile:
    profile = cli.store.get_profile_by_name(name)
    if profile is None:
        console.print(f"[red]✗[/red] No profile named [bold]{name}[/bold]")
        raise typer.Exit(1)
    return profile


# =============================================================================
# Profile Commands
# =============================================================================


@app.command("profiles")
def list_profiles(ctx: typer.Context) -> None:
    """List learner profiles."""
    cli: CLIContext = ctx.obj
    profiles = cli.store.list_profiles()
    if not profiles:
        console.print("[yellow]No profiles yet.[/yellow] Create one with [bold]mathpath create-profile NAME[/bold]")
        return

    table = Table(title="Profiles")
    table.add_column("Name", style="cyan")
    table.add_column("Created", style="dim")
    table.add_column("Streak", justify="right")
    table.add_column("Exercises", justify="right")

    for profile in profiles:
        stats = cli.store.load_profile_stats(profile.id)
        table.add_row(
            profile.name,
            profile.created_at.strftime("%Y-%m-%d"),
            f"🔥 {stats.streak}" if stats else "-",
            str(stats.total_completed) if stats else "0",
        )

    console.print(table)


@app.command("create-profile")
def create_profile(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Profile name")],
) -> None:
    """Create a learner profile."""
    cli: CLIContext = ctx.obj
    try:
        profile = cli.store.create_profile(name)
    except ValueError as exc:
        console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Created profile [bold]{profile.name}[/bold]")


@app.command("delete-profile")
def delete_profile(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Profile name")],
) -> None:
    """Delete a profile and all of its progress."""
    cli: CLIContext = ctx.obj
    profile = _require_profile(cli, name)
    cli.store.delete_profile(profile.id)
    console.print(f"[green]✓[/green] Deleted profile [bold]{profile.name}[/bold]")


# =============================================================================
# Path Commands
# =============================================================================


@app.command("path")
def show_path(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Profile name")],
) -> None:
    """Show the learning path with each skill's status."""
    cli: CLIContext = ctx.obj
    profile = _require_profile(cli, name)
    service = cli.service
    progress = service.load_profile_progress(profile.id)
    statuses = service.skill_statuses(profile.id)
    playable = service.playable_skill_id(profile.id)

    for section in cli.curriculum.sections:
        table = Table(title=f"[{section.color}]{section.name}[/{section.color}]", title_justify="left")
        table.add_column("", width=2)
        table.add_column("Skill", style="cyan")
        table.add_column("Name")
        table.add_column("Status")
        table.add_column("Best", justify="right")
        table.add_column("Attempts", justify="right")

        for skill in section.skills:
            status = statuses[skill.id]
            record = progress.records[skill.id]
            table.add_row(
                "▶" if skill.id == playable else "",
                skill.id,
                f"{skill.icon} {skill.name}",
                f"[{status.color}]{status.emoji} {status.value}[/{status.color}]",
                str(record.best_score) if record.attempts else "-",
                str(record.attempts),
            )
        console.print(table)

    stats = progress.stats
    footer = f"Streak: 🔥 {stats.streak}   Exercises completed: {stats.total_completed}"
    if playable is None:
        footer += "\n[green]Every skill is mastered![/green]"
    else:
        footer += f"\nNext lesson: [bold]{cli.curriculum.skill_map[playable].name}[/bold]"
    console.print(Panel(footer, title=profile.name, border_style="blue"))


# =============================================================================
# Lesson Commands
# =============================================================================


@app.command("plan")
def show_plan(ctx: typer.Context) -> None:
    """Show the slot order of a freshly planned lesson."""
    cli: CLIContext = ctx.obj
    plan = plan_session(cli.rng)

    table = Table(title=f"Lesson plan ({len(plan)} exercises)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Exercise kind", style="cyan")
    for index, kind in enumerate(plan, start=1):
        table.add_row(str(index), kind.value)
    console.print(table)

    composition = ", ".join(f"{count}× {kind.value}" for kind, count in SESSION_COMPOSITION.items())
    console.print(f"[dim]{composition}[/dim]")


def _exercise_lines(exercise: Exercise) -> list[str]:
    """Kind-specific body lines for a rendered exercise."""
    if isinstance(exercise, DirectChoice):
        return [
            f"[bold]{exercise.question}[/bold]",
            "Choices: " + "  ".join(str(choice) for choice in exercise.choices),
        ]
    if isinstance(exercise, Comparison):
        return [f"A: [bold]{exercise.expression_a}[/bold]", f"B: [bold]{exercise.expression_b}[/bold]"]
    if isinstance(exercise, MultiSelect):
        return [
            f"Target: [bold]{exercise.target_value}[/bold]",
            "Bubbles: " + "  ".join(f"[{i}] {b}" for i, b in enumerate(exercise.bubbles)),
        ]
    if isinstance(exercise, TileOrder):
        return ["Tiles: " + "  ".join(exercise.tiles)]
    if isinstance(exercise, SequenceOrder):
        return ["Items: " + "  ".join(f"[{i}] {item}" for i, item in enumerate(exercise.items))]
    return [repr(exercise)]


@app.command("sample")
def sample_exercise(
    ctx: typer.Context,
    skill_id: Annotated[str, typer.Argument(help="Skill id, e.g. add_within_10")],
    kind: Annotated[
        SlotKind | None, typer.Option("--kind", "-k", help="Lesson slot kind (random when omitted)")
    ] = None,
) -> None:
    """Generate one exercise for a skill and show it with its answer."""
    cli: CLIContext = ctx.obj
    skill = cli.curriculum.get_skill(skill_id)
    if skill is None:
        console.print(f"[red]✗[/red] Unknown skill: {skill_id}")
        raise typer.Exit(1)

    rng = cli.rng
    slot = kind or plan_session(rng)[0]
    exercise = generate_for_slot(slot, skill.problem_config, rng)
    description, answer_text = get_handler(exercise.kind).describe(exercise)

    body = "\n".join([
        *_exercise_lines(exercise),
        "",
        f"[dim]{description}[/dim]",
        f"Answer: [green]{answer_text}[/green]",
    ])
    console.print(Panel(body, title=f"{skill.icon} {skill.name} · {exercise.kind.value}", border_style="cyan"))


@app.command("finish")
def finish_lesson(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Profile name")],
    score: Annotated[int, typer.Option("--score", "-s", help="Correct answers in the lesson")],
    skill_id: Annotated[
        str | None, typer.Option("--skill", help="Skill played (defaults to the playable skill)")
    ] = None,
) -> None:
    """Record a finished lesson for a profile."""
    cli: CLIContext = ctx.obj
    profile = _require_profile(cli, name)
    service = cli.service

    skill_id = skill_id or service.playable_skill_id(profile.id)
    if skill_id is None:
        console.print("[green]Every skill is already mastered.[/green]")
        raise typer.Exit(1)

    try:
        outcome = service.complete_session(profile.id, skill_id, score)
    except ValueError as exc:
        console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(1)

    lines = [
        f"Score: [bold]{outcome.score}[/bold]",
        f"Level: {outcome.previous_level.display_name} → [bold]{outcome.new_level.display_name}[/bold]",
        f"Streak: 🔥 {outcome.stats.streak}",
    ]
    if outcome.new_level == MasteryLevel.MASTERED and outcome.leveled_up:
        lines.append("[green]Skill mastered![/green]")
    for unlocked in outcome.newly_unlocked:
        lines.append(f"[cyan]Unlocked:[/cyan] {cli.curriculum.skill_map[unlocked].name}")
    console.print(Panel("\n".join(lines), title=f"{profile.name} · {skill_id}", border_style="green"))


@app.command("version")
def show_version() -> None:
    """Show version information."""
    console.print(f"[bold]mathpath[/bold] v{__version__}")


# =============================================================================
# Entry Point
# =============================================================================


def configure_logging() -> None:
    """Route loguru output according to settings."""
    settings = get_settings()
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level, format="<level>{message}</level>")
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB")


def main() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
