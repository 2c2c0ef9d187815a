"""Command-line interface using Typer."""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ugc_engine import __version__
from ugc_engine.config import settings
from ugc_engine.domain.enums import JobState, ModelId
from ugc_engine.domain.models import MODELS, AdBrief
from ugc_engine.logging import setup_logging
from ugc_engine.services.lifecycle import (
    CompletionEvent,
    JobLifecycleController,
    get_job_service,
)
from ugc_engine.services.progression import evaluate_badges, level_from_xp
from ugc_engine.services.scoring import score_breakdown
from ugc_engine.services.store import FileStore, ProgressRepository

# Setup logging
setup_logging()

app = typer.Typer(
    name="ugc-engine",
    help="UGC Engine - score ad briefs and generate UGC videos",
    add_completion=False,
)

console = Console()


def _repository() -> ProgressRepository:
    return ProgressRepository(FileStore(settings.data_dir), history_limit=settings.history_limit)


def _score_style(total: int) -> str:
    if total >= 70:
        return "green"
    if total >= 40:
        return "yellow"
    return "red"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"UGC Engine v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug output to stderr."),
) -> None:
    """UGC Engine - Score briefs, generate ad videos, level up."""
    if verbose:
        setup_logging("DEBUG")


@app.command()
def score(
    product: str = typer.Option("", "--product", "-p", help="Product name"),
    audience: str = typer.Option("", "--audience", "-a", help="Target audience"),
    features: str = typer.Option("", "--features", "-f", help="Comma-separated features"),
    setting: str = typer.Option("", "--setting", "-s", help="Video setting"),
) -> None:
    """Score a brief without submitting it."""
    brief = AdBrief(
        product=product,
        target_audience=audience,
        product_features=features,
        video_setting=setting,
    )
    result = score_breakdown(brief)

    table = Table(title="Prompt Quality")
    table.add_column("Signal", style="cyan")
    table.add_column("Points", justify="right")
    table.add_column("Max", justify="right", style="dim")

    table.add_row("Length", str(result.length), "25")
    table.add_row("Detail keywords", str(result.details), "30")
    table.add_row("Audience", str(result.audience), "20")
    table.add_row("Features", str(result.features), "15")
    table.add_row("Setting", str(result.setting), "10")

    console.print(table)
    style = _score_style(result.total)
    console.print(f"[bold {style}]Score: {result.total}/100 ({result.label})[/bold {style}]")
    if result.matched_keywords:
        console.print(f"[dim]Keywords: {', '.join(result.matched_keywords)}[/dim]")


@app.command()
def login(
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, help="Access password"
    ),
) -> None:
    """Validate the access password and remember it."""

    async def _login() -> None:
        service = get_job_service()
        try:
            controller = JobLifecycleController(service, _repository())
            async with controller:
                if not await controller.authenticate(password):
                    console.print(
                        f"[bold red]✗ {controller.session.auth_error or 'Invalid password'}[/bold red]"
                    )
                    raise typer.Exit(code=1)

                session = controller.session
                if session.is_admin:
                    console.print("[bold green]✓ Signed in as admin (unlimited)[/bold green]")
                else:
                    console.print(
                        f"[bold green]✓ Signed in[/bold green] "
                        f"[dim]({session.remaining} generation(s) left)[/dim]"
                    )
        finally:
            await service.aclose()

    asyncio.run(_login())


@app.command()
def logout() -> None:
    """Forget the remembered access password."""
    _repository().clear_credential()
    console.print("[green]Signed out[/green]")


@app.command()
def generate(
    product: str = typer.Option(..., "--product", "-p", help="Product name"),
    photo_url: str = typer.Option(..., "--photo-url", "-u", help="Product photo URL"),
    audience: str = typer.Option("", "--audience", "-a", help="Target audience"),
    features: str = typer.Option("", "--features", "-f", help="Comma-separated features"),
    setting: str = typer.Option("", "--setting", "-s", help="Video setting"),
    model: ModelId = typer.Option(ModelId.NANO_VEO, "--model", "-m", help="Generation model"),
    timeout: float = typer.Option(900.0, "--timeout", help="Seconds to wait for the video"),
    poll_interval: Optional[float] = typer.Option(
        None, "--poll-interval", help="Seconds between status checks"
    ),
) -> None:
    """Submit a brief and wait for the video."""
    brief = AdBrief(
        product=product,
        product_photo_url=photo_url,
        target_audience=audience,
        product_features=features,
        video_setting=setting,
        model=model,
    )

    async def _generate() -> CompletionEvent:
        service = get_job_service()
        try:
            controller = JobLifecycleController(
                service, _repository(), poll_interval=poll_interval
            )
            events: list[CompletionEvent] = []
            controller.add_listener(events.append)

            async with controller:
                if not await controller.restore_session():
                    console.print("[bold red]Not signed in.[/bold red]")
                    console.print("[dim]Run 'ugc-engine login' first[/dim]")
                    raise typer.Exit(code=1)

                preview = controller.preview_score(brief)
                console.print(
                    Panel.fit(
                        f"[bold]Generating UGC Video[/bold]\n\n"
                        f"[cyan]Product:[/cyan] {brief.product}\n"
                        f"[cyan]Model:[/cyan] {brief.model.value}\n"
                        f"[cyan]Prompt score:[/cyan] {preview.total}/100 ({preview.label})",
                        title="Video Job",
                        border_style="blue",
                    )
                )

                state = await controller.submit(brief)
                if state is not JobState.PROCESSING:
                    message = (
                        controller.error
                        or controller.session.auth_error
                        or f"Job could not be started ({state.value})"
                    )
                    console.print(f"[bold red]✗ {message}[/bold red]")
                    raise typer.Exit(code=1)

                console.print(f"[dim]Job ID: {controller.job_id}[/dim]")
                with console.status("[bold blue]Processing...", spinner="dots"):
                    state = await controller.wait(timeout=timeout)

                if state is not JobState.COMPLETED or not events:
                    console.print(f"[bold yellow]Still processing after {timeout:.0f}s[/bold yellow]")
                    raise typer.Exit(code=1)
                if controller.error:
                    console.print(f"[bold yellow]⚠ {controller.error}[/bold yellow]")
                return events[0]
        finally:
            await service.aclose()

    event = asyncio.run(_generate())

    console.print("[bold green]✓ Video ready![/bold green]")
    console.print(f"[cyan]Video:[/cyan] {event.job.video_url}")
    console.print(f"[cyan]XP gained:[/cyan] +{event.xp_gained}")
    if event.leveled_up:
        console.print(f"[bold magenta]Level up! You are now level {event.stats.level}[/bold magenta]")
    for badge in event.new_badges:
        console.print(f"[bold yellow]{badge.icon} Badge earned: {badge.name}[/bold yellow]")


@app.command()
def stats() -> None:
    """Show level, XP and badges."""
    user_stats = _repository().load_stats()
    info = level_from_xp(user_stats.xp)

    if info.is_max_level:
        progress = f"{info.current_xp} XP beyond the top level"
    else:
        progress = f"{info.current_xp}/{info.next_level_xp} XP ({info.progress_percent}%)"

    console.print(
        Panel.fit(
            f"[bold]Level {info.level}[/bold]  {progress}\n\n"
            f"[cyan]Videos:[/cyan] {user_stats.total_videos}\n"
            f"[cyan]Avg quality:[/cyan] {user_stats.avg_quality}\n"
            f"[cyan]High quality (>70):[/cyan] {user_stats.high_quality_count}\n"
            f"[cyan]Streak:[/cyan] {user_stats.streak}\n"
            f"[cyan]Total XP:[/cyan] {user_stats.xp}",
            title="Progress",
            border_style="blue",
        )
    )

    table = Table(title="Badges")
    table.add_column("", width=2)
    table.add_column("Badge", style="cyan")
    table.add_column("Tier")
    table.add_column("Requirement", style="dim")
    table.add_column("Earned", justify="center")

    for badge in evaluate_badges(user_stats):
        table.add_row(
            badge.icon,
            badge.name,
            badge.tier.value,
            badge.description,
            "✓" if badge.earned else "✗",
        )

    console.print(table)


@app.command()
def history(
    limit: int = typer.Option(6, "--limit", "-l", help="Number of jobs to show"),
) -> None:
    """Show recently completed jobs."""
    jobs = _repository().load_history()
    if not jobs:
        console.print("[dim]No videos yet[/dim]")
        return

    table = Table(title=f"Recent Videos ({len(jobs)} total)")
    table.add_column("Completed", style="dim")
    table.add_column("Product", style="cyan")
    table.add_column("Model")
    table.add_column("Score", justify="right")
    table.add_column("Video")

    for job in jobs[:limit]:
        finished = job.completed_at or job.created_at
        table.add_row(
            finished.strftime("%Y-%m-%d %H:%M"),
            job.brief.product[:40],
            job.brief.model.value,
            str(job.quality_score) if job.quality_score is not None else "-",
            job.video_url or "-",
        )

    console.print(table)


@app.command()
def models() -> None:
    """List the available generation models."""
    table = Table(title="Models")
    table.add_column("ID", style="cyan")
    table.add_column("Speed")
    table.add_column("Quality", justify="right")
    table.add_column("XP", justify="right")
    table.add_column("Description", style="dim")

    for option in MODELS:
        table.add_row(
            option.id.value,
            option.speed.value,
            "★" * option.quality,
            f"×{option.xp_multiplier}",
            option.description,
        )

    console.print(table)


@app.command()
def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Erase local stats and history."""
    if not yes:
        typer.confirm("Erase all stats and history?", abort=True)
    _repository().reset()
    console.print("[green]Progress reset[/green]")


if __name__ == "__main__":
    app()
