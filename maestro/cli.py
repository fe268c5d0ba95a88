"""Command-line entry point.

``maestro MANIFEST`` runs every pending task in a Markdown manifest;
``maestro`` alone runs a single built-in demonstration task.
"""

from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path

import click

from maestro.config import settings
from maestro.core.task.models import Complexity, QualityLevel, Task
from maestro.dependencies import (
    build_git_service,
    build_llm_client,
    build_registry,
    build_scheduler,
)
from maestro.engine.scheduler import Scheduler
from maestro.utils.exceptions import MaestroError
from maestro.utils.logging import setup_logging

PREVIEW_CHARS = 200


def demo_task() -> Task:
    return Task(
        title="Competitive Analysis Research",
        goal=(
            "Understand how the product compares to similar platforms "
            "to identify strategic opportunities"
        ),
        acceptance_criteria=[
            "Analysis of 3-5 competitor platforms with feature matrices",
            "Feature gap identification with impact assessment",
            "Unique value proposition clarification and positioning strategy",
        ],
        complexity=Complexity.SIMPLE,
        quality_level=QualityLevel.STANDARD,
        skills_needed=["market research", "competitive analysis", "strategic thinking"],
        resources=["Competitor websites", "industry reports", "feature comparison tools"],
        testing_requirements="Validate competitor information accuracy",
        documentation_requirements="Competitive analysis report with recommendations",
        success_indicators=["Clear understanding of competitive landscape and positioning"],
    )


async def _run_manifest(scheduler: Scheduler, manifest: str) -> None:
    tasks = scheduler.load_manifest(manifest)
    click.echo(f"Loaded {len(tasks)} tasks from {manifest}")
    click.echo("Starting task execution...")

    summary = await scheduler.run()

    click.echo("")
    click.echo("Execution complete")
    click.echo(f"Success: {summary.success_count}/{summary.total_tasks}")
    click.echo(f"Failed: {summary.failure_count}/{summary.total_tasks}")
    click.echo(f"Duration: {summary.duration_seconds:.2f} seconds")
    if scheduler.run_dir is not None:
        click.echo(f"Reports: {scheduler.run_dir}")


async def _run_demo(scheduler: Scheduler) -> None:
    click.echo("Running single demonstration task (no manifest provided)")
    result = await scheduler.run_task(demo_task())

    if not result.succeeded:
        raise click.ClickException(f"Task failed: {result.notes}")

    preview = result.content[:PREVIEW_CHARS]
    click.echo("")
    click.echo("Task completed")
    click.echo("Result preview:")
    click.echo(preview + ("..." if len(result.content) > PREVIEW_CHARS else ""))

    output = Path(f"test-result-{int(time.time())}.txt")
    output.write_text(result.content, encoding="utf-8")
    click.echo(f"Full result saved to: {output}")
    click.echo("")
    click.echo("To run a manifest: maestro path/to/manifest.md")


@click.command()
@click.argument("manifest", required=False, type=click.Path(dir_okay=False))
@click.option(
    "--reports-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Root directory for per-run output (default: REPORTS_DIR or ./reports).",
)
@click.option("--debug", is_flag=True, default=False, help="Human-readable debug logging.")
def main(manifest: str | None, reports_dir: str | None, debug: bool) -> None:
    """Assign the tasks in MANIFEST to specialist handlers and run them."""
    setup_logging(debug=debug or settings.debug)

    try:
        llm = build_llm_client()
        registry = build_registry(llm, build_git_service())
        scheduler = build_scheduler(registry, reports_dir)

        if manifest:
            asyncio.run(_run_manifest(scheduler, manifest))
        else:
            asyncio.run(_run_demo(scheduler))
    except MaestroError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
