"""CLI interface for reqspec using Typer."""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from rich.console import Console
from rich.table import Table

from ..core.builder.payload import to_payload
from ..core.builder.requirement_builder import RequirementBuilder
from ..core.config.loader import load_config
from ..core.matching.evaluator import InMemoryEvaluator
from ..core.models.candidate import CandidateRecord
from ..core.models.enums import Region
from ..core.models.validation import FinalizeResult
from ..core.orchestrator.service import RequirementService
from ..core.storage.object_store import ObjectStore
from ..observability.logger import get_logger, setup_logging

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="reqspec",
    help="Candidate requirement builder - validate, serialize, match and submit requirements",
    add_completion=False,
)

RequirementFile = Annotated[
    Path,
    typer.Argument(
        help="Requirement form file (YAML or JSON, payload field names)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
]
RegionOption = Annotated[
    Region | None,
    typer.Option("--region", "-r", help="Dashboard region (overrides the file)"),
]


@app.callback()
def main(
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Override configured log level")
    ] = None,
):
    """Configure logging from the loaded configuration."""
    logging_config = load_config().get("logging", {})
    setup_logging(
        log_level=log_level or logging_config.get("level", "INFO"),
        log_format=logging_config.get("format", "json"),
        log_file=logging_config.get("file"),
    )


def _get_store(config: dict[str, Any]) -> ObjectStore:
    """Get file-based object store from config."""
    base_dir = config.get("storage", {}).get("object_store_dir", "data/requirements")
    return ObjectStore(base_dir)


def _read_form(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (IOError, UnicodeDecodeError, yaml.YAMLError) as e:
        console.print(f"[red]! Error reading requirement file:[/red] {e}")
        raise typer.Exit(code=2)
    if not isinstance(data, dict):
        console.print("[red]! Error:[/red] requirement file must contain a mapping")
        raise typer.Exit(code=2)
    return data


def _load_builder(
    path: Path, region: Region | None
) -> tuple[RequirementBuilder, dict[str, Any]]:
    """Replay a requirement file into a builder configured for its region."""
    data = _read_form(path)
    resolved = Region(region or data.get("region") or Region.DEFAULT)
    config = load_config(region=resolved.value)
    extra_required = config.get("requirements", {}).get("extra_required_fields", [])

    if not data.get("currency"):
        data["currency"] = config.get("requirements", {}).get("default_currency")

    try:
        builder = RequirementBuilder.from_form(
            data, region=resolved, extra_required_fields=extra_required
        )
    except ValueError as e:
        console.print(f"[red]! Invalid requirement file:[/red] {e}")
        raise typer.Exit(code=2)
    return builder, config


def _finalize_or_exit(builder: RequirementBuilder) -> FinalizeResult:
    result = builder.finalize()
    if result.success:
        return result

    table = Table(show_header=True, header_style="bold red", title="Missing or invalid fields")
    table.add_column("Field")
    table.add_column("Problem")
    for issue in result.errors:
        table.add_row(issue.field, issue.message)
    console.print(table)
    raise typer.Exit(code=1)


@app.command()
def validate(path: RequirementFile, region: RegionOption = None):
    """Validate a requirement file and show the normalized filters."""
    builder, _ = _load_builder(path, region)
    spec = _finalize_or_exit(builder).unwrap()

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Title", spec.title)
    table.add_row("Location", spec.job_location)
    table.add_row("Region", spec.region)
    table.add_row("Include skills", ", ".join(spec.include_skills) or "-")
    table.add_row("Exclude skills", ", ".join(spec.exclude_skills) or "-")
    table.add_row("Include locations", ", ".join(spec.include_locations) or "-")
    table.add_row("Exclude locations", ", ".join(spec.exclude_locations) or "-")
    table.add_row("Designations", ", ".join(spec.candidate_designations) or "-")
    table.add_row(
        "Experience",
        f"{_bound(spec.experience_min)} - {_bound(spec.experience_max)} years",
    )
    table.add_row(
        "Salary",
        f"{_bound(spec.salary_min)} - {_bound(spec.salary_max)} {spec.currency}",
    )
    table.add_row("Diversity", ", ".join(spec.diversity_preference) or "No preference")

    console.print("[green]> Requirement is valid[/green]")
    console.print(table)


@app.command()
def payload(
    path: RequirementFile,
    region: RegionOption = None,
    output_file: Annotated[
        Path | None, typer.Option("--output", "-o", help="Path to save payload JSON")
    ] = None,
):
    """Print the submission payload for a requirement file."""
    builder, _ = _load_builder(path, region)
    spec = _finalize_or_exit(builder).unwrap()
    body = json.dumps(to_payload(spec), indent=2)

    if output_file:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(body, encoding="utf-8")
        console.print(f"[green]Payload saved to:[/green] {output_file}")
    else:
        typer.echo(body)


@app.command()
def submit(path: RequirementFile, region: RegionOption = None):
    """Validate a requirement file and submit it to the backend."""
    builder, config = _load_builder(path, region)
    _finalize_or_exit(builder)

    service = RequirementService.from_config(config, store=_get_store(config))
    outcome = asyncio.run(service.submit(builder))

    if not outcome.success:
        console.print(f"\n[red]! {outcome.error_title}:[/red] {outcome.error_message}")
        raise typer.Exit(code=1)

    receipt = outcome.receipt
    if receipt.requirement_id:
        console.print(f"\n[green]> Requirement created.[/green] ID: {receipt.requirement_id}")
    else:
        console.print("\n[green]> Requirement created.[/green]")


@app.command()
def draft(
    path: RequirementFile,
    region: RegionOption = None,
    note: Annotated[str | None, typer.Option("--note", "-n", help="Draft note")] = None,
):
    """Validate a requirement file and save it as a local draft."""
    builder, config = _load_builder(path, region)
    spec = _finalize_or_exit(builder).unwrap()

    store = _get_store(config)
    service = RequirementService.from_config(config, store=store)
    saved = service.save_draft(spec, note=note)
    console.print(f"[green]Draft saved:[/green] {saved.id}")


@app.command()
def drafts():
    """List locally saved drafts."""
    store = _get_store(load_config())
    records = store.list_drafts()

    if not records:
        console.print("[yellow]No drafts found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Draft ID")
    table.add_column("Title")
    table.add_column("Region")
    table.add_column("Saved")
    table.add_column("Note")
    for record in records:
        table.add_row(
            record.id,
            record.spec.title,
            record.spec.region,
            record.created_at.strftime("%Y-%m-%d %H:%M"),
            record.note or "",
        )
    console.print(table)


def _read_candidates(path: Path) -> list[CandidateRecord]:
    try:
        raw_candidates = json.loads(path.read_text(encoding="utf-8"))
        return [CandidateRecord(**item) for item in raw_candidates]
    except (IOError, ValueError, TypeError) as e:
        console.print(f"[red]! Error reading candidates:[/red] {e}")
        raise typer.Exit(code=2)


CandidatesOption = Annotated[
    Path | None,
    typer.Option(
        "--candidates",
        "-c",
        help="JSON file with a list of candidate records",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
]


@app.command()
def pool(
    name: Annotated[str, typer.Argument(help="Name to store the pool under")],
    candidates_file: Annotated[
        Path,
        typer.Argument(
            help="JSON file with a list of candidate records",
            exists=True,
            file_okay=True,
            dir_okay=False,
        ),
    ],
):
    """Store a candidate pool for offline matching."""
    candidates = _read_candidates(candidates_file)
    path = _get_store(load_config()).save_candidate_pool(name, candidates)
    console.print(f"[green]Stored {len(candidates)} candidates:[/green] {path}")


@app.command()
def match(
    path: RequirementFile,
    candidates_file: CandidatesOption = None,
    pool_name: Annotated[
        str | None, typer.Option("--pool", "-p", help="Name of a stored candidate pool")
    ] = None,
    region: RegionOption = None,
    top_n: Annotated[int, typer.Option("--top-n", "-n", help="Number of matches to show")] = 10,
):
    """Run a requirement against a candidate file or a stored pool."""
    if top_n <= 0:
        console.print("[red]! Error:[/red] --top-n must be greater than 0")
        raise typer.Exit(code=1)
    if (candidates_file is None) == (pool_name is None):
        console.print("[red]! Error:[/red] pass exactly one of --candidates or --pool")
        raise typer.Exit(code=2)

    builder, config = _load_builder(path, region)
    spec = _finalize_or_exit(builder).unwrap()

    if candidates_file is not None:
        candidates = _read_candidates(candidates_file)
    else:
        candidates = _get_store(config).load_candidate_pool(pool_name)
        if not candidates:
            console.print(f"[red]! Error:[/red] no stored candidate pool named {pool_name!r}")
            raise typer.Exit(code=2)

    matches = InMemoryEvaluator(candidates).evaluate(spec)

    if not matches:
        console.print("[yellow]No matching candidates[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Rank", style="dim", width=6)
    table.add_column("Candidate ID")
    table.add_column("Name")
    table.add_column("Score", justify="right")
    table.add_column("Matched skills")
    for rank, item in enumerate(matches[:top_n], start=1):
        table.add_row(
            str(rank),
            item.candidate_id,
            item.candidate.name or "Unknown",
            f"{item.score:.1f}",
            ", ".join(item.matched_skills) or "-",
        )
    console.print(f"\n[bold]{len(matches)} matching candidates[/bold]")
    console.print(table)


def _bound(value: float | None) -> str:
    if value is None:
        return "any"
    return f"{value:g}"


if __name__ == "__main__":
    app()
