"""Click CLI entry point for crindex."""

from __future__ import annotations

import contextlib
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from pydantic import ValidationError

from crindex.codec import decode_snapshot_strict, extract_fragment
from crindex.config import Settings
from crindex.db import StateDatabase
from crindex.errors import InvalidMetricIdError, SnapshotDecodeError
from crindex.export import export_csv
from crindex.logging import configure_logging
from crindex.models.catalog import DEFAULT_CATALOG, MetricGroup
from crindex.store import AssessmentStore

if TYPE_CHECKING:
    from collections.abc import Iterator


def _get_db(settings: Settings) -> StateDatabase:
    settings.ensure_data_dir()
    db = StateDatabase(settings.db_path)
    db.init_schema()
    return db


@contextlib.contextmanager
def _open_store(ctx: click.Context) -> Iterator[AssessmentStore]:
    """Yield an initialized store backed by the local database."""
    settings: Settings = ctx.obj["settings"]
    db = _get_db(settings)
    try:
        store = AssessmentStore(DEFAULT_CATALOG, storage=db)
        store.initialize(imported=ctx.obj["link"])
        yield store
    finally:
        db.close()


def _print_scores(store: AssessmentStore) -> None:
    scores = store.scores()
    weights = store.weights
    click.echo(
        f"Weights:      capacity {weights.capacity_weight:.2f}  "
        f"adaptability {weights.adaptability_weight:.2f}"
    )
    click.echo(f"Capacity:     {scores.capacity_score:.1f}")
    click.echo(f"Adaptability: {scores.adaptability_score:.1f}")
    click.echo(f"C→R Index:    {scores.composite:.1f}")
    click.echo(f"Est. reduction in time-to-recover: {scores.recovery_reduction}%")
    click.echo(f"Innovation-under-stress index:     {scores.stress_index}")
    click.echo(f"Pivot tier:                        {scores.pivot_tier.label}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--link",
    type=str,
    default=None,
    help="Share link (or token) to start from when nothing is saved locally",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, link: str | None) -> None:
    """crindex: Creativity → Resilience (C→R) index calculator."""
    ctx.ensure_object(dict)
    settings = Settings()
    log_level = "DEBUG" if verbose else settings.log_level
    configure_logging(log_level=log_level, log_format=settings.log_format)
    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = verbose
    ctx.obj["link"] = link


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print snapshot and scores as JSON")
@click.pass_context
def show(ctx: click.Context, as_json: bool) -> None:
    """Show the current assessment and its scores."""
    with _open_store(ctx) as store:
        if as_json:
            payload = {
                "snapshot": store.snapshot().model_dump(mode="json", by_alias=True),
                "scores": store.scores().model_dump(mode="json"),
            }
            click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
            return

        for group in MetricGroup:
            click.echo(f"[{group.value}]")
            for v in store.values:
                if v.group == group:
                    click.echo(f"  {v.id:20s} {v.value:3d}  {v.label}")
        click.echo("")
        _print_scores(store)

        context = store.context
        if not context.is_empty:
            click.echo("")
            for name, value in context.model_dump(by_alias=True).items():
                if value:
                    click.echo(f"{name}: {value}")


@cli.command()
def catalog() -> None:
    """List the metrics every assessment is scored on."""
    for d in DEFAULT_CATALOG:
        click.echo(f"  {d.id:20s} {d.group.value:13s} default {d.default:3d}  {d.label}")
        click.echo(f"  {'':20s} {d.help}")


@cli.command("set", context_settings={"ignore_unknown_options": True})
@click.argument("metric_id")
@click.argument("value", type=int)
@click.pass_context
def set_value(ctx: click.Context, metric_id: str, value: int) -> None:
    """Set METRIC_ID to VALUE (clamped to 0-100)."""
    with _open_store(ctx) as store:
        try:
            updated = store.set_metric_value(metric_id, value)
        except InvalidMetricIdError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)
        click.echo(f"{updated.label}: {updated.value}")
        click.echo(f"C→R Index: {store.scores().composite:.1f}")


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("group", type=click.Choice([g.value for g in MetricGroup], case_sensitive=False))
@click.argument("value", type=float)
@click.pass_context
def weight(ctx: click.Context, group: str, value: float) -> None:
    """Set the weight of GROUP (capacity or adaptability)."""
    with _open_store(ctx) as store:
        try:
            weights = store.set_weight(MetricGroup(group.lower()), value)
        except ValidationError:
            click.echo(f"Error: weight must be a finite number, got {value}", err=True)
            sys.exit(1)
        click.echo(
            f"Weights: capacity {weights.capacity_weight:.2f}  "
            f"adaptability {weights.adaptability_weight:.2f}"
        )
        click.echo(f"C→R Index: {store.scores().composite:.1f}")


@cli.command()
@click.option("--team-name", type=str, default=None)
@click.option("--department", type=str, default=None)
@click.option("--date", "assessment_date", type=str, default=None, help="ISO date")
@click.option("--assessor", "assessor_name", type=str, default=None)
@click.option("--purpose", "assessment_purpose", type=str, default=None)
@click.pass_context
def context(ctx: click.Context, **fields: str | None) -> None:
    """Edit the assessment context (team, department, date, assessor, purpose)."""
    updates = {name: value for name, value in fields.items() if value is not None}
    with _open_store(ctx) as store:
        current = store.update_context(**updates) if updates else store.context
        for name, value in current.model_dump(by_alias=True).items():
            click.echo(f"{name}: {value}")


@cli.command()
@click.confirmation_option(prompt="Reset all values, weights and context to defaults?")
@click.pass_context
def reset(ctx: click.Context) -> None:
    """Restore catalog defaults."""
    with _open_store(ctx) as store:
        store.reset()
        click.echo(f"Reset. C→R Index: {store.scores().composite:.1f}")


@cli.command()
@click.option("--token", "token_only", is_flag=True, help="Print only the encoded token")
@click.pass_context
def share(ctx: click.Context, token_only: bool) -> None:
    """Print a share link for the current assessment."""
    settings: Settings = ctx.obj["settings"]
    with _open_store(ctx) as store:
        if token_only:
            click.echo(store.share_token())
        else:
            click.echo(store.share_link(settings.share_base_url))


@cli.command("import")
@click.argument("link")
@click.pass_context
def import_link(ctx: click.Context, link: str) -> None:
    """Replace the current assessment with the one in LINK."""
    token = extract_fragment(link)
    try:
        snapshot = decode_snapshot_strict(token or "")
    except SnapshotDecodeError as exc:
        click.echo(f"Error: cannot import link ({exc})", err=True)
        sys.exit(1)

    with _open_store(ctx) as store:
        store.apply_snapshot(snapshot)
        click.echo(f"Imported {len(snapshot.items)} metric value(s).")
        _print_scores(store)


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
    default=None,
    help="Target file ('-' for stdout). Defaults to the data directory.",
)
@click.pass_context
def export(ctx: click.Context, output: Path | None) -> None:
    """Export the assessment as CSV."""
    settings: Settings = ctx.obj["settings"]
    with _open_store(ctx) as store:
        csv_text = export_csv(store.values, store.weights, store.context)

    if output is not None and str(output) == "-":
        click.echo(csv_text)
        return
    target = output or settings.data_dir / settings.export_filename
    target.write_text(csv_text + "\n", encoding="utf-8")
    click.echo(f"Wrote {target}")


@cli.command()
@click.pass_context
def chart(ctx: click.Context) -> None:
    """Print radar and bar chart series as JSON."""
    with _open_store(ctx) as store:
        click.echo(store.chart().model_dump_json(indent=2))
