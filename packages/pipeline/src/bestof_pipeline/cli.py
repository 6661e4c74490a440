"""
cli.py — Click CLI entrypoint for the maintenance jobs.

Usage:
    bestof status
    bestof progress hotel
    bestof backup-drafts --dir backups/
    bestof publish-drafts --dry-run
    bestof fix-slugs fitness --apply
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

import click
import structlog

from bestof_shared.config import settings
from bestof_shared.constants import CATEGORIES

from bestof_pipeline.loaders.place_store import PlaceStore, UpdateResult
from bestof_pipeline.pipelines import cleanup, place_ids, publishing, reports
from bestof_pipeline.utils.logging import configure_logging

log = structlog.get_logger(__name__)

CATEGORY = click.Choice(list(CATEGORIES), case_sensitive=False)

STATUS_MARKS = {"success": "✓", "partial_failure": "⚠", "failure": "✗"}


def _store(ctx: click.Context) -> PlaceStore:
    return ctx.obj["store"]


def _echo_result(label: str, result: UpdateResult, *, verb: str = "updated") -> None:
    if result.records_skipped and not result.records_updated and not result.records_failed:
        click.echo(f"  {label}: {result.records_skipped} would be {verb} (dry run)")
        return
    mark = STATUS_MARKS.get(result.status, "?")
    click.echo(
        f"  {mark} {label}: {result.records_updated} {verb}, "
        f"{result.records_failed} failed"
    )
    for error in result.errors:
        click.echo(f"      {error}", err=True)


def _exit_on_failure(*results: UpdateResult) -> None:
    if any(r.records_failed for r in results):
        sys.exit(1)


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level",
)
@click.pass_context
def main(ctx: click.Context, log_level: str) -> None:
    """Best of Goa maintenance jobs."""
    configure_logging(log_level=log_level)
    ctx.ensure_object(dict)
    ctx.obj.setdefault("store", PlaceStore())
    log.info("command_start", command=ctx.invoked_subcommand)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show extraction status counts for every category."""
    for category, counts in reports.status_counts(_store(ctx)).items():
        total = sum(counts.values())
        summary = ", ".join(f"{s}={n}" for s, n in counts.items()) or "no records"
        click.echo(f"  {category:12s} {total:5d}  {summary}")


@main.command()
@click.argument("category", type=CATEGORY)
@click.pass_context
def progress(ctx: click.Context, category: str) -> None:
    """Show status counts, area distribution and daily rate for a category."""
    report = reports.progress(_store(ctx), category)
    click.echo(f"{category}: {report['total']} records, {report['completed_percent']}% completed")
    for s, n in report["by_status"].items():
        click.echo(f"  {s:12s} {n}")
    click.echo("Areas:")
    for area, n in report["by_area"].items():
        click.echo(f"  {area:20s} {n}")
    click.echo(f"Daily rate: {report['daily_rate']} records/day")


@main.command()
@click.argument("category", type=CATEGORY)
@click.option("--output", type=click.Path(dir_okay=False, writable=True), help="Write JSON report here")
@click.pass_context
def audit(ctx: click.Context, category: str, output: str | None) -> None:
    """Report field completeness per field group."""
    report = reports.audit(_store(ctx), category)
    click.echo(f"{category}: {report['total']} records")
    for group in report["groups"]:
        click.echo(f"  {group['group']:18s} {group['percent']:5.1f}%")
        for f in group["fields"]:
            click.echo(f"      {f['field']:22s} {f['populated']:5d}  {f['percent']:5.1f}%")
    if output:
        with open(output, "w", encoding="utf-8") as fh:
            json.dump(report, fh, indent=2)
        click.echo(f"Report written to {output}")


@main.command()
@click.argument("category", type=CATEGORY)
@click.pass_context
def duplicates(ctx: click.Context, category: str) -> None:
    """Group records sharing a place id or a normalized name."""
    report = reports.duplicates(_store(ctx), category)
    for label, key in (("Same place id", "by_place_id"), ("Same name", "by_name")):
        groups = report[key]
        click.echo(f"{label}: {len(groups)} group(s)")
        for group in groups:
            click.echo(f"  {group['key']}")
            for record in group["records"]:
                click.echo(f"      {record['id']}  {record['name']}  ({record['slug']})")


# ---------------------------------------------------------------------------
# Publishing
# ---------------------------------------------------------------------------

@main.command("backup-drafts")
@click.option("--dir", "directory", default=".", type=click.Path(file_okay=False), help="Backup directory")
@click.pass_context
def backup_drafts(ctx: click.Context, directory: str) -> None:
    """Save every draft restaurant and hotel to a JSON backup."""
    path = publishing.backup_drafts(_store(ctx), directory)
    click.echo(f"Backup written to {path}")


@main.command("publish-drafts")
@click.option("--dry-run", is_flag=True, help="Show counts without writing")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def publish_drafts(ctx: click.Context, dry_run: bool, yes: bool) -> None:
    """Publish every draft restaurant and hotel."""
    if not dry_run and not yes:
        click.confirm("Publish all draft restaurants and hotels? Run backup-drafts first.", abort=True)
    results = publishing.publish_drafts(_store(ctx), dry_run=dry_run)
    for category, result in results.items():
        _echo_result(category, result, verb="published")
    _exit_on_failure(*results.values())


@main.command()
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def rollback(ctx: click.Context, backup_file: str, yes: bool) -> None:
    """Restore visibility flags from a draft backup."""
    try:
        backup = publishing.load_backup(backup_file)
    except (ValueError, json.JSONDecodeError) as exc:
        raise click.ClickException(str(exc)) from exc
    if not yes:
        click.confirm(f"Restore flags from backup taken at {backup['timestamp']}?", abort=True)
    results = publishing.rollback(_store(ctx), backup)
    for category, result in results.items():
        _echo_result(category, result, verb="restored")
    _exit_on_failure(*results.values())


@main.command("publish-top")
@click.argument("category", type=CATEGORY)
@click.option("--limit", required=True, type=click.IntRange(min=1), help="Number of records to publish")
@click.option("--dry-run", is_flag=True, help="List the records without writing")
@click.pass_context
def publish_top(ctx: click.Context, category: str, limit: int, dry_run: bool) -> None:
    """Publish the most-reviewed records that have a rating and a place id."""
    selected, result = publishing.publish_top(_store(ctx), category, limit, dry_run=dry_run)
    for row in selected:
        click.echo(
            f"  {row.get('name')}  {row.get('google_rating')}★  "
            f"{row.get('google_review_count') or 0} reviews"
        )
    _echo_result(category, result, verb="published")
    _exit_on_failure(result)


# ---------------------------------------------------------------------------
# Repairs
# ---------------------------------------------------------------------------

@main.command("find-incomplete")
@click.argument("category", type=CATEGORY)
@click.option("--delete", "delete_", is_flag=True, help="Delete records with nothing worth keeping")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def find_incomplete(ctx: click.Context, category: str, delete_: bool, yes: bool) -> None:
    """Score records that never got a place id."""
    report = cleanup.find_incomplete(_store(ctx), category)
    for r in report:
        flag = "DELETE" if r["delete"] else "keep"
        click.echo(f"  {r['completeness']:3d}  {flag:6s} {r['name']}  ({r['slug']})")
    deletable = sum(1 for r in report if r["delete"])
    click.echo(f"{len(report)} incomplete, {deletable} deletable")

    if not delete_ or not deletable:
        return
    if not yes:
        click.confirm(f"Delete {deletable} {category} record(s)?", abort=True)
    result = cleanup.delete_incomplete(_store(ctx), category, report)
    _echo_result(category, result, verb="deleted")
    _exit_on_failure(result)


def _run_fix(label: str, fixes: list[dict[str, Any]], result: UpdateResult) -> None:
    for fix in fixes:
        if "changes" in fix:
            changes = ", ".join(f"{k}={v!r}" for k, v in fix["changes"].items())
            click.echo(f"  {fix['name']}: {changes}")
        else:
            click.echo(f"  {fix['name']}: {fix['old']!r} -> {fix['new']!r}")
    click.echo(f"{len(fixes)} record(s) need fixing")
    if fixes:
        _echo_result(label, result)
    _exit_on_failure(result)


@main.command("fix-slugs")
@click.argument("category", type=CATEGORY)
@click.option("--apply", is_flag=True, help="Write the fixes (default is a dry run)")
@click.pass_context
def fix_slugs(ctx: click.Context, category: str, apply: bool) -> None:
    """Rewrite malformed slugs from the record name."""
    fixes, result = cleanup.fix_slugs(_store(ctx), category, apply=apply)
    _run_fix(category, fixes, result)


@main.command("fix-social-links")
@click.argument("category", type=CATEGORY)
@click.option("--apply", is_flag=True, help="Write the fixes (default is a dry run)")
@click.pass_context
def fix_social_links(ctx: click.Context, category: str, apply: bool) -> None:
    """Clean scraped social media values into profile URLs."""
    fixes, result = cleanup.fix_social_links(_store(ctx), category, apply=apply)
    _run_fix(category, fixes, result)


@main.command("populate-fields")
@click.argument("category", type=CATEGORY)
@click.option("--apply", is_flag=True, help="Write the fixes (default is a dry run)")
@click.pass_context
def populate_fields(ctx: click.Context, category: str, apply: bool) -> None:
    """Fill empty columns from the stored Apify payload."""
    fixes, result = cleanup.populate_fields(_store(ctx), category, apply=apply)
    _run_fix(category, fixes, result)


@main.command("fetch-place-ids")
@click.argument("category", type=CATEGORY)
@click.option("--apply", is_flag=True, help="Write found place ids (default is a dry run)")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Look up at most N records")
@click.pass_context
def fetch_place_ids(ctx: click.Context, category: str, apply: bool, limit: int | None) -> None:
    """Look up missing google_place_id values via Google Places."""
    try:
        report, result = asyncio.run(
            place_ids.fetch_place_ids(_store(ctx), category, apply=apply, limit=limit)
        )
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc
    for r in report:
        click.echo(f"  {r['name']}: {r['place_id'] or 'not found'}")
    found = sum(1 for r in report if r["place_id"])
    click.echo(f"{found}/{len(report)} place id(s) found")
    if found:
        _echo_result(category, result)
    _exit_on_failure(result)


if __name__ == "__main__":
    main()
