#!/usr/bin/env python3
"""
Vakio Management CLI

Command-line management for the Vakio row generator: database setup,
pool imports and row generation without the web API.
"""

import json
import logging
import os

import click
from flask.cli import with_appcontext
from flask_migrate import downgrade, migrate, upgrade
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from vakio import create_app, db
from vakio.models import BetSet, Match, PoolImport, Score
from vakio.utils.export import pick_statistics, rows_to_csv, rows_to_text
from vakio.utils.performance import PerformanceMonitor
from vakio.utils.pool_import import PoolImportError, default_matches, parse_pool
from vakio.utils.row_generator import generate_unique_rows, validate_matches

app = create_app()


@click.group()
def cli():
    """Vakio Management CLI"""
    pass


def _load_pool(path):
    """Read and parse a pool description file, exiting on bad input"""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return parse_pool(data)
    except (OSError, json.JSONDecodeError, PoolImportError) as e:
        raise click.ClickException(f"Could not read pool file {path}: {e}")


# Row generation
@cli.command()
@click.option(
    "--file",
    "pool_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Pool description JSON (default: placeholder matches)",
)
@click.option("--count", type=int, default=None, help="Number of rows")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), help="Write rows as CSV")
@click.option("--stats", is_flag=True, help="Show per-match outcome counts")
@with_appcontext
def generate(pool_file, count, csv_path, stats):
    """Generate weighted rows and print them"""
    if pool_file:
        pool = _load_pool(pool_file)
        for warning in pool.warnings:
            click.echo(f"⚠️  {warning}")
        matches = pool.matches
    else:
        matches = default_matches()

    is_valid, message = validate_matches(matches)
    if not is_valid:
        raise click.ClickException(message)

    if count is None:
        count = app.config["ROW_COUNT"]
    if count < 1:
        raise click.ClickException("--count must be positive")

    with PerformanceMonitor("generate_rows"):
        rows = generate_unique_rows(matches, count)

    if csv_path:
        with open(csv_path, "w", encoding="utf-8", newline="") as f:
            f.write(rows_to_csv(rows))
        click.echo(f"✅ Wrote {len(rows)} rows to {csv_path}")
    else:
        click.echo(rows_to_text(rows))

    if stats:
        click.echo("\nMatch    1    X    2")
        for number, counts in pick_statistics(rows).items():
            click.echo(
                f"{number:>5} {counts['1']:>4} {counts['X']:>4} {counts['2']:>4}"
            )

    cost = len(rows) * app.config["COST_PER_ROW"]
    click.echo(f"\n{len(rows)} rows, total cost {cost:.2f} €")


@cli.command("import-pool")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@with_appcontext
def import_pool(path):
    """Store a pool description file"""
    pool = _load_pool(path)
    for warning in pool.warnings:
        click.echo(f"⚠️  {warning}")

    try:
        record = PoolImport.from_pool(pool)
        db.session.add(record)
        db.session.commit()
        click.echo(
            f"✅ Imported {pool.game_name} ({len(pool.raw_matches)} matches) as #{record.id}"
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error importing pool: {str(e)}")
        logging.error(f"Pool import failed - SQL error: {e}")


# Score Commands
@cli.group()
def scores():
    """Score commands"""
    pass


@scores.command()
@with_appcontext
def latest():
    """Show the most recent score record"""
    score = Score.get_latest()
    if not score:
        click.echo("No scores found.")
        return

    click.echo(
        f"{score.game_name} ({score.date:%Y-%m-%d}): "
        f"{score.correct_count}/{score.total_possible} ({score.percentage}%)"
    )


# Database Commands
@cli.group()
def db_cmd():
    """Database commands"""
    pass


@db_cmd.command()
@with_appcontext
def init_db():
    """Initialize database tables"""
    try:
        db.create_all()
        click.echo("✅ Database tables created successfully!")
    except SQLAlchemyError as e:
        click.echo(f"❌ Error initializing database: {str(e)}")


@db_cmd.command()
@with_appcontext
def reset():
    """⚠️  DANGER: Drop and recreate all tables"""
    if not click.confirm("This will DELETE ALL DATA. Are you sure?"):
        click.echo("Cancelled.")
        return

    try:
        db.drop_all()
        db.create_all()
        click.echo("✅ Database reset successfully!")
    except SQLAlchemyError as e:
        click.echo(f"❌ Error resetting database: {str(e)}")


# Database Migration Commands
@cli.group()
def db_migrate():
    """Database migration commands"""
    pass


@db_migrate.command()
@with_appcontext
def init_migrations():
    """Initialize migrations repository"""
    if os.path.exists("migrations"):
        click.echo("❌ Migrations directory already exists!")
        return

    from flask_migrate import init as flask_migrate_init

    flask_migrate_init()
    click.echo("✅ Migrations repository initialized!")


@db_migrate.command()
@click.option("-m", "--message", required=True, help="Migration message")
@with_appcontext
def create_migration(message):
    """Create a new migration"""
    migrate(message=message)
    click.echo(f"✅ Migration created: {message}")


@db_migrate.command()
@click.option("--revision", default="head", help="Revision to upgrade to")
@with_appcontext
def apply_migrations(revision):
    """Apply migrations to database"""
    upgrade(revision=revision)
    click.echo(f"✅ Migrations applied to {revision}")


@db_migrate.command()
@click.option("--revision", required=True, help="Revision to downgrade to")
@with_appcontext
def rollback_migration(revision):
    """Rollback migrations to specific revision"""
    downgrade(revision=revision)
    click.echo(f"✅ Rolled back to {revision}")


# Info Commands
@cli.command()
@with_appcontext
def status():
    """Show application status"""
    click.echo("Vakio Application Status")
    click.echo("=" * 40)

    try:
        db.session.execute(text("SELECT 1"))
        click.echo("✅ Database: Connected")
    except SQLAlchemyError as e:
        click.echo(f"❌ Database: Error - {str(e)}")
        return

    click.echo(f"⚽ Stored matches: {Match.query.count()}")
    click.echo(f"🎫 Bet sets: {BetSet.query.count()}")
    click.echo(f"📥 Pool imports: {PoolImport.query.count()}")

    latest_score = Score.get_latest()
    if latest_score:
        click.echo(
            f"🏆 Latest score: {latest_score.game_name} "
            f"{latest_score.correct_count}/{latest_score.total_possible}"
        )
    else:
        click.echo("🏆 Latest score: None")


if __name__ == "__main__":
    with app.app_context():
        cli()
