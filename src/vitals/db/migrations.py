"""
Database migrations for the metric history store.

Uses SQLite ALTER TABLE ADD COLUMN for incremental schema evolution.
Each migration is idempotent: columns are only added if absent.

Called automatically from get_engine() after create_all() so both
fresh installs and existing DBs are handled without manual steps.
"""
from sqlalchemy import text


def run_migrations(engine) -> None:
    """Apply all pending schema migrations.

    Safe to call multiple times — checks column existence before altering.
    Supports SQLite only (uses PRAGMA table_info).

    Args:
        engine: SQLAlchemy engine (SQLModel create_engine result).
    """
    with engine.connect() as conn:
        # MetricEntry: where the value came from (manual entry vs import)
        _add_column_if_missing(conn, "metricentry", "source", "TEXT")

        # UserProfile: weight goal added after the first release
        _add_column_if_missing(conn, "userprofile", "goal_weight_kg", "REAL")

        # UserProfile: daily activity goals
        _add_column_if_missing(conn, "userprofile", "daily_steps_goal", "INTEGER")
        _add_column_if_missing(conn, "userprofile", "daily_water_goal", "REAL")
        _add_column_if_missing(conn, "userprofile", "daily_burned_calories_goal", "INTEGER")

        conn.commit()


def _add_column_if_missing(conn, table: str, column: str, col_type: str) -> None:
    """Add a column to a table if it doesn't already exist.

    Args:
        conn: SQLAlchemy connection.
        table: Table name (lowercase, as SQLite stores it).
        column: Column name to add.
        col_type: SQLite type string, e.g. "INTEGER", "REAL", "TEXT".
    """
    result = conn.execute(text(f"PRAGMA table_info({table})"))
    existing_columns = {row[1] for row in result}
    if existing_columns and column not in existing_columns:
        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {col_type}"))
