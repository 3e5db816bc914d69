"""
Automatic database migration.
Compares the SQLAlchemy models with the live SQLite schema and adds missing columns.
"""
import sqlite3
import logging
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from nexus.database import engine as default_engine, Base
from nexus import models  # noqa: F401  registers all tables

logger = logging.getLogger("nexus.migrations")


def get_table_columns(conn, table_name: str) -> dict:
    """Existing columns of a table, keyed by name"""
    cursor = conn.cursor()
    cursor.execute(f"PRAGMA table_info({table_name})")
    columns = {}
    for row in cursor.fetchall():
        # row: (cid, name, type, notnull, dflt_value, pk)
        columns[row[1]] = {
            'type': row[2],
            'notnull': row[3],
            'default': row[4],
            'pk': row[5]
        }
    return columns


def sqlalchemy_type_to_sqlite(sa_type) -> str:
    """Map a SQLAlchemy column type to its SQLite storage class"""
    name = str(sa_type).upper()

    if 'INTEGER' in name or 'BOOLEAN' in name:
        return 'INTEGER'
    if 'FLOAT' in name or 'NUMERIC' in name or 'REAL' in name:
        return 'REAL'
    # Strings, text, dates and timestamps are all stored as text
    return 'TEXT'


def get_default_value(column) -> str:
    """Column default rendered as an SQL literal, or NULL"""
    default = column.default
    if default is None or not hasattr(default, 'arg'):
        return 'NULL'

    value = default.arg
    if callable(value):
        # utcnow and other callables cannot be expressed as constants
        return 'NULL'
    if isinstance(value, bool):
        return '1' if value else '0'
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    return 'NULL'


def build_alter_statement(table_name: str, column) -> str:
    alter_sql = f"ALTER TABLE {table_name} ADD COLUMN {column.name} {sqlalchemy_type_to_sqlite(column.type)}"
    default_value = get_default_value(column)
    if default_value != 'NULL':
        alter_sql += f" DEFAULT {default_value}"
        # SQLite only accepts NOT NULL in ALTER TABLE together with a default
        if not column.nullable:
            alter_sql += " NOT NULL"
    return alter_sql


def auto_migrate(engine: Engine = None) -> int:
    """
    Add columns declared on the models but missing from the database.

    Only SQLite databases are migrated; other backends are skipped.

    Returns:
        Number of columns added
    """
    engine = engine or default_engine
    if engine.dialect.name != "sqlite":
        logger.info(f"Skipping schema migration for dialect '{engine.dialect.name}'")
        return 0

    logger.info("Starting automatic schema migration...")

    existing_tables = inspect(engine).get_table_names()
    conn = engine.raw_connection()
    cursor = conn.cursor()
    migrations_applied = 0

    try:
        for table_name, table in Base.metadata.tables.items():
            if table_name not in existing_tables:
                logger.warning(f"Table '{table_name}' doesn't exist. Run Base.metadata.create_all() first.")
                continue

            existing_columns = get_table_columns(conn, table_name)
            for column in table.columns:
                if column.name in existing_columns:
                    continue

                alter_sql = build_alter_statement(table_name, column)
                logger.info(f"Adding column '{column.name}' to table '{table_name}'")
                logger.debug(f"SQL: {alter_sql}")
                try:
                    cursor.execute(alter_sql)
                    migrations_applied += 1
                except sqlite3.Error as e:
                    logger.error(f"Failed to add column {table_name}.{column.name}: {e}")

        conn.commit()

        if migrations_applied > 0:
            logger.info(f"Migration completed: {migrations_applied} column(s) added")
        else:
            logger.info("Schema is up to date - no migrations needed")
    except Exception as e:
        logger.error(f"Migration failed: {e}")
        conn.rollback()
        raise
    finally:
        conn.close()

    return migrations_applied


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    auto_migrate()
