"""
Schema sync for the KoloKwa tables.

- Creates missing tables via Base.metadata.create_all()
- Adds columns that exist on the models but not yet in the database

A new database does not need this; app startup already runs create_all().
Run it against an existing database after a model gained a column:
  python scripts/create_tables.py
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sqlalchemy import inspect, text  # noqa: E402
from sqlalchemy.schema import DefaultClause  # noqa: E402
from kolokwa.database import Base, engine  # noqa: E402
from kolokwa import models  # noqa: F401,E402


def _column_ddl(table_name: str, col) -> tuple[str, str | None]:
    """ALTER TABLE statement for one missing column, plus a warning if NOT NULL had to be dropped."""
    parts = [f'ALTER TABLE {table_name} ADD COLUMN "{col.name}" {col.type.compile(dialect=engine.dialect)}']
    default_sql = None
    if isinstance(col.server_default, DefaultClause) and col.server_default.arg is not None:
        default_sql = str(col.server_default.arg.compile(dialect=engine.dialect))
        parts.append(f"DEFAULT {default_sql}")
    warning = None
    if not col.nullable:
        if default_sql is not None:
            parts.append("NOT NULL")
        else:
            warning = f"{table_name}.{col.name} is NOT NULL on the model but was added as NULL (no server default)."
    return " ".join(parts), warning


def main():
    if engine is None:
        print("DATABASE_URL is empty. Set it in .env first.")
        sys.exit(1)

    Base.metadata.create_all(bind=engine)
    insp = inspect(engine)
    warnings = []

    with engine.begin() as conn:
        for table in Base.metadata.tables.values():
            existing = {c["name"] for c in insp.get_columns(table.name)}
            for col in table.columns:
                if col.name in existing:
                    continue
                stmt, warning = _column_ddl(table.name, col)
                conn.execute(text(stmt))
                print(f"  added: {table.name}.{col.name}")
                if warning:
                    warnings.append(warning)

    print(f"Done. Tables: {', '.join(sorted(Base.metadata.tables))}")
    for w in warnings:
        print(f" - {w}")


if __name__ == "__main__":
    main()
