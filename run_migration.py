"""
SQL migration runner for existing databases
Usage: python run_migration.py migrations/<migration_file.sql>

Fresh databases get every table and index from create_all at startup;
files under migrations/ bring older databases up to date.
"""
import logging
import sys
from pathlib import Path

from sqlalchemy import text

from venue_booking.database import engine

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)


def split_statements(sql: str) -> list[str]:
    """Drop '--' comment lines and split the remaining script on ';'"""
    lines = [line for line in sql.splitlines() if not line.strip().startswith('--')]
    return [s.strip() for s in '\n'.join(lines).split(';') if s.strip()]


def run_migration(migration_file_path: str, bind=engine):
    """Run a SQL migration file in one transaction"""
    migration_file = Path(migration_file_path)

    if not migration_file.exists():
        raise FileNotFoundError(f"Migration file not found: {migration_file}")

    logger.info(f"Reading migration file: {migration_file}")
    statements = split_statements(migration_file.read_text())
    logger.info(f"Found {len(statements)} SQL statements to execute")

    with bind.begin() as conn:
        for i, stmt in enumerate(statements, 1):
            logger.info(f"Executing statement {i}/{len(statements)}...")
            conn.execute(text(stmt))

    logger.info("✅ Migration completed successfully!")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        logger.error("Usage: python run_migration.py <migration_file.sql>")
        sys.exit(1)

    try:
        run_migration(sys.argv[1])
    except Exception as e:
        logger.error(f"❌ Migration failed: {e}")
        sys.exit(1)
