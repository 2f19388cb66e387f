from .row_split import MigrationResult, split_first_row
from .runner import (
    MIGRATIONS,
    BatchMigrationResult,
    Migration,
    MigrationRunResult,
    migrate_documents,
    run_migrations,
)

__all__ = [
    "split_first_row",
    "MigrationResult",
    "migrate_documents",
    "BatchMigrationResult",
    "Migration",
    "MIGRATIONS",
    "run_migrations",
    "MigrationRunResult",
]
