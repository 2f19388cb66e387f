"""
Batch migration over stored documents.

Storage hands documents over in their plain-tree form (see
Document.to_dict).  Extra keys such as ``id`` or ``name`` are carried
through untouched.

migrate_documents applies the row-split migration to every document in a
batch.  A malformed document, or one whose steps the engine rejects, is
skipped with a warning and left as it was; the batch itself never fails.

MIGRATIONS lists every migration by id.  run_migrations applies those not
yet in ``applied_ids`` in id order and reports which ones now count as
applied and which failed.  A failed migration does not stop the ones after
it.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Collection, Mapping, Sequence

from rowguide.migrations.row_split import split_first_row
from rowguide.schemas.diagnostics import Diagnostic, Severity, error, has_errors, warning
from rowguide.schemas.document import Document

_OPERATION = "migrate_documents"


@dataclass(frozen=True)
class BatchMigrationResult:
    """
    Outcome of one migration over a batch.

    Attributes:
        documents: Every input document in order; migrated ones replaced by
            their new plain-tree form, skipped or untouched ones as given.
        migrated: Indices of the documents that were rewritten.
        skipped: Indices of the documents left as given because they
            are malformed or hold steps the row split rejects.
        diagnostics: Per-document problems, with ``index`` in the context.
    """

    documents: tuple[Any, ...]
    migrated: tuple[int, ...] = ()
    skipped: tuple[int, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()


@dataclass(frozen=True)
class Migration:
    id: int
    description: str
    apply: Callable[[Sequence[Any]], BatchMigrationResult]


@dataclass(frozen=True)
class MigrationRunResult:
    """
    Outcome of run_migrations.

    Attributes:
        documents: The documents after every successful migration.
        applied_ids: Ids already applied on entry plus those applied now.
        failed_ids: Ids that failed in this run; they remain pending.
        diagnostics: Everything the migrations reported, in run order.
    """

    documents: tuple[Any, ...]
    applied_ids: tuple[int, ...]
    failed_ids: tuple[int, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()


def migrate_documents(raw_documents: Any) -> BatchMigrationResult:
    """Apply split_first_row to each plain-tree document in ``raw_documents``."""
    if not isinstance(raw_documents, (list, tuple)):
        return BatchMigrationResult(
            documents=(),
            diagnostics=(
                error(
                    _OPERATION,
                    "Documents must be a list or tuple",
                    actual_type=type(raw_documents).__name__,
                ),
            ),
        )

    documents: list[Any] = []
    migrated: list[int] = []
    skipped: list[int] = []
    diagnostics: list[Diagnostic] = []

    for index, raw in enumerate(raw_documents):
        problem = _shape_problem(raw)
        document = None
        if problem is None:
            try:
                document = Document.from_dict(raw)
            except ValueError as exc:
                problem = str(exc)
        if document is None:
            diagnostics.append(
                warning(_OPERATION, f"Skipped malformed document: {problem}", index=index)
            )
            skipped.append(index)
            documents.append(raw)
            continue

        result = split_first_row(document)
        if has_errors(result.diagnostics):
            # A tree can be well-formed yet hold steps the engine rejects.
            reasons = "; ".join(
                d.message for d in result.diagnostics if d.severity == Severity.ERROR
            )
            diagnostics.append(
                warning(_OPERATION, f"Skipped unprocessable document: {reasons}", index=index)
            )
            skipped.append(index)
            documents.append(raw)
            continue
        if result.applied:
            migrated.append(index)
            documents.append({**raw, **result.document.to_dict()})
        else:
            documents.append(raw)

    return BatchMigrationResult(
        documents=tuple(documents),
        migrated=tuple(migrated),
        skipped=tuple(skipped),
        diagnostics=tuple(diagnostics),
    )


MIGRATIONS: Mapping[int, Migration] = MappingProxyType(
    {
        1: Migration(
            id=1,
            description="Split combined first rows into two alternating rows",
            apply=migrate_documents,
        ),
    }
)


def run_migrations(
    raw_documents: Sequence[Any],
    applied_ids: Collection[int] = (),
    migrations: Mapping[int, Migration] = MIGRATIONS,
) -> MigrationRunResult:
    """
    Apply every migration in ``migrations`` whose id is not in ``applied_ids``.

    A migration fails when it raises or reports an error diagnostic; its
    output is discarded and later migrations still run on the previous
    documents.
    """
    documents: tuple[Any, ...] = tuple(raw_documents)
    applied = set(applied_ids)
    failed: list[int] = []
    diagnostics: list[Diagnostic] = []

    for migration_id in sorted(migrations):
        if migration_id in applied:
            continue
        migration = migrations[migration_id]
        try:
            result = migration.apply(documents)
        except Exception as exc:  # noqa: BLE001 — one failed migration must not stop the rest
            warnings.warn(f"Migration {migration_id} failed: {exc}", stacklevel=2)
            diagnostics.append(
                error(
                    "run_migrations",
                    f"Migration {migration_id} failed: {exc}",
                    migration_id=migration_id,
                )
            )
            failed.append(migration_id)
            continue

        diagnostics.extend(result.diagnostics)
        if has_errors(result.diagnostics):
            failed.append(migration_id)
            continue
        documents = result.documents
        applied.add(migration_id)

    return MigrationRunResult(
        documents=documents,
        applied_ids=tuple(sorted(applied)),
        failed_ids=tuple(failed),
        diagnostics=tuple(diagnostics),
    )


def _shape_problem(raw: Any) -> str | None:
    """Describe why ``raw`` cannot be migrated, or return None."""
    if not isinstance(raw, dict):
        return f"document is not a mapping ({type(raw).__name__})"
    rows = raw.get("rows")
    if not isinstance(rows, list):
        return "rows is not a list"
    for position in (0, 1):
        if position < len(rows):
            row = rows[position]
            if not isinstance(row, dict) or not isinstance(row.get("steps"), list):
                return f"row {position} has no steps list"
    return None
