"""
Import pipeline: parsed CSV rows -> column mapping -> table definition ->
fresh table -> transactional load.

Stages run strictly in order and the first failure ends the import. Two
concurrent imports targeting the same table name are not serialized: one
request's drop/create can land between the other's provisioning and load.
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence

from django.db import DEFAULT_DB_ALIAS, DatabaseError

from .exceptions import CSVImportError, ImportDatabaseError, ImportValidationError
from .utils.column_names import build_column_mapping
from .utils.csv_reader import read_csv_rows
from .utils.db_insert import insert_rows
from .utils.db_schema import build_table_definition, provision_table

logger = logging.getLogger(__name__)


class ImportStage(enum.Enum):
    RECEIVED = "received"
    PARSED = "parsed"
    MAPPING_BUILT = "mapping_built"
    TABLE_PROVISIONED = "table_provisioned"
    LOADED = "loaded"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ImportResult:
    success: bool
    message: str
    column_mapping: Dict[str, str] = field(default_factory=dict)
    rows_imported: int = 0

    def as_response_data(self):
        return {
            "success": self.success,
            "message": self.message,
            "columnMapping": self.column_mapping,
        }


class _Pipeline:
    def __init__(self, table_name):
        self.table_name = (table_name or "").strip()
        self.stage = ImportStage.RECEIVED
        logger.info("Import into %s: %s", self.table_name, self.stage.value)

    def advance(self, stage):
        logger.info("Import into %s: %s -> %s", self.table_name, self.stage.value, stage.value)
        self.stage = stage

    def fail(self, exc: CSVImportError):
        # stage the failure happened in, i.e. the last one reached
        exc.stage = self.stage
        logger.warning(
            "Import into %s failed after stage %s: %s", self.table_name, self.stage.value, exc.message
        )
        self.stage = ImportStage.FAILED
        return exc


def _run(pipeline: _Pipeline, rows, using, batch_size) -> ImportResult:
    table_name = pipeline.table_name

    if not table_name:
        raise ImportValidationError("Table name is required")
    if not rows:
        raise ImportValidationError("CSV file is empty")
    pipeline.advance(ImportStage.PARSED)

    column_mapping = build_column_mapping(list(rows[0].keys()))
    logger.info("Column mapping: %s", column_mapping)
    pipeline.advance(ImportStage.MAPPING_BUILT)

    definition = build_table_definition(table_name, column_mapping.values())
    try:
        provision_table(definition, using=using)
        pipeline.advance(ImportStage.TABLE_PROVISIONED)

        inserted = insert_rows(table_name, column_mapping, rows, using=using, batch_size=batch_size)
        pipeline.advance(ImportStage.LOADED)
    except DatabaseError as e:
        raise ImportDatabaseError(str(e).strip()) from e

    pipeline.advance(ImportStage.COMPLETED)
    return ImportResult(
        success=True,
        message=f"Successfully imported {inserted} rows",
        column_mapping=column_mapping,
        rows_imported=inserted,
    )


def run_import(
    table_name: str,
    rows: Sequence[Mapping[str, Optional[str]]],
    using: str = DEFAULT_DB_ALIAS,
    batch_size: Optional[int] = None,
) -> ImportResult:
    """
    Recreate table_name from the rows' headers and load every row into it.

    The table name is stripped of surrounding whitespace. All validation
    (table name, empty data, colliding column names) happens before the
    database is touched. Raises a CSVImportError subclass on failure.
    """
    pipeline = _Pipeline(table_name)
    try:
        return _run(pipeline, rows, using, batch_size)
    except CSVImportError as e:
        raise pipeline.fail(e)


def import_csv(
    table_name: str,
    file_obj,
    using: str = DEFAULT_DB_ALIAS,
    batch_size: Optional[int] = None,
) -> ImportResult:
    """Parse an uploaded CSV file and import its rows like run_import()."""
    pipeline = _Pipeline(table_name)
    try:
        rows = read_csv_rows(file_obj)
        return _run(pipeline, rows, using, batch_size)
    except CSVImportError as e:
        raise pipeline.fail(e)
