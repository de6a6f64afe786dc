import logging
from itertools import islice
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, connections, transaction

from .identifiers import quote_identifier

logger = logging.getLogger(__name__)


def _batches(rows: Sequence[Mapping], size: int) -> Iterator[List[Mapping]]:
    it = iter(rows)
    while True:
        batch = list(islice(it, size))
        if not batch:
            return
        yield batch


def build_insert_statement(table_name: str, columns: Sequence[str], connection) -> str:
    table = quote_identifier(table_name, connection, escape_percent=True)
    quoted_cols = ", ".join(quote_identifier(c, connection, escape_percent=True) for c in columns)
    placeholders = ", ".join(["%s"] * len(columns))
    return f"INSERT INTO {table} ({quoted_cols}) VALUES ({placeholders})"


def insert_rows(
    table_name: str,
    column_mapping: Dict[str, str],
    rows: Sequence[Mapping[str, Optional[str]]],
    using: str = DEFAULT_DB_ALIAS,
    batch_size: Optional[int] = None,
) -> int:
    """
    Insert every row into table_name inside a single transaction.

    Each row's value for an original header lands in that header's sanitized
    column; values are always bound parameters. If any insert fails the
    transaction is rolled back and the error propagates, so either all rows
    are committed or none are. Returns the number of rows inserted.
    """
    if batch_size is None:
        batch_size = settings.CSV_IMPORT_BATCH_SIZE
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")

    originals = list(column_mapping)
    conn = connections[using]
    statement = build_insert_statement(table_name, [column_mapping[c] for c in originals], conn)

    logger.info("Ordered cols: %s", [column_mapping[c] for c in originals])
    logger.info("Num of rows: %s", len(rows))

    inserted = 0
    with transaction.atomic(using=using):
        with conn.cursor() as cur:
            for batch in _batches(rows, batch_size):
                cur.executemany(statement, [[row.get(c) for c in originals] for row in batch])
                inserted += len(batch)
                logger.debug("Inserted %s/%s rows into %s", inserted, len(rows), table_name)

    return inserted
