import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from django.db import DEFAULT_DB_ALIAS, connections, transaction
from psycopg2 import sql

from .identifiers import render

logger = logging.getLogger(__name__)

PRIMARY_KEY_COLUMN = "id"


@dataclass(frozen=True)
class ColumnDefinition:
    name: str
    data_type: str = "TEXT"
    primary_key: bool = False


@dataclass(frozen=True)
class TableDefinition:
    table_name: str
    columns: Tuple[ColumnDefinition, ...]

    @property
    def column_names(self):
        return [c.name for c in self.columns]

    @property
    def primary_key(self) -> Optional[str]:
        return next((c.name for c in self.columns if c.primary_key), None)


def build_table_definition(table_name: str, column_names: Iterable[str]) -> TableDefinition:
    """
    Every column is TEXT; a column named exactly "id" becomes the primary key.
    No type inference happens here.
    """
    columns = tuple(
        ColumnDefinition(name=name, primary_key=(name == PRIMARY_KEY_COLUMN))
        for name in column_names
    )
    if not columns:
        raise ValueError(f"Table '{table_name}' needs at least one column.")
    return TableDefinition(table_name=table_name, columns=columns)


def _column_sql(column: ColumnDefinition) -> sql.Composed:
    template = "{} {} PRIMARY KEY" if column.primary_key else "{} {}"
    return sql.SQL(template).format(sql.Identifier(column.name), sql.SQL(column.data_type))


def provision_table(definition: TableDefinition, using: str = DEFAULT_DB_ALIAS) -> None:
    """
    Drop any table named definition.table_name and create it from scratch.

    Destructive: rows of a pre-existing table with that name are discarded.
    Both statements run in one transaction, so a failed CREATE leaves the
    old table in place.
    """
    conn = connections[using]
    table = sql.Identifier(definition.table_name)
    drop = sql.SQL("DROP TABLE IF EXISTS {}").format(table)
    create = sql.SQL("CREATE TABLE {} ({})").format(
        table,
        sql.SQL(", ").join(_column_sql(c) for c in definition.columns),
    )

    with transaction.atomic(using=using):
        with conn.cursor() as cur:
            cur.execute(render(drop, conn))
            cur.execute(render(create, conn))

    logger.info(
        "Provisioned table %s with columns %s (primary key: %s)",
        definition.table_name,
        definition.column_names,
        definition.primary_key,
    )
