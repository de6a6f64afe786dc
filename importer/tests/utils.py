from django.db import connection

from importer.utils.identifiers import quote_identifier


def get_table_columns(table_name):
    """
    Returns ordered columns of a public table:
    [{'column': 'id', 'data_type': 'text', 'is_nullable': False}, ...]
    """
    with connection.cursor() as cur:
        cur.execute(
            """
            SELECT column_name, data_type, is_nullable
            FROM information_schema.columns
            WHERE table_schema = 'public' AND table_name = %s
            ORDER BY ordinal_position
            """,
            [table_name],
        )
        rows = cur.fetchall()
    return [{"column": r[0], "data_type": r[1], "is_nullable": (r[2] == "YES")} for r in rows]


def get_primary_key(table_name):
    with connection.cursor() as cur:
        cur.execute(
            """
            SELECT kcu.column_name
            FROM information_schema.table_constraints tc
            JOIN information_schema.key_column_usage kcu
              ON tc.constraint_name = kcu.constraint_name
             AND tc.table_schema = kcu.table_schema
            WHERE tc.table_schema = 'public'
              AND tc.table_name = %s
              AND tc.constraint_type = 'PRIMARY KEY'
            """,
            [table_name],
        )
        rows = cur.fetchall()
    return [r[0] for r in rows]


def table_exists(table_name):
    return bool(get_table_columns(table_name))


def fetch_rows(table_name, order_by=None):
    query = f"SELECT * FROM {quote_identifier(table_name, connection)}"
    if order_by:
        query += f" ORDER BY {quote_identifier(order_by, connection)}"
    with connection.cursor() as cur:
        cur.execute(query)
        columns = [col[0] for col in cur.description]
        return [dict(zip(columns, row)) for row in cur.fetchall()]


def count_rows(table_name):
    with connection.cursor() as cur:
        cur.execute(f"SELECT COUNT(*) FROM {quote_identifier(table_name, connection)}")
        return cur.fetchone()[0]
