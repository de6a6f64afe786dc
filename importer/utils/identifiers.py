from psycopg2 import sql


def render(query: sql.Composable, connection) -> str:
    """Render a psycopg2.sql composition against a Django connection wrapper."""
    connection.ensure_connection()
    return query.as_string(connection.connection)


def quote_identifier(name: str, connection, escape_percent: bool = False) -> str:
    quoted = render(sql.Identifier(name), connection)
    if escape_percent:
        # statements executed with params go through %-formatting in the driver
        quoted = quoted.replace("%", "%%")
    return quoted
