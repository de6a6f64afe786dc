import csv
import io
from typing import Dict, List

from importer.exceptions import ImportValidationError


def read_csv_rows(file_obj) -> List[Dict[str, str]]:
    """
    Returns one {header: value} dict per data line, keyed by the first line's fields.
    Blank lines are skipped; a header-only or empty file yields [].
    """
    content = file_obj.read()
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ImportValidationError(f"CSV file is not valid UTF-8: {e}")

    reader = csv.reader(io.StringIO(content, newline=""))

    try:
        headers = next((r for r in reader if r), None)
        if headers is None:
            return []

        seen = set()
        for h in headers:
            if h in seen:
                raise ImportValidationError(f"Duplicate column header in CSV: '{h}'")
            seen.add(h)

        rows = []
        for record in reader:
            if not record:
                continue
            if len(record) != len(headers):
                raise ImportValidationError(
                    f"row {reader.line_num}: expected {len(headers)} fields, got {len(record)}"
                )
            if any("\x00" in value for value in record):
                # PostgreSQL text values cannot hold NUL
                raise ImportValidationError(f"row {reader.line_num}: contains a NUL (0x00) character")
            rows.append(dict(zip(headers, record)))
    except csv.Error as e:
        raise ImportValidationError(f"Malformed CSV at line {reader.line_num}: {e}")

    return rows
