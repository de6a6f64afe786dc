from rest_framework import status


class CSVImportError(Exception):
    """Terminal failure of one import request."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message, stage=None):
        super().__init__(message)
        self.message = message
        self.stage = stage


class ImportValidationError(CSVImportError):
    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateColumnError(ImportValidationError):
    def __init__(self, identifier, headers, stage=None):
        quoted = ", ".join(repr(h) for h in headers)
        super().__init__(
            f"Columns {quoted} all map to '{identifier}' after sanitization; rename them so they are unique",
            stage=stage,
        )
        self.identifier = identifier
        self.headers = list(headers)


class ImportDatabaseError(CSVImportError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
