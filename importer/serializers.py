from rest_framework import serializers


class CSVImportSerializer(serializers.Serializer):
    # declaration order decides which error is reported when both are missing
    file = serializers.FileField(
        allow_empty_file=True,
        error_messages={"required": "No file uploaded", "null": "No file uploaded"},
    )
    table_name = serializers.CharField(
        error_messages={
            "required": "Table name is required",
            "blank": "Table name is required",
            "null": "Table name is required",
        },
    )

    def first_error(self):
        """Single human-readable message for the {success, error} envelope."""
        for messages in self.errors.values():
            if messages:
                return str(messages[0])
        return "Invalid request"
