from importer.exceptions import CSVImportError
from importer.serializers import CSVImportSerializer
from importer.services import import_csv

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status

import logging

logger = logging.getLogger(__name__)


class ImportCSVView(APIView):
    def post(self, request):
        serializer = CSVImportSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"success": False, "error": serializer.first_error()},
                status=status.HTTP_400_BAD_REQUEST,
            )

        table = serializer.validated_data["table_name"]
        file_obj = serializer.validated_data["file"]

        try:
            result = import_csv(table, file_obj)
        except CSVImportError as e:
            if e.status_code >= 500:
                logger.exception("Import into %s failed", table)
            return Response({"success": False, "error": e.message}, status=e.status_code)
        finally:
            # removes the temporary file backing large uploads
            file_obj.close()

        return Response(result.as_response_data(), status=status.HTTP_200_OK)
