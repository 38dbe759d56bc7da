from django.http import FileResponse
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from irecruit.recruitment.utils.storage import DocumentStorage


class DocumentDownloadView(APIView):
    """
    Serves a document through a presigned link issued by
    ``DocumentStorage.presigned_url``; the token is the only credential.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request, token):
        storage = DocumentStorage()
        ref = storage.ref_for_token(token)
        return FileResponse(
            storage.open(ref),
            as_attachment=True,
            filename=ref.rsplit('/', 1)[-1],
            content_type='application/pdf'
        )
