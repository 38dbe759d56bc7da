from django.urls import path
from rest_framework.routers import DefaultRouter

from irecruit.recruitment.api.v1.views.application import ApplicationViewSet
from irecruit.recruitment.api.v1.views.document import DocumentDownloadView
from irecruit.recruitment.api.v1.views.interview import InterviewViewSet

app_name = 'recruitment'

router = DefaultRouter()

router.register(r'applications', ApplicationViewSet, basename='application')
router.register(r'interviews', InterviewViewSet, basename='interview')

urlpatterns = [
    path(
        'documents/<str:token>/',
        DocumentDownloadView.as_view(),
        name='document-download'
    ),
] + router.urls
