from django.urls import path, include

app_name = 'api_v1'

urlpatterns = [
    # Recruitment
    path('recruitment/', include('irecruit.recruitment.api.v1.urls')),
]
