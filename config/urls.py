from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include


def get_version_for_api(_):
    from . import VERSION
    return JsonResponse(
        {
            'version': ".".join(str(i) for i in VERSION[:4]),
            'status': VERSION[-1],
        }
    )


urlpatterns = [
    path('api/v1/version/', get_version_for_api, name='get_application_version'),
    path('dj-admin/', admin.site.urls),

    # api urls
    path('api/v1/', include('irecruit.api.v1.urls')),
]
