from django.apps import AppConfig


class CoreConfig(AppConfig):
    name = 'irecruit.core'
