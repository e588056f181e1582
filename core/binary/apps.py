from django.apps import AppConfig


class BinaryConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core.binary'
    label = 'binary'
    verbose_name = 'Binary Tree'
