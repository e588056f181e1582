from django.apps import AppConfig


class RegistrationConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core.registration'
    label = 'registration'
    verbose_name = 'Member Registration'
