from django.apps import AppConfig


class AmpBlocksConfig(AppConfig):
    name = 'amp_blocks'
    verbose_name = 'AMP blocks'
