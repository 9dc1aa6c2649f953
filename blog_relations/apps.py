"""Django app configuration for blog_relations."""
from django.apps import AppConfig


class BlogRelationsConfig(AppConfig):
    """Configuration for the blog relations app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "blog_relations"
    verbose_name = "Blog Relations"

    def ready(self):
        """Register settings checks."""
        from . import checks  # noqa: F401
