from django.apps import AppConfig


class PortfolioConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "portfolio"

    def ready(self):  # pragma: no cover - side-effect setup
        # Create the singleton Profile once the tables exist
        from django.db.models.signals import post_migrate

        def _ensure_profile(sender, **kwargs):
            from .models import Profile

            Profile.load()

        post_migrate.connect(_ensure_profile, sender=self, dispatch_uid="portfolio_ensure_profile")
