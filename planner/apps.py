"""App configuration for the planner Django app."""

from __future__ import annotations

from django.apps import AppConfig


class PlannerConfig(AppConfig):
    """Configuration for the `planner` app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "planner"

    def ready(self) -> None:
        """Register system checks for availability settings."""

        from planner import checks  # noqa: F401
