"""Terminal dashboard for Backstage."""

from .app import BackstageApp

__all__ = ["BackstageApp"]
