"""Backstage - Studio project workflow and feed composition engine."""

__version__ = "0.1.0"
