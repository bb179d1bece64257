"""HTTP server module exposing the StudyRoom endpoints."""

from .app import create_app, get_generator, get_settings, get_store

__all__ = ["create_app", "get_generator", "get_settings", "get_store"]
