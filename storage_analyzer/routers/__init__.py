"""API routers for the Storage Analyzer."""

from storage_analyzer.routers import health, volumes

__all__ = ["health", "volumes"]
