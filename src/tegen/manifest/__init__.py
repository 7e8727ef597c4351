"""
Project manifest handling.

This package provides:
1. The pydantic model of TegenConfig.json
2. Loading and atomically saving the manifest at a project root
"""

from .models import ProjectManifest
from .store import ManifestStore

__all__ = ["ProjectManifest", "ManifestStore"]
