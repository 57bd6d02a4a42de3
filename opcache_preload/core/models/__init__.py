"""
Domain models for the preload tool.

Re-exported here for convenient access:

    from opcache_preload.core.models import FileRecord, PreloadConfig, PreloadList
"""

from opcache_preload.core.models.config import PreloadConfig
from opcache_preload.core.models.preload import FileRecord, PreloadList

__all__ = [
    "FileRecord",
    "PreloadConfig",
    "PreloadList",
]
