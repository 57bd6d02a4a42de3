"""opcache-preload — generate OPcache preload scripts from a file tree."""

__version__ = "0.1.0"
