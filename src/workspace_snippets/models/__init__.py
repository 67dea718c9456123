"""Data models for workspace snippet updates."""

from .context import UpdateContext, ArchiveMetadata, RemoteHead

__all__ = [
    'UpdateContext',
    'ArchiveMetadata',
    'RemoteHead',
]
