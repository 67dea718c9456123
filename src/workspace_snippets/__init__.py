"""Keep Bazel workspace and module snippets pointed at the latest GitHub commit."""

from .version import __version__

__all__ = ['__version__']
