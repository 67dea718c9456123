"""Core operations: resolving the remote, locating and rewriting stanzas."""

from .locator import Stanza, StanzaKind, find_stanzas
from .rewriter import StanzaRewrite, rewrite, rewrite_stanza
from .updater import FileUpdate, Updater, build_context

__all__ = [
    'Stanza',
    'StanzaKind',
    'find_stanzas',
    'StanzaRewrite',
    'rewrite',
    'rewrite_stanza',
    'FileUpdate',
    'Updater',
    'build_context',
]
