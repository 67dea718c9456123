"""A small parser and canonical printer for Bazel build-file snippets.

Only the subset of the language that appears in dependency stanzas is
supported: calls with keyword arguments, strings, numbers, lists, dicts,
dotted names, ``+`` and line comments.
"""

from .syntax import (
    Comments,
    Node,
    Ident,
    Number,
    String,
    ListExpr,
    DictEntry,
    DictExpr,
    DotExpr,
    BinaryExpr,
    Assign,
    Call,
    File,
)
from .parser import parse
from .printer import format_file

__all__ = [
    'Comments',
    'Node',
    'Ident',
    'Number',
    'String',
    'ListExpr',
    'DictEntry',
    'DictExpr',
    'DotExpr',
    'BinaryExpr',
    'Assign',
    'Call',
    'File',
    'parse',
    'format_file',
]
