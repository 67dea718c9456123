"""Immutable syntax tree for build-file snippets.

Every node is a frozen dataclass. Transformations build new nodes with
``dataclasses.replace`` instead of mutating existing ones.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Comments:
    """Line comments attached to a node, stored with their leading ``#``.

    An empty string in ``before`` or ``after`` marks a blank line.
    """
    before: Tuple[str, ...] = ()  # own-line comments preceding the node
    suffix: Tuple[str, ...] = ()  # comment after the node on the same line
    after: Tuple[str, ...] = ()  # comments before a closing bracket or end of file

    def __bool__(self) -> bool:
        return bool(self.before or self.suffix or self.after)


NO_COMMENTS = Comments()


@dataclass(frozen=True)
class Node:
    comments: Comments = field(default=NO_COMMENTS, kw_only=True)


@dataclass(frozen=True)
class Ident(Node):
    name: str


@dataclass(frozen=True)
class Number(Node):
    token: str


@dataclass(frozen=True)
class String(Node):
    """A string literal.

    ``token`` holds the literal as written in the source and is printed
    verbatim. It is ``None`` for strings created by a rewrite, which are
    printed in canonical double-quoted form.
    """
    value: str
    token: Optional[str] = None

    def with_value(self, value: str) -> "String":
        if value == self.value:
            return self
        return String(value, comments=self.comments)


@dataclass(frozen=True)
class ListExpr(Node):
    items: Tuple[Node, ...] = ()
    multiline: bool = False


@dataclass(frozen=True)
class DictEntry(Node):
    key: Node
    value: Node


@dataclass(frozen=True)
class DictExpr(Node):
    entries: Tuple[DictEntry, ...] = ()
    multiline: bool = False


@dataclass(frozen=True)
class DotExpr(Node):
    target: Node
    name: str


@dataclass(frozen=True)
class BinaryExpr(Node):
    left: Node
    op: str
    right: Node


@dataclass(frozen=True)
class Assign(Node):
    """``name = value``, either a statement or a keyword argument."""
    name: Ident
    value: Node


@dataclass(frozen=True)
class Call(Node):
    func: Node
    args: Tuple[Node, ...] = ()
    multiline: bool = False


@dataclass(frozen=True)
class File(Node):
    """A sequence of statements; ``comments.after`` holds trailing comments."""
    statements: Tuple[Node, ...] = ()
