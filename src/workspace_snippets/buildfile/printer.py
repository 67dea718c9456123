"""Canonical printer for build-file syntax trees."""

from typing import List, Sequence, Tuple

from .syntax import (
    Assign,
    BinaryExpr,
    Call,
    DictEntry,
    DictExpr,
    DotExpr,
    File,
    Ident,
    ListExpr,
    Node,
    Number,
    String,
)

INDENT = "    "
SUFFIX_SEPARATOR = "  "

_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
}


def quote(value: str) -> str:
    """Render ``value`` as a double-quoted string literal."""
    parts = ['"']
    for char in value:
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7f:
            parts.append(f'\\x{ord(char):02x}')
        else:
            parts.append(char)
    parts.append('"')
    return ''.join(parts)


def format_file(file: File) -> str:
    """Print ``file`` in canonical form. The result ends with a newline."""
    lines = []
    for statement in file.statements:
        lines.extend(_comment_lines(statement.comments.before, ""))
        lines.append(_with_suffix(format_node(statement, 0), statement))
    lines.extend(_comment_lines(file.comments.after, ""))
    return ''.join(line + '\n' for line in lines)


def format_node(node: Node, level: int) -> str:
    """Print ``node`` starting at indentation ``level``.

    Own-line and suffix comments of ``node`` itself are printed by the
    enclosing container, not here.
    """
    if isinstance(node, Ident):
        return node.name
    if isinstance(node, Number):
        return node.token
    if isinstance(node, String):
        return node.token if node.token is not None else quote(node.value)
    if isinstance(node, DotExpr):
        return f"{format_node(node.target, level)}.{node.name}"
    if isinstance(node, BinaryExpr):
        return f"{format_node(node.left, level)} {node.op} {format_node(node.right, level)}"
    if isinstance(node, Assign):
        return f"{node.name.name} = {format_node(node.value, level)}"
    if isinstance(node, DictEntry):
        return f"{format_node(node.key, level)}: {format_node(node.value, level)}"
    if isinstance(node, Call):
        return format_node(node.func, level) + _bracketed('(', ')', node.args, node, level)
    if isinstance(node, ListExpr):
        return _bracketed('[', ']', node.items, node, level)
    if isinstance(node, DictExpr):
        return _bracketed('{', '}', node.entries, node, level)
    raise TypeError(f"can't print {type(node).__name__}")


def _comment_lines(comments: Sequence[str], indent: str) -> List[str]:
    # An empty comment stands for a blank line.
    return [indent + comment if comment else "" for comment in comments]


def _with_suffix(text: str, node: Node) -> str:
    if not node.comments.suffix:
        return text
    return text + SUFFIX_SEPARATOR + ' '.join(node.comments.suffix)


def _bracketed(opening: str, closing: str, items: Sequence[Node], container: Node, level: int) -> str:
    rendered: List[Tuple[Node, str]] = [(item, format_node(item, level + 1)) for item in items]
    after = container.comments.after
    multiline = (
        getattr(container, 'multiline', False)
        or bool(after)
        or any(item.comments for item in items)
        or any('\n' in text for _, text in rendered)
    )
    if not items and not after:
        return opening + closing
    if not multiline:
        return opening + ', '.join(text for _, text in rendered) + closing

    inner = INDENT * (level + 1)
    lines = [opening]
    for item, text in rendered:
        lines.extend(_comment_lines(item.comments.before, inner))
        lines.append(inner + _with_suffix(text + ',', item))
    lines.extend(_comment_lines(after, inner))
    lines.append(INDENT * level + closing)
    return '\n'.join(lines)
